"""Wizard controller: the per-session context object.

Owns the ``InputAggregate`` and the step state, gates forward navigation on
step validation and derives KPIs on read once the summary is reached. The
presentation layer keeps one controller per session and never computes
anything itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Set, Union

from roi_wizard.config import EngineConfig
from roi_wizard.currency import Currency, convert, parse_currency
from roi_wizard.engine import KPIResult, compute
from roi_wizard.errors import UnknownFieldError
from roi_wizard.inputs import (
    FieldError,
    InputAggregate,
    Step,
    ValidationResult,
    default_aggregate,
    validate_all,
    validate_step,
)
from roi_wizard.presets import Preset
from roi_wizard.priorities import Priority

logger = logging.getLogger(__name__)

FIRST_STEP = Step.TEAM_AND_COST
LAST_STEP = Step.SUMMARY


@dataclass
class WizardState:
    current_step: Step = FIRST_STEP
    completed_steps: Set[Step] = field(default_factory=set)

    @property
    def at_summary(self) -> bool:
        return self.current_step == LAST_STEP


def _refused(message: str) -> ValidationResult:
    return ValidationResult.from_errors([FieldError("step", message)])


class WizardController:
    def __init__(self, config: Optional[EngineConfig] = None, aggregate: Optional[InputAggregate] = None):
        self.config = config or EngineConfig()
        self.aggregate = aggregate if aggregate is not None else default_aggregate()
        self._state = WizardState()

    # ----------------------------------------------------------------------------------
    # Read side
    # ----------------------------------------------------------------------------------
    @property
    def state(self) -> WizardState:
        return WizardState(self._state.current_step, set(self._state.completed_steps))

    @property
    def current_step(self) -> Step:
        return self._state.current_step

    @property
    def validation(self) -> ValidationResult:
        return validate_step(self._state.current_step, self.aggregate)

    def result(self) -> Optional[KPIResult]:
        """KPIs for the current inputs, or ``None`` off the summary or while any input is invalid."""
        if not self._state.at_summary:
            return None
        if not validate_all(self.aggregate).valid:
            return None
        return compute(self.aggregate, self.config)

    # ----------------------------------------------------------------------------------
    # Navigation
    # ----------------------------------------------------------------------------------
    def next(self) -> ValidationResult:
        step = self._state.current_step
        if step == LAST_STEP:
            return _refused("Already at the results step.")
        check = validate_step(step, self.aggregate)
        if check.valid and step + 1 == LAST_STEP:
            # update() can reach fields of earlier steps; the summary needs all of them
            check = validate_all(self.aggregate)
        if not check.valid:
            logger.info("blocked at step %d: %s", step, ", ".join(check.failing_fields))
            return check
        self._state.completed_steps.add(step)
        self._state.current_step = Step(step + 1)
        logger.debug("step %d -> %d", step, self._state.current_step)
        if self._state.at_summary:
            kpis = compute(self.aggregate, self.config)
            logger.info(
                "summary reached: %.0f hours/year, savings %.0f %s",
                kpis.hours_saved_per_year, kpis.annual_savings_amount, kpis.currency.value,
            )
        return check

    def back(self) -> bool:
        step = self._state.current_step
        if step == FIRST_STEP:
            return False
        self._state.current_step = Step(step - 1)
        logger.debug("step %d -> %d", step, self._state.current_step)
        return True

    def can_visit(self, step: Union[Step, int]) -> bool:
        step = Step(step)
        if step <= self._state.current_step:
            return True
        for earlier in range(FIRST_STEP, step):
            if earlier not in self._state.completed_steps:
                return False
            if not validate_step(Step(earlier), self.aggregate).valid:
                return False
        return True

    def goto(self, step: Union[Step, int]) -> bool:
        """Jump to ``step``: backwards freely, forwards only over completed, still-valid steps."""
        if not self.can_visit(step):
            return False
        self._state.current_step = Step(step)
        return True

    def restart(self) -> None:
        """Start over from step 1, keeping the values already entered."""
        self._state = WizardState()

    # ----------------------------------------------------------------------------------
    # Mutation
    # ----------------------------------------------------------------------------------
    def update(self, **changes) -> ValidationResult:
        if self._state.at_summary:
            return _refused("Results are read-only; go back to change inputs.")
        known = set(InputAggregate.field_names())
        unknown = sorted(set(changes) - known)
        if unknown:
            raise UnknownFieldError(f"Unknown input field(s): {', '.join(unknown)}")
        for name, value in changes.items():
            setattr(self.aggregate, name, value)
        return self.validation

    def choose_preset(self, preset: Union[Preset, str]) -> ValidationResult:
        if self._state.at_summary:
            return _refused("Results are read-only; go back to change inputs.")
        preset = preset if isinstance(preset, Preset) else Preset(preset)
        self.aggregate.apply_preset(preset)
        logger.debug("preset %s applied", preset.value)
        return self.validation

    def set_currency(self, currency: Union[Currency, str]) -> ValidationResult:
        """Switch the active currency.

        Monetary inputs are re-labelled unless the config carries exchange
        rates, in which case the average salary is converted.
        """
        if self._state.at_summary:
            return _refused("Results are read-only; go back to change inputs.")
        target = parse_currency(currency)
        source = self.aggregate.currency
        salary = self.aggregate.avg_salary
        convertible = isinstance(salary, (int, float)) and not isinstance(salary, bool)
        if self.config.converts_currency and convertible and isinstance(source, Currency) and source != target:
            self.aggregate.avg_salary = convert(self.aggregate.avg_salary, source, target, self.config.exchange_rates)
        self.aggregate.currency = target
        return self.validation

    def toggle_priority(self, priority: Union[Priority, str], selected: bool) -> ValidationResult:
        if self._state.at_summary:
            return _refused("Results are read-only; go back to change inputs.")
        priority = priority if isinstance(priority, Priority) else Priority(priority)
        chosen = set(self.aggregate.selected_priorities)
        if selected:
            chosen.add(priority)
        else:
            chosen.discard(priority)
        self.aggregate.selected_priorities = chosen
        return self.validation
