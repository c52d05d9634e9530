from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum, IntEnum
from numbers import Real
from typing import Any, Dict, List, Optional, Set

from roi_wizard.currency import Currency
from roi_wizard.presets import Preset, preset_fields
from roi_wizard.priorities import Priority

MAX_WEEKLY_HOURS = 168.0
MATURITY_MIN, MATURITY_MAX = 1, 10


class Step(IntEnum):
    TEAM_AND_COST = 1
    ASSUMPTIONS = 2
    USAGE = 3
    PRIORITIES = 4
    BENEFITS = 5
    SUMMARY = 6


STEP_LABELS = {
    Step.TEAM_AND_COST: "Team & cost",
    Step.ASSUMPTIONS: "Assumptions",
    Step.USAGE: "Usage",
    Step.PRIORITIES: "Priorities",
    Step.BENEFITS: "Configure benefits",
    Step.SUMMARY: "Results",
}


class Department(Enum):
    COMPANY_WIDE = "Company-wide"
    MARKETING = "Marketing"
    SALES = "Sales"
    CUSTOMER_SUPPORT = "Customer Support"
    OPERATIONS = "Operations"
    ENGINEERING = "Engineering"
    HR = "HR"


# ======================================================================================
# INPUT RECORD
# ======================================================================================
@dataclass
class InputAggregate:
    team_size: int = 150
    avg_salary: float = 52000.0
    hours_per_week: float = 2.0
    adoption_rate: float = 0.6
    confidence_discount: float = 0.7
    preset: Preset = Preset.AVERAGE
    selected_priorities: Set[Priority] = field(default_factory=lambda: set(Priority))
    currency: Currency = Currency.EUR
    department: Department = Department.COMPANY_WIDE
    maturity: int = 4
    annual_turnover_rate: float = 0.18
    retention_improvement: float = 0.10
    upskilling_coverage: float = 0.60
    upskilling_hours_per_week: float = 1.0

    def apply_preset(self, preset: Preset) -> None:
        """Overwrite the preset-bound fields with ``preset``'s defaults (last write wins)."""
        self.preset = preset
        for name, value in preset_fields(preset).items():
            setattr(self, name, value)

    def copy(self) -> "InputAggregate":
        return replace(self, selected_priorities=set(self.selected_priorities))

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


def default_aggregate(preset: Preset = Preset.AVERAGE) -> InputAggregate:
    agg = InputAggregate()
    agg.apply_preset(preset)
    return agg


# ======================================================================================
# VALIDATION
# ======================================================================================
@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reasons: List[FieldError] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[FieldError]) -> "ValidationResult":
        return cls(valid=not errors, reasons=list(errors))

    def messages(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for err in self.reasons:
            out.setdefault(err.field, []).append(err.message)
        return out

    @property
    def failing_fields(self) -> List[str]:
        return [e.field for e in self.reasons]


def _as_number(value: Any) -> Optional[float]:
    # bool is a Real subclass but never a valid numeric input
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    value = float(value)
    return None if math.isnan(value) else value


def _check_fraction(agg: InputAggregate, name: str, label: str, errors: List[FieldError]):
    v = _as_number(getattr(agg, name))
    if v is None:
        errors.append(FieldError(name, f"{label} must be a number."))
    elif not 0.0 <= v <= 1.0:
        errors.append(FieldError(name, f"{label} must be between 0% and 100%."))


def _check_weekly_hours(agg: InputAggregate, name: str, label: str, errors: List[FieldError], allow_zero: bool):
    v = _as_number(getattr(agg, name))
    if v is None:
        errors.append(FieldError(name, f"{label} must be a number."))
        return
    low_ok = v >= 0 if allow_zero else v > 0
    if not low_ok or v > MAX_WEEKLY_HOURS:
        bound = "between 0 and 168" if allow_zero else "greater than 0 and at most 168"
        errors.append(FieldError(name, f"{label} must be {bound}."))


def _validate_team_and_cost(agg: InputAggregate) -> List[FieldError]:
    errors = []
    n = _as_number(agg.team_size)
    if n is None or not n.is_integer() or n <= 0:
        errors.append(FieldError("team_size", "Employees in scope must be a whole number greater than 0."))
    salary = _as_number(agg.avg_salary)
    if salary is None or math.isinf(salary) or salary <= 0:
        errors.append(FieldError("avg_salary", "Average annual salary must be greater than 0."))
    if not isinstance(agg.currency, Currency):
        errors.append(FieldError("currency", "Choose one of EUR, USD, GBP or AUD."))
    return errors


def _validate_assumptions(agg: InputAggregate) -> List[FieldError]:
    errors = []
    if not isinstance(agg.preset, Preset):
        errors.append(FieldError("preset", "Choose Low, Average or Aggressive."))
    _check_fraction(agg, "confidence_discount", "Confidence", errors)
    return errors


def _validate_usage(agg: InputAggregate) -> List[FieldError]:
    errors = []
    _check_weekly_hours(agg, "hours_per_week", "Hours saved per week", errors, allow_zero=False)
    _check_fraction(agg, "adoption_rate", "Adoption rate", errors)
    m = _as_number(agg.maturity)
    if m is None or not m.is_integer() or not MATURITY_MIN <= m <= MATURITY_MAX:
        errors.append(FieldError("maturity", "AI maturity must be a whole number from 1 to 10."))
    return errors


def _validate_priorities(agg: InputAggregate) -> List[FieldError]:
    selected = agg.selected_priorities or set()
    if not selected:
        return [FieldError("selected_priorities", "Pick at least one priority.")]
    if any(not isinstance(p, Priority) for p in selected):
        return [FieldError("selected_priorities", "Unknown priority selected.")]
    return []


def _validate_benefits(agg: InputAggregate) -> List[FieldError]:
    errors: List[FieldError] = []
    selected = agg.selected_priorities or set()
    if Priority.RETENTION in selected:
        _check_fraction(agg, "annual_turnover_rate", "Annual turnover", errors)
        _check_fraction(agg, "retention_improvement", "Expected improvement", errors)
    if Priority.UPSKILLING in selected:
        _check_fraction(agg, "upskilling_coverage", "Competency coverage", errors)
        _check_weekly_hours(agg, "upskilling_hours_per_week", "Weekly hours per competent employee",
                            errors, allow_zero=True)
    return errors


_RULES = {
    Step.TEAM_AND_COST: _validate_team_and_cost,
    Step.ASSUMPTIONS: _validate_assumptions,
    Step.USAGE: _validate_usage,
    Step.PRIORITIES: _validate_priorities,
    Step.BENEFITS: _validate_benefits,
    Step.SUMMARY: lambda agg: [],
}


def validate_step(step: Step, aggregate: InputAggregate) -> ValidationResult:
    """Check every field owned by ``step``; all failures are reported together."""
    return ValidationResult.from_errors(_RULES[Step(step)](aggregate))


def validate_all(aggregate: InputAggregate) -> ValidationResult:
    errors: List[FieldError] = []
    for step in Step:
        errors.extend(validate_step(step, aggregate).reasons)
    return ValidationResult.from_errors(errors)


# ======================================================================================
# HELPERS
# ======================================================================================
def suggested_hours_per_week(maturity: int) -> float:
    """Baseline hours/week an employee could save: ~5 at maturity 1, ~1 at maturity 10."""
    lo, hi = 1.0, 5.0
    t = (MATURITY_MAX - maturity) / (MATURITY_MAX - MATURITY_MIN)
    return lo + (hi - lo) * t


def overridden_fields(aggregate: InputAggregate) -> List[str]:
    """Preset-bound fields the user has changed since the preset was applied."""
    if not isinstance(aggregate.preset, Preset):
        return []
    return [
        name for name, default in preset_fields(aggregate.preset).items()
        if getattr(aggregate, name) != default
    ]
