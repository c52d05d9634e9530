"""Guided calculator for the ROI of training a workforce on AI tools.

Example:
    from roi_wizard import WizardController

    wiz = WizardController()
    wiz.update(team_size=50, avg_salary=60000)
    while wiz.next().valid and wiz.result() is None:
        pass
    print(wiz.result())
"""
from roi_wizard.config import EngineConfig, TrainingCostMode, load_config
from roi_wizard.currency import Currency, format_money
from roi_wizard.engine import KPIResult, compute
from roi_wizard.inputs import InputAggregate, Step, ValidationResult, validate_step
from roi_wizard.presets import Preset, apply_preset
from roi_wizard.priorities import Priority, select_priorities
from roi_wizard.wizard import WizardController, WizardState

__all__ = [
    "Currency",
    "EngineConfig",
    "InputAggregate",
    "KPIResult",
    "Preset",
    "Priority",
    "Step",
    "TrainingCostMode",
    "ValidationResult",
    "WizardController",
    "WizardState",
    "apply_preset",
    "compute",
    "format_money",
    "load_config",
    "select_priorities",
    "validate_step",
]
