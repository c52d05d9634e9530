"""
Pytest Configuration and Fixtures
==================================
Shared engine config, scenario inputs and controllers.
"""

import pytest

from roi_wizard.config import EngineConfig, TrainingCostMode
from roi_wizard.currency import Currency
from roi_wizard.inputs import Step, default_aggregate
from roi_wizard.presets import Preset
from roi_wizard.priorities import Priority
from roi_wizard.wizard import WizardController


@pytest.fixture
def engine_config():
    """Flat 20,000 training cost over a 2080-hour year."""
    return EngineConfig(
        training_cost_mode=TrainingCostMode.FLAT,
        training_cost_value=20000.0,
        annual_working_hours=2080.0,
    )


@pytest.fixture
def scenario_aggregate():
    """50 people on 60k, 5 h/week saved at 60% adoption."""
    agg = default_aggregate(Preset.AVERAGE)
    agg.team_size = 50
    agg.avg_salary = 60000.0
    agg.hours_per_week = 5.0
    agg.adoption_rate = 0.6
    agg.currency = Currency.EUR
    agg.selected_priorities = {Priority.THROUGHPUT, Priority.RETENTION}
    return agg


@pytest.fixture
def controller(engine_config):
    return WizardController(engine_config)


@pytest.fixture
def controller_at_summary(engine_config, scenario_aggregate):
    wiz = WizardController(engine_config, scenario_aggregate)
    while wiz.current_step != Step.SUMMARY:
        assert wiz.next().valid
    return wiz
