"""
Unit Tests for the ROI calculation engine
"""

import math

import pandas as pd
import pytest

from roi_wizard.config import EngineConfig, TrainingCostMode
from roi_wizard.currency import Currency
from roi_wizard.engine import (
    adoption_sensitivity,
    compute,
    roi_summary,
    training_cost,
    value_breakdown,
)
from roi_wizard.priorities import Priority


class TestHeadlineScenario:

    def test_hours_saved(self, scenario_aggregate, engine_config):
        assert compute(scenario_aggregate, engine_config).hours_saved_per_year == pytest.approx(7800)

    def test_annual_savings(self, scenario_aggregate, engine_config):
        assert compute(scenario_aggregate, engine_config).annual_savings_amount == pytest.approx(225000)

    def test_payback(self, scenario_aggregate, engine_config):
        k = compute(scenario_aggregate, engine_config)
        assert k.payback_applicable
        assert k.payback_months == pytest.approx(1.0667, abs=1e-3)

    def test_retention_score(self, scenario_aggregate, engine_config):
        # confidence 0.7 x retention weight 2/5 x adoption 0.6
        assert compute(scenario_aggregate, engine_config).retention_impact_score == pytest.approx(0.168)

    def test_carries_active_currency(self, scenario_aggregate, engine_config):
        scenario_aggregate.currency = Currency.GBP
        assert compute(scenario_aggregate, engine_config).currency is Currency.GBP


class TestGuardsAndProperties:

    def test_zero_adoption_payback_not_applicable(self, scenario_aggregate, engine_config):
        scenario_aggregate.adoption_rate = 0
        k = compute(scenario_aggregate, engine_config)
        assert k.annual_savings_amount == 0
        assert k.payback_months is None
        assert not k.payback_applicable

    def test_deterministic(self, scenario_aggregate, engine_config):
        assert compute(scenario_aggregate, engine_config) == compute(scenario_aggregate, engine_config)

    def test_compute_does_not_mutate_inputs(self, scenario_aggregate, engine_config):
        before = scenario_aggregate.copy()
        compute(scenario_aggregate, engine_config)
        value_breakdown(scenario_aggregate, engine_config)
        adoption_sensitivity(scenario_aggregate, engine_config)
        assert scenario_aggregate == before

    def test_monotonic_in_adoption(self, scenario_aggregate, engine_config):
        prev = None
        for rate in [0.0, 0.1, 0.25, 0.5, 0.75, 1.0]:
            scenario_aggregate.adoption_rate = rate
            k = compute(scenario_aggregate, engine_config)
            if prev is not None:
                assert k.hours_saved_per_year >= prev.hours_saved_per_year
                assert k.annual_savings_amount >= prev.annual_savings_amount
            prev = k

    def test_retention_score_zero_without_retention_priority(self, scenario_aggregate, engine_config):
        scenario_aggregate.selected_priorities = {Priority.THROUGHPUT}
        assert compute(scenario_aggregate, engine_config).retention_impact_score == 0.0

    def test_retention_score_bounded(self, scenario_aggregate, engine_config):
        scenario_aggregate.selected_priorities = {Priority.RETENTION}
        scenario_aggregate.confidence_discount = 1.0
        scenario_aggregate.adoption_rate = 1.0
        assert compute(scenario_aggregate, engine_config).retention_impact_score == 1.0

    def test_retention_score_empty_selection(self, scenario_aggregate, engine_config):
        scenario_aggregate.selected_priorities = set()
        assert compute(scenario_aggregate, engine_config).retention_impact_score == 0.0


class TestTrainingCost:

    def test_flat(self, scenario_aggregate, engine_config):
        assert training_cost(scenario_aggregate, engine_config) == 20000.0

    def test_per_head_scales_with_team(self, scenario_aggregate):
        cfg = EngineConfig(training_cost_mode=TrainingCostMode.PER_HEAD, training_cost_value=400.0)
        assert training_cost(scenario_aggregate, cfg) == 20000.0
        scenario_aggregate.team_size = 100
        assert training_cost(scenario_aggregate, cfg) == 40000.0

    def test_converted_from_base_currency(self, scenario_aggregate):
        cfg = EngineConfig(
            training_cost_mode=TrainingCostMode.FLAT,
            training_cost_value=10000.0,
            base_currency=Currency.EUR,
            exchange_rates={Currency.EUR: 1.0, Currency.USD: 1.1},
        )
        scenario_aggregate.currency = Currency.USD
        assert training_cost(scenario_aggregate, cfg) == pytest.approx(11000.0)

    def test_zero_cost_pays_back_immediately(self, scenario_aggregate):
        cfg = EngineConfig(training_cost_mode=TrainingCostMode.FLAT, training_cost_value=0.0)
        k = compute(scenario_aggregate, cfg)
        assert k.payback_months == 0.0
        assert roi_summary(scenario_aggregate, cfg).roi_multiple is None


class TestValueBreakdown:

    def test_rows_follow_selection(self, scenario_aggregate, engine_config):
        df = value_breakdown(scenario_aggregate, engine_config)
        assert list(df["priority"]) == ["throughput", "retention", "total"]

    def test_row_values(self, scenario_aggregate, engine_config):
        df = value_breakdown(scenario_aggregate, engine_config).set_index("priority")
        assert df.loc["throughput", "value"] == pytest.approx(225000)
        assert df.loc["throughput", "hours"] == pytest.approx(7800)
        # 50 x 18% turnover x 10% improvement x (0.5 x 60,000)
        assert df.loc["retention", "value"] == pytest.approx(27000)
        assert math.isnan(df.loc["retention", "hours"])

    def test_upskilling_row(self, scenario_aggregate, engine_config):
        scenario_aggregate.selected_priorities = {Priority.UPSKILLING}
        df = value_breakdown(scenario_aggregate, engine_config).set_index("priority")
        # 60% of 50 people x 1 h/week x 52
        assert df.loc["upskilling", "hours"] == pytest.approx(1560)
        assert df.loc["upskilling", "value"] == pytest.approx(45000)

    def test_total_is_sum_of_rows(self, scenario_aggregate, engine_config):
        scenario_aggregate.selected_priorities = set(Priority)
        df = value_breakdown(scenario_aggregate, engine_config)
        body, total = df.iloc[:-1], df.iloc[-1]
        assert total["value"] == pytest.approx(body["value"].sum())
        assert total["hours"] == pytest.approx(body["hours"].sum())

    def test_roi_summary_matches_total(self, scenario_aggregate, engine_config):
        s = roi_summary(scenario_aggregate, engine_config)
        assert s.total_value == pytest.approx(252000)
        assert s.total_hours == pytest.approx(7800)
        assert s.roi_multiple == pytest.approx(12.6)


class TestAdoptionSensitivity:

    def test_grid(self, scenario_aggregate, engine_config):
        df = adoption_sensitivity(scenario_aggregate, engine_config, points=5)
        assert isinstance(df, pd.DataFrame)
        assert list(df["adoption_rate"]) == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])
        assert df["annual_savings"].is_monotonic_increasing

    def test_zero_adoption_row_has_no_payback(self, scenario_aggregate, engine_config):
        df = adoption_sensitivity(scenario_aggregate, engine_config)
        assert pd.isna(df.loc[0, "payback_months"])

    def test_needs_two_points(self, scenario_aggregate, engine_config):
        with pytest.raises(ValueError):
            adoption_sensitivity(scenario_aggregate, engine_config, points=1)
