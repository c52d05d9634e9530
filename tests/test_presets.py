"""
Unit Tests for presets and priority weighting
"""

import pytest

from roi_wizard.errors import EmptySelectionError
from roi_wizard.inputs import default_aggregate, overridden_fields
from roi_wizard.presets import PRESETS, Preset, apply_preset, preset_fields
from roi_wizard.priorities import Priority, normalized_weight, select_priorities


class TestPresets:

    def test_every_preset_has_defaults(self):
        for p in Preset:
            d = apply_preset(p)
            assert 0.0 <= d.adoption_rate <= 1.0
            assert 0.0 <= d.confidence_discount <= 1.0
            assert d.hours_saved_per_week >= 0

    def test_ordered_by_aggressiveness(self):
        assert Preset.LOW < Preset.AVERAGE < Preset.AGGRESSIVE
        assert sorted([Preset.AGGRESSIVE, Preset.LOW, Preset.AVERAGE]) == list(Preset)

    def test_total_order_comparisons(self):
        assert Preset.LOW <= Preset.AVERAGE
        assert Preset.AVERAGE <= Preset.AVERAGE
        assert Preset.AGGRESSIVE > Preset.AVERAGE
        assert Preset.AGGRESSIVE >= Preset.LOW
        assert not Preset.LOW >= Preset.AVERAGE
        assert max(Preset) is Preset.AGGRESSIVE

    def test_defaults_grow_with_aggressiveness(self):
        low, avg, agg = (PRESETS[p] for p in Preset)
        assert low.adoption_rate < avg.adoption_rate < agg.adoption_rate
        assert low.hours_saved_per_week < avg.hours_saved_per_week < agg.hours_saved_per_week

    def test_preset_fields_target_aggregate_names(self):
        assert preset_fields(Preset.AVERAGE) == {
            "adoption_rate": 0.60,
            "hours_per_week": 2.0,
            "confidence_discount": 0.70,
        }

    def test_applying_twice_is_idempotent(self):
        agg = default_aggregate(Preset.LOW)
        agg.apply_preset(Preset.AGGRESSIVE)
        first = agg.copy()
        agg.apply_preset(Preset.AGGRESSIVE)
        assert agg == first

    def test_last_write_wins_over_overrides(self):
        agg = default_aggregate(Preset.AVERAGE)
        agg.adoption_rate = 0.95
        assert overridden_fields(agg) == ["adoption_rate"]
        agg.apply_preset(Preset.AVERAGE)
        assert agg.adoption_rate == 0.60
        assert overridden_fields(agg) == []

    def test_override_keeps_preset_label(self):
        agg = default_aggregate(Preset.LOW)
        agg.hours_per_week = 7.0
        assert agg.preset is Preset.LOW


class TestPriorityWeights:

    def test_weights_sum_to_one(self):
        for selection in ({Priority.THROUGHPUT}, {Priority.RETENTION, Priority.UPSKILLING}, set(Priority)):
            assert sum(select_priorities(selection).values()) == pytest.approx(1.0)

    def test_proportional_to_relative_weight(self):
        w = select_priorities({Priority.THROUGHPUT, Priority.RETENTION})
        assert w[Priority.THROUGHPUT] == pytest.approx(0.6)
        assert w[Priority.RETENTION] == pytest.approx(0.4)

    def test_only_selected_are_weighted(self):
        w = select_priorities([Priority.UPSKILLING])
        assert w == {Priority.UPSKILLING: 1.0}
        assert normalized_weight([Priority.UPSKILLING], Priority.RETENTION) == 0.0

    def test_empty_selection_is_rejected(self):
        with pytest.raises(EmptySelectionError):
            select_priorities(set())
