"""
QA Test Suite — core/savings.py & config/measures.py
=====================================================
Tests for measure applicability, ranking, payback sentinel and the
next-DPE-class gap analysis.
"""
from __future__ import annotations

import copy
import os
import sys

import pytest

_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _root not in sys.path:
    sys.path.insert(0, _root)

from config.constants import DEFAULT_INPUTS
from config.measures import MEASURE_CATEGORIES, MEASURES, measure_ids, measure_quantity
from core import savings
from core.physics import compute, resolve_inputs

YEAR = 2026


def _ids(measures):
    return [m["id"] for m in measures]


# ─────────────────────────────────────────────────────────────────────────────
# Measure catalogue
# ─────────────────────────────────────────────────────────────────────────────

class TestMeasureCatalogue:
    def test_ids_unique(self):
        ids = measure_ids()
        assert len(ids) == len(set(ids))

    def test_changes_reference_known_fields(self):
        for measure in MEASURES:
            for key in measure["changes"]:
                assert key in DEFAULT_INPUTS, f"[{measure['id']}] unknown field {key}"

    def test_categories_and_costs(self):
        for measure in MEASURES:
            assert measure["category"] in MEASURE_CATEGORIES
            assert 0 <= measure["cost_min"] <= measure["cost_max"]

    def test_quantity_from_field(self):
        roof = next(m for m in MEASURES if m["id"] == "roof_insulation")
        assert measure_quantity(roof, resolve_inputs({"area_roof_m2": 64})) == 64.0

    def test_fixed_quantity(self):
        pv = next(m for m in MEASURES if m["id"] == "pv_installation")
        assert measure_quantity(pv, resolve_inputs({})) == 3.0


# ─────────────────────────────────────────────────────────────────────────────
# Full analysis
# ─────────────────────────────────────────────────────────────────────────────

class TestAnalyze:
    def test_every_measure_applies_to_default_dwelling(self):
        result = savings.analyze({}, year=YEAR)
        assert set(_ids(result["measures"])) == set(measure_ids())

    def test_sorted_by_payback(self):
        paybacks = [m["payback_years"] for m in savings.analyze({}, year=YEAR)["measures"]]
        assert paybacks == sorted(paybacks)

    def test_idempotent(self):
        assert savings.analyze({}, year=YEAR) == savings.analyze({}, year=YEAR)

    def test_baseline_passthrough_matches(self):
        inputs = {"zone_id": "est", "living_area_m2": 140}
        baseline = compute(inputs, YEAR)
        assert savings.analyze(inputs, baseline=baseline, year=YEAR) == savings.analyze(inputs, year=YEAR)

    def test_does_not_mutate_inputs(self):
        inputs = {"u_roof": "2,5", "has_pv": "nee"}
        snapshot = copy.deepcopy(inputs)
        savings.analyze(inputs, year=YEAR)
        assert inputs == snapshot

    @pytest.mark.parametrize("override,absent", [
        ({"u_roof": 0.15}, "roof_insulation"),
        ({"u_floor": 0.2}, "floor_insulation"),
        ({"u_window": 1.1}, "window_upgrade"),
        ({"main_heating": "heat_pump"}, "heat_pump"),
        ({"has_hrv": True, "hrv_efficiency": 0.8}, "hrv_ventilation"),
        ({"has_pv": True}, "pv_installation"),
    ])
    def test_already_done_measures_skipped(self, override, absent):
        assert absent not in _ids(savings.analyze(override, year=YEAR)["measures"])

    def test_measure_record(self):
        roof = next(
            m for m in savings.analyze({}, year=YEAR)["measures"] if m["id"] == "roof_insulation"
        )
        assert roof["quantity"] == 80.0
        assert roof["cost_min"] == 3200
        assert roof["cost_max"] == 6400
        assert roof["savings_kwh"] > 0
        assert roof["savings_eur"] > 0
        assert roof["dpe_reduction_kwh_m2"] > 0
        assert roof["co2_reduction_kg"] > 0
        assert roof["payback_years"] == pytest.approx(4800 / roof["savings_eur"], abs=0.1)

    def test_pv_saves_money_not_energy(self):
        pv = next(
            m for m in savings.analyze({}, year=YEAR)["measures"] if m["id"] == "pv_installation"
        )
        assert pv["savings_kwh"] == 0
        assert pv["savings_eur"] > 0
        assert pv["dpe_reduction_kwh_m2"] == 0

    def test_totals_are_sums(self):
        result = savings.analyze({}, year=YEAR)
        assert result["total_savings_kwh"] == sum(m["savings_kwh"] for m in result["measures"])
        assert result["total_savings_eur"] == sum(m["savings_eur"] for m in result["measures"])

    def test_dpe_after_measures_not_worse(self):
        result = savings.analyze({}, year=YEAR)
        baseline = compute({}, YEAR)
        assert result["dpe_after_measures"]["kwh_per_m2"] <= baseline["dpe"]["kwh_per_m2"]

    def test_next_class_gap(self):
        result = savings.analyze({}, year=YEAR)
        baseline = compute({}, YEAR)
        assert result["next_class_gap_kwh_m2"] == baseline["dpe"]["kwh_to_better_class"]
        assert result["next_class_reachable"] is True
        chosen = result["next_class_measures"]
        assert sum(m["dpe_reduction_kwh_m2"] for m in chosen) >= result["next_class_gap_kwh_m2"]
        assert result["next_class_cost_min"] == sum(m["cost_min"] for m in chosen)
        assert result["next_class_cost_max"] == sum(m["cost_max"] for m in chosen)


# ─────────────────────────────────────────────────────────────────────────────
# Single measure
# ─────────────────────────────────────────────────────────────────────────────

class TestEvaluateMeasure:
    SWITCH_TO_ELECTRIC = {
        "id":             "direct_electric",
        "name":           "Direct electric heating",
        "description":    "Replace the boiler with panel heaters.",
        "category":       "heating",
        "cost_min":       10,
        "cost_max":       20,
        "unit":           "m² living area",
        "quantity_field": "living_area_m2",
        "applies":        lambda inputs: True,
        "changes":        {"main_heating": "electric"},
        "source":         "",
    }

    def test_energy_saving_but_cost_increase_uses_sentinel(self):
        resolved = resolve_inputs({})
        baseline = compute(resolved, YEAR)
        measure = savings.evaluate_measure(resolved, baseline, self.SWITCH_TO_ELECTRIC, YEAR)
        assert measure["savings_kwh"] > 0
        assert measure["savings_eur"] < 0
        assert measure["payback_years"] == savings.PAYBACK_SENTINEL_YEARS

    def test_not_applicable_returns_none(self):
        resolved = resolve_inputs({})
        baseline = compute(resolved, YEAR)
        template = dict(self.SWITCH_TO_ELECTRIC, applies=lambda inputs: False)
        assert savings.evaluate_measure(resolved, baseline, template, YEAR) is None

    def test_no_effect_returns_none(self):
        resolved = resolve_inputs({})
        baseline = compute(resolved, YEAR)
        template = dict(self.SWITCH_TO_ELECTRIC, changes={"main_heating": "gas"})
        assert savings.evaluate_measure(resolved, baseline, template, YEAR) is None


# ─────────────────────────────────────────────────────────────────────────────
# Greedy next-class set
# ─────────────────────────────────────────────────────────────────────────────

class TestMinimalSet:
    MEASURES = [
        {"id": "a", "dpe_reduction_kwh_m2": 10},
        {"id": "b", "dpe_reduction_kwh_m2": 50},
        {"id": "c", "dpe_reduction_kwh_m2": 30},
    ]

    def test_largest_first_until_covered(self):
        assert _ids(savings.minimal_set_for_next_class(self.MEASURES, 60)) == ["b", "c"]

    def test_single_measure_enough(self):
        assert _ids(savings.minimal_set_for_next_class(self.MEASURES, 45)) == ["b"]

    def test_no_gap(self):
        assert savings.minimal_set_for_next_class(self.MEASURES, 0) == []

    def test_unreachable_takes_everything(self):
        assert _ids(savings.minimal_set_for_next_class(self.MEASURES, 1000)) == ["b", "c", "a"]
