"""
QA Test Suite — core/fields.py
==============================
Tests for the questionnaire field schema and the advisory validator.
"""
from __future__ import annotations

import os
import sys

import pytest

_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _root not in sys.path:
    sys.path.insert(0, _root)

from config.constants import DEFAULT_INPUTS
from core import fields

VALID_DWELLING = {
    "archetype_id":     "pavillon",
    "living_area_m2":   120,
    "floors":           2,
    "ceiling_height_m": 2.5,
}


# ─────────────────────────────────────────────────────────────────────────────
# Schema integrity
# ─────────────────────────────────────────────────────────────────────────────

class TestSchema:
    def test_five_steps(self):
        assert len(fields.STEP_FIELDS) == 5

    def test_ids_unique(self):
        ids = [f["id"] for f in fields.all_fields()]
        assert len(ids) == len(set(ids))

    def test_every_field_is_an_input(self):
        for field in fields.all_fields():
            assert field["id"] in DEFAULT_INPUTS, f"[{field['id']}] not a calculation input"

    def test_field_keys(self):
        for field in fields.all_fields() + fields.QUICK_ADVICE_FIELDS:
            assert set(field) == {
                "id", "label", "type", "required", "min", "max",
                "unit", "options", "help_text", "default",
            }

    def test_selects_have_options(self):
        for field in fields.all_fields() + fields.QUICK_ADVICE_FIELDS:
            if field["type"] == "select":
                assert field["options"], f"[{field['id']}] select without options"

    def test_defaults_pass_validation(self):
        for field in fields.all_fields() + fields.QUICK_ADVICE_FIELDS:
            if field["type"] == "number":
                ok, message = fields.validate_number(field["default"], field)
                assert ok, f"[{field['id']}] default rejected: {message}"

    def test_living_area_bounds(self):
        area = next(f for f in fields.DWELLING_FIELDS if f["id"] == "living_area_m2")
        assert (area["min"], area["max"]) == (10, 1000)

    def test_quick_advice_fields(self):
        assert [f["id"] for f in fields.QUICK_ADVICE_FIELDS] == [
            "living_area_m2", "build_year", "insulation_level", "heating_system",
        ]


# ─────────────────────────────────────────────────────────────────────────────
# validate_number
# ─────────────────────────────────────────────────────────────────────────────

class TestValidateNumber:
    AREA = next(f for f in fields.DWELLING_FIELDS if f["id"] == "living_area_m2")

    @pytest.mark.parametrize("value", [10, 120, 1000, "120", "120,5", 99.9])
    def test_valid(self, value):
        assert fields.validate_number(value, self.AREA) == (True, "ok")

    @pytest.mark.parametrize("value", ["abc", True, float("nan"), [120], 10**400])
    def test_not_a_number(self, value):
        ok, message = fields.validate_number(value, self.AREA)
        assert ok is False
        assert message == "Living area must be a number."

    def test_below_min(self):
        assert fields.validate_number(5, self.AREA) == (False, "Living area must be at least 10 m².")

    def test_above_max(self):
        assert fields.validate_number(5000, self.AREA) == (False, "Living area must be at most 1000 m².")


# ─────────────────────────────────────────────────────────────────────────────
# validate / validate_step
# ─────────────────────────────────────────────────────────────────────────────

class TestValidate:
    def test_valid_step(self):
        assert fields.validate_step(2, VALID_DWELLING) == []

    def test_missing_required(self):
        values = dict(VALID_DWELLING, living_area_m2="")
        assert fields.validate_step(2, values) == [
            {"field_id": "living_area_m2", "message": "Living area is required."},
        ]

    def test_missing_optional_is_fine(self):
        errors = fields.validate(fields.ENERGY_FIELDS, {
            "main_heating": "gas", "occupants": 2, "showers_per_day": 1,
            "litres_per_shower": 50, "dhw_system": "gas", "base_electricity_kwh": 2500,
        })
        assert errors == []

    def test_one_error_per_field(self):
        values = dict(VALID_DWELLING, living_area_m2=5, floors="two")
        errors = fields.validate_step(2, values)
        assert [e["field_id"] for e in errors] == ["living_area_m2", "floors"]
        assert errors[1]["message"] == "Floors must be a number."

    @pytest.mark.parametrize("step", [0, 6, -1, "2", None, True])
    def test_unknown_step(self, step):
        assert fields.validate_step(step, {}) == []

    def test_non_mapping_values(self):
        errors = fields.validate_step(2, None)
        assert len(errors) == 4
        assert all(e["message"].endswith("is required.") for e in errors)

    def test_validator_never_blocks_compute(self):
        from core.physics import compute
        assert compute({"living_area_m2": 5}, 2026)["dpe"]["letter"] in "ABCDEFG"
