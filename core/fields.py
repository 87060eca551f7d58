# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Field Schema & Validation
# © 2026 Aparajita Parihar. All rights reserved.
#
# Declarative field definitions for the five questionnaire steps and the
# quick-advice form, plus a generic advisory validator.
#
# The validator only REPORTS problems to the UI. compute() never consults it
# and tolerates any value by falling back to DEFAULT_INPUTS.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import datetime
import math
from typing import Any, Mapping, Optional

from config.archetypes import ARCHETYPES
from config.constants import CLIMATE_ZONES, DEFAULT_INPUTS

# ─────────────────────────────────────────────────────────────────────────────
# FIELD CONSTRUCTION
# ─────────────────────────────────────────────────────────────────────────────

_SYSTEM_OPTIONS: list[dict] = [
    {"value": "gas",       "label": "Gas boiler"},
    {"value": "oil",       "label": "Fuel oil boiler"},
    {"value": "heat_pump", "label": "Heat pump"},
    {"value": "electric",  "label": "Direct electric"},
    {"value": "wood",      "label": "Wood / pellets"},
]


def _field(
    field_id: str,
    label: str,
    field_type: str = "number",
    *,
    required: bool = True,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    unit: str = "",
    options: Optional[list[dict]] = None,
    help_text: str = "",
    default: Any = None,
) -> dict:
    if default is None and field_id in DEFAULT_INPUTS:
        default = DEFAULT_INPUTS[field_id]
    return {
        "id":        field_id,
        "label":     label,
        "type":      field_type,
        "required":  required,
        "min":       min_value,
        "max":       max_value,
        "unit":      unit,
        "options":   options or [],
        "help_text": help_text,
        "default":   default,
    }


# ─────────────────────────────────────────────────────────────────────────────
# STEP 1 — LOCATION
# ─────────────────────────────────────────────────────────────────────────────

LOCATION_FIELDS: list[dict] = [
    _field("postcode", "Postcode", "text",
           help_text="French postcode; the first two digits select the climate zone."),
    _field("zone_id", "Climate zone", "select",
           options=[{"value": z["id"], "label": z["name"]} for z in CLIMATE_ZONES.values()],
           help_text="Derived from the postcode; override if the dwelling sits at altitude."),
]

# ─────────────────────────────────────────────────────────────────────────────
# STEP 2 — DWELLING
# ─────────────────────────────────────────────────────────────────────────────

DWELLING_FIELDS: list[dict] = [
    _field("archetype_id", "House type", "select",
           options=[{"value": a["id"], "label": f"{a['name']} ({a['period']})"} for a in ARCHETYPES.values()],
           help_text="Pre-fills typical U-values and envelope areas."),
    _field("living_area_m2", "Living area", min_value=10, max_value=1000, unit="m²",
           help_text="Total heated floor area."),
    _field("floors", "Floors", min_value=1, max_value=5,
           help_text="Number of heated storeys."),
    _field("ceiling_height_m", "Ceiling height", min_value=2.0, max_value=6.0, unit="m"),
]

# ─────────────────────────────────────────────────────────────────────────────
# STEP 3 — ENVELOPE
# ─────────────────────────────────────────────────────────────────────────────

ENVELOPE_FIELDS: list[dict] = [
    _field("u_wall", "U-value walls", min_value=0.1, max_value=4.0, unit="W/m²K"),
    _field("u_roof", "U-value roof", min_value=0.1, max_value=5.0, unit="W/m²K"),
    _field("u_floor", "U-value floor", min_value=0.1, max_value=3.0, unit="W/m²K"),
    _field("u_window", "U-value windows", min_value=0.5, max_value=6.0, unit="W/m²K"),
    _field("area_wall_m2", "Wall area", min_value=0, max_value=3000, unit="m²"),
    _field("area_roof_m2", "Roof area", min_value=0, max_value=2000, unit="m²"),
    _field("area_floor_m2", "Floor area", min_value=0, max_value=2000, unit="m²"),
    _field("area_window_m2", "Window area", min_value=0, max_value=500, unit="m²"),
    _field("ach", "Air changes per hour", min_value=0.1, max_value=3.0, unit="1/h",
           help_text="0.3 for an airtight new build, 1.0 or more for a draughty old house."),
]

# ─────────────────────────────────────────────────────────────────────────────
# STEP 4 — ENERGY SYSTEMS
# ─────────────────────────────────────────────────────────────────────────────

ENERGY_FIELDS: list[dict] = [
    _field("main_heating", "Main heating", "select", options=_SYSTEM_OPTIONS),
    _field("main_efficiency", "Main heating efficiency / SCOP", required=False,
           min_value=0, max_value=6, help_text="Leave at 0 to use the typical value for the system."),
    _field("aux_heating", "Auxiliary heating", "select", required=False,
           options=[{"value": "none", "label": "None"}] + _SYSTEM_OPTIONS),
    _field("aux_fraction", "Auxiliary share of heat", required=False, min_value=0, max_value=0.9),
    _field("occupants", "Occupants", min_value=1, max_value=12),
    _field("showers_per_day", "Showers per person per day", min_value=0, max_value=4),
    _field("litres_per_shower", "Litres per shower", min_value=10, max_value=200, unit="L"),
    _field("dhw_system", "Hot-water system", "select", options=_SYSTEM_OPTIONS),
    _field("base_electricity_kwh", "Household electricity", min_value=0, max_value=20000, unit="kWh/yr",
           help_text="Appliances and lighting, excluding heating."),
    _field("ev_km_per_year", "EV distance", required=False, min_value=0, max_value=60000, unit="km/yr"),
    _field("pv_kwp", "PV capacity", required=False, min_value=0, max_value=36, unit="kWp"),
    _field("pv_self_consumption", "PV self-consumption", required=False, min_value=0, max_value=1),
    _field("pool_area_m2", "Pool area", required=False, min_value=0, max_value=200, unit="m²"),
    _field("pool_months", "Pool months in use", required=False, min_value=0, max_value=12),
    _field("cooling_eer", "Cooling EER", required=False, min_value=1, max_value=8),
]

# ─────────────────────────────────────────────────────────────────────────────
# STEP 5 — BEHAVIOUR & FINANCE
# ─────────────────────────────────────────────────────────────────────────────

FINANCE_FIELDS: list[dict] = [
    _field("setpoint_c", "Setpoint when home", min_value=14, max_value=26, unit="°C"),
    _field("away_setpoint_c", "Setpoint when away", min_value=5, max_value=22, unit="°C"),
    _field("days_present", "Days at home", min_value=0, max_value=365, unit="days"),
    _field("days_away", "Days away", min_value=0, max_value=365, unit="days"),
    _field("price_gas", "Gas price", required=False, min_value=0, max_value=1, unit="€/kWh"),
    _field("price_oil", "Fuel oil price", required=False, min_value=0, max_value=1, unit="€/kWh"),
    _field("price_electricity", "Electricity price", required=False, min_value=0, max_value=1, unit="€/kWh"),
    _field("price_wood", "Wood price", required=False, min_value=0, max_value=1, unit="€/kWh"),
    _field("export_tariff", "PV export tariff", required=False, min_value=0, max_value=1, unit="€/kWh"),
]

STEP_FIELDS: list[list[dict]] = [
    LOCATION_FIELDS,
    DWELLING_FIELDS,
    ENVELOPE_FIELDS,
    ENERGY_FIELDS,
    FINANCE_FIELDS,
]

# ─────────────────────────────────────────────────────────────────────────────
# QUICK ADVICE
# ─────────────────────────────────────────────────────────────────────────────

QUICK_ADVICE_FIELDS: list[dict] = [
    _field("living_area_m2", "Living area", min_value=10, max_value=1000, unit="m²", default=100),
    _field("build_year", "Year built", min_value=1800, max_value=datetime.date.today().year,
           unit="year", default=1980),
    _field("insulation_level", "Insulation level", "select", default="moderate", options=[
        {"value": "poor",      "label": "Poor (pre-1980, no insulation)"},
        {"value": "moderate",  "label": "Moderate (partly insulated)"},
        {"value": "good",      "label": "Good (fully insulated)"},
        {"value": "excellent", "label": "Excellent (passive house)"},
    ]),
    _field("heating_system", "Heating system", "select", default="gas", options=_SYSTEM_OPTIONS),
]


# ─────────────────────────────────────────────────────────────────────────────
# VALIDATION HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def validate_number(value: Any, field: dict) -> tuple[bool, str]:
    """Validate one value for a number field against its bounds."""
    label = field["label"]
    unit = f" {field['unit']}" if field.get("unit") else ""
    if isinstance(value, bool):
        return False, f"{label} must be a number."
    try:
        number = float(str(value).strip().replace(",", ".")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return False, f"{label} must be a number."
    if math.isnan(number):
        return False, f"{label} must be a number."
    if field.get("min") is not None and number < field["min"]:
        return False, f"{label} must be at least {field['min']}{unit}."
    if field.get("max") is not None and number > field["max"]:
        return False, f"{label} must be at most {field['max']}{unit}."
    return True, "ok"


def validate(fields: list[dict], values: Mapping[str, Any]) -> list[dict]:
    """
    Check ``values`` against field definitions.

    Reports, at most once per field: a missing required value, a non-numeric
    value in a number field, or a number outside ``min`` / ``max``.

    Returns a list of ``{"field_id", "message"}`` dicts (empty when valid).
    """
    values = values if isinstance(values, Mapping) else {}
    errors: list[dict] = []
    for field in fields:
        raw = values.get(field["id"])
        if _is_missing(raw):
            if field["required"]:
                errors.append({"field_id": field["id"], "message": f"{field['label']} is required."})
            continue
        if field["type"] == "number":
            ok, message = validate_number(raw, field)
            if not ok:
                errors.append({"field_id": field["id"], "message": message})
    return errors


def validate_step(step: int, values: Mapping[str, Any]) -> list[dict]:
    """Validate one questionnaire step (1-based); unknown steps yield no errors."""
    if not isinstance(step, int) or isinstance(step, bool) or not 1 <= step <= len(STEP_FIELDS):
        return []
    return validate(STEP_FIELDS[step - 1], values)


def all_fields() -> list[dict]:
    """Every questionnaire field across the five steps, in step order."""
    return [field for step in STEP_FIELDS for field in step]
