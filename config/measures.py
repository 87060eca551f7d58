# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Retrofit Measure Catalogue
# © 2026 Aparajita Parihar. All rights reserved.
#
# Single source of truth for:
#   • MEASURES — retrofit measure templates evaluated by core/savings.py
#
# Each template declares:
#   applies(inputs)  — False when the dwelling already meets the target
#   changes          — input overrides applied on top of the resolved inputs
#   cost_min/max     — indicative € per unit (2025–2026 French market prices)
#   quantity_field   — input key giving the quantity, or None with `quantity`
#
# This file has ZERO network imports.
# It is safe to import in unit tests and CLI contexts.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

from config.constants import DEFAULT_INPUTS

_INSULATION_SOURCE = "https://infofrankrijk.com/de-isolatie-van-het-franse-huis/"

MEASURE_CATEGORIES: tuple[str, ...] = ("insulation", "heating", "ventilation", "renewable")

# ─────────────────────────────────────────────────────────────────────────────
# MEASURE TEMPLATES
# Ids must be stable: report tables and UI state reference them.
# ─────────────────────────────────────────────────────────────────────────────

MEASURES: list[dict] = [
    {
        "id":             "roof_insulation",
        "name":           "Roof insulation",
        "description":    "Insulate the roof with mineral wool or PIR boards (R ≥ 6 m²·K/W).",
        "category":       "insulation",
        "cost_min":       40,
        "cost_max":       80,
        "unit":           "m² roof",
        "quantity_field": "area_roof_m2",
        "applies":        lambda inputs: inputs["u_roof"] > 0.20,
        "changes":        {"u_roof": 0.17},
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "wall_insulation_internal",
        "name":           "Wall insulation (internal)",
        "description":    "Insulate the walls from inside with plasterboard-backed insulation (R ≥ 3.7 m²·K/W).",
        "category":       "insulation",
        "cost_min":       50,
        "cost_max":       100,
        "unit":           "m² wall",
        "quantity_field": "area_wall_m2",
        "applies":        lambda inputs: inputs["u_wall"] > 0.30,
        "changes":        {"u_wall": 0.27},
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "wall_insulation_external",
        "name":           "Wall insulation (external, ITE)",
        "description":    "Insulate the walls from outside (ITE). More effective than internal insulation, removes thermal bridges.",
        "category":       "insulation",
        "cost_min":       120,
        "cost_max":       200,
        "unit":           "m² wall",
        "quantity_field": "area_wall_m2",
        "applies":        lambda inputs: inputs["u_wall"] > 0.25,
        "changes":        {"u_wall": 0.22},
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "floor_insulation",
        "name":           "Floor insulation",
        "description":    "Insulate the floor from the crawl space or cellar (R ≥ 3 m²·K/W).",
        "category":       "insulation",
        "cost_min":       30,
        "cost_max":       60,
        "unit":           "m² floor",
        "quantity_field": "area_floor_m2",
        "applies":        lambda inputs: inputs["u_floor"] > 0.30,
        "changes":        {"u_floor": 0.25},
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "window_upgrade",
        "name":           "High-performance double glazing",
        "description":    "Replace single or early double glazing with HR++ units (U ≤ 1.3 W/m²·K).",
        "category":       "insulation",
        "cost_min":       400,
        "cost_max":       800,
        "unit":           "m² window",
        "quantity_field": "area_window_m2",
        "applies":        lambda inputs: inputs["u_window"] > 1.5,
        "changes":        {"u_window": 1.2},
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "heat_pump",
        "name":           "Air-to-water heat pump",
        "description":    "Replace the main heating with an air-to-water heat pump (SCOP ≥ 3.5) that also serves hot water.",
        "category":       "heating",
        "cost_min":       80,
        "cost_max":       150,
        "unit":           "m² living area",
        "quantity_field": "living_area_m2",
        "applies":        lambda inputs: inputs["main_heating"] != "heat_pump",
        "changes": {
            "main_heating":    "heat_pump",
            "main_efficiency": 3.5,
            "dhw_system":      "heat_pump",
            "dhw_efficiency":  3.0,
        },
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "hrv_ventilation",
        "name":           "Heat-recovery ventilation",
        "description":    "Install balanced mechanical ventilation with heat recovery (efficiency ≥ 75%).",
        "category":       "ventilation",
        "cost_min":       40,
        "cost_max":       80,
        "unit":           "m² living area",
        "quantity_field": "living_area_m2",
        "applies":        lambda inputs: not (inputs["has_hrv"] and inputs["hrv_efficiency"] >= 0.7),
        "changes":        {"has_hrv": True, "hrv_efficiency": 0.80},
        "source":         _INSULATION_SOURCE,
    },
    {
        "id":             "pv_installation",
        "name":           "Solar PV (3 kWp)",
        "description":    "Install 3 kWp of roof-mounted solar panels for self-consumption.",
        "category":       "renewable",
        "cost_min":       300,
        "cost_max":       500,
        "unit":           "kWp",
        "quantity_field": None,
        "quantity":       3,
        "applies":        lambda inputs: not inputs["has_pv"],
        "changes":        {"has_pv": True, "pv_kwp": 3.0, "pv_self_consumption": 0.30},
        "source":         _INSULATION_SOURCE,
    },
]


def measure_ids() -> list[str]:
    return [m["id"] for m in MEASURES]


def measure_quantity(measure: dict, inputs: dict) -> float:
    """Quantity the per-unit cost applies to, for a resolved input dict."""
    field = measure.get("quantity_field")
    if field is None:
        return float(measure.get("quantity", 0))
    return float(inputs.get(field, 0.0))


# ─────────────────────────────────────────────────────────────────────────────
# INTEGRITY ASSERTION (runs at import time)
# Raises AssertionError immediately if a template references an unknown
# input field or carries an inconsistent cost range.
# ─────────────────────────────────────────────────────────────────────────────

def _assert_catalogue_integrity() -> None:
    seen: set[str] = set()
    for measure in MEASURES:
        mid = measure["id"]
        assert mid not in seen, (
            f"config/measures.py integrity error: duplicate measure id '{mid}'"
        )
        seen.add(mid)
        assert measure["category"] in MEASURE_CATEGORIES, (
            f"config/measures.py integrity error: "
            f"measure '{mid}' has unknown category '{measure['category']}'"
        )
        assert 0 <= measure["cost_min"] <= measure["cost_max"], (
            f"config/measures.py integrity error: "
            f"measure '{mid}' has cost_min > cost_max"
        )
        for key in measure["changes"]:
            assert key in DEFAULT_INPUTS, (
                f"config/measures.py integrity error: "
                f"measure '{mid}' changes unknown input field '{key}'"
            )
        field = measure["quantity_field"]
        assert field is None or field in DEFAULT_INPUTS, (
            f"config/measures.py integrity error: "
            f"measure '{mid}' uses unknown quantity field '{field}'"
        )
        assert field is not None or "quantity" in measure, (
            f"config/measures.py integrity error: "
            f"measure '{mid}' has neither quantity_field nor quantity"
        )


_assert_catalogue_integrity()
