# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Quick Advice Estimator
# © 2026 Aparajita Parihar. All rights reserved.
#
# Four-question first estimate (living area, year built, insulation level,
# heating system) shown before the full questionnaire. Uses a fixed energy
# intensity per insulation level and the canonical DPE, CO₂ and price tables.
#
# DISCLAIMER: Rough order-of-magnitude estimate only.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from config.constants import CO2_FACTOR, DEFAULT_INPUTS, FALLBACK_HEATING_SYSTEM, PRICE_FIELD
from core.dpe import classify
from core.utils import _round_half_up, _safe_number

logger = logging.getLogger(__name__)

# Final energy intensity per insulation level
INSULATION_INTENSITY_KWH_M2: dict[str, float] = {
    "poor":      200.0,
    "moderate":  150.0,
    "good":      100.0,
    "excellent": 50.0,
}
DEFAULT_INSULATION_LEVEL: str = "moderate"

# Design heat load proxy: annual demand spread over ~2000 full-load hours
FULL_LOAD_HOURS: float = 2000.0

DEFAULT_QUICK_AREA_M2: float = 100.0


def quick_estimate(values: Optional[Mapping[str, Any]], year: Optional[int] = None) -> dict:
    """
    First estimate from the quick-advice form.

    Never raises: a missing or non-positive area uses 100 m², unknown insulation
    levels use "moderate", unknown heating systems use gas.

    Returns a dict with keys:
      annual_kwh, kwh_per_m2, dpe (see core.dpe.classify), co2_kg,
      cost_eur, design_heat_load_w
    """
    values = values if isinstance(values, Mapping) else {}

    area = _safe_number(values.get("living_area_m2"), default=DEFAULT_QUICK_AREA_M2)
    if area <= 0:
        area = DEFAULT_QUICK_AREA_M2

    level = values.get("insulation_level")
    if not isinstance(level, str) or level not in INSULATION_INTENSITY_KWH_M2:
        if level is not None:
            logger.warning("Unknown insulation level %r, using %s", level, DEFAULT_INSULATION_LEVEL)
        level = DEFAULT_INSULATION_LEVEL

    system = values.get("heating_system")
    if not isinstance(system, str) or system not in CO2_FACTOR:
        if system is not None:
            logger.warning("Unknown heating system %r, using %s", system, FALLBACK_HEATING_SYSTEM)
        system = FALLBACK_HEATING_SYSTEM

    intensity = INSULATION_INTENSITY_KWH_M2[level]
    annual_kwh = area * intensity
    price = float(DEFAULT_INPUTS[PRICE_FIELD[system]])

    return {
        "annual_kwh":         _round_half_up(annual_kwh),
        "kwh_per_m2":         intensity,
        "dpe":                classify(intensity, year),
        "co2_kg":             _round_half_up(annual_kwh * CO2_FACTOR[system]),
        "cost_eur":           _round_half_up(annual_kwh * price),
        "design_heat_load_w": _round_half_up(annual_kwh / FULL_LOAD_HOURS * 1000),
    }
