# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Dwelling Archetype Registry
# © 2026 Aparajita Parihar. All rights reserved.
#
# Typical French dwelling types with default envelope properties. Archetypes
# only SEED the questionnaire when a user picks a house type; the calculation
# engine never requires one.
#
# Envelope areas are expressed as ratios to living area (m² of element per m²
# of living area) and scaled by seed_from_archetype().
#
# Sources:
#   ADEME — Typologie du parc résidentiel (TABULA FR)
#   3CL-DPE 2021 default U-values by construction period
#   RT2005 / RT2012 / RE2020 reference requirements
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import logging

from core.utils import _round_half_up, _safe_number

logger = logging.getLogger(__name__)

DEFAULT_ARCHETYPE_ID: str = "pavillon"

# ─────────────────────────────────────────────────────────────────────────────
# ARCHETYPES
# ─────────────────────────────────────────────────────────────────────────────
ARCHETYPES: dict[str, dict] = {
    "longere": {
        "id":               "longere",
        "name":             "La Longère",
        "period":           "Pre-1948",
        "description":      "Long single-storey farmhouse in rubble stone, uninsulated roof, single glazing.",
        "u_wall":           2.5,
        "u_roof":           3.5,
        "u_floor":          1.5,
        "u_window":         5.8,
        "ach":              0.9,
        "area_ratios":      {"wall": 1.5, "roof": 0.6, "floor": 0.6, "window": 0.1167},
        "thermal_mass":     "high",
        "insulation_score": 1,
        "moisture_advice":  "Stone walls must stay vapour-open: use lime plaster and breathable insulation (hemp, wood fibre).",
        "warnings": [
            "Never apply a vapour barrier or cement render on stone walls.",
            "Rising damp is common: check the floor before insulating it.",
        ],
        "source":           "ADEME TABULA FR — maison individuelle avant 1948",
    },
    "maison_de_ville": {
        "id":               "maison_de_ville",
        "name":             "Maison de ville",
        "period":           "Pre-1948",
        "description":      "Terraced town house on two or three levels, shared party walls.",
        "u_wall":           2.0,
        "u_roof":           2.5,
        "u_floor":          1.2,
        "u_window":         4.5,
        "ach":              0.8,
        "area_ratios":      {"wall": 0.8, "roof": 0.45, "floor": 0.45, "window": 0.14},
        "thermal_mass":     "high",
        "insulation_score": 2,
        "moisture_advice":  "Ventilate cellars and keep façade joints open to avoid trapped moisture.",
        "warnings": [
            "External wall insulation is often refused in protected town centres (ABF).",
        ],
        "source":           "ADEME TABULA FR — maison mitoyenne avant 1948",
    },
    "pavillon": {
        "id":               "pavillon",
        "name":             "Pavillon",
        "period":           "1948–1974",
        "description":      "Detached post-war house in concrete block, no insulation before the first thermal regulation.",
        "u_wall":           2.8,
        "u_roof":           3.0,
        "u_floor":          1.2,
        "u_window":         4.0,
        "ach":              0.8,
        "area_ratios":      {"wall": 1.2, "roof": 0.8, "floor": 0.8, "window": 0.15},
        "thermal_mass":     "medium",
        "insulation_score": 2,
        "moisture_advice":  "Check for condensation behind furniture on north walls.",
        "warnings": [
            "Asbestos may be present in roofing and floor tiles: get a diagnosis before works.",
        ],
        "source":           "ADEME TABULA FR — maison individuelle 1948–1974",
    },
    "pavillon_1975": {
        "id":               "pavillon_1975",
        "name":             "Pavillon 1975–2000",
        "period":           "1975–2000",
        "description":      "Detached house built under the first thermal regulations, thin insulation.",
        "u_wall":           0.8,
        "u_roof":           0.5,
        "u_floor":          0.8,
        "u_window":         2.9,
        "ach":              0.6,
        "area_ratios":      {"wall": 1.2, "roof": 0.8, "floor": 0.8, "window": 0.16},
        "thermal_mass":     "medium",
        "insulation_score": 5,
        "moisture_advice":  "Original mechanical extract is often undersized: check airflow before tightening the envelope.",
        "warnings": [
            "Glass wool from this period is often settled: roof insulation is the first quick win.",
        ],
        "source":           "ADEME TABULA FR — maison individuelle 1975–2000",
    },
    "rt2005": {
        "id":               "rt2005",
        "name":             "RT2005 house",
        "period":           "2001–2012",
        "description":      "House built under RT2000 / RT2005, double glazing and insulated roof.",
        "u_wall":           0.36,
        "u_roof":           0.2,
        "u_floor":          0.27,
        "u_window":         1.8,
        "ach":              0.5,
        "area_ratios":      {"wall": 1.2, "roof": 0.8, "floor": 0.8, "window": 0.17},
        "thermal_mass":     "medium",
        "insulation_score": 7,
        "moisture_advice":  "Keep the extract ventilation running permanently.",
        "warnings": [],
        "source":           "Arrêté du 24 mai 2006 (RT2005) — garde-fous",
    },
    "rt2012": {
        "id":               "rt2012",
        "name":             "RT2012 house",
        "period":           "2013–2021",
        "description":      "Low-energy house (BBC), airtight envelope, heat pump or condensing boiler.",
        "u_wall":           0.23,
        "u_roof":           0.14,
        "u_floor":          0.2,
        "u_window":         1.3,
        "ach":              0.4,
        "area_ratios":      {"wall": 1.2, "roof": 0.8, "floor": 0.8, "window": 0.18},
        "thermal_mass":     "medium",
        "insulation_score": 9,
        "moisture_advice":  "Airtight envelope: never block ventilation inlets.",
        "warnings": [],
        "source":           "Arrêté du 26 octobre 2010 (RT2012)",
    },
    "re2020": {
        "id":               "re2020",
        "name":             "RE2020 house",
        "period":           "2022+",
        "description":      "New-build to RE2020, very low heating need, often with balanced ventilation.",
        "u_wall":           0.18,
        "u_roof":           0.11,
        "u_floor":          0.16,
        "u_window":         1.1,
        "ach":              0.3,
        "area_ratios":      {"wall": 1.2, "roof": 0.8, "floor": 0.8, "window": 0.18},
        "thermal_mass":     "low",
        "insulation_score": 10,
        "moisture_advice":  "Balanced ventilation filters need changing twice a year.",
        "warnings": [
            "Lightweight construction: summer overheating can exceed heating needs.",
        ],
        "source":           "Décret n° 2021-1004 (RE2020)",
    },
}


# ─────────────────────────────────────────────────────────────────────────────
# ACCESSORS
# ─────────────────────────────────────────────────────────────────────────────

def archetype_options() -> list[str]:
    """Return archetype ids in table order (oldest first)."""
    return list(ARCHETYPES)


def get_archetype(archetype_id: str) -> dict:
    """Return a copy of an archetype definition.

    Raises:
        KeyError: if ``archetype_id`` is not registered.
    """
    if archetype_id not in ARCHETYPES:
        raise KeyError(
            f"Unknown archetype '{archetype_id}'. "
            f"Valid archetypes: {', '.join(ARCHETYPES)}"
        )
    archetype = dict(ARCHETYPES[archetype_id])
    archetype["area_ratios"] = dict(archetype["area_ratios"])
    archetype["warnings"] = list(archetype["warnings"])
    return archetype


def seed_from_archetype(archetype_id: str, living_area_m2: float) -> dict:
    """
    Build the envelope input fields an archetype pre-fills.

    Areas are ``ratio × living_area_m2`` rounded to whole m².  Unknown ids
    fall back to the default archetype.

    Returns a dict with keys:
      archetype_id, u_wall, u_roof, u_floor, u_window, ach,
      area_wall_m2, area_roof_m2, area_floor_m2, area_window_m2
    """
    if not isinstance(archetype_id, str) or archetype_id not in ARCHETYPES:
        logger.warning(
            "Unknown archetype %r, seeding from %s", archetype_id, DEFAULT_ARCHETYPE_ID
        )
        archetype_id = DEFAULT_ARCHETYPE_ID
    archetype = ARCHETYPES[archetype_id]
    ratios = archetype["area_ratios"]
    area = max(0.0, _safe_number(living_area_m2, default=0.0))

    return {
        "archetype_id":   archetype_id,
        "u_wall":         archetype["u_wall"],
        "u_roof":         archetype["u_roof"],
        "u_floor":        archetype["u_floor"],
        "u_window":       archetype["u_window"],
        "ach":            archetype["ach"],
        "area_wall_m2":   float(_round_half_up(area * ratios["wall"])),
        "area_roof_m2":   float(_round_half_up(area * ratios["roof"])),
        "area_floor_m2":  float(_round_half_up(area * ratios["floor"])),
        "area_window_m2": float(_round_half_up(area * ratios["window"])),
    }
