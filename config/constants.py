# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Canonical Constants Registry
# © 2026 Aparajita Parihar. All rights reserved.
#
# Single source of truth for all physical, financial, and regulatory constants
# used by the calculation engine, plus the central defaults table for inputs.
# All modules MUST import from here — never redefine constants locally.
#
# Sources:
#   ADEME Base Carbone (CO₂ factors per delivered kWh)
#   CRE / TRV regulated tariffs, February 2026 (energy prices)
#   Arrêté du 31 mars 2021 — DPE class thresholds (3CL-DPE 2021)
#   Loi Climat et Résilience 2021 — rental bans on G / F / E dwellings
#   Météo-France degree-day normals (zone averages, base 18 °C)
#
# This file has ZERO network and ZERO side-effect imports.
# It is safe to import in any context, including unit tests.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import math

# ─────────────────────────────────────────────────────────────────────────────
# CLIMATE ZONES
# One zone per group of départements (see services/location.py).
# hdd / cdd       : heating / cooling degree-days, base 18 °C
# pv_yield        : PV production, kWh / kWp / year
# pool_temp_c     : mean unheated pool water temperature over the season
# t_ref_c         : reference outdoor temperature used for setpoint correction
# ─────────────────────────────────────────────────────────────────────────────

CLIMATE_ZONES: dict[str, dict] = {
    "med": {
        "id": "med", "name": "Méditerranée (mild)",
        "hdd": 1400, "cdd": 700, "pv_yield": 1450, "pool_temp_c": 22, "t_ref_c": 12,
    },
    "ouest": {
        "id": "ouest", "name": "South-West / Atlantic",
        "hdd": 1900, "cdd": 350, "pv_yield": 1250, "pool_temp_c": 20, "t_ref_c": 10,
    },
    "paris": {
        "id": "paris", "name": "North / Paris (Île-de-France)",
        "hdd": 2200, "cdd": 250, "pv_yield": 1150, "pool_temp_c": 19, "t_ref_c": 7,
    },
    "centre": {
        "id": "centre", "name": "Centre / Bourgogne",
        "hdd": 2500, "cdd": 200, "pv_yield": 1200, "pool_temp_c": 19, "t_ref_c": 6,
    },
    "est": {
        "id": "est", "name": "East / Alsace-Lorraine",
        "hdd": 2800, "cdd": 150, "pv_yield": 1150, "pool_temp_c": 18, "t_ref_c": 5,
    },
    "mont": {
        "id": "mont", "name": "Mountains (cool)",
        "hdd": 3400, "cdd": 50, "pv_yield": 1100, "pool_temp_c": 17, "t_ref_c": 2,
    },
}

DEFAULT_ZONE_ID: str = "paris"


# ─────────────────────────────────────────────────────────────────────────────
# HEATING SYSTEMS — efficiencies, CO₂ factors, prices
# Efficiency is η for combustion / direct electric and SCOP for heat pumps.
# ─────────────────────────────────────────────────────────────────────────────

HEATING_SYSTEMS: tuple[str, ...] = ("gas", "oil", "heat_pump", "electric", "wood")
AUX_NONE: str = "none"
FALLBACK_HEATING_SYSTEM: str = "gas"

DEFAULT_EFFICIENCY: dict[str, float] = {
    "gas":       0.90,
    "oil":       0.85,
    "heat_pump": 3.5,   # SCOP
    "electric":  1.0,
    "wood":      0.75,
}

CO2_FACTOR: dict[str, float] = {
    "gas":       0.205,  # kgCO₂ / kWh delivered
    "oil":       0.265,  # kgCO₂ / kWh delivered
    "heat_pump": 0.055,  # kgCO₂ / kWh electricity
    "electric":  0.055,  # kgCO₂ / kWh electricity
    "wood":      0.030,  # kgCO₂ / kWh delivered
}

# Which price input each system is billed against
PRICE_FIELD: dict[str, str] = {
    "gas":       "price_gas",
    "oil":       "price_oil",
    "heat_pump": "price_electricity",
    "electric":  "price_electricity",
    "wood":      "price_wood",
}


# ─────────────────────────────────────────────────────────────────────────────
# ENERGY PRICES — France, February 2026
#   electricity : 0.2516 €/kWh (TRV base)
#   gas         : 0.1051 €/kWh (PCI)
#   fuel oil    : 1.18 €/L ÷ 10 kWh/L
#   firewood    : 85 €/stère ÷ 1500 kWh/stère
# ─────────────────────────────────────────────────────────────────────────────

PRICE_GAS_EUR_PER_KWH: float         = 0.1051  # € / kWh
PRICE_OIL_EUR_PER_KWH: float         = 0.118   # € / kWh
PRICE_ELECTRICITY_EUR_PER_KWH: float = 0.2516  # € / kWh
PRICE_WOOD_EUR_PER_KWH: float        = 0.057   # € / kWh

# PV surplus buy-back (OA EDF tarif S1 2026)
DEFAULT_EXPORT_TARIFF_EUR_PER_KWH: float = 0.13  # € / kWh


# ─────────────────────────────────────────────────────────────────────────────
# PHYSICS CONSTANTS
# ─────────────────────────────────────────────────────────────────────────────

AIR_HEAT_CAPACITY_WH_M3K: float = 0.34   # Wh / m³·K
WATER_HEAT_CAPACITY_KJ_KGK: float = 4.186  # kJ / kg·K

HDD_BASE_C: float = 18.0  # °C
DAYS_PER_YEAR: int = 365

DHW_COLD_WATER_C: float = 12.0  # °C
DHW_HOT_WATER_C: float  = 40.0  # °C

POOL_LOSS_W_M2K: float        = 15.0  # W / m²·K, open unheated pool
POOL_WATER_TEMP_C: float      = 28.0  # °C
POOL_AMBIENT_OFFSET_K: float  = 5.0   # ambient ≈ pool temperature − 5 K
POOL_HOURS_PER_MONTH: int     = 30 * 24

COOLING_LOAD_W_M2: float     = 30.0  # W / m²
COOLING_HOURS_PER_CDD: float = 8.0   # active cooling hours per CDD

AUX_FRACTION_MAX: float = 0.9


# ─────────────────────────────────────────────────────────────────────────────
# DPE CLASS LOOKUP — 3CL-DPE 2021 energy thresholds (kWh / m² / year)
#
# Each tuple: (letter, upper_bound_inclusive, hex_colour)
# Thresholds: A ≤ 70 · B ≤ 110 · C ≤ 180 · D ≤ 250 · E ≤ 330 · F ≤ 420 · G > 420
# ─────────────────────────────────────────────────────────────────────────────

DPE_CLASSES: list[tuple[str, float, str]] = [
    ("A", 70,       "#319834"),
    ("B", 110,      "#33cc31"),
    ("C", 180,      "#cbfc32"),
    ("D", 250,      "#fbfe06"),
    ("E", 330,      "#fbcc05"),
    ("F", 420,      "#f66c02"),
    ("G", math.inf, "#fc0205"),
]


# ─────────────────────────────────────────────────────────────────────────────
# RENTAL BANS — Loi Climat et Résilience
# Classes D and better carry no entry.
# ─────────────────────────────────────────────────────────────────────────────

RENTAL_BANS: dict[str, dict] = {
    "G": {
        "since_year":  2025,
        "description": "Since 1 January 2025 dwellings rated G may no longer be let.",
    },
    "F": {
        "since_year":  2028,
        "description": "From 1 January 2028 dwellings rated F may no longer be let.",
    },
    "E": {
        "since_year":  2034,
        "description": "From 1 January 2034 dwellings rated E may no longer be let.",
    },
}


# ─────────────────────────────────────────────────────────────────────────────
# DEFAULT SUBSIDY INTAKE
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_SUBSIDY_INTAKE: dict[str, object] = {
    "usage":         "rp",
    "age_gt_2":      "ja",
    "stage":         "voor",
    "work_type":     "onbekend",
    "mpr_path":      "onbekend",
    "heatloss_done": False,
}


# ─────────────────────────────────────────────────────────────────────────────
# DEFAULT INPUTS
# The only place input defaults live. core/physics.py resolves every missing
# or malformed field against this table.
# ─────────────────────────────────────────────────────────────────────────────

DEFAULT_INPUTS: dict[str, object] = {
    # location
    "postcode":             "",
    "zone_id":              DEFAULT_ZONE_ID,
    "archetype_id":         "pavillon",
    # geometry
    "living_area_m2":       100.0,
    "floors":               1.0,
    "ceiling_height_m":     2.5,
    # envelope
    "u_wall":               2.8,    # W / m²·K
    "u_roof":               3.0,
    "u_floor":              1.2,
    "u_window":             4.0,
    "area_wall_m2":         120.0,
    "area_roof_m2":         80.0,
    "area_floor_m2":        80.0,
    "area_window_m2":       15.0,
    "ach":                  0.8,    # air changes / hour
    # heating
    "main_heating":         "gas",
    "main_efficiency":      0.0,    # 0 = system default
    "aux_heating":          AUX_NONE,
    "aux_fraction":         0.0,
    "aux_efficiency":       0.0,
    # ventilation
    "has_hrv":              False,
    "hrv_efficiency":       0.75,
    # domestic hot water
    "occupants":            2.0,
    "showers_per_day":      1.0,
    "litres_per_shower":    50.0,
    "dhw_system":           "gas",
    "dhw_efficiency":       0.0,
    # electricity
    "base_electricity_kwh": 2500.0,
    # electric vehicle
    "has_ev":               False,
    "ev_km_per_year":       15000.0,
    "ev_kwh_per_km":        0.20,
    # photovoltaics
    "has_pv":               False,
    "pv_kwp":               3.0,
    "pv_self_consumption":  0.30,
    # pool
    "has_pool":             False,
    "pool_area_m2":         32.0,
    "pool_months":          5.0,
    # cooling
    "has_cooling":          False,
    "cooling_eer":          3.0,
    # occupancy behaviour
    "setpoint_c":           20.0,
    "away_setpoint_c":      16.0,
    "days_present":         300.0,
    "days_away":            65.0,
    # prices (€ / kWh)
    "price_gas":            PRICE_GAS_EUR_PER_KWH,
    "price_oil":            PRICE_OIL_EUR_PER_KWH,
    "price_electricity":    PRICE_ELECTRICITY_EUR_PER_KWH,
    "price_wood":           PRICE_WOOD_EUR_PER_KWH,
    "export_tariff":        DEFAULT_EXPORT_TARIFF_EUR_PER_KWH,
    # subsidy questionnaire
    "subsidy_intake":       DEFAULT_SUBSIDY_INTAKE,
}

BOOLEAN_FIELDS: tuple[str, ...] = (
    "has_hrv", "has_ev", "has_pv", "has_pool", "has_cooling",
)

SYSTEM_FIELDS: tuple[str, ...] = ("main_heating", "aux_heating", "dhw_system")

TEXT_FIELDS: tuple[str, ...] = ("postcode", "zone_id", "archetype_id")

NUMERIC_FIELDS: tuple[str, ...] = tuple(
    key for key in DEFAULT_INPUTS
    if key not in BOOLEAN_FIELDS + SYSTEM_FIELDS + TEXT_FIELDS + ("subsidy_intake",)
)
