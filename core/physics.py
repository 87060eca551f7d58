# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Core Physics Engine
# © 2026 Aparajita Parihar. All rights reserved.
#
# Steady-state degree-day model of a dwelling's annual energy balance:
#   UA         = Σ(Aᵢ × Uᵢ)                                  [W/K]
#   Hvent      = 0.34 × V × ACH × (1 − η_HRV)                [W/K]
#   HDD_corr   = HDD × max(0, (T_set − T_ref) / (18 − T_ref))
#   Q_heat     = H × (HDD_present × d_p/365 + HDD_away × d_a/365) × 24 / 1000
#   Q_dhw      = n × showers × L × 365 × 28 K × 4.186 / 3600 [kWh]
# plus EV, pool, cooling, PV self-consumption, CO₂ and cost roll-ups.
#
# Calibrated against EN ISO 13790 degree-day method + ADEME Base Carbone
#
# DISCLAIMER: Simplified steady-state model. Results are indicative only.
# Not a certified 3CL-DPE calculation.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import copy
import functools
import json
import logging
from typing import Any, Mapping, Optional

from config.archetypes import ARCHETYPES, DEFAULT_ARCHETYPE_ID
from config.constants import (
    AIR_HEAT_CAPACITY_WH_M3K,
    AUX_FRACTION_MAX,
    AUX_NONE,
    BOOLEAN_FIELDS,
    CLIMATE_ZONES,
    CO2_FACTOR,
    COOLING_HOURS_PER_CDD,
    COOLING_LOAD_W_M2,
    DAYS_PER_YEAR,
    DEFAULT_EFFICIENCY,
    DEFAULT_INPUTS,
    DEFAULT_ZONE_ID,
    DHW_COLD_WATER_C,
    DHW_HOT_WATER_C,
    FALLBACK_HEATING_SYSTEM,
    HDD_BASE_C,
    HEATING_SYSTEMS,
    NUMERIC_FIELDS,
    POOL_AMBIENT_OFFSET_K,
    POOL_HOURS_PER_MONTH,
    POOL_LOSS_W_M2K,
    POOL_WATER_TEMP_C,
    PRICE_FIELD,
    WATER_HEAT_CAPACITY_KJ_KGK,
)
from core.dpe import _current_year, classify
from core.subsidies import resolve_intake
from core.utils import _clamp, _round_half_up, _safe_bool, _safe_number
from services.location import zone_id_for_postcode

logger = logging.getLogger(__name__)

# Prices and export tariff: 0 means "use the February 2026 default"
PRICE_FIELDS: tuple[str, ...] = (
    "price_gas", "price_oil", "price_electricity", "price_wood", "export_tariff",
)


# ─────────────────────────────────────────────────────────────────────────────
# INPUT RESOLUTION
# Every default substitution happens here, against DEFAULT_INPUTS.
# ─────────────────────────────────────────────────────────────────────────────

def default_inputs() -> dict:
    """Return a fresh copy of the complete default input."""
    return copy.deepcopy(DEFAULT_INPUTS)


def _resolve_number(key: str, raw_value: Any) -> tuple[float, bool]:
    default = float(DEFAULT_INPUTS[key])
    if isinstance(raw_value, str):
        raw_value = raw_value.strip().replace(",", ".")
    value = _safe_number(raw_value, default=None)
    if value is None or value < 0 or (key in PRICE_FIELDS and value == 0):
        if raw_value not in (None, ""):
            logger.debug("Invalid %s=%r, using default %s", key, raw_value, default)
        return default, True
    return value, False


def _resolve_system(key: str, raw_value: Any) -> tuple[str, bool]:
    if raw_value is None:
        return str(DEFAULT_INPUTS[key]), True
    allowed = HEATING_SYSTEMS + (AUX_NONE,) if key == "aux_heating" else HEATING_SYSTEMS
    if isinstance(raw_value, str) and raw_value in allowed:
        return raw_value, False
    fallback = AUX_NONE if key == "aux_heating" else FALLBACK_HEATING_SYSTEM
    logger.warning("Unknown heating system %s=%r, using %r", key, raw_value, fallback)
    return fallback, True


def _resolve_zone(raw_zone: Any, postcode: str) -> tuple[str, bool]:
    if isinstance(raw_zone, str) and raw_zone in CLIMATE_ZONES:
        return raw_zone, False
    if raw_zone not in (None, ""):
        logger.warning("Unknown climate zone %r, deriving from postcode", raw_zone)
    if postcode:
        return zone_id_for_postcode(postcode), True
    return DEFAULT_ZONE_ID, True


def _resolve_archetype(raw_value: Any) -> tuple[str, bool]:
    if raw_value in (None, ""):
        return DEFAULT_ARCHETYPE_ID, True
    if isinstance(raw_value, str) and raw_value in ARCHETYPES:
        return raw_value, False
    logger.warning("Unknown archetype %r, using %r", raw_value, DEFAULT_ARCHETYPE_ID)
    return DEFAULT_ARCHETYPE_ID, True


def _resolve(raw: Optional[Mapping[str, Any]]) -> tuple[dict, list[str]]:
    raw = raw if isinstance(raw, Mapping) else {}
    resolved: dict = {}
    applied: list[str] = []

    for key in NUMERIC_FIELDS:
        resolved[key], substituted = _resolve_number(key, raw.get(key))
        if substituted:
            applied.append(key)

    for key in BOOLEAN_FIELDS:
        value = raw.get(key)
        default = bool(DEFAULT_INPUTS[key])
        resolved[key] = _safe_bool(value, default=default)
        if value is None:
            applied.append(key)

    for key in ("main_heating", "aux_heating", "dhw_system"):
        resolved[key], substituted = _resolve_system(key, raw.get(key))
        if substituted:
            applied.append(key)

    postcode = str(raw.get("postcode") or "").strip()
    resolved["postcode"] = postcode
    resolved["zone_id"], substituted = _resolve_zone(raw.get("zone_id"), postcode)
    if substituted:
        applied.append("zone_id")

    resolved["archetype_id"], substituted = _resolve_archetype(raw.get("archetype_id"))
    if substituted:
        applied.append("archetype_id")

    resolved["subsidy_intake"] = resolve_intake(raw.get("subsidy_intake"))
    return resolved, applied


def resolve_inputs(raw: Optional[Mapping[str, Any]]) -> dict:
    """
    Build a complete calculation input from a partial or malformed mapping.

    - Missing, unparseable, negative, NaN or infinite numbers → table default
    - Prices / export tariff of 0 → February 2026 default
    - Unknown main / DHW heating system → gas; unknown auxiliary → none
    - Unknown zone → zone from postcode, else the default zone
    - Unknown archetype → the default archetype
    - Unknown keys are dropped

    Never raises and never mutates ``raw``.
    """
    resolved, _ = _resolve(raw)
    return resolved


# ─────────────────────────────────────────────────────────────────────────────
# SUB-CALCULATIONS
# ─────────────────────────────────────────────────────────────────────────────

def calc_ua(inputs: Mapping[str, float]) -> dict:
    """Transmission heat-loss coefficient UA [W/K], total and per element."""
    wall = inputs["area_wall_m2"] * inputs["u_wall"]
    roof = inputs["area_roof_m2"] * inputs["u_roof"]
    floor = inputs["area_floor_m2"] * inputs["u_floor"]
    window = inputs["area_window_m2"] * inputs["u_window"]
    return {
        "total":  wall + roof + floor + window,
        "wall":   wall,
        "roof":   roof,
        "floor":  floor,
        "window": window,
    }


def calc_hvent(volume_m3: float, ach: float, has_hrv: bool, hrv_efficiency: float) -> tuple[float, float]:
    """
    Ventilation heat-loss coefficient [W/K].

    Returns ``(before_hrv, effective)``; the HRV efficiency is clamped to [0, 1].
    """
    before_hrv = AIR_HEAT_CAPACITY_WH_M3K * volume_m3 * ach
    eta = _clamp(hrv_efficiency, 0.0, 1.0) if has_hrv else 0.0
    return before_hrv, before_hrv * (1.0 - eta)


def calc_hdd_corrected(hdd: float, setpoint_c: float, t_ref_c: float) -> float:
    """
    Scale zone degree-days to a heating setpoint.

    HDD_corr = HDD × max(0, (setpoint − T_ref) / (18 − T_ref)).
    Returns ``hdd`` unchanged when 18 − T_ref ≤ 0.
    """
    denominator = HDD_BASE_C - t_ref_c
    if denominator <= 0:
        return hdd
    return hdd * max(0.0, (setpoint_c - t_ref_c) / denominator)


def calc_heating_demand(
    h_total_wk: float,
    hdd_present: float,
    hdd_away: float,
    days_present: float,
    days_away: float,
) -> float:
    """Annual thermal heating demand [kWh]."""
    frac_present = days_present / DAYS_PER_YEAR
    frac_away = days_away / DAYS_PER_YEAR
    return h_total_wk * (hdd_present * frac_present + hdd_away * frac_away) * 24 / 1000


def calc_dhw_thermal(occupants: float, showers_per_day: float, litres_per_shower: float) -> float:
    """Annual domestic hot-water thermal demand [kWh], heating 12 °C → 40 °C."""
    delta_t = DHW_HOT_WATER_C - DHW_COLD_WATER_C
    litres_per_year = occupants * showers_per_day * litres_per_shower * DAYS_PER_YEAR
    return litres_per_year * delta_t * WATER_HEAT_CAPACITY_KJ_KGK / 3600


def calc_pool_kwh(area_m2: float, months: float, pool_temp_c: float) -> float:
    """
    Seasonal pool heat loss [kWh]; 0 when area or months is not positive.

    Ambient is approximated as zone pool temperature − 5 K, water held at 28 °C.
    """
    if area_m2 <= 0 or months <= 0:
        return 0.0
    ambient_c = pool_temp_c - POOL_AMBIENT_OFFSET_K
    delta_t = max(0.0, POOL_WATER_TEMP_C - ambient_c)
    hours = months * POOL_HOURS_PER_MONTH
    return POOL_LOSS_W_M2K * area_m2 * delta_t * hours / 1000


def calc_cooling_kwh(cdd: float, living_area_m2: float, eer: float) -> float:
    """Annual cooling electricity [kWh] from a 30 W/m² load over 8 h per CDD."""
    if cdd <= 0:
        return 0.0
    if eer <= 0:
        eer = float(DEFAULT_INPUTS["cooling_eer"])
    cooling_hours = cdd * COOLING_HOURS_PER_CDD
    return COOLING_LOAD_W_M2 * living_area_m2 * cooling_hours / (eer * 1000)


def efficiency_for(system: str, override: float) -> float:
    """Override when positive, else the system default, else 1.0."""
    if override > 0:
        return override
    return DEFAULT_EFFICIENCY.get(system, 1.0)


# ─────────────────────────────────────────────────────────────────────────────
# ENERGY BALANCE
# ─────────────────────────────────────────────────────────────────────────────

def _compute_impl(r: dict, year: int, with_trace: bool) -> tuple[dict, Optional[dict]]:
    zone = CLIMATE_ZONES[r["zone_id"]]
    living_area = r["living_area_m2"]

    volume = living_area * r["floors"] * r["ceiling_height_m"]
    ua = calc_ua(r)
    hvent_before, hvent_eff = calc_hvent(volume, r["ach"], r["has_hrv"], r["hrv_efficiency"])
    h_total = ua["total"] + hvent_eff

    hdd_present = calc_hdd_corrected(zone["hdd"], r["setpoint_c"], zone["t_ref_c"])
    hdd_away = calc_hdd_corrected(zone["hdd"], r["away_setpoint_c"], zone["t_ref_c"])
    heating_demand = calc_heating_demand(
        h_total, hdd_present, hdd_away, r["days_present"], r["days_away"]
    )

    # Main / auxiliary split; with no auxiliary system the main system carries it all
    main_system, aux_system = r["main_heating"], r["aux_heating"]
    has_aux = aux_system != AUX_NONE
    aux_frac = _clamp(r["aux_fraction"], 0.0, AUX_FRACTION_MAX) if has_aux else 0.0
    main_frac = 1.0 - aux_frac
    main_eff = efficiency_for(main_system, r["main_efficiency"])
    aux_eff = efficiency_for(aux_system, r["aux_efficiency"]) if has_aux else 1.0

    heating_main = heating_demand * main_frac / main_eff
    heating_aux = heating_demand * aux_frac / aux_eff if has_aux else 0.0
    heating_total = heating_main + heating_aux

    dhw_thermal = calc_dhw_thermal(r["occupants"], r["showers_per_day"], r["litres_per_shower"])
    dhw_eff = efficiency_for(r["dhw_system"], r["dhw_efficiency"])
    dhw_delivered = dhw_thermal / dhw_eff

    base_electricity = r["base_electricity_kwh"]
    ev_kwh = r["ev_km_per_year"] * r["ev_kwh_per_km"] if r["has_ev"] else 0.0
    pool_kwh = (
        calc_pool_kwh(r["pool_area_m2"], r["pool_months"], zone["pool_temp_c"])
        if r["has_pool"] else 0.0
    )
    cooling_kwh = (
        calc_cooling_kwh(zone["cdd"], living_area, r["cooling_eer"])
        if r["has_cooling"] else 0.0
    )
    electric_loads = base_electricity + ev_kwh + pool_kwh + cooling_kwh

    total_kwh = heating_total + dhw_delivered + electric_loads

    pv_production = r["pv_kwp"] * zone["pv_yield"] if r["has_pv"] else 0.0
    pv_self = pv_production * _clamp(r["pv_self_consumption"], 0.0, 1.0)
    pv_export = pv_production - pv_self
    net_grid = max(0.0, total_kwh - pv_self)

    dpe = classify(total_kwh / max(1.0, living_area), year)

    prices = {field: r[field] for field in PRICE_FIELDS}
    price_elec = prices["price_electricity"]

    def _price(system: str) -> float:
        return prices[PRICE_FIELD[system]]

    co2 = heating_main * CO2_FACTOR[main_system]
    if has_aux:
        co2 += heating_aux * CO2_FACTOR[aux_system]
    co2 += dhw_delivered * CO2_FACTOR[r["dhw_system"]]
    co2 += electric_loads * CO2_FACTOR["electric"]

    cost_heating = heating_main * _price(main_system)
    if has_aux:
        cost_heating += heating_aux * _price(aux_system)
    cost_dhw = dhw_delivered * _price(r["dhw_system"])
    cost_electricity = electric_loads * price_elec
    cost_total = cost_heating + cost_dhw + cost_electricity

    pv_savings = pv_self * price_elec + pv_export * prices["export_tariff"]
    net_cost = max(0.0, cost_total - pv_savings)

    result = {
        "ua_wk":                   _round_half_up(ua["total"], 1),
        "hvent_wk":                _round_half_up(hvent_before, 1),
        "hvent_eff_wk":            _round_half_up(hvent_eff, 1),
        "h_total_wk":              _round_half_up(h_total, 1),
        "hdd_present":             _round_half_up(hdd_present),
        "hdd_away":                _round_half_up(hdd_away),
        "heating_demand_kwh":      _round_half_up(heating_demand),
        "heating_main_kwh":        _round_half_up(heating_main),
        "heating_aux_kwh":         _round_half_up(heating_aux),
        "heating_total_kwh":       _round_half_up(heating_total),
        "dhw_thermal_kwh":         _round_half_up(dhw_thermal),
        "dhw_delivered_kwh":       _round_half_up(dhw_delivered),
        "base_electricity_kwh":    _round_half_up(base_electricity),
        "ev_kwh":                  _round_half_up(ev_kwh),
        "pool_kwh":                _round_half_up(pool_kwh),
        "cooling_kwh":             _round_half_up(cooling_kwh),
        "total_consumption_kwh":   _round_half_up(total_kwh),
        "pv_production_kwh":       _round_half_up(pv_production),
        "pv_self_consumption_kwh": _round_half_up(pv_self),
        "pv_export_kwh":           _round_half_up(pv_export),
        "net_grid_kwh":            _round_half_up(net_grid),
        "dpe":                     dpe,
        "co2_kg":                  _round_half_up(co2),
        "cost_heating_eur":        _round_half_up(cost_heating),
        "cost_dhw_eur":            _round_half_up(cost_dhw),
        "cost_electricity_eur":    _round_half_up(cost_electricity),
        "cost_total_eur":          _round_half_up(cost_total),
        "pv_savings_eur":          _round_half_up(pv_savings),
        "net_cost_eur":            _round_half_up(net_cost),
    }

    if not with_trace:
        return result, None

    trace = {
        "zone":                dict(zone),
        "archetype_id":        r["archetype_id"],
        "ua_wall":             ua["wall"],
        "ua_roof":             ua["roof"],
        "ua_floor":            ua["floor"],
        "ua_window":           ua["window"],
        "volume_m3":           volume,
        "ach_used":            r["ach"],
        "hvent_before_hrv":    hvent_before,
        "hrv_efficiency_used": _clamp(r["hrv_efficiency"], 0.0, 1.0) if r["has_hrv"] else 0.0,
        "setpoint_c":          r["setpoint_c"],
        "away_setpoint_c":     r["away_setpoint_c"],
        "t_ref_c":             zone["t_ref_c"],
        "hdd_base":            zone["hdd"],
        "hdd_present":         hdd_present,
        "hdd_away":            hdd_away,
        "frac_present":        r["days_present"] / DAYS_PER_YEAR,
        "frac_away":           r["days_away"] / DAYS_PER_YEAR,
        "main_frac":           main_frac,
        "main_efficiency":     main_eff,
        "aux_frac":            aux_frac,
        "aux_efficiency":      aux_eff,
        "dhw_litres_per_day":  r["occupants"] * r["showers_per_day"] * r["litres_per_shower"],
        "dhw_delta_t":         DHW_HOT_WATER_C - DHW_COLD_WATER_C,
        "dhw_efficiency":      dhw_eff,
        "pv_yield":            zone["pv_yield"],
        "prices":              prices,
    }
    return result, trace


def _make_cache_key(resolved: dict, year: int, with_trace: bool) -> tuple:
    """Create a hashable key from the resolved input dict for LRU caching."""
    return json.dumps(resolved, sort_keys=True), int(year), with_trace


@functools.lru_cache(maxsize=512)
def _compute_cached(inputs_json: str, year: int, with_trace: bool) -> tuple[dict, Optional[dict]]:
    """Cached internal implementation using hashable inputs."""
    return _compute_impl(json.loads(inputs_json), year, with_trace)


def compute_with_trace(
    inputs: Optional[Mapping[str, Any]],
    year: Optional[int] = None,
) -> tuple[dict, dict]:
    """
    Run the energy balance and also return every intermediate value.

    Returns ``(result, trace)`` where ``result`` is identical to
    ``compute(inputs, year)`` and ``trace`` holds the unrounded intermediate
    values plus ``defaults_applied``, the input fields that fell back to
    their defaults.
    """
    resolved, applied = _resolve(inputs)
    if year is None:
        year = _current_year()
    result, trace = _compute_cached(*_make_cache_key(resolved, year, True))
    trace = copy.deepcopy(trace)
    trace["defaults_applied"] = applied
    return copy.deepcopy(result), trace


def compute(inputs: Optional[Mapping[str, Any]], year: Optional[int] = None) -> dict:
    """
    Public entry point for the energy-balance engine with LRU caching.

    Pure and total: malformed or missing fields fall back to DEFAULT_INPUTS,
    fractions are clamped, degenerate denominators short-circuit. ``year``
    only affects the rental-ban flag of the DPE result and defaults to the
    current calendar year.

    Returns a dict with keys:
      ua_wk, hvent_wk, hvent_eff_wk, h_total_wk      : float — W/K, 1 decimal
      hdd_present, hdd_away                          : int   — corrected HDD
      heating_demand_kwh                             : int   — thermal demand
      heating_main_kwh, heating_aux_kwh,
      heating_total_kwh                              : int   — delivered energy
      dhw_thermal_kwh, dhw_delivered_kwh             : int
      base_electricity_kwh, ev_kwh, pool_kwh,
      cooling_kwh                                    : int
      total_consumption_kwh                          : int
      pv_production_kwh, pv_self_consumption_kwh,
      pv_export_kwh, net_grid_kwh                    : int
      dpe                                            : dict  — see core.dpe.classify
      co2_kg                                         : int
      cost_heating_eur, cost_dhw_eur,
      cost_electricity_eur, cost_total_eur,
      pv_savings_eur, net_cost_eur                   : int   — € / year

    DISCLAIMER: Simplified steady-state model. Results are indicative only.
    """
    resolved, _ = _resolve(inputs)
    if year is None:
        year = _current_year()
    # Return a copy so the cached result is never mutated by the caller
    result, _ = _compute_cached(*_make_cache_key(resolved, year, False))
    return copy.deepcopy(result)
