# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — Retrofit Savings Analysis
# © 2026 Aparajita Parihar. All rights reserved.
#
# For every measure in config/measures.py:
#   • re-runs the energy balance with the measure applied
#   • derives kWh / € / CO₂ savings, payback and DPE impact
#   • ranks measures by payback and picks the smallest set reaching the
#     next better DPE class
#
# Each measure is evaluated independently against the same baseline; the
# totals are plain sums, not a simulation of the combined package.
#
# DISCLAIMER: Cost ranges and savings are indicative only. Obtain quotes from
# RGE-certified contractors before committing to works.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

from typing import Any, Mapping, Optional

from config.measures import MEASURES, measure_quantity
from core.dpe import _current_year, classify
from core.physics import compute, resolve_inputs
from core.utils import _round_half_up

PAYBACK_SENTINEL_YEARS: float = 999.0


# ─────────────────────────────────────────────────────────────────────────────
# SINGLE MEASURE
# ─────────────────────────────────────────────────────────────────────────────

def evaluate_measure(
    resolved: dict,
    baseline: dict,
    measure: dict,
    year: int,
) -> Optional[dict]:
    """
    Evaluate one measure template against a baseline result.

    Returns ``None`` when the measure does not apply to the dwelling or saves
    neither energy nor money.
    """
    if not measure["applies"](resolved):
        return None

    modified = {**resolved, **measure["changes"]}
    after = compute(modified, year)

    savings_kwh = baseline["total_consumption_kwh"] - after["total_consumption_kwh"]
    # Net cost (after PV) so a PV-equipped baseline is not double-counted
    savings_eur = baseline["net_cost_eur"] - after["net_cost_eur"]
    if savings_kwh <= 0 and savings_eur <= 0:
        return None

    quantity = measure_quantity(measure, resolved)
    cost_min = measure["cost_min"] * quantity
    cost_max = measure["cost_max"] * quantity
    average_cost = (cost_min + cost_max) / 2
    payback = average_cost / savings_eur if savings_eur > 0 else PAYBACK_SENTINEL_YEARS

    return {
        "id":                   measure["id"],
        "name":                 measure["name"],
        "description":          measure["description"],
        "category":             measure["category"],
        "unit":                 measure["unit"],
        "quantity":             _round_half_up(quantity, 1),
        "cost_min":             _round_half_up(cost_min),
        "cost_max":             _round_half_up(cost_max),
        "savings_kwh":          _round_half_up(savings_kwh),
        "savings_eur":          _round_half_up(savings_eur),
        "payback_years":        _round_half_up(payback, 1),
        "dpe_reduction_kwh_m2": _round_half_up(baseline["dpe"]["kwh_per_m2"] - after["dpe"]["kwh_per_m2"]),
        "co2_reduction_kg":     _round_half_up(baseline["co2_kg"] - after["co2_kg"]),
        "source":               measure["source"],
    }


# ─────────────────────────────────────────────────────────────────────────────
# NEXT-CLASS GAP ANALYSIS
# ─────────────────────────────────────────────────────────────────────────────

def minimal_set_for_next_class(measures: list[dict], gap_kwh_m2: float) -> list[dict]:
    """
    Greedily pick measures by DPE impact (largest first) until their summed
    reduction covers ``gap_kwh_m2``.  Returns ``[]`` when there is no gap.
    """
    if gap_kwh_m2 <= 0:
        return []

    ranked = sorted(measures, key=lambda m: m["dpe_reduction_kwh_m2"], reverse=True)

    selected, accumulated = [], 0.0
    for measure in ranked:
        if accumulated >= gap_kwh_m2:
            break
        selected.append(measure)
        accumulated += measure["dpe_reduction_kwh_m2"]
    return selected


# ─────────────────────────────────────────────────────────────────────────────
# FULL ANALYSIS
# ─────────────────────────────────────────────────────────────────────────────

def analyze(
    inputs: Optional[Mapping[str, Any]],
    baseline: Optional[dict] = None,
    year: Optional[int] = None,
) -> dict:
    """
    Rank every applicable retrofit measure for a dwelling.

    ``baseline`` is the ``compute()`` result for ``inputs``; it is computed
    when omitted.

    Returns:
      measures               : list[dict] — ascending payback (best value first)
      total_savings_kwh      : int        — naive sum over all measures
      total_savings_eur      : int        — naive sum over all measures
      dpe_after_measures     : dict       — classify(baseline − Σ reductions)
      next_class_gap_kwh_m2  : float      — kWh/m² to reach the next class
      next_class_measures    : list[dict] — smallest greedy set closing the gap
      next_class_reachable   : bool       — can the listed measures close it
      next_class_cost_min    : int        — indicative lower cost of that set (€)
      next_class_cost_max    : int        — indicative upper cost of that set (€)
    """
    if year is None:
        year = _current_year()
    resolved = resolve_inputs(inputs)
    if baseline is None:
        baseline = compute(resolved, year)

    measures = []
    for template in MEASURES:
        measure = evaluate_measure(resolved, baseline, template, year)
        if measure is not None:
            measures.append(measure)

    measures.sort(key=lambda m: m["payback_years"])

    reduction = sum(m["dpe_reduction_kwh_m2"] for m in measures)
    dpe_after = classify(max(0.0, baseline["dpe"]["kwh_per_m2"] - reduction), year)

    gap = baseline["dpe"]["kwh_to_better_class"]
    next_set = minimal_set_for_next_class(measures, gap)

    return {
        "measures":              measures,
        "total_savings_kwh":     sum(m["savings_kwh"] for m in measures),
        "total_savings_eur":     sum(m["savings_eur"] for m in measures),
        "dpe_after_measures":    dpe_after,
        "next_class_gap_kwh_m2": gap,
        "next_class_measures":   next_set,
        "next_class_reachable":  sum(m["dpe_reduction_kwh_m2"] for m in next_set) >= gap,
        "next_class_cost_min":   sum(m["cost_min"] for m in next_set),
        "next_class_cost_max":   sum(m["cost_max"] for m in next_set),
    }
