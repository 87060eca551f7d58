"""
EnergiePortaal — Report Table Builder
=====================================
Turns calculation results into pandas DataFrames for "show your work" reports
(energy and cost breakdowns, retrofit measures, calculation trace, subsidy
verdicts). Rendering to HTML, CSV or PDF is left to the caller.

Public API
----------
energy_breakdown_table(result)   -> pd.DataFrame
cost_breakdown_table(result)     -> pd.DataFrame
measures_table(savings)          -> pd.DataFrame
trace_table(trace)               -> pd.DataFrame
subsidy_table(subsidy_result)    -> pd.DataFrame
build_report_tables(inputs, year=None) -> dict[str, pd.DataFrame]

No builder mutates its argument.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import pandas as pd

from core import savings, subsidies
from core.physics import compute_with_trace, resolve_inputs
from core.utils import _round_half_up, _safe_nested_number

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Row layouts
# ─────────────────────────────────────────────────────────────────────────────

_ENERGY_ROWS: list[tuple[str, str]] = [
    ("Heating (main)",      "heating_main_kwh"),
    ("Heating (auxiliary)", "heating_aux_kwh"),
    ("Hot water",           "dhw_delivered_kwh"),
    ("Household electricity", "base_electricity_kwh"),
    ("Electric vehicle",    "ev_kwh"),
    ("Pool",                "pool_kwh"),
    ("Cooling",             "cooling_kwh"),
]

_COST_ROWS: list[tuple[str, str]] = [
    ("Heating",       "cost_heating_eur"),
    ("Hot water",     "cost_dhw_eur"),
    ("Electricity",   "cost_electricity_eur"),
    ("Total",         "cost_total_eur"),
    ("PV savings",    "pv_savings_eur"),
    ("Net cost",      "net_cost_eur"),
]

_MEASURE_COLUMNS: list[str] = [
    "id", "name", "category", "quantity", "unit", "cost_min", "cost_max",
    "savings_kwh", "savings_eur", "payback_years", "dpe_reduction_kwh_m2",
    "co2_reduction_kg",
]

_SUBSIDY_COLUMNS: list[str] = ["id", "title", "status", "eligible", "amount", "reason"]


# ─────────────────────────────────────────────────────────────────────────────
# Builders
# ─────────────────────────────────────────────────────────────────────────────

def energy_breakdown_table(result: Mapping[str, Any]) -> pd.DataFrame:
    """Delivered energy per end use with its share of the total."""
    rows = [
        {"category": label, "kwh": _safe_nested_number(dict(result), key)}
        for label, key in _ENERGY_ROWS
    ]
    total = sum(row["kwh"] for row in rows)
    for row in rows:
        row["share_pct"] = _round_half_up(row["kwh"] / total * 100, 1) if total > 0 else 0.0
    return pd.DataFrame(rows, columns=["category", "kwh", "share_pct"])


def cost_breakdown_table(result: Mapping[str, Any]) -> pd.DataFrame:
    """Annual running cost lines (€/year)."""
    rows = [
        {"item": label, "eur": _safe_nested_number(dict(result), key)}
        for label, key in _COST_ROWS
    ]
    return pd.DataFrame(rows, columns=["item", "eur"])


def measures_table(savings_result: Mapping[str, Any]) -> pd.DataFrame:
    """One row per ranked retrofit measure, best payback first."""
    rows = [
        {column: measure.get(column) for column in _MEASURE_COLUMNS}
        for measure in savings_result.get("measures", [])
    ]
    return pd.DataFrame(rows, columns=_MEASURE_COLUMNS)


def _flatten(prefix: str, value: Any, rows: list[dict]) -> None:
    if isinstance(value, Mapping):
        for key, inner in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), inner, rows)
    elif isinstance(value, (list, tuple)):
        rows.append({"step": prefix, "value": ", ".join(str(v) for v in value)})
    else:
        rows.append({"step": prefix, "value": value})


def trace_table(trace: Mapping[str, Any]) -> pd.DataFrame:
    """
    Calculation trace as ``step`` / ``value`` rows.

    Nested dicts are flattened with dotted names (``zone.hdd``,
    ``prices.price_gas``); lists are joined into one comma-separated string.
    """
    rows: list[dict] = []
    _flatten("", trace, rows)
    return pd.DataFrame(rows, columns=["step", "value"])


def subsidy_table(subsidy_result: Mapping[str, Any]) -> pd.DataFrame:
    """One row per subsidy programme card."""
    rows = [
        {column: card.get(column) for column in _SUBSIDY_COLUMNS}
        for card in subsidy_result.get("cards", [])
    ]
    return pd.DataFrame(rows, columns=_SUBSIDY_COLUMNS)


def build_report_tables(
    inputs: Optional[Mapping[str, Any]],
    year: Optional[int] = None,
) -> dict[str, pd.DataFrame]:
    """
    Run the full pipeline (energy balance, savings, subsidies) and return
    every report table keyed by name: energy, costs, measures, trace,
    subsidies.
    """
    resolved = resolve_inputs(inputs)
    result, trace = compute_with_trace(inputs, year)
    savings_result = savings.analyze(inputs, baseline=result, year=year)
    subsidy_result = subsidies.evaluate(resolved["subsidy_intake"])
    logger.debug(
        "Report built: DPE %s, %d measures",
        result["dpe"]["letter"], len(savings_result["measures"]),
    )
    return {
        "energy":    energy_breakdown_table(result),
        "costs":     cost_breakdown_table(result),
        "measures":  measures_table(savings_result),
        "trace":     trace_table(trace),
        "subsidies": subsidy_table(subsidy_result),
    }
