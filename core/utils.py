"""Coercion helpers shared by the calculation engine.

Kept free of any presentation dependency so the engine can be imported and
tested on its own.
"""

from __future__ import annotations

import math
import sys
from typing import Any

# ─────────────────────────────────────────────────────────────────────────────
# NUMERIC SAFETY HELPERS
# ─────────────────────────────────────────────────────────────────────────────

_TRUE_STRINGS = frozenset({"true", "yes", "ja", "oui", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "no", "nee", "non", "0", "off"})


def _safe_number(value: Any, default: float = 0.0) -> float:
    """Coerce a potentially-missing or malformed value to float.

    Returns ``default`` for ``None``, booleans, non-numeric strings, NaN or
    infinite values, and any value that cannot be converted by ``float()``.
    Never raises.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return number


def _safe_nested_number(container: dict, *keys: str, default: float = 0.0) -> float:
    """Safely traverse a nested dict and return the leaf value as a float.

    Returns ``default`` if any key is absent or if the leaf cannot be
    coerced to float.  Never raises.

    Example::

        _safe_nested_number(result, "dpe", "kwh_per_m2", default=0.0)
    """
    current: Any = container
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current.get(key)
    return _safe_number(current, default=default)


def _safe_bool(value: Any, default: bool = False) -> bool:
    """Coerce form-style truthy values (``"ja"``, ``"true"``, ``1``) to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return default


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` with halves going up (2.5 → 3, -2.5 → -2).

    Non-finite values never reach ``math.floor``: NaN rounds to 0 and
    ±inf is held at the largest finite float.
    """
    if math.isnan(value):
        return 0 if ndigits == 0 else 0.0
    value = _clamp(value, -sys.float_info.max, sys.float_info.max)
    if ndigits == 0:
        return math.floor(value + 0.5)
    # Above 2**52 a float has no fractional digits left to round
    if abs(value) >= 2 ** 52:
        return value
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale
