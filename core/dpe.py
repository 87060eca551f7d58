# ═══════════════════════════════════════════════════════════════════════════════
# EnergiePortaal — DPE Classifier
# © 2026 Aparajita Parihar. All rights reserved.
#
# Maps an energy intensity (kWh / m² / year) to a DPE letter, the distance to
# the neighbouring classes, and the applicable rental-ban advisory.
#
# Canonical threshold table (config/constants.py → DPE_CLASSES):
#   A ≤ 70 · B ≤ 110 · C ≤ 180 · D ≤ 250 · E ≤ 330 · F ≤ 420 · G > 420
# Values exactly on a boundary belong to the better class.
#
# DISCLAIMER: Indicative only. Not a certified 3CL-DPE assessment by an
# accredited diagnostiqueur.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations

import datetime
import math
import sys
from typing import Any, Optional

from config.constants import DPE_CLASSES, RENTAL_BANS
from core.utils import _round_half_up, _safe_number

_LETTERS: list[str] = [letter for letter, _, _ in DPE_CLASSES]


def _current_year() -> int:
    return datetime.date.today().year


def _intensity(kwh_per_m2: Any) -> float:
    # Beyond the float range (inf, or an int too large for float) is class G
    if (
        isinstance(kwh_per_m2, (int, float))
        and not isinstance(kwh_per_m2, bool)
        and kwh_per_m2 > sys.float_info.max
    ):
        return math.inf
    return max(0.0, _safe_number(kwh_per_m2, default=0.0))


def _round_distance(value: float) -> float:
    return value if math.isinf(value) else _round_half_up(value)


# ─────────────────────────────────────────────────────────────────────────────
# LOOKUPS
# ─────────────────────────────────────────────────────────────────────────────

def dpe_letter(kwh_per_m2: float) -> str:
    """Return the DPE letter for an intensity in kWh/m²/year."""
    x = _intensity(kwh_per_m2)
    for letter, upper_bound, _ in DPE_CLASSES:
        if x <= upper_bound:
            return letter
    return "G"


def dpe_colour(letter: str) -> str:
    """Return the hex colour for a letter (G colour for unknown letters)."""
    for class_letter, _, colour in DPE_CLASSES:
        if class_letter == letter:
            return colour
    return DPE_CLASSES[-1][2]


def class_upper_bound(letter: str) -> float:
    """Return the inclusive upper bound of a class (``math.inf`` for G)."""
    for class_letter, upper_bound, _ in DPE_CLASSES:
        if class_letter == letter:
            return float(upper_bound)
    return math.inf


def kwh_to_better_class(kwh_per_m2: float) -> float:
    """kWh/m² to save to move up one class; 0 when already A."""
    x = _intensity(kwh_per_m2)
    index = _LETTERS.index(dpe_letter(x))
    if index == 0:
        return 0.0
    better_bound = DPE_CLASSES[index - 1][1]
    return max(0.0, x - better_bound)


def kwh_to_worse_class(kwh_per_m2: float) -> float:
    """kWh/m² headroom before dropping one class; ``math.inf`` when already G."""
    x = _intensity(kwh_per_m2)
    index = _LETTERS.index(dpe_letter(x))
    if index == len(DPE_CLASSES) - 1:
        return math.inf
    return max(0.0, DPE_CLASSES[index][1] - x)


def rental_ban(letter: str, year: Optional[int] = None) -> Optional[dict]:
    """
    Return the rental-ban advisory for a letter, or ``None`` for D and better.

    ``banned`` is True when ``year`` is on or after the ban's start year.
    ``year`` defaults to the current calendar year.
    """
    ban = RENTAL_BANS.get(letter)
    if ban is None:
        return None
    if year is None:
        year = _current_year()
    return {
        "banned":      year >= ban["since_year"],
        "since_year":  ban["since_year"],
        "description": ban["description"],
    }


# ─────────────────────────────────────────────────────────────────────────────
# CLASSIFICATION
# ─────────────────────────────────────────────────────────────────────────────

def classify(kwh_per_m2: float, year: Optional[int] = None) -> dict:
    """
    Classify an energy intensity on the DPE scale.

    Non-numeric, NaN and negative inputs are treated as 0 kWh/m²; +inf is
    class G.  Halves round up (70.5 → 71).

    Returns a dict with keys:
      letter               : str          — A–G
      kwh_per_m2           : int          — rounded intensity
      colour               : str          — hex colour of the class
      class_max_kwh_m2     : float        — upper bound of the class (inf for G)
      kwh_to_better_class  : int          — saving needed to move up (0 for A)
      kwh_to_worse_class   : int | float  — headroom before moving down (inf for G)
      rental_ban           : dict | None  — {banned, since_year, description}
    """
    x = _intensity(kwh_per_m2)
    letter = dpe_letter(x)
    return {
        "letter":              letter,
        "kwh_per_m2":          _round_half_up(x),
        "colour":              dpe_colour(letter),
        "class_max_kwh_m2":    class_upper_bound(letter),
        "kwh_to_better_class": _round_distance(kwh_to_better_class(x)),
        "kwh_to_worse_class":  _round_distance(kwh_to_worse_class(x)),
        "rental_ban":          rental_ban(letter, year),
    }
