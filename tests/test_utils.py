import math
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from core.utils import _clamp, _round_half_up, _safe_bool, _safe_nested_number, _safe_number


@pytest.mark.parametrize("value,expected", [
    (3, 3.0), ("4.5", 4.5), (None, 7.0), ("abc", 7.0), (True, 7.0),
    (float("nan"), 7.0), (math.inf, 7.0), ([1], 7.0), (10**400, 7.0),
])
def test_safe_number(value, expected):
    assert _safe_number(value, default=7.0) == expected


def test_safe_nested_number():
    data = {"dpe": {"kwh_per_m2": "325"}}
    assert _safe_nested_number(data, "dpe", "kwh_per_m2") == 325.0
    assert _safe_nested_number(data, "dpe", "missing", default=-1.0) == -1.0
    assert _safe_nested_number(data, "dpe", "kwh_per_m2", "deeper", default=-1.0) == -1.0


@pytest.mark.parametrize("value,expected", [
    (True, True), ("Oui", True), ("ja", True), (1, True),
    (False, False), ("non", False), (0, False), (" off ", False),
])
def test_safe_bool(value, expected):
    assert _safe_bool(value) is expected


@pytest.mark.parametrize("value", ["", "perhaps", 2, None, [True]])
def test_safe_bool_default(value):
    assert _safe_bool(value, default=True) is True


def test_clamp():
    assert _clamp(1.5, 0.0, 1.0) == 1.0
    assert _clamp(-0.2, 0.0, 1.0) == 0.0
    assert _clamp(0.4, 0.0, 1.0) == 0.4


@pytest.mark.parametrize("value,ndigits,expected", [
    (70.5, 0, 71), (2.5, 0, 3), (-2.5, 0, -2), (0.49, 0, 0),
    (0.25, 1, 0.3), (891.24, 1, 891.2), (float("nan"), 0, 0),
])
def test_round_half_up(value, ndigits, expected):
    assert _round_half_up(value, ndigits) == expected


def test_round_half_up_holds_infinity():
    assert _round_half_up(math.inf) == math.floor(sys.float_info.max)
    assert _round_half_up(-math.inf, 1) == -sys.float_info.max
