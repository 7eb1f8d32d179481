# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- decimal numeric policy.

Indicator state is kept in ``decimal.Decimal``.  Values are rounded exactly
once, when they are placed into a result set, with half-away-from-zero
rounding at one of three precision classes.

Trigonometric / logarithmic primitives run on binary floats: convert with
``float(x)`` inside the expression that needs ``math.atan`` & co. and bring
the result back with ``from_float``.
"""
from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

ZERO = Decimal(0)
ONE = Decimal(1)
TWO = Decimal(2)
HUNDRED = Decimal(100)

PRECISION_PERCENT = 3
PRECISION_MONEY = 6
PRECISION_QUANTITY = 3

_QUANTUM = {
    3: Decimal("0.001"),
    6: Decimal("0.000001"),
}


def _round_dp(value: Decimal, dp: int) -> Decimal:
    return value.quantize(_QUANTUM[dp], rounding=ROUND_HALF_UP)


def to_percent(value: Decimal) -> Decimal:
    """``value * 100`` rounded to 3 places (1.2345 -> 123.450)."""
    return _round_dp(value * HUNDRED, PRECISION_PERCENT)


def to_percent_decimal(value: Decimal) -> Decimal:
    """Inverse of the percent scale, unrounded (123.45 -> 1.2345)."""
    return value.scaleb(-2)


def to_money(value: Decimal) -> Decimal:
    return _round_dp(value, PRECISION_MONEY)


def to_quantity(value: Decimal) -> Decimal:
    return _round_dp(value, PRECISION_QUANTITY)


def is_pos_one(value: Decimal) -> bool:
    return value == ONE


# ---------------------------------------------------------------------------
# Float / decimal bridge
# ---------------------------------------------------------------------------

def from_float(x: float) -> Decimal:
    """Decimal from a float result, via its shortest repr."""
    return Decimal(repr(float(x)))


def as_decimal(value: Any) -> Decimal:
    """Coerce a bar value to Decimal.  Non-finite input raises ValueError."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)) and not isinstance(value, bool):
        result = Decimal(value)
    else:
        # floats and numpy scalars
        result = from_float(value)
    if not result.is_finite():
        raise ValueError(f"non-finite input value: {value!r}")
    return result


def safe_div(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator``, or 0 when the denominator is 0."""
    if denominator == ZERO:
        return ZERO
    return numerator / denominator


def decimal_atan(ratio_num: Decimal, ratio_den: Decimal) -> Decimal:
    """``atan(num / den)`` in radians, 0 when either side is 0."""
    if ratio_num == ZERO or ratio_den == ZERO:
        return ZERO
    # divide in decimal: both sides may be far below float range
    return from_float(math.atan(float(ratio_num / ratio_den)))
