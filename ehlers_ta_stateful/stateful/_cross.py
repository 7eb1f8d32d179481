# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- cross detection and trend tracking.

``CrossState`` detects a sign change of ``a - b`` between consecutive
steps.  ``TrendState`` holds the last trend direction and the number of
bars since it was last set.  ``CrossTrendState`` wires one into the other,
which is the "trend / trend_since" pair reported by mama, ssf and itrend.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum

from ._decimal import ZERO


class Cross(IntEnum):
    BELOW = -1
    NONE = 0
    ABOVE = 1


class Trend(IntEnum):
    DOWN = -1
    FLAT = 0
    UP = 1


# ---------------------------------------------------------------------------
# Cross
# ---------------------------------------------------------------------------

@dataclass
class CrossState:
    prev_delta: Decimal = ZERO
    primed: bool = False


def cross_update(state: CrossState, a: Decimal, b: Decimal) -> Cross:
    """Classify the move of ``a`` relative to ``b`` since the last call.

    ABOVE when ``a - b`` goes from <= 0 to > 0, BELOW when it goes from
    >= 0 to < 0.  The first call only records the pair.
    """
    delta = a - b
    prev = state.prev_delta
    state.prev_delta = delta

    if not state.primed:
        state.primed = True
        return Cross.NONE
    if prev <= ZERO < delta:
        return Cross.ABOVE
    if prev >= ZERO > delta:
        return Cross.BELOW
    return Cross.NONE


# ---------------------------------------------------------------------------
# Trend
# ---------------------------------------------------------------------------

@dataclass
class TrendState:
    trend: Trend = Trend.FLAT
    since: int = 0


def trend_mark(state: TrendState, trend: Trend) -> None:
    """Enter *trend* and restart the bar counter."""
    state.trend = Trend(trend)
    state.since = 0


def trend_hold(state: TrendState) -> None:
    state.since += 1


# ---------------------------------------------------------------------------
# Cross + Trend
# ---------------------------------------------------------------------------

@dataclass
class CrossTrendState:
    cross: CrossState = field(default_factory=CrossState)
    trend: TrendState = field(default_factory=TrendState)


def cross_trend_update(state: CrossTrendState, a: Decimal, b: Decimal) -> Cross:
    """Cross of ``a`` over ``b``; an above/below cross moves the trend up/down."""
    result = cross_update(state.cross, a, b)
    if result is Cross.ABOVE:
        trend_mark(state.trend, Trend.UP)
    elif result is Cross.BELOW:
        trend_mark(state.trend, Trend.DOWN)
    else:
        trend_hold(state.trend)
    return result


def trend_outputs(state: CrossTrendState) -> tuple:
    """``(trend, trend_since)`` as Decimals for a result set."""
    return Decimal(int(state.trend.trend)), Decimal(state.trend.since)
