# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- overlap indicators (price-scale filters).

Registered kinds
----------------
mama, ssf, itrend

Each section follows the pattern:
  1. State dataclass
  2. init / update / output_names helpers
  3. STATEFUL_REGISTRY["<kind>"] = StatefulIndicator(...)
  4. SEED_REGISTRY["<kind>"]     = seed_fn  (replay over the raw inputs)
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from ._base import (
    ResultSet,
    _param,
    _as_decimal_param,
    StatefulIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
    replay_seed,
)
from ._cross import CrossTrendState, cross_trend_update, trend_outputs
from ._decimal import (
    ZERO, ONE, TWO,
    as_decimal, decimal_atan, from_float, safe_div, to_percent, to_quantity,
)
from ._dsp import DSPState, dsp_make, dsp_update
from ._window import LagWindow

HALF = Decimal("0.5")


def _super_smoother_coefficients(cos_arg: float) -> Tuple[Decimal, Decimal, Decimal]:
    """(c1, c2, c3) of the 2-pole super smoother, poles at exp(-1.414*pi/10)."""
    a1 = from_float(math.exp(-1.414 * math.pi / 10.0))
    c2 = TWO * a1 * from_float(math.cos(cos_arg))
    c3 = -a1 * a1
    c1 = ONE - c2 - c3
    return c1, c2, c3


# ===========================================================================
# MAMA  -- MESA Adaptive Moving Average
# ===========================================================================
# Hilbert cycle engine + phase-rate adaptive alpha.
# Defaults: fast_limit=0.5, slow_limit=0.05.
# Outputs: mama, fama, trend, trend_since, strength.

@dataclass
class MAMAState:
    fast_limit: Decimal
    slow_limit: Decimal
    dsp: DSPState = field(default_factory=dsp_make)
    phase_prev: Decimal = ZERO
    mama_prev: Decimal = ZERO
    fama_prev: Decimal = ZERO
    tracker: CrossTrendState = field(default_factory=CrossTrendState)


def _mama_init(params: Dict[str, Any]) -> MAMAState:
    fl = _as_decimal_param(_param(params, "fast_limit", "0.5"), "0.5")
    sl = _as_decimal_param(_param(params, "slow_limit", "0.05"), "0.05")
    if not (ZERO < sl <= fl <= ONE):
        raise ValueError(f"mama: need 0 < slow_limit <= fast_limit <= 1, got {sl}, {fl}")
    return MAMAState(fast_limit=fl, slow_limit=sl)


def _mama_update(
    state: MAMAState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, MAMAState]:
    price = as_decimal(bar["close"])
    step = dsp_update(state.dsp, price)

    # --- Phase rate ---
    phase = decimal_atan(step.q1, step.i1) if step.i1 != ZERO else ZERO
    delta_phase = state.phase_prev - phase
    if delta_phase < ONE:
        delta_phase = ONE

    alpha = state.fast_limit / delta_phase
    if alpha < state.slow_limit:
        alpha = state.slow_limit
    if alpha > state.fast_limit:
        alpha = state.fast_limit

    # --- MAMA & FAMA ---
    mama = alpha * price + (ONE - alpha) * state.mama_prev
    fama = HALF * alpha * mama + (ONE - HALF * alpha) * state.fama_prev

    state.phase_prev = phase
    state.mama_prev = mama
    state.fama_prev = fama

    cross_trend_update(state.tracker, mama, fama)
    trend, trend_since = trend_outputs(state.tracker)

    return {
        "mama": to_quantity(mama),
        "fama": to_quantity(fama),
        "trend": trend,
        "trend_since": trend_since,
        "strength": to_percent(safe_div(mama - fama, fama)),
    }, state


def _mama_output_names(params: Dict[str, Any]) -> List[str]:
    return ["mama", "fama", "trend", "trend_since", "strength"]


def _mama_seed(series: Dict[str, Any], params: Dict[str, Any]) -> MAMAState:
    return replay_seed("mama", series, params)


STATEFUL_REGISTRY["mama"] = StatefulIndicator(
    kind="mama",
    inputs=("close",),
    init=_mama_init,
    update=_mama_update,
    output_names=_mama_output_names,
)
SEED_REGISTRY["mama"] = _mama_seed


# ===========================================================================
# SSF  -- Ehlers 2-pole Super Smoother Filter with trigger
# ===========================================================================
#   a1 = exp(-1.414*pi/10)
#   c2 = 2*a1*cos(1.414*2*pi/10),  c3 = -a1*a1,  c1 = 1 - c2 - c3
#   filter = c1*(x + x1)/2 + c2*filter1 + c3*filter2
#   trigger = filter2   (filter two bars back)

@dataclass
class SSFState:
    c1: Decimal
    c2: Decimal
    c3: Decimal
    price: LagWindow = field(default_factory=lambda: LagWindow(2))
    filt: LagWindow = field(default_factory=lambda: LagWindow(3))
    tracker: CrossTrendState = field(default_factory=CrossTrendState)


def _ssf_init(params: Dict[str, Any]) -> SSFState:
    c1, c2, c3 = _super_smoother_coefficients(1.414 * 2.0 * math.pi / 10.0)
    return SSFState(c1=c1, c2=c2, c3=c3)


def _ssf_update(
    state: SSFState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, SSFState]:
    price = as_decimal(bar["close"])
    filt1, filt2 = state.filt[0], state.filt[1]

    value = state.c1 * (price + state.price[0]) / TWO + state.c2 * filt1 + state.c3 * filt2
    trigger = filt2

    state.price.push(price)
    state.filt.push(value)

    cross = cross_trend_update(state.tracker, value, trigger)
    trend, trend_since = trend_outputs(state.tracker)

    return {
        "filter": to_quantity(value),
        "trigger": to_quantity(trigger),
        "cross": Decimal(int(cross)),
        "trend": trend,
        "trend_since": trend_since,
        "strength": to_percent(safe_div(value - trigger, trigger)),
    }, state


def _filter_output_names(params: Dict[str, Any]) -> List[str]:
    return ["filter", "trigger", "cross", "trend", "trend_since", "strength"]


def _ssf_seed(series: Dict[str, Any], params: Dict[str, Any]) -> SSFState:
    return replay_seed("ssf", series, params)


STATEFUL_REGISTRY["ssf"] = StatefulIndicator(
    kind="ssf",
    inputs=("close",),
    init=_ssf_init,
    update=_ssf_update,
    output_names=_filter_output_names,
)
SEED_REGISTRY["ssf"] = _ssf_seed


# ===========================================================================
# ITREND  -- Instantaneous Trendline
# ===========================================================================
# Bars 1..6 use a 3-tap FIR warm-up: (x + 2*x1 + x2) / 4.  From bar 7:
#   it = (a - a^2/4)*x + 0.5*a^2*x1 - (a - 0.75*a^2)*x2
#        + 2*(1-a)*it1 - (1-a)^2*it2
#   trigger = 2*it - it2
# Default alpha=0.07.

ITREND_WARMUP = 7


@dataclass
class ITrendState:
    alpha: Decimal
    price: LagWindow = field(default_factory=lambda: LagWindow(2))
    filt: LagWindow = field(default_factory=lambda: LagWindow(3))
    bars: int = 0
    tracker: CrossTrendState = field(default_factory=CrossTrendState)


def _itrend_init(params: Dict[str, Any]) -> ITrendState:
    alpha = _as_decimal_param(_param(params, "alpha", "0.07"), "0.07")
    if not (ZERO < alpha < ONE):
        raise ValueError(f"itrend: alpha must be in (0, 1), got {alpha}")
    return ITrendState(alpha=alpha)


def _itrend_update(
    state: ITrendState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, ITrendState]:
    price = as_decimal(bar["close"])
    a = state.alpha
    a2 = a * a
    price1, price2 = state.price[0], state.price[1]
    filt1, filt2 = state.filt[0], state.filt[1]
    state.bars += 1

    if state.bars < ITREND_WARMUP:
        value = (price + TWO * price1 + price2) / 4
    else:
        value = ((a - a2 / 4) * price
                 + HALF * a2 * price1
                 - (a - Decimal("0.75") * a2) * price2
                 + TWO * (ONE - a) * filt1
                 - (ONE - a) * (ONE - a) * filt2)

    trigger = TWO * value - filt2

    state.price.push(price)
    state.filt.push(value)

    cross = cross_trend_update(state.tracker, trigger, value)
    trend, trend_since = trend_outputs(state.tracker)

    return {
        "filter": to_quantity(value),
        "trigger": to_quantity(trigger),
        "cross": Decimal(int(cross)),
        "trend": trend,
        "trend_since": trend_since,
        "strength": to_percent(safe_div(trigger - value, value)),
    }, state


def _itrend_seed(series: Dict[str, Any], params: Dict[str, Any]) -> ITrendState:
    return replay_seed("itrend", series, params)


STATEFUL_REGISTRY["itrend"] = StatefulIndicator(
    kind="itrend",
    inputs=("close",),
    init=_itrend_init,
    update=_itrend_update,
    output_names=_filter_output_names,
)
SEED_REGISTRY["itrend"] = _itrend_seed
