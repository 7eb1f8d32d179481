# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- Hilbert transform dominant-cycle engine.

Shared by mama and snr.  One call to ``dsp_update`` evaluates the whole
cascade for a new price:

  smooth -> detrender -> (i1, q1) -> (ji, jq) -> (i2, q2) -> (re, im)
         -> period -> smooth_period [-> (q3, i3)]

All stages read history from the windows first; the windows are pushed
together at the very end, so a step either fully happens or not at all.
Lagged values are written ``x<k>`` (= x k bars ago).  Because lag 0 of a
window is the newest *stored* value, ``x<k>`` is ``window[k - 1]`` here.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ._decimal import ZERO, TWO, decimal_atan, safe_div
from ._window import LagWindow

A_C = Decimal("0.0962")
B_C = Decimal("0.5769")
ADJ_SLOPE = Decimal("0.075")
ADJ_OFFSET = Decimal("0.54")
P_W = Decimal("0.2")
P_W_C = Decimal("0.8")
SMP_W = Decimal("0.33")
SMP_W_C = Decimal("0.67")

PERIOD_MAX_RATIO = Decimal("1.5")
PERIOD_MIN_RATIO = Decimal("0.67")
PERIOD_FLOOR = Decimal(6)
PERIOD_CEIL = Decimal(50)
DEGREES_FULL = Decimal(360)

# ceil(PERIOD_CEIL / 2) lags plus the current value
Q3_CAPACITY = 50


@dataclass
class DSPState:
    price: LagWindow
    smooth: LagWindow
    detrender: LagWindow
    i1: LagWindow
    q1: LagWindow
    i2: LagWindow
    q2: LagWindow
    re: LagWindow
    im: LagWindow
    period: LagWindow
    smooth_period: LagWindow
    q3: Optional[LagWindow] = None


@dataclass(frozen=True)
class DSPStep:
    price: Decimal
    smooth: Decimal
    detrender: Decimal
    i1: Decimal
    q1: Decimal
    ji: Decimal
    jq: Decimal
    i2: Decimal
    q2: Decimal
    re: Decimal
    im: Decimal
    clamped_period: Decimal
    period: Decimal
    smooth_period: Decimal
    q3: Decimal = ZERO
    i3: Decimal = ZERO


def dsp_make(with_q3: bool = False) -> DSPState:
    return DSPState(
        price=LagWindow(4),
        smooth=LagWindow(7),
        detrender=LagWindow(7),
        i1=LagWindow(6),
        q1=LagWindow(6),
        i2=LagWindow(2),
        q2=LagWindow(2),
        re=LagWindow(2),
        im=LagWindow(2),
        period=LagWindow(2),
        smooth_period=LagWindow(2),
        q3=LagWindow(Q3_CAPACITY) if with_q3 else None,
    )


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _hilbert(x0: Decimal, xa: Decimal, xb: Decimal, xc: Decimal, adj: Decimal) -> Decimal:
    """0.0962*x0 + 0.5769*xa - 0.5769*xb - 0.0962*xc, scaled by *adj*."""
    return (A_C * x0 + B_C * xa - B_C * xb - A_C * xc) * adj


def clamp_period(raw: Decimal, period1: Decimal) -> Decimal:
    """Limit the instantaneous period.  The order of the limits matters."""
    period = raw
    if period > PERIOD_MAX_RATIO * period1:
        period = PERIOD_MAX_RATIO * period1
    if period < PERIOD_MIN_RATIO * period1:
        period = PERIOD_MIN_RATIO * period1
    if period < PERIOD_FLOOR:
        period = PERIOD_FLOOR
    if period > PERIOD_CEIL:
        period = PERIOD_CEIL
    return period


def instantaneous_period(re: Decimal, im: Decimal) -> Decimal:
    """360 / atan(im / re), 0 when either component is 0."""
    angle = decimal_atan(im, re)
    if angle == ZERO:
        return ZERO
    return DEGREES_FULL / angle


def dsp_update(state: DSPState, price: Decimal) -> DSPStep:
    p, s, d = state.price, state.smooth, state.detrender

    smooth = (4 * price + 3 * p[0] + 2 * p[1] + p[2]) / 10

    period1 = state.period[0]
    adj = ADJ_SLOPE * period1 + ADJ_OFFSET

    detrender = _hilbert(smooth, s[1], s[3], s[5], adj)
    q1 = _hilbert(detrender, d[1], d[3], d[5], adj)
    i1 = d[2]

    ji = _hilbert(i1, state.i1[0], state.i1[2], state.i1[4], adj)
    jq = _hilbert(q1, state.q1[0], state.q1[2], state.q1[4], adj)

    i2_1, q2_1 = state.i2[0], state.q2[0]
    i2 = P_W * (i1 - jq) + P_W_C * i2_1
    q2 = P_W * (q1 + ji) + P_W_C * q2_1

    re = P_W * (i2 * i2_1 + q2 * q2_1) + P_W_C * state.re[0]
    im = P_W * (i2 * q2_1 - q2 * i2_1) + P_W_C * state.im[0]

    clamped = clamp_period(instantaneous_period(re, im), period1)
    period = P_W * clamped + P_W_C * period1
    smooth_period = SMP_W * period + SMP_W_C * state.smooth_period[0]

    q3 = i3 = ZERO
    if state.q3 is not None:
        q3 = Decimal("0.5") * (smooth - s[1]) * (Decimal("0.1759") * smooth_period + Decimal("0.4607"))
        half = smooth_period / TWO
        # q3 summed over the whole half period, current value included
        acc = q3
        for lag in range(1, math.ceil(half)):
            acc += state.q3[lag - 1]
        i3 = safe_div(Decimal("1.57") * acc, half)

    # advance every window together
    state.price.push(price)
    state.smooth.push(smooth)
    state.detrender.push(detrender)
    state.i1.push(i1)
    state.q1.push(q1)
    state.i2.push(i2)
    state.q2.push(q2)
    state.re.push(re)
    state.im.push(im)
    state.period.push(period)
    state.smooth_period.push(smooth_period)
    if state.q3 is not None:
        state.q3.push(q3)

    return DSPStep(
        price=price, smooth=smooth, detrender=detrender,
        i1=i1, q1=q1, ji=ji, jq=jq, i2=i2, q2=q2, re=re, im=im,
        clamped_period=clamped, period=period, smooth_period=smooth_period,
        q3=q3, i3=i3,
    )
