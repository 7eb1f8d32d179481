# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- cycle indicators.

Registered kinds
----------------
ebsw, emd, snr

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
    _as_int,
    _as_decimal_param,
    StatefulIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
    replay_seed,
)
from ._cross import (
    Cross,
    CrossState,
    Trend,
    TrendState,
    cross_update,
    trend_hold,
    trend_mark,
)
from ._decimal import ZERO, ONE, TWO, as_decimal, from_float, safe_div, to_quantity
from ._dsp import DSPState, dsp_make, dsp_update
from ._overlap import HALF, _super_smoother_coefficients
from ._window import LagWindow, RollingExtremeIndex, RollingMean


# ===========================================================================
# EBSW  -- Even Better SineWave
# ===========================================================================
# hp     = 0.5*(1+alpha1)*(x - x1) + alpha1*hp1
# filt   = c1*(hp + hp1)/2 + c2*filt1 + c3*filt2        (super smoother)
# signal = mean(filt, 3) / sqrt(mean(filt^2, 3))        (0 when power is 0)
# upper_cross / lower_cross: signal against +0.8 / -0.8.
# Default: duration=40 (high-pass cutoff period, in bars).

EBSW_UPPER = Decimal("0.8")
EBSW_LOWER = Decimal("-0.8")


@dataclass
class EBSWState:
    duration: int
    alpha1: Decimal
    c1: Decimal
    c2: Decimal
    c3: Decimal
    price: LagWindow = field(default_factory=lambda: LagWindow(2))
    hp: LagWindow = field(default_factory=lambda: LagWindow(2))
    filt: LagWindow = field(default_factory=lambda: LagWindow(3))
    upper: CrossState = field(default_factory=CrossState)
    lower: CrossState = field(default_factory=CrossState)


def _ebsw_init(params: Dict[str, Any]) -> EBSWState:
    duration = _as_int(_param(params, "duration", 40), 40)
    if duration < 3:
        raise ValueError(f"ebsw: duration must be >= 3, got {duration}")

    angle = 2.0 * math.pi / duration
    alpha1 = from_float((1.0 - math.sin(angle)) / math.cos(angle))
    c1, c2, c3 = _super_smoother_coefficients(1.414 * math.pi / 10.0)
    return EBSWState(duration=duration, alpha1=alpha1, c1=c1, c2=c2, c3=c3)


def _ebsw_update(
    state: EBSWState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, EBSWState]:
    price = as_decimal(bar["close"])
    hp1 = state.hp[0]
    filt1, filt2 = state.filt[0], state.filt[1]

    # HighPass filter cyclic components
    hp = HALF * (ONE + state.alpha1) * (price - state.price[0]) + state.alpha1 * hp1
    # Smooth with a Super Smoother Filter
    filt = state.c1 * (hp + hp1) / TWO + state.c2 * filt1 + state.c3 * filt2

    # Normalize the 3 bar average wave to the square root of its power
    wave = (filt + filt1 + filt2) / 3
    power = (filt * filt + filt1 * filt1 + filt2 * filt2) / 3
    signal = safe_div(wave, power.sqrt())

    state.price.push(price)
    state.hp.push(hp)
    state.filt.push(filt)

    upper = cross_update(state.upper, signal, EBSW_UPPER)
    lower = cross_update(state.lower, signal, EBSW_LOWER)

    return {
        "signal": to_quantity(signal),
        "upper_cross": Decimal(int(upper)),
        "lower_cross": Decimal(int(lower)),
    }, state


def _ebsw_output_names(params: Dict[str, Any]) -> List[str]:
    return ["signal", "upper_cross", "lower_cross"]


def _ebsw_seed(series: Dict[str, Any], params: Dict[str, Any]) -> EBSWState:
    return replay_seed("ebsw", series, params)


STATEFUL_REGISTRY["ebsw"] = StatefulIndicator(
    kind="ebsw",
    inputs=("close",),
    init=_ebsw_init,
    update=_ebsw_update,
    output_names=_ebsw_output_names,
)
SEED_REGISTRY["ebsw"] = _ebsw_seed


# ===========================================================================
# EMD  -- Empirical Mode Decomposition
# ===========================================================================
# Band-pass the price around `period`, average it over two periods (mean)
# and compare the mean with a fraction of the averaged peaks / valleys.
#   mean above upper  -> uptrend
#   mean below lower  -> downtrend
#   back between them -> cycle mode (trend 0)
# Defaults: delta=0.5 (damping), fraction=0.1 (threshold), period=20.

EMD_ENVELOPE_LENGTH = 50
EMD_EXTREME_LENGTH = 48


@dataclass
class EMDState:
    delta: Decimal
    fraction: Decimal
    period: int
    alpha: Decimal
    beta: Decimal
    mean_bp: RollingMean
    mean_peak: RollingMean = field(default_factory=lambda: RollingMean(EMD_ENVELOPE_LENGTH))
    mean_valley: RollingMean = field(default_factory=lambda: RollingMean(EMD_ENVELOPE_LENGTH))
    highest: RollingExtremeIndex = field(
        default_factory=lambda: RollingExtremeIndex(EMD_EXTREME_LENGTH, highest=True))
    lowest: RollingExtremeIndex = field(
        default_factory=lambda: RollingExtremeIndex(EMD_EXTREME_LENGTH, highest=False))
    price: LagWindow = field(default_factory=lambda: LagWindow(2))
    bp: LagWindow = field(default_factory=lambda: LagWindow(2))
    peak: Decimal = ZERO
    valley: Decimal = ZERO
    cross_hi: CrossState = field(default_factory=CrossState)
    cross_lo: CrossState = field(default_factory=CrossState)
    trend: TrendState = field(default_factory=TrendState)


def _emd_init(params: Dict[str, Any]) -> EMDState:
    delta = _as_decimal_param(_param(params, "delta", "0.5"), "0.5")
    fraction = _as_decimal_param(_param(params, "fraction", "0.1"), "0.1")
    period = _as_int(_param(params, "period", 20), 20)
    if delta <= ZERO:
        raise ValueError(f"emd: delta must be > 0, got {delta}")
    if fraction <= ZERO:
        raise ValueError(f"emd: fraction must be > 0, got {fraction}")
    if period < 2:
        raise ValueError(f"emd: period must be >= 2, got {period}")

    beta = from_float(math.cos(2.0 * math.pi / period))
    cos_damp = from_float(math.cos(4.0 * math.pi * float(delta) / period))
    if cos_damp == ZERO:
        raise ValueError(f"emd: delta={delta} puts the band-pass pole at infinity")
    gamma = ONE / cos_damp
    alpha = gamma - max(gamma * gamma - ONE, ZERO).sqrt()

    return EMDState(
        delta=delta, fraction=fraction, period=period,
        alpha=alpha, beta=beta,
        mean_bp=RollingMean(2 * period),
    )


def _emd_update(
    state: EMDState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, EMDState]:
    price = as_decimal(bar["close"])
    a, b = state.alpha, state.beta
    price2 = state.price[1]
    bp1, bp2 = state.bp[0], state.bp[1]

    bp = HALF * (ONE - a) * (price - price2) + b * (ONE + a) * bp1 - a * bp2
    mean = state.mean_bp.next(bp)

    # latch the previous band-pass value when it turned out to be an extreme
    if bp1 > bp and bp1 > bp2:
        state.peak = bp1
    if bp1 < bp and bp1 < bp2:
        state.valley = bp1
    upper = state.fraction * state.mean_peak.next(state.peak)
    lower = state.fraction * state.mean_valley.next(state.valley)

    state.price.push(price)
    state.bp.push(bp)

    upper_cross = cross_update(state.cross_hi, mean, upper)
    lower_cross = cross_update(state.cross_lo, mean, lower)
    highest_high = int(state.highest.next(mean) == 1)
    lowest_low = int(state.lowest.next(mean) == 1)

    if lower_cross is Cross.BELOW:
        trend_mark(state.trend, Trend.DOWN)
    elif upper_cross is Cross.ABOVE:
        trend_mark(state.trend, Trend.UP)
    elif upper_cross is Cross.BELOW or lower_cross is Cross.ABOVE:
        trend_mark(state.trend, Trend.FLAT)
    else:
        trend_hold(state.trend)

    return {
        "mean": to_quantity(mean),
        "upper": to_quantity(upper),
        "upper_cross": Decimal(int(upper_cross)),
        "lower": to_quantity(lower),
        "lower_cross": Decimal(int(lower_cross)),
        "highest_high": Decimal(highest_high),
        "lowest_low": Decimal(lowest_low),
        "trend": Decimal(int(state.trend.trend)),
        "trend_since": Decimal(state.trend.since),
    }, state


def _emd_output_names(params: Dict[str, Any]) -> List[str]:
    return [
        "mean", "upper", "upper_cross", "lower", "lower_cross",
        "highest_high", "lowest_low", "trend", "trend_since",
    ]


def _emd_seed(series: Dict[str, Any], params: Dict[str, Any]) -> EMDState:
    return replay_seed("emd", series, params)


STATEFUL_REGISTRY["emd"] = StatefulIndicator(
    kind="emd",
    inputs=("close",),
    init=_emd_init,
    update=_emd_update,
    output_names=_emd_output_names,
)
SEED_REGISTRY["emd"] = _emd_seed


# ===========================================================================
# SNR  -- Enhanced Signal to Noise Ratio
# ===========================================================================
# Hilbert cycle engine with the q3 / i3 stage.
#   signal = i3^2 + q3^2
#   noise  = 0.1*((high - low)^2 * 0.25) + 0.9*noise1
#   snr    = 0.33*10*ln(signal/noise) + 0.67*snr1      (0 on a zero side)
# noise1 and snr1 are read from histories that never advance, so both are
# always 0 and every bar stands on its own range.
# Total lag is about 4 bars.  Avoid cycle-mode trading below ~6 dB.

SNR_NOISE_WEIGHT = Decimal("0.1") * Decimal("0.25")
SNR_WEIGHT = Decimal("0.33")


@dataclass
class SNRState:
    dsp: DSPState = field(default_factory=lambda: dsp_make(with_q3=True))


def _snr_init(params: Dict[str, Any]) -> SNRState:
    return SNRState()


def _snr_update(
    state: SNRState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, SNRState]:
    price = as_decimal(bar["close"])
    high = as_decimal(bar["high"])
    low = as_decimal(bar["low"])

    step = dsp_update(state.dsp, price)

    signal = step.i3 * step.i3 + step.q3 * step.q3
    hl = high - low
    noise = SNR_NOISE_WEIGHT * hl * hl

    if noise != ZERO and signal != ZERO:
        snr = SNR_WEIGHT * 10 * (signal / noise).ln()
    else:
        snr = ZERO

    return {"snr": to_quantity(snr)}, state


def _snr_output_names(params: Dict[str, Any]) -> List[str]:
    return ["snr"]


def _snr_seed(series: Dict[str, Any], params: Dict[str, Any]) -> SNRState:
    return replay_seed("snr", series, params)


STATEFUL_REGISTRY["snr"] = StatefulIndicator(
    kind="snr",
    inputs=("close", "high", "low"),
    init=_snr_init,
    update=_snr_update,
    output_names=_snr_output_names,
)
SEED_REGISTRY["snr"] = _snr_seed
