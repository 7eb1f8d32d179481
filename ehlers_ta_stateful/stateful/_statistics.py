# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- statistics indicators over a pair of series.

Registered kinds
----------------
cointegration

Unlike the cycle indicators these work on binary floats: each bar pushes
one ``x`` and one ``y`` into rolling windows and the statistics are
recomputed over the whole window.  Results come back as Decimals.

Each section follows the pattern:
  1. State dataclass
  2. init / update / output_names helpers
  3. STATEFUL_REGISTRY["<kind>"] = StatefulIndicator(...)
  4. SEED_REGISTRY["<kind>"]     = seed_fn  (replay over the raw inputs)
"""
from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Tuple

import numpy as np
from scipy import stats
from statsmodels.tsa.stattools import coint

from ._base import (
    ResultSet,
    _param,
    _as_int,
    StatefulIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
    replay_seed,
)
from ._decimal import ZERO, ONE, as_decimal, from_float

logger = logging.getLogger(__name__)


def _finite_or_zero(x: float) -> Decimal:
    return from_float(x) if math.isfinite(x) else ZERO


# ===========================================================================
# COINTEGRATION  -- Engle-Granger pair statistics
# ===========================================================================
# Windows of `period` floats, prefilled with 0.0.
#   spread_std    = x - (a + b*y) on the last bar, (a, b) from OLS of x on y
#   spread_dyn    = last one-step error of a Kalman-filtered hedge ratio
#   engle_t_stat  = Engle-Granger ADF statistic on the OLS residuals
#   engle_p_value = its MacKinnon p-value;  is_coint = p_value < 0.05
#   pearson       = Pearson r;  correlation = cov / (sd_x * sd_y)
# A failed test ends the bar early: only the keys computed so far are
# returned.  Non-finite test values are reported as 0.
# Default period=30.

COINT_P_VALUE = 0.05
KALMAN_DELTA = 1e-4
KALMAN_OBS_VAR = 1e-3


@dataclass
class CointegrationState:
    period: int
    x: deque = field(default_factory=deque)   # maxlen=period
    y: deque = field(default_factory=deque)


def _cointegration_init(params: Dict[str, Any]) -> CointegrationState:
    period = _as_int(_param(params, "period", 30), 30)
    if period < 3:
        raise ValueError(f"cointegration: period must be >= 3, got {period}")
    return CointegrationState(
        period=period,
        x=deque([0.0] * period, maxlen=period),
        y=deque([0.0] * period, maxlen=period),
    )


def _spread_standard(x: np.ndarray, y: np.ndarray) -> float:
    """OLS residual of the newest pair; a flat y gives a zero hedge ratio."""
    x_mean, y_mean = x.mean(), y.mean()
    y_var = ((y - y_mean) ** 2).sum()
    beta = ((x - x_mean) * (y - y_mean)).sum() / y_var if y_var else 0.0
    alpha = x_mean - beta * y_mean
    return float(x[-1] - alpha - beta * y[-1])


def _spread_dynamic(x: np.ndarray, y: np.ndarray) -> float:
    """Kalman filter on x = b*y + a; returns the last prediction error."""
    theta = np.zeros(2)
    cov = np.zeros((2, 2))
    drift = KALMAN_DELTA / (1.0 - KALMAN_DELTA) * np.eye(2)
    error = 0.0
    for xt, yt in zip(x, y):
        obs = np.array([yt, 1.0])
        prior = cov + drift
        error = xt - obs @ theta
        var = obs @ prior @ obs + KALMAN_OBS_VAR
        gain = prior @ obs / var
        theta = theta + gain * error
        cov = prior - np.outer(gain, obs) @ prior
    return float(error)


def _cointegration_update(
    state: CointegrationState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, CointegrationState]:
    state.x.append(float(as_decimal(bar["x"])))
    state.y.append(float(as_decimal(bar["y"])))
    x = np.fromiter(state.x, dtype=float, count=state.period)
    y = np.fromiter(state.y, dtype=float, count=state.period)

    result: ResultSet = {
        "spread_std": _finite_or_zero(_spread_standard(x, y)),
        "spread_dyn": _finite_or_zero(_spread_dynamic(x, y)),
    }

    try:
        t_stat, p_value, _ = coint(x, y)
    except (ValueError, np.linalg.LinAlgError) as exc:
        logger.debug("cointegration: Engle-Granger test failed: %s", exc)
        return result, state
    result["engle_t_stat"] = _finite_or_zero(t_stat)
    result["engle_p_value"] = _finite_or_zero(p_value)
    result["is_coint"] = ONE if p_value < COINT_P_VALUE else ZERO

    try:
        pearson = stats.pearsonr(x, y)[0]
    except ValueError as exc:
        logger.debug("cointegration: pearson failed: %s", exc)
        return result, state
    if not math.isfinite(pearson):
        return result, state
    result["pearson"] = from_float(pearson)

    dx, dy = x - x.mean(), y - y.mean()
    correlation = (dx * dy).sum() / (math.sqrt((dx * dx).sum()) * math.sqrt((dy * dy).sum()))
    result["correlation"] = from_float(correlation)

    return result, state


def _cointegration_output_names(params: Dict[str, Any]) -> List[str]:
    return [
        "spread_std", "spread_dyn", "engle_t_stat", "engle_p_value",
        "is_coint", "pearson", "correlation",
    ]


def _cointegration_seed(series: Dict[str, Any], params: Dict[str, Any]) -> CointegrationState:
    return replay_seed("cointegration", series, params)


STATEFUL_REGISTRY["cointegration"] = StatefulIndicator(
    kind="cointegration",
    inputs=("x", "y"),
    init=_cointegration_init,
    update=_cointegration_update,
    output_names=_cointegration_output_names,
)
SEED_REGISTRY["cointegration"] = _cointegration_seed
