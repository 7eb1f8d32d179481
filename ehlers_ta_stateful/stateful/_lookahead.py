# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- lookahead indicators.

These indicators need bars *after* the one they describe:

  1. roc -- forward rate of change.  Full form: ``rate_of_change`` over a
     caller-supplied bar sequence, or ``rate_of_change_series`` over a
     pandas Series.  Streaming form: DELAYED, the value for a bar is
     emitted ``period`` bars later, with a one-time warning.

Each section follows the pattern:
  1. State dataclass
  2. init / update / output_names helpers
  3. LOOKAHEAD_REGISTRY["<kind>"] = StatefulIndicator(...)
  4. SEED_REGISTRY["<kind>"] = seed_fn
"""
from __future__ import annotations

import warnings
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from ._base import (
    ResultSet,
    _param,
    _as_int,
    StatefulIndicator,
    SEED_REGISTRY,
    LOOKAHEAD_REGISTRY,
    replay_seed,
)
from ._decimal import ZERO, as_decimal, from_float, safe_div, to_quantity


# ===========================================================================
# ROC  (forward)  -- strongest move within the next `period` bars
# ===========================================================================
# strength[i] = the (close[j] - close[i]) / close[i], j in i+1..i+period,
# with the largest magnitude (earliest wins ties).  Truncated at the end of
# the data; 0 when there are no later bars or close[i] == 0.
# Default period=10.

def _close_of(bar: Any) -> Decimal:
    if isinstance(bar, Mapping):
        return as_decimal(bar["close"])
    return as_decimal(bar.close)


def _forward_strength(base: Decimal, later: Sequence[Decimal]) -> Decimal:
    strength = ZERO
    for close in later:
        roc = safe_div(close - base, base)
        if abs(roc) > abs(strength):
            strength = roc
    return strength


def _check_period(period: int) -> int:
    if period < 1:
        raise ValueError(f"roc: period must be >= 1, got {period}")
    return period


def rate_of_change(bars: Sequence[Any], i: int, period: int = 10) -> ResultSet:
    """Forward strength of ``bars[i]`` against the next *period* bars.

    *bars* is any sequence of mappings with a ``"close"`` key (or objects
    with a ``close`` attribute).
    """
    _check_period(period)
    base = _close_of(bars[i])
    later = [_close_of(b) for b in bars[i + 1: i + 1 + period]]
    return {"strength": to_quantity(_forward_strength(base, later))}


def rate_of_change_series(close, period: int = 10):
    """``rate_of_change`` for every row of a close Series.

    Returns an object-dtype ``pd.Series`` of Decimals named ``strength``.
    A NaN close gives NaN; NaN closes further ahead are ignored.

    The ratios are computed in binary floats, so a ratio lying exactly on a
    3-digit rounding midpoint can round differently from ``rate_of_change``.
    """
    import pandas as pd
    _check_period(period)

    values = close.to_numpy(dtype=float)
    n = len(values)
    changes = np.full((n, period), np.nan)
    with np.errstate(divide="ignore", invalid="ignore"):
        for k in range(1, min(period, n - 1) + 1):
            base = values[: n - k]
            changes[: n - k, k - 1] = (values[k:] - base) / base

    missing = np.isnan(values)
    has_any = ~np.all(np.isnan(changes), axis=1) & (values != 0) & ~missing
    idx = np.zeros(n, dtype=int)
    if has_any.any():
        idx[has_any] = np.nanargmax(np.abs(changes[has_any]), axis=1)
    strength = np.where(has_any, changes[np.arange(n), idx], 0.0)

    return pd.Series(
        [np.nan if skip else to_quantity(from_float(v)) for v, skip in zip(strength, missing)],
        index=close.index,
        name="strength",
        dtype=object,
    )


@dataclass
class ROCState:
    period: int
    closes: deque = field(default_factory=deque)   # maxlen=period+1
    warned: bool = False


def _roc_init(params: Dict[str, Any]) -> ROCState:
    period = _check_period(_as_int(_param(params, "period", 10), 10))
    return ROCState(period=period, closes=deque(maxlen=period + 1))


def _roc_update(
    state: ROCState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, ROCState]:
    """Emit the strength of the bar ``period`` bars back (None until then)."""
    if not state.warned:
        warnings.warn(
            "roc in stateful mode is delayed: each value belongs to the bar "
            f"{state.period} bars before the one just received.",
            UserWarning,
            stacklevel=2,
        )
        state.warned = True

    state.closes.append(as_decimal(bar["close"]))
    if len(state.closes) <= state.period:
        return {"strength": None}, state

    base, *later = state.closes
    return {"strength": to_quantity(_forward_strength(base, later))}, state


def _roc_output_names(params: Dict[str, Any]) -> List[str]:
    return ["strength"]


def _roc_seed(series: Dict[str, Any], params: Dict[str, Any]) -> ROCState:
    return replay_seed("roc", series, params)


LOOKAHEAD_REGISTRY["roc"] = StatefulIndicator(
    kind="roc",
    inputs=("close",),
    init=_roc_init,
    update=_roc_update,
    output_names=_roc_output_names,
)
SEED_REGISTRY["roc"] = _roc_seed
