# -*- coding: utf-8 -*-
"""ehlers-ta.stateful – streaming / stateful indicator package.

Category modules populate STATEFUL_REGISTRY, SEED_REGISTRY, and
LOOKAHEAD_REGISTRY at import time.  This package re-exports them
plus the shared core (windows, decimal policy, cycle engine, crosses).
"""
from __future__ import annotations

# Base API (always available)
from ._base import (
    ResultSet,
    StatefulIndicator,
    StreamingIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
    LOOKAHEAD_REGISTRY,
    get_indicator,
    make,
    replay_seed,
    build_state_key,
    resolve_output_names,
    stateful_supported_kinds,
    STATEFUL_SPEC_EXCLUDES,
    _param,
    _as_int,
    _as_decimal_param,
)
from ._decimal import (
    PRECISION_PERCENT,
    PRECISION_MONEY,
    PRECISION_QUANTITY,
    to_percent,
    to_percent_decimal,
    to_money,
    to_quantity,
    is_pos_one,
    as_decimal,
    from_float,
    safe_div,
)
from ._window import LagWindow, RollingMean, RollingExtremeIndex
from ._cross import (
    Cross,
    Trend,
    CrossState,
    TrendState,
    CrossTrendState,
    cross_update,
    cross_trend_update,
    trend_mark,
    trend_hold,
)
from ._dsp import DSPState, DSPStep, dsp_make, dsp_update, clamp_period

# ---------------------------------------------------------------------------
# Category modules – each populates the shared registries on import
# ---------------------------------------------------------------------------
from . import _overlap      # noqa: F401  mama, ssf, itrend
from . import _cycle        # noqa: F401  ebsw, emd, snr
from . import _momentum     # noqa: F401  change_percent
from . import _lookahead    # noqa: F401  roc
from . import _statistics   # noqa: F401  cointegration
from ._lookahead import rate_of_change, rate_of_change_series
from ._frame import stream, study

__all__ = [
    # base
    "ResultSet",
    "StatefulIndicator",
    "StreamingIndicator",
    "STATEFUL_REGISTRY",
    "SEED_REGISTRY",
    "LOOKAHEAD_REGISTRY",
    "get_indicator",
    "make",
    "replay_seed",
    "build_state_key",
    "resolve_output_names",
    "stateful_supported_kinds",
    # decimal policy
    "PRECISION_PERCENT",
    "PRECISION_MONEY",
    "PRECISION_QUANTITY",
    "to_percent",
    "to_percent_decimal",
    "to_money",
    "to_quantity",
    "is_pos_one",
    "as_decimal",
    "from_float",
    "safe_div",
    # core
    "LagWindow",
    "RollingMean",
    "RollingExtremeIndex",
    "Cross",
    "Trend",
    "CrossState",
    "TrendState",
    "CrossTrendState",
    "cross_update",
    "cross_trend_update",
    "trend_mark",
    "trend_hold",
    "DSPState",
    "DSPStep",
    "dsp_make",
    "dsp_update",
    "clamp_period",
    # lookahead & frames
    "rate_of_change",
    "rate_of_change_series",
    "stream",
    "study",
]
