# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- momentum indicators.

Registered kinds
----------------
change_percent
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from ._base import (
    ResultSet,
    StatefulIndicator,
    STATEFUL_REGISTRY,
    SEED_REGISTRY,
    replay_seed,
)
from ._decimal import ZERO, ONE, as_decimal, to_percent


# ===========================================================================
# CHANGE_PERCENT  -- bar-over-bar change in percent
# ===========================================================================
# The first bar is compared with itself (0%).  A zero previous value is
# replaced by the current one, so 0 -> x reports 0% instead of failing.

@dataclass
class ChangePercentState:
    prev: Optional[Decimal] = None


def _change_percent_init(params: Dict[str, Any]) -> ChangePercentState:
    return ChangePercentState()


def _change_percent_update(
    state: ChangePercentState, bar: Dict[str, Any], params: Dict[str, Any]
) -> Tuple[ResultSet, ChangePercentState]:
    curr = as_decimal(bar["close"])
    prev = curr if state.prev is None or state.prev == ZERO else state.prev

    # prev is only 0 here when curr is 0 as well
    change = ZERO if prev == ZERO else to_percent(curr / prev - ONE)
    state.prev = curr

    return {"change_percent": change}, state


def _change_percent_output_names(params: Dict[str, Any]) -> List[str]:
    return ["change_percent"]


def _change_percent_seed(series: Dict[str, Any], params: Dict[str, Any]) -> ChangePercentState:
    return replay_seed("change_percent", series, params)


STATEFUL_REGISTRY["change_percent"] = StatefulIndicator(
    kind="change_percent",
    inputs=("close",),
    init=_change_percent_init,
    update=_change_percent_update,
    output_names=_change_percent_output_names,
)
SEED_REGISTRY["change_percent"] = _change_percent_seed
