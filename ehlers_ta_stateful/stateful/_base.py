# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- shared base: helpers, descriptor, registries.

All category modules (``_overlap``, ``_cycle``, ...) import from here
and populate the registries at load time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional, Tuple

from ._decimal import as_decimal

logger = logging.getLogger(__name__)

ResultSet = Dict[str, Optional[Decimal]]


# ---------------------------------------------------------------------------
# Parameter helpers
# ---------------------------------------------------------------------------

def _param(params: Dict[str, Any], key: str, default: Any) -> Any:
    """``params[key]``, with a missing key or an explicit None giving *default*."""
    value = params.get(key)
    return default if value is None else value


def _as_int(value: Any, default: int) -> int:
    """Integer params (periods, durations); unparseable values fall back."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def _as_decimal_param(value: Any, default: Any) -> Decimal:
    """Decimal params (limits, alphas); unparseable values fall back."""
    try:
        return as_decimal(value)
    except (TypeError, ValueError, InvalidOperation):
        return as_decimal(default)


# ---------------------------------------------------------------------------
# Indicator descriptor & registries  (populated by category modules)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatefulIndicator:
    """Immutable descriptor for a single stateful indicator.

    ``update(state, bar, params)`` returns ``(result_set, state)`` where the
    result set maps every name from ``output_names(params)`` to a value.
    """
    kind:         str
    inputs:       Tuple[str, ...]
    init:         Callable[[Dict[str, Any]], Any]
    update:       Callable[[Any, Dict[str, Any], Dict[str, Any]],
                           Tuple[Dict[str, Any], Any]]
    output_names: Callable[[Dict[str, Any]], List[str]]


# Populated by category modules at import time.
STATEFUL_REGISTRY:  Dict[str, StatefulIndicator] = {}
SEED_REGISTRY:      Dict[str, Callable] = {}            # kind -> seed_fn(inputs, params) -> State
LOOKAHEAD_REGISTRY: Dict[str, StatefulIndicator] = {}   # forward-looking, delayed output


def get_indicator(kind: str) -> StatefulIndicator:
    indicator = STATEFUL_REGISTRY.get(kind) or LOOKAHEAD_REGISTRY.get(kind)
    if indicator is None:
        raise ValueError(f"Indicator '{kind}' not found in STATEFUL_REGISTRY or LOOKAHEAD_REGISTRY")
    return indicator


# ---------------------------------------------------------------------------
# Generic seed helper
# ---------------------------------------------------------------------------

def replay_seed(kind: str, inputs: Dict[str, Any], params: Dict[str, Any]) -> Any:
    """Generic seed: replay the stateful update over historical Series.

    *inputs* values must be ``pd.Series`` (or any indexable with ``.iloc``).
    Rows with a missing value in any input are skipped.  Returns the final
    *State* after processing all rows.
    """
    import pandas as pd          # lazy – pandas not required at module load
    indicator = get_indicator(kind)
    state = indicator.init(params)
    keys = list(inputs.keys())
    if not keys:
        return state
    n = len(inputs[keys[0]])
    skipped = 0
    for i in range(n):
        bar: Dict[str, Any] = {}
        valid = True
        for k in keys:
            v = inputs[k].iloc[i]
            if pd.isna(v):
                valid = False
                break
            bar[k] = v
        if not valid:
            skipped += 1
            continue
        _, state = indicator.update(state, bar, params)
    logger.debug("replay_seed %s: %d rows replayed, %d skipped", kind, n - skipped, skipped)
    return state


# ---------------------------------------------------------------------------
# Output-name helpers
# ---------------------------------------------------------------------------

# Spec keys that are naming or bookkeeping, never indicator params.
STATEFUL_SPEC_EXCLUDES = frozenset({
    "kind", "prefix", "suffix", "delimiter", "col_names",
    "state_key", "name", "description",
})


def build_state_key(kind: str, spec: Dict[str, Any]) -> str:
    """``kind|k1=v1|k2=v2`` over the params of *spec*, keys sorted.

    Two specs that only differ in naming map to the same state.
    """
    params = sorted(k for k in spec if k not in STATEFUL_SPEC_EXCLUDES)
    if not params:
        return kind
    return "|".join([kind] + [f"{k}={spec[k]!r}" for k in params])


def resolve_output_names(base_names: List[str], spec: Dict[str, Any]) -> List[str]:
    """Column names for *base_names* after the naming overrides in *spec*.

    ``col_names`` (a tuple, or a single name) replaces the names outright;
    otherwise ``prefix`` / ``suffix`` are joined on with ``delimiter``.
    """
    col_names = spec.get("col_names")
    if col_names is not None:
        if not isinstance(col_names, tuple):
            col_names = (col_names,)
        if len(col_names) < len(base_names):
            raise ValueError(f"col_names too short: {len(col_names)} < {len(base_names)}")
        return list(col_names[: len(base_names)])

    delimiter = spec.get("delimiter", "_")
    head = [spec["prefix"]] if spec.get("prefix") else []
    tail = [spec["suffix"]] if spec.get("suffix") else []
    return [delimiter.join(head + [name] + tail) for name in base_names]


def stateful_supported_kinds(include_lookahead: bool = True) -> List[str]:
    """Return sorted list of supported indicator kinds.

    When include_lookahead=True, include the forward-looking kinds.
    """
    kinds = set(STATEFUL_REGISTRY.keys())
    if include_lookahead:
        kinds.update(LOOKAHEAD_REGISTRY.keys())
    return sorted(kinds)


# ---------------------------------------------------------------------------
# Bar-by-bar driver
# ---------------------------------------------------------------------------

class StreamingIndicator:
    """One indicator instance fed one bar per ``next`` call.

    Example: ``make("mama", fast_limit=0.5).next(close=101.25)["mama"]``.
    """

    def __init__(self, kind: str, params: Optional[Dict[str, Any]] = None, state: Any = None):
        self.indicator = get_indicator(kind)
        self.params = dict(params or {})
        self.state = self.indicator.init(self.params) if state is None else state

    @property
    def kind(self) -> str:
        return self.indicator.kind

    @property
    def output_names(self) -> List[str]:
        return self.indicator.output_names(self.params)

    def next(self, **bar: Any) -> ResultSet:
        missing = [k for k in self.indicator.inputs if k not in bar]
        if missing:
            raise ValueError(f"{self.kind}: missing bar inputs {missing}")
        result, self.state = self.indicator.update(self.state, bar, self.params)
        return result


def make(kind: str, **params: Any) -> StreamingIndicator:
    """Fresh streaming instance of *kind*; invalid params raise ValueError."""
    return StreamingIndicator(kind, params)
