# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- pandas DataFrame drivers.

``stream`` runs one indicator over the rows of a DataFrame; ``study`` runs
several and returns their states keyed by ``build_state_key`` so a later
call on newer rows can pick up where the previous one stopped.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ._base import (
    build_state_key,
    get_indicator,
    resolve_output_names,
    STATEFUL_SPEC_EXCLUDES,
)

logger = logging.getLogger(__name__)


def _input_columns(df: pd.DataFrame, inputs: Tuple[str, ...], kind: str) -> Dict[str, str]:
    lookup = {str(c).lower(): c for c in df.columns}
    missing = [name for name in inputs if name not in lookup]
    if missing:
        raise ValueError(f"{kind}: DataFrame is missing input columns {missing}")
    return {name: lookup[name] for name in inputs}


def stream(
    df: pd.DataFrame,
    kind: str,
    params: Optional[Dict[str, Any]] = None,
    state: Any = None,
    **spec: Any,
) -> Tuple[pd.DataFrame, Any]:
    """Feed every row of *df* to *kind*; return ``(results, state)``.

    Rows with a missing input are skipped and left as NaN in the results.
    *spec* takes the naming overrides ``prefix``, ``suffix``, ``delimiter``
    and ``col_names``.
    """
    params = dict(params or {})
    indicator = get_indicator(kind)
    names = resolve_output_names(indicator.output_names(params), spec)
    columns = _input_columns(df, indicator.inputs, kind)
    if state is None:
        state = indicator.init(params)

    keys = indicator.output_names(params)
    rows: List[Dict[str, Any]] = []
    skipped = 0
    inputs = df[list(columns.values())]
    for values in inputs.itertuples(index=False, name=None):
        if any(pd.isna(v) for v in values):
            skipped += 1
            rows.append({})
            continue
        bar = dict(zip(columns.keys(), values))
        result, state = indicator.update(state, bar, params)
        rows.append(result)

    out = pd.DataFrame(rows, index=df.index, columns=keys)
    out.columns = names
    logger.debug("stream %s: %d rows, %d skipped", kind, len(df), skipped)
    return out, state


def study(
    df: pd.DataFrame,
    specs: List[Dict[str, Any]],
    states: Optional[Dict[str, Any]] = None,
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """Run several indicator specs over *df*.

    Each spec is ``{"kind": ..., **params, **naming}``.  Returns the
    concatenated results and a ``{state_key: state}`` dict; pass it back as
    *states* with the next rows to continue every stream.
    """
    states = dict(states or {})
    frames = []
    for spec in specs:
        kind = spec["kind"]
        params = {k: v for k, v in spec.items() if k not in STATEFUL_SPEC_EXCLUDES}
        naming = {k: v for k, v in spec.items() if k in ("prefix", "suffix", "delimiter", "col_names")}
        key = spec.get("state_key") or build_state_key(kind, spec)
        frame, states[key] = stream(df, kind, params, states.get(key), **naming)
        frames.append(frame)
        logger.debug("study: %s -> %s", key, list(frame.columns))

    if not frames:
        return pd.DataFrame(index=df.index), states
    return pd.concat(frames, axis=1), states
