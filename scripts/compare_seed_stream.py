#!/usr/bin/env python3
"""Seed + stream vs one full stream comparison.

For every supported kind this script:
1) streams the whole synthetic frame in one go (reference)
2) seeds a state on t=0..split with SEED_REGISTRY
3) streams t=split+1..end from that state

and reports, per output column, how many rows differ between the two.
Every kind is deterministic, so any mismatch is a state-handling bug.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from time import perf_counter
from typing import List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import numpy as np
import pandas as pd
import ehlers_ta_stateful as ta

logger = logging.getLogger("compare_seed_stream")


def make_ohlc(rows: int, seed: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    idx = pd.date_range("2025-01-01", periods=rows, freq="1min")
    base = 100 + rng.standard_normal(rows).cumsum()
    close = base + rng.normal(0, 0.2, rows)
    open_ = base + rng.normal(0, 0.2, rows)
    high = np.maximum(open_, close) + rng.random(rows) * 0.5
    low = np.minimum(open_, close) - rng.random(rows) * 0.5
    # a pair for cointegration: x tracks 2 * y plus noise
    y = base + rng.normal(0, 0.2, rows)
    x = 2 * y + rng.normal(0, 0.5, rows)
    return pd.DataFrame({"high": high, "low": low, "close": close, "x": x, "y": y}, index=idx)


def parse_kinds(value: str | None) -> List[str]:
    if not value:
        return ta.stateful_supported_kinds(include_lookahead=False)
    return [v.strip() for v in value.split(",") if v.strip()]


def compare_frames(ref: pd.DataFrame, test: pd.DataFrame) -> pd.Series:
    """Number of differing rows per column (NaN == NaN)."""
    same = (ref == test) | (ref.isna() & test.isna())
    return (~same).sum()


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rows", type=int, default=2000)
    ap.add_argument("--split", type=int, default=1500, help="seed end index")
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--kinds", type=str, default="", help="comma-separated kinds (default: all)")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    if args.split >= args.rows:
        raise SystemExit("--split must be < --rows")

    df = make_ohlc(args.rows, args.seed)
    head = df.iloc[: args.split + 1]
    tail = df.iloc[args.split + 1:]

    failures = 0
    for kind in parse_kinds(args.kinds):
        indicator = ta.get_indicator(kind)

        t0 = perf_counter()
        ref, _ = ta.stream(df, kind)
        t_full = perf_counter() - t0

        t0 = perf_counter()
        state = ta.SEED_REGISTRY[kind]({k: head[k] for k in indicator.inputs}, {})
        t_seed = perf_counter() - t0
        test, _ = ta.stream(tail, kind, state=state)

        diff = compare_frames(ref.loc[tail.index], test)
        bad = int(diff.sum())
        failures += bad
        logger.info(
            "%-15s full=%.3fs seed=%.3fs (%d rows) mismatches=%d",
            kind, t_full, t_seed, len(head), bad,
        )
        if bad:
            print(diff[diff > 0])

    if failures:
        logger.error("%d mismatching cells", failures)
        return 1
    logger.info("seed + stream matches the full stream for every kind")
    return 0


if __name__ == "__main__":
    sys.exit(main())
