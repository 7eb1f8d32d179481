"""Shared synthetic data for the ehlers_ta_stateful test suite"""

import numpy as np
import pandas as pd
import pytest


def make_ohlc(rows: int, seed: int = 7) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    idx = pd.date_range("2025-01-01", periods=rows, freq="1min")
    close = np.round(100 + rng.standard_normal(rows).cumsum(), 2)
    high = np.round(close + rng.random(rows) * 0.5 + 0.01, 2)
    low = np.round(close - rng.random(rows) * 0.5 - 0.01, 2)
    return pd.DataFrame({"high": high, "low": low, "close": close}, index=idx)


@pytest.fixture
def ohlc():
    return make_ohlc(300)


@pytest.fixture
def closes(ohlc):
    return ohlc["close"].tolist()
