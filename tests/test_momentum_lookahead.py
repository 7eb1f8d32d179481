"""Tests for change_percent and the forward rate of change"""

from decimal import Decimal
from types import SimpleNamespace

import pandas as pd
import pytest

from ehlers_ta_stateful import make, rate_of_change, rate_of_change_series


def bars(*closes):
    return [{"close": c} for c in closes]


class TestChangePercent:
    """Bar over bar change in percent"""

    def test_sequence(self):
        indicator = make("change_percent")
        changes = [indicator.next(close=c)["change_percent"] for c in (100, 110, 121, 0, 50)]
        assert changes == [
            Decimal("0.000"),
            Decimal("10.000"),
            Decimal("10.000"),
            Decimal("-100.000"),
            Decimal("0.000"),
        ]

    def test_zero_to_zero(self):
        indicator = make("change_percent")
        assert indicator.next(close=0)["change_percent"] == 0
        assert indicator.next(close=0)["change_percent"] == 0


class TestRateOfChange:
    """Strongest move over the next `period` bars"""

    def test_strongest_move_wins(self):
        data = bars(100, 105, 80, 110)
        assert rate_of_change(data, 0, period=3) == {"strength": Decimal("-0.200")}
        assert rate_of_change(data, 1, period=1) == {"strength": Decimal("-0.238")}

    def test_no_later_bars(self):
        assert rate_of_change(bars(100, 105, 80, 110), 3, period=3)["strength"] == 0

    def test_ties_keep_the_earliest(self):
        assert rate_of_change(bars(100, 110, 90), 0, period=2)["strength"] == Decimal("0.100")

    def test_zero_base(self):
        assert rate_of_change(bars(0, 5, 6), 0, period=2)["strength"] == 0

    def test_accepts_objects(self):
        data = [SimpleNamespace(close=c) for c in (100, 105, 80, 110)]
        assert rate_of_change(data, 0, period=3)["strength"] == Decimal("-0.200")

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            rate_of_change(bars(1, 2), 0, period=0)


class TestRateOfChangeSeries:
    """Vectorised forward strength over a close Series"""

    def test_values(self):
        close = pd.Series([100.0, 105.0, 80.0, 110.0])
        result = rate_of_change_series(close, period=3)
        assert result.name == "strength"
        assert result.tolist() == [
            Decimal("-0.200"), Decimal("-0.238"), Decimal("0.375"), Decimal("0.000"),
        ]

    def test_zero_base(self):
        result = rate_of_change_series(pd.Series([0.0, 5.0, 6.0]), period=2)
        assert result.tolist() == [Decimal("0.000"), Decimal("0.200"), Decimal("0.000")]

    def test_nan_close_stays_nan(self):
        result = rate_of_change_series(pd.Series([100.0, float("nan"), 110.0]), period=2)
        values = result.tolist()
        # the gap is skipped when looking ahead from the first bar
        assert values[0] == Decimal("0.100")
        assert pd.isna(values[1])
        assert values[2] == Decimal("0.000")

    def test_matches_bar_function(self):
        values = [100, 104, 97, 99, 120, 118, 80, 95, 96, 101]
        close = pd.Series([float(v) for v in values])
        expected = [rate_of_change(bars(*values), i, period=4)["strength"] for i in range(len(values))]
        assert rate_of_change_series(close, period=4).tolist() == expected


class TestDelayedROC:
    """Streaming form emits the value for the bar `period` bars back"""

    def test_delayed_output_and_single_warning(self):
        roc = make("roc", period=2)
        with pytest.warns(UserWarning) as record:
            strengths = [roc.next(close=c)["strength"] for c in (100, 105, 80, 110)]
        assert len(record) == 1
        assert strengths == [None, None, Decimal("-0.200"), Decimal("-0.238")]

    def test_default_period(self):
        with pytest.warns(UserWarning):
            roc = make("roc")
            results = [roc.next(close=100 + i) for i in range(11)]
        assert roc.state.period == 10
        assert results[9]["strength"] is None
        assert results[10]["strength"] == Decimal("0.100")
