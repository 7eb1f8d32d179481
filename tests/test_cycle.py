"""Tests for ebsw, emd and snr"""

import math
from decimal import Decimal

import pytest

from ehlers_ta_stateful import make


def sine(bars, period=20, amplitude=10, base=100):
    return [round(base + amplitude * math.sin(2 * math.pi * i / period), 4) for i in range(bars)]


class TestEBSW:
    """Even better sinewave"""

    def test_first_bar_is_one_over_root_three(self):
        result = make("ebsw").next(close=100)
        assert result["signal"] == Decimal("0.577")
        assert result["upper_cross"] == 0
        assert result["lower_cross"] == 0

    def test_zero_power_gives_zero_signal(self):
        assert make("ebsw").next(close=0)["signal"] == 0

    def test_signal_is_bounded(self, closes):
        ebsw = make("ebsw")
        for close in closes:
            assert abs(ebsw.next(close=close)["signal"]) <= 1

    def test_crosses_agree_with_thresholds(self):
        ebsw = make("ebsw", duration=20)
        results = [ebsw.next(close=c) for c in sine(200)]
        uppers = [r for r in results if r["upper_cross"] == 1]
        lowers = [r for r in results if r["lower_cross"] == -1]
        assert uppers and lowers
        for result in uppers:
            assert result["signal"] >= Decimal("0.8")
        for result in lowers:
            assert result["signal"] <= Decimal("-0.8")

    def test_invalid_duration(self):
        with pytest.raises(ValueError):
            make("ebsw", duration=2)


class TestEMD:
    """Empirical mode decomposition"""

    def test_output_names(self):
        assert make("emd").output_names == [
            "mean", "upper", "upper_cross", "lower", "lower_cross",
            "highest_high", "lowest_low", "trend", "trend_since",
        ]

    @pytest.mark.parametrize("params", [
        {"period": 1},
        {"delta": 0},
        {"fraction": -0.1},
    ])
    def test_invalid_params(self, params):
        with pytest.raises(ValueError):
            make("emd", **params)

    def test_constant_price_mean_decays(self):
        emd = make("emd")
        results = [emd.next(close=100) for _ in range(400)]
        assert results[-1]["mean"] == 0
        assert abs(results[-1]["upper"]) < Decimal("0.01")
        assert abs(results[-1]["lower"]) < Decimal("0.01")

    def test_envelope_orders_on_cycle(self):
        emd = make("emd")
        results = [emd.next(close=c) for c in sine(300)]
        for result in results[100:]:
            assert result["lower"] <= 0 <= result["upper"]

    def test_extreme_flags(self, closes):
        emd = make("emd")
        results = [emd.next(close=c) for c in closes]
        highs = [r["highest_high"] for r in results]
        lows = [r["lowest_low"] for r in results]
        assert set(highs) <= {0, 1} and set(lows) <= {0, 1}
        assert sum(highs) > 0 and sum(lows) > 0
        for result in results:
            assert not (result["highest_high"] == 1 and result["lowest_low"] == 1)

    def test_trend_values(self, closes):
        emd = make("emd")
        for close in closes:
            result = emd.next(close=close)
            assert result["trend"] in (-1, 0, 1)
            assert result["trend_since"] >= 0


class TestSNR:
    """Enhanced signal to noise ratio"""

    def test_requires_high_and_low(self):
        with pytest.raises(ValueError):
            make("snr").next(close=100)

    def test_zero_range_gives_zero(self, closes):
        snr = make("snr")
        for close in closes:
            assert snr.next(close=close, high=close, low=close)["snr"] == 0

    def test_first_bar(self):
        # smooth=40, smooth_period=0.396, q3=10.607128, i3=1.57*q3/0.198
        # signal=7186.50..., noise=0.1*2^2*0.25=0.1, 3.3*ln(71865.03)
        assert make("snr").next(close=100, high=101, low=99)["snr"] == Decimal("36.902")

    def test_noise_has_no_memory(self):
        snr = make("snr")
        snr.next(close=100, high=101, low=99)
        # a zero range zeroes the noise even right after a wide bar
        assert snr.next(close=101, high=101, low=101)["snr"] == 0

    def test_same_range_same_scale(self):
        wide, narrow = make("snr"), make("snr")
        a = wide.next(close=100, high=102, low=98)["snr"]
        b = narrow.next(close=100, high=101, low=99)["snr"]
        # doubling the range quarters the noise: 3.3*ln(4) lower
        assert abs((b - a) - Decimal("4.575")) <= Decimal("0.002")

    def test_flat_price_loses_its_signal(self):
        snr = make("snr")
        results = [snr.next(close=100, high=101, low=99) for _ in range(80)]
        assert results[-1]["snr"] == 0

    def test_random_walk(self, ohlc):
        snr = make("snr")
        for row in ohlc.itertuples():
            result = snr.next(close=row.close, high=row.high, low=row.low)
            assert list(result) == ["snr"]
