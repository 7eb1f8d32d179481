"""Tests for mama, ssf and itrend"""

from decimal import Decimal

import pytest

from ehlers_ta_stateful import make


def feed(indicator, closes):
    return [indicator.next(close=c) for c in closes]


def assert_trend_bookkeeping(results):
    """trend_since restarts exactly when the trend flips, else counts up."""
    for prev, curr in zip(results, results[1:]):
        assert curr["trend"] in (-1, 0, 1)
        if curr["trend"] != prev["trend"]:
            assert curr["trend_since"] == 0
        else:
            assert curr["trend_since"] in (0, prev["trend_since"] + 1)


class TestMAMA:
    """MESA adaptive moving average"""

    def test_output_names(self):
        assert make("mama").output_names == ["mama", "fama", "trend", "trend_since", "strength"]

    def test_constant_price_converges(self):
        results = feed(make("mama"), [100] * 200)
        last = results[-1]
        assert last["mama"] == Decimal("100.000")
        assert last["fama"] == Decimal("100.000")
        assert last["strength"] == 0
        # fama trails mama from below: no cross ever happens
        assert last["trend"] == 0
        assert last["trend_since"] == 200

    def test_mama_leads_fama_on_rising_prices(self):
        results = feed(make("mama"), [100 + i for i in range(60)])
        for result in results:
            assert result["fama"] <= result["mama"]

    def test_trend_bookkeeping(self, closes):
        assert_trend_bookkeeping(feed(make("mama"), closes))

    def test_custom_limits(self):
        mama = make("mama", fast_limit=0.25, slow_limit=0.25)
        result = mama.next(close=100)
        # alpha pinned to 0.25 on the first bar
        assert result["mama"] == Decimal("25.000")

    @pytest.mark.parametrize("fast, slow", [(0.05, 0.5), (1.5, 0.05), (0.5, 0)])
    def test_invalid_limits(self, fast, slow):
        with pytest.raises(ValueError):
            make("mama", fast_limit=fast, slow_limit=slow)

    def test_unparseable_limit_falls_back_to_default(self):
        assert make("mama", fast_limit="abc").state.fast_limit == Decimal("0.5")


class TestSSF:
    """Two-pole super smoother with a two-bar trigger"""

    def test_first_bar(self):
        result = make("ssf").next(close=100)
        assert result["trigger"] == 0
        assert result["strength"] == 0
        assert result["cross"] == 0
        assert result["trend_since"] == 1

    def test_unit_dc_gain(self):
        last = feed(make("ssf"), [100] * 100)[-1]
        assert last["filter"] == Decimal("100.000")
        assert last["trigger"] == Decimal("100.000")
        assert last["strength"] == 0

    def test_trend_follows_direction(self):
        down = [200 - i for i in range(50)]
        up = [down[-1] + i for i in range(1, 51)]
        results = feed(make("ssf"), down + up)
        assert results[49]["trend"] == -1
        assert results[-1]["trend"] == 1
        assert results[-1]["trend_since"] < 50

    def test_cross_matches_trend_changes(self, closes):
        results = feed(make("ssf"), closes)
        assert_trend_bookkeeping(results)
        for result in results:
            if result["cross"] == 1:
                assert result["trend"] == 1 and result["trend_since"] == 0
            elif result["cross"] == -1:
                assert result["trend"] == -1 and result["trend_since"] == 0


class TestITrend:
    """Instantaneous trendline"""

    def test_warmup_and_trigger(self):
        results = feed(make("itrend"), [100] * 10)
        assert [r["filter"] for r in results[:4]] == [
            Decimal("25.000"), Decimal("75.000"), Decimal("100.000"), Decimal("100.000"),
        ]
        assert [r["trigger"] for r in results[:5]] == [
            Decimal("50.000"), Decimal("150.000"), Decimal("175.000"),
            Decimal("125.000"), Decimal("100.000"),
        ]
        assert results[0]["strength"] == Decimal("100.000")

    def test_constant_price_is_a_fixed_point(self):
        results = feed(make("itrend"), [100] * 30)
        for result in results[2:]:
            assert result["filter"] == Decimal("100.000")
        assert results[-1]["trigger"] == Decimal("100.000")
        assert results[-1]["strength"] == 0
        assert results[-1]["trend"] == 0
        assert results[-1]["trend_since"] == 30

    def test_trend_bookkeeping(self, closes):
        assert_trend_bookkeeping(feed(make("itrend"), closes))

    @pytest.mark.parametrize("alpha", [0, 1, -0.5])
    def test_invalid_alpha(self, alpha):
        with pytest.raises(ValueError):
            make("itrend", alpha=alpha)
