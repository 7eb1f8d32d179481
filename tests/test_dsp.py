"""Tests for the Hilbert transform cycle engine"""

from decimal import Decimal

from ehlers_ta_stateful import DSPStep, as_decimal, clamp_period, dsp_make, dsp_update


class TestClampPeriod:
    """Limits applied in a fixed order"""

    def test_rate_limit_up(self):
        assert clamp_period(Decimal(100), Decimal(20)) == 30

    def test_rate_limit_down(self):
        assert clamp_period(Decimal(1), Decimal(20)) == Decimal("13.4")

    def test_floor(self):
        assert clamp_period(Decimal(0), Decimal(0)) == 6

    def test_ceiling_wins_last(self):
        assert clamp_period(Decimal(80), Decimal(60)) == 50


class TestDSPUpdate:
    """One step of the cascade"""

    def test_first_step(self):
        step = dsp_update(dsp_make(), Decimal(100))
        assert isinstance(step, DSPStep)
        assert step.smooth == 40
        # 0.0962 * 40 * (0.075 * 0 + 0.54)
        assert step.detrender == Decimal("2.07792")
        assert step.i1 == 0
        assert step.re == 0
        assert step.clamped_period == 6
        assert step.period == Decimal("1.2")
        assert step.smooth_period == Decimal("0.396")

    def test_windows_advance_together(self):
        state = dsp_make()
        for price in (100, 101, 102):
            dsp_update(state, Decimal(price))
        assert state.price.count == 3
        assert state.smooth.count == 3
        assert state.smooth_period.count == 3
        assert state.price[0] == 102

    def test_q3_only_when_tracked(self):
        plain = dsp_make()
        assert plain.q3 is None
        step = dsp_update(plain, Decimal(100))
        assert step.q3 == 0 and step.i3 == 0

        tracked = dsp_make(with_q3=True)
        assert tracked.q3.capacity == 50
        step = dsp_update(tracked, Decimal(100))
        assert step.q3 > 0
        assert step.i3 > 0

    def test_period_bounds_on_random_walk(self, closes):
        state = dsp_make(with_q3=True)
        period1 = Decimal(0)
        for close in closes:
            step = dsp_update(state, as_decimal(close))
            clamped = step.clamped_period
            assert 6 <= clamped <= 50
            # rate limited against the previous period unless pinned to a bound
            assert clamped in (6, 50) or (
                Decimal("0.67") * period1 <= clamped <= Decimal("1.5") * period1
            )
            assert 0 <= step.period <= 50
            assert 0 <= step.smooth_period <= 50
            period1 = step.period

    def test_deterministic(self, closes):
        a, b = dsp_make(), dsp_make()
        for close in closes[:120]:
            price = as_decimal(close)
            assert dsp_update(a, price) == dsp_update(b, price)
