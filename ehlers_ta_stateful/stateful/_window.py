# -*- coding: utf-8 -*-
"""ehlers-ta stateful -- fixed-lag history windows.

``LagWindow`` is a deque of fixed length, prefilled with a fill value so
that every lag below ``capacity`` is always readable.  Lag 0 is the newest
stored value: while an indicator is computing bar *t*, ``window[k]`` holds
the value from bar ``t - k - 1``.
"""
from __future__ import annotations

from collections import deque
from decimal import Decimal
from typing import Any, Iterator

from ._decimal import ZERO


class LagWindow:
    """Fixed-capacity history addressed by bars ago (0 = newest)."""

    __slots__ = ("_buf", "capacity", "fill", "count")

    def __init__(self, capacity: int, fill: Any = ZERO) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self.fill = fill
        self.count = 0
        self._buf: deque = deque([fill] * self.capacity, maxlen=self.capacity)

    def push(self, value: Any) -> None:
        self._buf.appendleft(value)
        self.count += 1

    def get(self, lag: int) -> Any:
        if lag < 0:
            raise IndexError(f"lag must be >= 0, got {lag}")
        if lag >= self.capacity:
            return self.fill
        return self._buf[lag]

    __getitem__ = get

    def __len__(self) -> int:
        return self.capacity

    def __iter__(self) -> Iterator[Any]:
        return iter(self._buf)

    def __repr__(self) -> str:
        return f"LagWindow(capacity={self.capacity}, values={list(self._buf)!r})"


# ---------------------------------------------------------------------------
# Rolling helpers on top of LagWindow
# ---------------------------------------------------------------------------

class RollingMean:
    """SMA over a zero-prefilled window: sum(window) / length from bar 1."""

    __slots__ = ("length", "window")

    def __init__(self, length: int, fill: Decimal = ZERO) -> None:
        self.length = int(length)
        self.window = LagWindow(self.length, fill)

    def next(self, x: Decimal) -> Decimal:
        self.window.push(x)
        return sum(self.window, ZERO) / self.length


class RollingExtremeIndex:
    """Bars ago (0 = current) of the highest / lowest value in the window.

    Ties resolve to the most recent bar.
    """

    __slots__ = ("highest", "window")

    def __init__(self, length: int, highest: bool = True, fill: Decimal = ZERO) -> None:
        self.highest = highest
        self.window = LagWindow(length, fill)

    def next(self, x: Decimal) -> int:
        self.window.push(x)
        best_lag = 0
        best = self.window[0]
        for lag, value in enumerate(self.window):
            if (value > best) if self.highest else (value < best):
                best, best_lag = value, lag
        return best_lag
