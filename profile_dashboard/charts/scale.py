"""Coordinate scales used by the chart renderers.

Each chart composes the scales it needs instead of inheriting layout code.
"""

from __future__ import annotations

from datetime import date, datetime


class LinearScale:
    """Map a numeric domain onto a pixel range (either may be reversed)."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]) -> None:
        lo, hi = domain
        if hi == lo:
            # Degenerate domain: widen so a flat series sits on the lower edge
            hi = lo + 1
        self.domain = (lo, hi)
        self.range = range_

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 5) -> list[float]:
        """``count`` evenly spaced values from domain start to end inclusive."""
        d0, d1 = self.domain
        if count <= 1:
            return [d0]
        step = (d1 - d0) / (count - 1)
        return [d0 + step * i for i in range(count)]


def _ordinal(value) -> float:
    """Days since the epoch as a float, for both date and datetime."""
    if isinstance(value, datetime):
        return value.timestamp() / 86400
    if isinstance(value, date):
        return float(value.toordinal())
    raise TypeError(f"TimeScale expects date or datetime, got {type(value).__name__}")


class TimeScale:
    """Map a date domain onto a pixel range.

    A single-date domain maps every value to the middle of the range.
    """

    def __init__(self, domain: tuple, range_: tuple[float, float]) -> None:
        self.domain = domain
        self.range = range_
        self._start = _ordinal(domain[0])
        self._span = _ordinal(domain[1]) - self._start

    def __call__(self, value) -> float:
        r0, r1 = self.range
        if self._span == 0:
            return (r0 + r1) / 2
        return r0 + (_ordinal(value) - self._start) / self._span * (r1 - r0)

    def ticks(self, values: list, limit: int = 6) -> list:
        """Pick at most ``limit`` of the given values, spread evenly, keeping both ends."""
        if len(values) <= limit:
            return list(values)
        if limit <= 1:
            return [values[0]]
        last = len(values) - 1
        picked = sorted({round(i * last / (limit - 1)) for i in range(limit)})
        return [values[i] for i in picked]
