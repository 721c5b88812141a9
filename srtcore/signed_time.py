"""Signed 32-bit microsecond timestamps relative to a time base.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

_MODULUS = 1 << 32


def _as_i32(value: int) -> int:
    return ((value + (1 << 31)) % _MODULUS) - (1 << 31)


class TimeBase:
    """Maps instants to signed timestamps relative to an origin instant."""

    __slots__ = ("_origin",)

    def __init__(self, start_time: int) -> None:
        self._origin = start_time

    def timestamp_from(self, instant: int) -> int:
        if self._origin > instant:
            return _as_i32(-_as_i32(self._origin - instant))
        return _as_i32(instant - self._origin)

    def instant_from(self, timestamp: int) -> int:
        return self._origin + timestamp

    def adjust(self, delta: int) -> None:
        self._origin += delta

    def __repr__(self) -> str:
        return f"TimeBase({self._origin})"


class Timer:
    """A periodic timer whose period never drops below the minimum."""

    MIN_PERIOD = 1

    def __init__(self, period: int, now: int) -> None:
        self.period = max(period, self.MIN_PERIOD)
        self.last = now

    def next_instant(self) -> int:
        return self.last + self.period

    def reset(self, now: int) -> None:
        self.last = now

    def set_period(self, period: int) -> None:
        self.period = max(period, self.MIN_PERIOD)

    def check_expired(self, now: int) -> int | None:
        """Advance by whole periods if expired and return the new base, else None."""
        if now < self.next_instant():
            return None
        elapsed_periods = (now - self.last) // self.period
        self.last += self.period * elapsed_periods
        return self.last

    def __repr__(self) -> str:
        return f"Timer(period={self.period}, last={self.last})"