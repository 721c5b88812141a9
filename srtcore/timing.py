"""Wrapping 32-bit timestamps, signed spans, time bases and periodic timers.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

U32_MAX = (1 << 32) - 1
_MODULUS = 1 << 32


@dataclass(frozen=True, order=True)
class TimeSpan:
    """A signed duration in microseconds, e.g. a round trip time."""

    micros: int

    @classmethod
    def from_micros(cls, us: int) -> TimeSpan:
        return cls(us)

    def as_micros(self) -> int:
        return self.micros

    def abs(self) -> TimeSpan:
        return TimeSpan(abs(self.micros))

    def as_secs_f64(self) -> float:
        return self.micros / 1e6

    def __add__(self, other: TimeSpan) -> TimeSpan:
        if not isinstance(other, TimeSpan):
            return NotImplemented
        return TimeSpan(self.micros + other.micros)

    def __sub__(self, other: TimeSpan) -> TimeSpan:
        if not isinstance(other, TimeSpan):
            return NotImplemented
        return TimeSpan(self.micros - other.micros)

    def __neg__(self) -> TimeSpan:
        return TimeSpan(-self.micros)

    def __mul__(self, other: int) -> TimeSpan:
        if not isinstance(other, int):
            return NotImplemented
        return TimeSpan(self.micros * other)

    __rmul__ = __mul__

    def __truediv__(self, other: int) -> TimeSpan:
        """Divide, truncating toward zero."""
        if not isinstance(other, int):
            return NotImplemented
        quotient = abs(self.micros) // abs(other)
        negative = (self.micros < 0) != (other < 0)
        return TimeSpan(-quotient if negative else quotient)


def _as_i32(value: int) -> int:
    return ((value + (1 << 31)) % _MODULUS) - (1 << 31)


@total_ordering
@dataclass(frozen=True)
class TimeStamp:
    """Microseconds since a time base; wraps every 2**32 microseconds."""

    micros: int

    def __post_init__(self) -> None:
        if not 0 <= self.micros <= U32_MAX:
            raise ValueError(f"timestamp {self.micros} out of range 0..{U32_MAX}")

    @classmethod
    def from_micros(cls, us: int) -> TimeStamp:
        return cls(us)

    def as_micros(self) -> int:
        return self.micros

    def as_secs_f64(self) -> float:
        return self.micros / 1e6

    def as_duration(self) -> int:
        """The timestamp as a duration in microseconds."""
        return self.micros

    def __add__(self, other: TimeSpan) -> TimeStamp:
        if not isinstance(other, TimeSpan):
            return NotImplemented
        return TimeStamp((self.micros + other.micros) % _MODULUS)

    def __sub__(self, other: TimeStamp | TimeSpan) -> TimeSpan | TimeStamp:
        """The nearest signed span to another timestamp, or a timestamp moved back."""
        if isinstance(other, TimeSpan):
            return self + -other
        if isinstance(other, TimeStamp):
            forward = (self.micros - other.micros) % _MODULUS
            backward = (other.micros - self.micros) % _MODULUS
            if forward < backward:
                return TimeSpan(_as_i32(forward))
            return -TimeSpan(_as_i32(backward))
        return NotImplemented

    def __lt__(self, other: TimeStamp) -> bool:
        if not isinstance(other, TimeStamp):
            return NotImplemented
        return (self - other).as_micros() < 0


class TimeBase:
    """Maps instants to wrapping timestamps relative to an origin instant."""

    __slots__ = ("_origin",)

    def __init__(self, start_time: int) -> None:
        self._origin = start_time

    def timestamp_from(self, instant: int) -> TimeStamp:
        if instant < self._origin:
            raise ValueError("timestamps are only valid after the timebase start time")
        return TimeStamp((instant - self._origin) & U32_MAX)

    def instant_from(self, now: int, timestamp: TimeStamp) -> int:
        """The instant closest to ``now`` that is consistent with ``timestamp``."""
        wraps = max(now - self._origin, 0) >> 32
        return self._origin + wraps * U32_MAX + timestamp.as_micros()

    def adjust(self, delta: TimeSpan) -> None:
        self._origin += delta.as_micros()

    def origin_time(self) -> int:
        return self._origin

    def __repr__(self) -> str:
        return f"TimeBase({self._origin})"


class Timer:
    """A periodic event that fires once ``period`` has elapsed since ``last``."""

    MIN_PERIOD = 1

    def __init__(self, period: int, now: int) -> None:
        self.period = max(period, self.MIN_PERIOD)
        self.last = now

    def next_instant(self) -> int:
        return self.last + self.period

    def reset(self, now: int) -> None:
        self.last = now

    def set_period(self, period: int) -> None:
        self.period = period

    def check_expired(self, now: int) -> int | None:
        """Return the instant the timer last fired if it expired, else None."""
        if self.period == 0:
            return now
        if now >= self.next_instant():
            elapsed = now - self.last
            self.last += self.period * (elapsed // self.period)
            return self.last
        return None

    def __repr__(self) -> str:
        return f"Timer(period={self.period}, last={self.last})"