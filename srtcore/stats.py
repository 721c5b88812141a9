"""Statistics gathered over fixed time windows.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Protocol, TypeVar

SECOND = 1_000_000


class Stats(Protocol):
    """An accumulator that takes one measure at a time."""

    def add(self, measure: Any) -> None: ...


S = TypeVar("S", bound=Stats)


@dataclass
class StatsWindow(Generic[S]):
    """Statistics accumulated over ``period`` microseconds."""

    stats: S
    period: int = SECOND


class OnlineWindowedStats(Generic[S]):
    """Accumulates measures and hands back a window once a period has elapsed."""

    def __init__(self, period: int, stats_factory: Callable[[], S]) -> None:
        self.period = period
        self._factory = stats_factory
        self._last: int | None = None
        self._stats = stats_factory()

    def add(self, now: int, measure: Any) -> StatsWindow[S] | None:
        self._stats.add(measure)

        if self._last is None:
            self._last = now
            return None
        if now < self._last + self.period:
            return None

        elapsed = now - self._last
        self._last = now
        window = StatsWindow(stats=self._stats, period=elapsed)
        self._stats = self._factory()
        return window