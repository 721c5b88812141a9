"""Receiver-side timing: remote clock synchronisation, RTT estimate and ACK/NAK timers.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

import math

from .timing import TimeBase, TimeSpan, TimeStamp, Timer


def _div_trunc(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


class _OnlineStats:
    """Running mean and population standard deviation."""

    def __init__(self) -> None:
        self._count = 0
        self._mean = 0.0
        self._m2 = 0.0

    def add(self, sample: float) -> None:
        self._count += 1
        delta = sample - self._mean
        self._mean += delta / self._count
        self._m2 += delta * (sample - self._mean)

    def __len__(self) -> int:
        return self._count

    def mean(self) -> float:
        return self._mean

    def stddev(self) -> float:
        if self._count == 0:
            return 0.0
        return math.sqrt(self._m2 / self._count)


class SynchronizedRemoteClock:
    """Maps remote timestamps to local instants, correcting for steady drift."""

    MAX_SAMPLES = 1_000
    DRIFT_TOLERANCE = 5_000

    def __init__(self, now: int) -> None:
        self.tolerance = self.DRIFT_TOLERANCE
        self._time_base = TimeBase(now)
        self._stats: _OnlineStats | None = None

    def synchronize(self, now: int, ts: TimeStamp) -> None:
        drift = self._time_base.timestamp_from(now) - ts
        if self._stats is None:
            self._time_base.adjust(drift)
        else:
            self._stats.add(drift.as_micros())
            if len(self._stats) < self.MAX_SAMPLES:
                return
            if self._stats.stddev() < self.tolerance:
                self._time_base.adjust(TimeSpan.from_micros(int(self._stats.mean())))
        self._stats = _OnlineStats()

    def instant_from(self, now: int, ts: TimeStamp) -> int:
        return self._time_base.instant_from(now, ts)

    def origin_time(self) -> int:
        return self._time_base.origin_time()


class RTT:
    """Smoothed round trip time and its variance."""

    def __init__(self) -> None:
        self._mean = TimeSpan.from_micros(10_000)
        self._variance = TimeSpan.from_micros(1_000)

    def update(self, rtt: TimeSpan) -> None:
        sample = rtt.as_micros()
        mean = _div_trunc(self._mean.as_micros() * 7 + sample, 8)
        self._mean = TimeSpan.from_micros(mean)
        variance = _div_trunc(self._variance.as_micros() * 3 + abs(mean - sample), 4)
        self._variance = TimeSpan.from_micros(variance)

    def mean(self) -> TimeSpan:
        return self._mean

    def variance(self) -> TimeSpan:
        return self._variance

    def mean_as_duration(self) -> int:
        return self._mean.as_micros()

    def variance_as_duration(self) -> int:
        return self._variance.as_micros()


class ReceiveTimers:
    """The receiver's ACK and NAK timers."""

    SYN = 10_000

    def __init__(self, now: int) -> None:
        ack, nak = self._calculate_periods(RTT())
        self.ack = Timer(ack, now)
        self.nak = Timer(nak, now)

    def next_timer(self, now: int) -> int:
        return max(now, min(self.nak.next_instant(), self.ack.next_instant()))

    def update_rtt(self, rtt: RTT) -> None:
        ack, nak = self._calculate_periods(rtt)
        self.ack.set_period(ack)
        self.nak.set_period(nak)

    @classmethod
    def _calculate_periods(cls, rtt: RTT) -> tuple[int, int]:
        rtt_period = 4 * rtt.mean_as_duration() + rtt.variance_as_duration() + cls.SYN
        nak_report_period_accelerator = 2
        return rtt_period, nak_report_period_accelerator * rtt_period