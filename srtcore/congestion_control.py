"""Sender congestion control for live streaming: pacing from the input data rate.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .seq_number import SeqNumber
from .stats import SECOND, OnlineWindowedStats, StatsWindow

GIGABIT = 1_000_000_000 // 8

_UDP_HEADER_SIZE = 28
_HEADER_SIZE = 16
_SRT_DATA_HEADER_SIZE = _UDP_HEADER_SIZE + _HEADER_SIZE


@dataclass
class MessageStats:
    """Counts of messages, packets and bytes handed to the sender."""

    message_count: int = 0
    packet_count: int = 0
    bytes_total: int = 0

    def add(self, measure: tuple[int, int]) -> None:
        packets, data_bytes = measure
        self.message_count += 1
        self.packet_count += packets
        self.bytes_total += data_bytes


def mean_payload_size(window: StatsWindow[MessageStats]) -> int:
    """Average bytes per packet in the window, or 0 when no packets were seen."""
    if window.stats.packet_count > 0:
        return window.stats.bytes_total // window.stats.packet_count
    return 0


def data_rate(window: StatsWindow[MessageStats]) -> int:
    """Bytes per second over the window, or 0 for an empty period."""
    if window.period > 0:
        return int(window.stats.bytes_total / (window.period / SECOND))
    return 0


@dataclass(frozen=True)
class FixedRate:
    """A configured input rate plus an overhead percentage."""

    rate: int
    overhead: int


@dataclass(frozen=True)
class MaxRate:
    """A fixed maximum rate."""

    rate: int


@dataclass(frozen=True)
class AutoRate:
    """The measured input rate plus an overhead percentage."""

    overhead: int


@dataclass(frozen=True)
class UnlimitedRate:
    """No limit beyond one gigabit per second."""


LiveDataRate = Union[FixedRate, MaxRate, AutoRate, UnlimitedRate]


class SenderCongestionControl:
    """Decides the inter-packet sending period and the flow window."""

    def __init__(self, live_data_rate: LiveDataRate, window_size: int | None = None) -> None:
        self._message_stats_window = OnlineWindowedStats(SECOND, MessageStats)
        self._message_stats: StatsWindow[MessageStats] = StatsWindow(stats=MessageStats())
        self.live_data_rate = live_data_rate
        self._window_size = window_size
        self.current_data_rate = GIGABIT
        self.acks_received = 0
        self.naks_received = 0
        self.largest_lost: SeqNumber | None = None
        self.packets_sent = 0

    def on_input(self, now: int, packets: int, data_length: int) -> None:
        window = self._message_stats_window.add(now, (packets, data_length))
        if window is not None:
            self.current_data_rate = self._updated_data_rate(data_rate(window))
            self._message_stats = window

    def snd_period(self) -> int:
        """The interval between packets, in microseconds (at least 1)."""
        if self.current_data_rate > 0:
            mean_packet_size = mean_payload_size(self._message_stats) + _SRT_DATA_HEADER_SIZE
            period = mean_packet_size * 1_000_000 // self.current_data_rate
            if period > 0:
                return period
        return 1

    def window_size(self) -> int:
        return 1000 if self._window_size is None else self._window_size

    def on_ack(self) -> None:
        """Count an arriving ACK; live mode does not change the rate."""
        self.acks_received += 1

    def on_nak(self, largest_seq_in_ll: SeqNumber) -> None:
        """Record an arriving NAK; live mode does not change the rate."""
        self.naks_received += 1
        self.largest_lost = largest_seq_in_ll

    def on_packet_sent(self) -> None:
        """Count a packet leaving; live mode does not change the rate."""
        self.packets_sent += 1

    def _updated_data_rate(self, actual_data_rate: int) -> int:
        rate = self.live_data_rate
        if isinstance(rate, FixedRate):
            return rate.rate * (100 + rate.overhead) // 100
        if isinstance(rate, MaxRate):
            return rate.rate
        if isinstance(rate, AutoRate):
            return actual_data_rate * (100 + rate.overhead) // 100
        return GIGABIT