"""Receive buffer: reorders packets and releases whole messages on time.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

import logging
from collections import deque

from .packets import DataPacket
from .receiver_time import SynchronizedRemoteClock
from .seq_number import SeqNumber
from .timing import TimeBase, TimeStamp

log = logging.getLogger(__name__)

_LATE_GRACE = 2_000


class RecvBuffer:
    """Holds received packets from ``head`` onward until their message is released."""

    def __init__(self, head: SeqNumber, start: int, tsbpd_latency: int) -> None:
        self._buffer: deque[DataPacket | None] = deque()
        self._head = head
        self._time_base = TimeBase(start)
        self.remote_clock = SynchronizedRemoteClock(start)
        self.tsbpd_latency = tsbpd_latency

    def next_release(self) -> SeqNumber:
        """The sequence number to be released next."""
        return self._head

    def add(self, packet: DataPacket) -> None:
        """Store a packet; packets before the head are ignored."""
        if packet.seq_number < self._head:
            return
        idx = packet.seq_number - self._head
        if idx >= len(self._buffer):
            self._buffer.extend([None] * (idx + 1 - len(self._buffer)))
        self._buffer[idx] = packet

    def synchronize_clock(self, now: int, ts: TimeStamp) -> None:
        self.remote_clock.synchronize(now, ts)

    def drop_too_late_packets(self, now: int) -> int:
        """Drop packets in front of a later message that is already due.

        Returns the number of slots dropped.
        """
        idx = next(
            (i for i, p in enumerate(self._buffer) if p is not None and p.is_first),
            None,
        )
        if not idx:
            return 0

        timestamp = self._buffer[idx].timestamp
        release = self._tsbpd_instant_from(now, timestamp)
        if release + _LATE_GRACE > now:
            return 0

        log.info(
            "Dropping packets [%s,%s), %d ms too late",
            self._head,
            self._head + idx,
            (now - release) // 1000,
        )
        self._head += idx
        for _ in range(idx):
            self._buffer.popleft()
        return idx

    def next_msg_ready_tsbpd(self, now: int) -> int | None:
        """The packet count of the next message if it is complete and due."""
        msg_size = self.next_msg_ready()
        if msg_size is None:
            return None
        packet = self._buffer[0]
        if self._tsbpd_instant_from(now, packet.timestamp) <= now:
            log.debug(
                "Message ready for release: sn=%s, npackets=%d", packet.seq_number, msg_size
            )
            return msg_size
        return None

    def next_msg_ready(self) -> int | None:
        """The packet count of the next message if it is complete, else None."""
        if not self._buffer or self._buffer[0] is None:
            return None
        first = self._buffer[0]
        if not first.is_first:
            raise RuntimeError(
                f"packet seq={first.seq_number} was not marked as the first in its message"
            )
        for count, packet in enumerate(self._buffer, start=1):
            if packet is None:
                return None
            if packet.is_last:
                return count
        return None

    def next_message_release_time(self, now: int) -> int | None:
        """When the next complete message becomes due, if there is one."""
        if self.next_msg_ready() is None:
            return None
        return self._tsbpd_instant_from(now, self._buffer[0].timestamp)

    def next_msg_tsbpd(self, now: int) -> tuple[int, bytes] | None:
        """Release the next message if it is complete and due."""
        if self.next_msg_ready_tsbpd(now) is None:
            return None
        return self.next_msg(now)

    def next_msg(self, now: int) -> tuple[int, bytes] | None:
        """Release the next complete message with its origin instant."""
        count = self.next_msg_ready()
        if count is None:
            return None
        self._head += count
        origin_time = self.remote_clock.instant_from(now, self._buffer[0].timestamp)
        payload = b"".join(self._buffer.popleft().payload for _ in range(count))
        return origin_time, payload

    def timestamp_from(self, at: int) -> TimeStamp:
        return self._time_base.timestamp_from(at)

    def _tsbpd_instant_from(self, now: int, timestamp: TimeStamp) -> int:
        return self.remote_clock.instant_from(now, timestamp) + self.tsbpd_latency

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        slots = [
            None if p is None else (p.seq_number.as_raw(), p.message_loc) for p in self._buffer
        ]
        return repr(slots)