"""Sender-side buffers: packets to transmit, packets awaiting ACK, and the loss list.

Instants are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

import dataclasses
from collections import deque
from typing import Iterable, Iterator, Protocol

from .packets import DataEncryption, DataPacket, PacketLocation
from .seq_number import SeqNumber
from .timing import TimeBase, TimeStamp

_MSG_NUMBER_MASK = (1 << 26) - 1


class Encryptor(Protocol):
    """Encrypts a payload in place and reports which key was used."""

    def encrypt(self, seq_number: SeqNumber, payload: bytearray) -> DataEncryption: ...


class PacketNotBuffered(KeyError):
    """A requested sequence number is not held by the send buffer."""

    def __init__(self, seq_number: SeqNumber) -> None:
        super().__init__(seq_number)
        self.seq_number = seq_number


class TransmitBuffer:
    """Splits messages into packets waiting to be sent."""

    def __init__(
        self,
        remote_socket_id: int,
        max_packet_size: int,
        socket_start_time: int,
        init_send_seq_num: SeqNumber,
        crypto: Encryptor | None = None,
    ) -> None:
        if max_packet_size <= 0:
            raise ValueError("max_packet_size must be positive")
        self.remote_socket_id = remote_socket_id
        self.max_packet_size = max_packet_size
        self._time_base = TimeBase(socket_start_time)
        self._buffer: deque[DataPacket] = deque()
        self._crypto = crypto
        self.next_sequence_number = init_send_seq_num
        self.next_message_number = 0

    def push_message(self, time: int, payload: bytes) -> int:
        """Queue a message, split into packets; returns how many packets it took."""
        message_number = self._new_message_number()
        location = PacketLocation.FIRST
        count = 0
        size = self.max_packet_size
        while len(payload) > size:
            self._begin_transmit(time, message_number, payload[:size], location)
            payload = payload[size:]
            location = PacketLocation(0)
            count += 1
        self._begin_transmit(time, message_number, payload, location | PacketLocation.LAST)
        return count + 1

    def pop_front(self) -> DataPacket | None:
        return self._buffer.popleft() if self._buffer else None

    def front(self) -> DataPacket | None:
        return self._buffer[0] if self._buffer else None

    def is_empty(self) -> bool:
        return not self._buffer

    def __len__(self) -> int:
        return len(self._buffer)

    def timestamp_from(self, at: int) -> TimeStamp:
        return self._time_base.timestamp_from(at)

    def _begin_transmit(
        self, time: int, message_number: int, payload: bytes, location: PacketLocation
    ) -> None:
        seq_number = self._new_sequence_number()
        encryption = DataEncryption.NONE
        if self._crypto is not None:
            data = bytearray(payload)
            encryption = self._crypto.encrypt(seq_number, data)
            payload = bytes(data)
        self._buffer.append(
            DataPacket(
                seq_number=seq_number,
                message_loc=location,
                in_order_delivery=False,
                encryption=encryption,
                retransmitted=False,
                message_number=message_number,
                timestamp=self.timestamp_from(time),
                dest_sockid=self.remote_socket_id,
                payload=payload,
            )
        )

    def _new_message_number(self) -> int:
        number = self.next_message_number
        self.next_message_number = (number + 1) & _MSG_NUMBER_MASK
        return number

    def _new_sequence_number(self) -> SeqNumber:
        number = self.next_sequence_number
        self.next_sequence_number = number + 1
        return number


class SendBuffer:
    """Sent packets kept for retransmission until acknowledged."""

    def __init__(self, init_send_seq_num: SeqNumber) -> None:
        self._buffer: deque[DataPacket] = deque()
        self._first_seq = init_send_seq_num

    def release_acknowledged_packets(self, acknowledged: SeqNumber) -> None:
        """Drop every packet before ``acknowledged``."""
        while acknowledged > self._first_seq:
            if self._buffer:
                self._buffer.popleft()
            self._first_seq += 1

    def get(self, numbers: Iterable[SeqNumber]) -> Iterator[DataPacket]:
        """Yield the buffered packet for each number.

        Raises PacketNotBuffered on reaching a number that is not held.
        """
        for number in numbers:
            idx = number - self._first_seq
            if idx >= len(self._buffer):
                raise PacketNotBuffered(number)
            yield self._buffer[idx]

    def front(self) -> DataPacket | None:
        return self._buffer[0] if self._buffer else None

    def push_back(self, packet: DataPacket) -> None:
        self._buffer.append(packet)

    def __len__(self) -> int:
        return len(self._buffer)


class LossList:
    """Packets reported lost, queued for retransmission in order."""

    def __init__(self) -> None:
        self._packets: deque[DataPacket] = deque()

    def push_back(self, packet: DataPacket) -> None:
        self._packets.append(dataclasses.replace(packet, retransmitted=True))

    def pop_front(self) -> DataPacket | None:
        return self._packets.popleft() if self._packets else None

    def remove_acknowledged_packets(self, acknowledged: SeqNumber) -> int:
        """Drop packets before ``acknowledged``; returns how many were dropped."""
        removed = 0
        while self._packets and acknowledged > self._packets[0].seq_number:
            self._packets.popleft()
            removed += 1
        return removed

    def back(self) -> DataPacket | None:
        return self._packets[-1] if self._packets else None

    def is_empty(self) -> bool:
        return not self._packets

    def __len__(self) -> int:
        return len(self._packets)

    def __iter__(self) -> Iterator[DataPacket]:
        return iter(self._packets)