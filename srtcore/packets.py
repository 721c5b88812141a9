"""Data packets and the flags they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

from .seq_number import SeqNumber
from .timing import TimeStamp


class PacketLocation(IntFlag):
    """Where a packet sits within its message."""

    LAST = 0b01
    FIRST = 0b10
    ONLY = FIRST | LAST


class DataEncryption(IntEnum):
    """Which key, if any, encrypted the payload."""

    NONE = 0b00
    EVEN = 0b01
    ODD = 0b10


@dataclass(frozen=True)
class DataPacket:
    """A data packet carrying part or all of one message."""

    seq_number: SeqNumber
    message_loc: PacketLocation = PacketLocation.ONLY
    in_order_delivery: bool = False
    encryption: DataEncryption = DataEncryption.NONE
    retransmitted: bool = False
    message_number: int = 0
    timestamp: TimeStamp = field(default_factory=lambda: TimeStamp(0))
    dest_sockid: int = 0
    payload: bytes = b""

    @property
    def is_first(self) -> bool:
        """True when this packet starts its message."""
        return PacketLocation.FIRST in self.message_loc

    @property
    def is_last(self) -> bool:
        """True when this packet ends its message."""
        return PacketLocation.LAST in self.message_loc