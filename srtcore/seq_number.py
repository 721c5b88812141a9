"""Packet sequence numbers: 31-bit values that wrap around."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import ClassVar, Iterator

_BITS = 31
_MODULUS = 1 << _BITS
_MASK = _MODULUS - 1
_HALF = _MODULUS >> 1


@total_ordering
@dataclass(frozen=True)
class SeqNumber:
    """A sequence number with modular arithmetic and wrap-aware ordering."""

    value: int

    MAX_VALUE: ClassVar[int] = _MASK

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _MASK:
            raise ValueError(f"sequence number {self.value} out of range 0..{_MASK}")

    @classmethod
    def new_truncate(cls, value: int) -> SeqNumber:
        """Build a sequence number from the low 31 bits of ``value``."""
        return cls(value & _MASK)

    def as_raw(self) -> int:
        return self.value

    def __add__(self, other: int) -> SeqNumber:
        if not isinstance(other, int):
            return NotImplemented
        return SeqNumber((self.value + other) & _MASK)

    __radd__ = __add__

    def __sub__(self, other: SeqNumber | int) -> SeqNumber | int:
        """Distance to another sequence number, or a sequence number moved back."""
        if isinstance(other, SeqNumber):
            return (self.value - other.value) & _MASK
        if isinstance(other, int):
            return SeqNumber((self.value - other) & _MASK)
        return NotImplemented

    def __mod__(self, other: int) -> int:
        return self.value % other

    def __lt__(self, other: SeqNumber) -> bool:
        if not isinstance(other, SeqNumber):
            return NotImplemented
        distance = (other.value - self.value) & _MASK
        return 0 < distance < _HALF

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


def seq_num_range(begin: SeqNumber, past_end: SeqNumber) -> Iterator[SeqNumber]:
    """Yield sequence numbers from ``begin`` up to, but excluding, ``past_end``."""
    current = begin
    while current != past_end:
        yield current
        current += 1