"""Connection liveness: expiry counting and keep-alive scheduling.

Instants and durations are integer microseconds on a monotonic clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .timing import Timer

log = logging.getLogger(__name__)

EXP_PERIOD = 500_000
KEEPALIVE_PERIOD = 1_000_000
EXP_LIMIT = 16


@dataclass(frozen=True)
class ContinueUntil:
    """Nothing to do before ``instant``."""

    instant: int


@dataclass(frozen=True)
class SendKeepAlive:
    """A keep-alive packet should be sent now."""


@dataclass(frozen=True)
class Close:
    """The peer timed out; the connection should close."""


ConnectionAction = Union[ContinueUntil, SendKeepAlive, Close]


class Connection:
    """Tracks packets to and from the remote to detect timeouts and send keep-alives."""

    def __init__(self, socket_start_time: int) -> None:
        self.exp_count = 1
        self._exp_timer = Timer(EXP_PERIOD, socket_start_time)
        self._keepalive_timer = Timer(KEEPALIVE_PERIOD, socket_start_time)

    def on_packet(self, now: int) -> None:
        """A packet arrived from the remote."""
        self.exp_count = 1
        self._exp_timer.reset(now)

    def on_send(self, now: int) -> None:
        """A packet was sent to the remote."""
        self._keepalive_timer.reset(now)

    def next_action(self, now: int) -> ConnectionAction:
        expired = self._exp_timer.check_expired(now)
        if expired is not None:
            self.exp_count += 1
            log.info("Exp event hit, exp count=%d", self.exp_count)
            if self.exp_count == EXP_LIMIT:
                log.info("%d exps, timeout!", EXP_LIMIT)
            self._exp_timer.reset(expired)

        expired = self._keepalive_timer.check_expired(now)
        if expired is not None:
            self._keepalive_timer.reset(expired)
            return SendKeepAlive()

        if self.exp_count >= EXP_LIMIT:
            return Close()
        return ContinueUntil(
            min(self._exp_timer.next_instant(), self._keepalive_timer.next_instant())
        )