"""Handshake cookies derived from a peer address and the current time."""

from __future__ import annotations

import hashlib
import time


def _format_address(address: tuple) -> str:
    host, port = address[0], address[1]
    if ":" in str(host):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def gen_cookie(address: tuple, now: float | None = None) -> int:
    """Hash ``address`` and the time into a signed 32-bit cookie.

    ``now`` is seconds since the Unix epoch and defaults to the current time.
    """
    seconds = int(time.time() if now is None else now)
    if seconds < 0:
        raise ValueError("time was before the unix epoch")
    time_mins = seconds * 60

    material = f"{_format_address(address)}|{time_mins}".encode()
    digest = hashlib.blake2b(material, digest_size=8).digest()
    raw = int.from_bytes(digest, "little") & 0xFFFFFFFF
    return raw - (1 << 32) if raw >= (1 << 31) else raw