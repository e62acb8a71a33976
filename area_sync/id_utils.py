"""ID generation for areas created while offline.

Local identifiers follow the 12-byte ObjectId layout the remote service
uses, rendered as 24 lowercase hex characters:

    4 bytes  seconds since the epoch (big-endian)
    5 bytes  per-process random value
    3 bytes  counter, seeded randomly
"""

from __future__ import annotations

import itertools
import os
import re
import secrets
import time

_OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$")

_process_random = secrets.token_bytes(5)
_process_pid = os.getpid()
_counter = itertools.count(secrets.randbelow(0xFFFFFF))


def new_object_id() -> str:
    """Generate a collision-resistant 24-hex-character identifier."""
    global _process_random, _process_pid

    # Re-seed after fork so children never share the random segment
    if os.getpid() != _process_pid:
        _process_pid = os.getpid()
        _process_random = secrets.token_bytes(5)

    timestamp = int(time.time()) & 0xFFFFFFFF
    count = next(_counter) & 0xFFFFFF
    raw = timestamp.to_bytes(4, "big") + _process_random + count.to_bytes(3, "big")
    return raw.hex()


def is_object_id(value: str) -> bool:
    """Check whether a string looks like a 24-hex identifier."""
    return bool(_OBJECT_ID_RE.match(value))


def object_id_timestamp(value: str) -> int:
    """Extract the creation timestamp (seconds) from an identifier.

    Raises ValueError on malformed input.
    """
    if not is_object_id(value):
        raise ValueError(f"Malformed object ID: {value}")
    return int(value[:8], 16)
