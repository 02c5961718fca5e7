from __future__ import annotations

import secrets
import time
import uuid


def generate_id() -> str:
    """
    Return a time-ordered UUIDv7 string for primary keys.

    Used as a SQLAlchemy column default, so it must be callable with no
    arguments. Rows created later sort after earlier ones, which keeps
    audit and notification listings stable when timestamps tie.
    """
    unix_ms = time.time_ns() // 1_000_000
    value = (unix_ms & ((1 << 48) - 1)) << 80
    value |= secrets.randbits(80)
    # version 7 in bits 76-79, RFC 4122 variant in bits 62-63
    value = (value & ~(0xF << 76)) | (0x7 << 76)
    value = (value & ~(0x3 << 62)) | (0x2 << 62)
    return str(uuid.UUID(int=value))
