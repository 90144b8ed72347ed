"""Decoding of the ``com.apple.provenance`` extended attribute.

The attribute is a short binary blob. Bytes 0-2 are a format prefix that is
not interpreted; bytes 3-10 hold the signed 64-bit key of the responsible
application's row in the provenance tracking table, in native byte order.
Anything after byte 10 is ignored.
"""

from __future__ import annotations

import struct

from provscan.errors import MalformedTagError

TAG_ATTRIBUTE = "com.apple.provenance"
KEY_OFFSET = 3
KEY_SIZE = 8
MIN_TAG_LENGTH = KEY_OFFSET + KEY_SIZE

_KEY_FORMAT = struct.Struct("=q")
_UINT64_MASK = (1 << 64) - 1


def decode_key(blob: bytes) -> int:
    """Extract the provenance key from a raw attribute blob."""
    if len(blob) < MIN_TAG_LENGTH:
        raise MalformedTagError(len(blob))
    (key,) = _KEY_FORMAT.unpack_from(blob, KEY_OFFSET)
    return key


def encode_key(key: int, prefix: bytes = b"\x00\x00\x00") -> bytes:
    """Build a minimal attribute blob carrying ``key``."""
    if len(prefix) != KEY_OFFSET:
        raise ValueError(f"prefix must be {KEY_OFFSET} bytes")
    return prefix + _KEY_FORMAT.pack(key)


def format_key(key: int) -> str:
    """Render a key as its 64-bit two's-complement bit pattern, e.g. ``0x00000000000000ff``."""
    return f"0x{key & _UINT64_MASK:016x}"
