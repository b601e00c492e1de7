"""Payload compression schemes understood by GELF collectors.

The scheme is a pure function of configuration: the compressor never inspects
the payload and never falls back to another scheme.
"""

from __future__ import annotations

import gzip
import zlib
from enum import Enum

ZLIB_MAGIC = 0x78
#: Second header byte emitted by zlib for the fastest/low/default/best levels.
ZLIB_LEVEL_BYTES = frozenset({0x01, 0x5E, 0x9C, 0xDA})
GZIP_MAGIC = b"\x1f\x8b"


class Compression(Enum):
    """Supported payload encodings."""

    ZLIB = "zlib"
    GZIP = "gzip"
    NONE = "none"

    @classmethod
    def from_name(cls, name: str) -> "Compression":
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown compression: {name!r} (expected gzip, zlib or none)") from exc


def coerce_compression(value: str | Compression) -> Compression:
    """Accept either the enum or its name."""
    if isinstance(value, Compression):
        return value
    return Compression.from_name(value)


def compress(data: bytes, scheme: Compression) -> bytes:
    """Return ``data`` encoded with ``scheme``.

    Examples
    --------
    >>> compress(b"{}", Compression.NONE)
    b'{}'
    >>> compress(b"{}", Compression.GZIP)[:2]
    b'\\x1f\\x8b'
    >>> compress(b"{}", Compression.ZLIB)[0] == ZLIB_MAGIC
    True
    """
    if scheme is Compression.ZLIB:
        return zlib.compress(data)
    if scheme is Compression.GZIP:
        return gzip.compress(data)
    return bytes(data)


def decompress(data: bytes, scheme: Compression) -> bytes:
    """Inverse of :func:`compress`."""
    if scheme is Compression.ZLIB:
        return zlib.decompress(data)
    if scheme is Compression.GZIP:
        return gzip.decompress(data)
    return bytes(data)


def detect_compression(payload: bytes) -> Compression:
    """Infer the scheme of a complete payload from its leading magic bytes."""
    if len(payload) >= 2 and payload[0] == ZLIB_MAGIC and payload[1] in ZLIB_LEVEL_BYTES:
        return Compression.ZLIB
    if payload[:2] == GZIP_MAGIC:
        return Compression.GZIP
    return Compression.NONE


__all__ = [
    "Compression",
    "GZIP_MAGIC",
    "ZLIB_MAGIC",
    "coerce_compression",
    "compress",
    "decompress",
    "detect_compression",
]
