"""GELF chunk framing and the sender-side fragmenter.

Purpose
-------
Split payloads larger than one datagram into at most 128 framed chunks and
parse such frames back on the receiver side.

Contents
--------
* :class:`Chunk` – one framed fragment with ``encode``/``parse`` helpers.
* :class:`Fragmenter` – payload → list of datagrams, or
  :class:`~lib_log_gelf.domain.errors.MessageTooLargeError`.

System Role
-----------
Defines the bit-exact chunk header::

    0x1E 0x0F | message id (8 bytes) | index (1 byte) | count (1 byte) | body

Small payloads (``<= chunk_size``) are emitted unframed so they look exactly
like non-chunked traffic.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass

from .errors import MalformedChunkError, MessageTooLargeError

CHUNK_MAGIC = b"\x1e\x0f"
MESSAGE_ID_LENGTH = 8
HEADER_LENGTH = len(CHUNK_MAGIC) + MESSAGE_ID_LENGTH + 2
MAX_CHUNKS = 128
DEFAULT_CHUNK_SIZE = 1452

RandomSource = Callable[[int], bytes]

_ID_START = len(CHUNK_MAGIC)
_ID_END = _ID_START + MESSAGE_ID_LENGTH
_INDEX_OFFSET = _ID_END
_COUNT_OFFSET = _ID_END + 1


def is_chunk(datagram: bytes) -> bool:
    """Return ``True`` when ``datagram`` starts with the chunk magic bytes."""

    return datagram[:2] == CHUNK_MAGIC


@dataclass(slots=True, frozen=True)
class Chunk:
    """One framed fragment of an oversized payload."""

    message_id: bytes
    index: int
    count: int
    body: bytes

    def __post_init__(self) -> None:
        if len(self.message_id) != MESSAGE_ID_LENGTH:
            raise MalformedChunkError(f"message id must be {MESSAGE_ID_LENGTH} bytes, got {len(self.message_id)}")
        if not 1 <= self.count <= MAX_CHUNKS:
            raise MalformedChunkError(f"chunk count {self.count} outside 1..{MAX_CHUNKS}")
        if not 0 <= self.index < self.count:
            raise MalformedChunkError(f"chunk index {self.index} outside 0..{self.count - 1}")

    def encode(self) -> bytes:
        """Return the datagram bytes for this chunk."""

        return b"".join((CHUNK_MAGIC, self.message_id, bytes((self.index, self.count)), self.body))

    @classmethod
    def parse(cls, datagram: bytes) -> "Chunk":
        """Parse a framed datagram with explicit bounds checks.

        Examples
        --------
        >>> raw = Chunk(b"12345678", 1, 3, b"body").encode()
        >>> parsed = Chunk.parse(raw)
        >>> parsed.index, parsed.count, parsed.body
        (1, 3, b'body')
        """
        if not is_chunk(datagram):
            raise MalformedChunkError("datagram does not start with the chunk magic bytes")
        if len(datagram) < HEADER_LENGTH:
            raise MalformedChunkError(f"truncated chunk header ({len(datagram)} of {HEADER_LENGTH} bytes)")
        return cls(
            message_id=bytes(datagram[_ID_START:_ID_END]),
            index=datagram[_INDEX_OFFSET],
            count=datagram[_COUNT_OFFSET],
            body=bytes(datagram[HEADER_LENGTH:]),
        )


class Fragmenter:
    """Split compressed payloads into UDP-sized datagrams.

    Parameters
    ----------
    chunk_size:
        Datagram payload budget in bytes. Must leave room for the 12-byte header.
    random_source:
        Callable returning ``n`` random bytes; used for message ids. Defaults
        to :func:`secrets.token_bytes`.

    Examples
    --------
    >>> fragmenter = Fragmenter(chunk_size=20, random_source=lambda n: b"\\x00" * n)
    >>> fragmenter.part_size, fragmenter.max_message_size
    (8, 1024)
    >>> fragmenter.fragment(b"tiny")
    [b'tiny']
    >>> [len(d) for d in fragmenter.fragment(b"x" * 20)]
    [20]
    >>> [len(d) for d in fragmenter.fragment(b"x" * 21)]
    [20, 20, 17]
    """

    def __init__(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE, random_source: RandomSource | None = None) -> None:
        if chunk_size <= HEADER_LENGTH:
            raise ValueError(f"chunk_size must be greater than {HEADER_LENGTH} bytes")
        self._chunk_size = chunk_size
        self._random_source = random_source or secrets.token_bytes

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def part_size(self) -> int:
        return self._chunk_size - HEADER_LENGTH

    @property
    def max_message_size(self) -> int:
        return self.part_size * MAX_CHUNKS

    def fragment(self, payload: bytes) -> list[bytes]:
        """Return the datagrams carrying ``payload``.

        Raises
        ------
        MessageTooLargeError
            When ``payload`` would need more than 128 chunks.
        """
        size = len(payload)
        if size > self.max_message_size:
            raise MessageTooLargeError(size, self.max_message_size)
        if size <= self._chunk_size:
            return [bytes(payload)]

        part_size = self.part_size
        parts = [payload[offset : offset + part_size] for offset in range(0, size, part_size)]
        message_id = self._random_source(MESSAGE_ID_LENGTH)
        count = len(parts)
        return [Chunk(message_id, index, count, bytes(part)).encode() for index, part in enumerate(parts)]


__all__ = [
    "CHUNK_MAGIC",
    "Chunk",
    "DEFAULT_CHUNK_SIZE",
    "Fragmenter",
    "HEADER_LENGTH",
    "MAX_CHUNKS",
    "MESSAGE_ID_LENGTH",
    "RandomSource",
    "is_chunk",
]
