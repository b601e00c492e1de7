"""Exception hierarchy shared by the sender and receiver pipelines."""

from __future__ import annotations


class GelfError(Exception):
    """Base class for all errors raised by :mod:`lib_log_gelf`."""


class MessageTooLargeError(GelfError):
    """Compressed payload exceeds the 128-chunk ceiling and was not sent."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Message too large ({size} bytes, limit {limit} bytes)")
        self.size = size
        self.limit = limit


class MalformedChunkError(GelfError):
    """A framed datagram carries an invalid or truncated chunk header."""


class DecodeError(GelfError):
    """A complete payload could not be decompressed or parsed as a GELF object."""


class TransportError(GelfError):
    """The UDP socket could not be acquired or a send failed."""


__all__ = [
    "DecodeError",
    "GelfError",
    "MalformedChunkError",
    "MessageTooLargeError",
    "TransportError",
]
