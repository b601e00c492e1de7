"""Domain entities, value objects, and wire-format logic of the GELF pipeline."""

from __future__ import annotations

from .chunks import Chunk, Fragmenter
from .compression import Compression
from .decoder import decode_payload
from .envelope import build_envelope, serialize_envelope
from .errors import DecodeError, GelfError, MalformedChunkError, MessageTooLargeError, TransportError
from .events import LogEvent
from .levels import LogLevel
from .reassembly import ChunkReassembler
from .settings import GelfSettings

__all__ = [
    "Chunk",
    "ChunkReassembler",
    "Compression",
    "DecodeError",
    "Fragmenter",
    "GelfError",
    "GelfSettings",
    "LogEvent",
    "LogLevel",
    "MalformedChunkError",
    "MessageTooLargeError",
    "TransportError",
    "build_envelope",
    "decode_payload",
    "serialize_envelope",
]
