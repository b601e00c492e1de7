"""Public package surface: GELF over UDP for Python services.

Host code calls :func:`init` once, obtains loggers via :func:`get`, and calls
:func:`shutdown` on exit. The wire-level building blocks (envelope builder,
compressor, fragmenter, reassembler, decoder) are re-exported for collectors
and tests.
"""

from __future__ import annotations

from .adapters import GelfUdpListener, UdpTransport
from .application.use_cases.encode_event import encode_event
from .application.use_cases.receive_datagram import create_receive_datagram
from .domain import (
    ChunkReassembler,
    Compression,
    DecodeError,
    Fragmenter,
    GelfError,
    GelfSettings,
    LogEvent,
    LogLevel,
    MalformedChunkError,
    MessageTooLargeError,
    TransportError,
    build_envelope,
    decode_payload,
)
from .lib_log_gelf import LoggerProxy, current_settings, get, init, is_initialised, shutdown, summary_info

__all__ = [
    "ChunkReassembler",
    "Compression",
    "DecodeError",
    "Fragmenter",
    "GelfError",
    "GelfSettings",
    "GelfUdpListener",
    "LogEvent",
    "LogLevel",
    "LoggerProxy",
    "MalformedChunkError",
    "MessageTooLargeError",
    "TransportError",
    "UdpTransport",
    "build_envelope",
    "create_receive_datagram",
    "current_settings",
    "decode_payload",
    "encode_event",
    "get",
    "init",
    "is_initialised",
    "shutdown",
    "summary_info",
]
