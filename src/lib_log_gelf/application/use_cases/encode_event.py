"""Turn one log event into the datagrams that carry it.

Purpose
-------
Expose the sender pipeline (envelope → JSON → compression → fragmentation) as
a single pure function of an event and a settings snapshot.

System Role
-----------
Called by the process use case for every shipped event and directly by tests
that need the exact bytes placed on the wire.
"""

from __future__ import annotations

from lib_log_gelf.domain.chunks import Fragmenter
from lib_log_gelf.domain.compression import compress
from lib_log_gelf.domain.envelope import build_envelope, serialize_envelope
from lib_log_gelf.domain.events import LogEvent
from lib_log_gelf.domain.settings import GelfSettings


def encode_payload(event: LogEvent, settings: GelfSettings) -> bytes:
    """Return the compressed, unfragmented payload for ``event``."""

    envelope = build_envelope(event, app=settings.app, allowed_metadata=settings.metadata)
    return compress(serialize_envelope(envelope), settings.compression)


def encode_event(event: LogEvent, settings: GelfSettings, fragmenter: Fragmenter) -> list[bytes]:
    """Return the datagrams carrying ``event``.

    Raises
    ------
    MessageTooLargeError
        When the compressed payload exceeds ``fragmenter.max_message_size``.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_gelf.domain import Compression, LogLevel
    >>> settings = GelfSettings(app="svc", compression=Compression.NONE)
    >>> event = LogEvent(LogLevel.DEBUG, "hello", datetime(2025, 1, 1, tzinfo=timezone.utc))
    >>> encode_event(event, settings, Fragmenter())
    [b'{"version":"1.1","timestamp":1735689600.0,"level":7,"host":"svc","short_message":"hello"}']
    """
    return fragmenter.fragment(encode_payload(event, settings))


__all__ = ["encode_event", "encode_payload"]
