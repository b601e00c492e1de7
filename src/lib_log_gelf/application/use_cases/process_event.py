"""Use case shipping a single log event to the collector.

Purpose
-------
Tie together level filtering, encoding, and transport, and translate the
size-exceeded condition into a diagnostic rather than an exception.

Contents
--------
* :func:`create_process_log_event` factory returning the runtime callable.
* ``_build_diagnostic_emitter`` wrapping the optional host hook.

System Role
-----------
Application-layer orchestrator invoked by :func:`lib_log_gelf.init` to turn
the configured dependencies into a callable logging pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from lib_log_gelf.application.ports import ClockPort, TransportPort
from lib_log_gelf.domain.chunks import Fragmenter
from lib_log_gelf.domain.errors import MessageTooLargeError
from lib_log_gelf.domain.events import LogEvent
from lib_log_gelf.domain.levels import LogLevel
from lib_log_gelf.domain.settings import GelfSettings

from .encode_event import encode_event

logger = logging.getLogger(__name__)

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
ProcessResult = dict[str, Any]
ProcessCallable = Callable[..., ProcessResult]


def _build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Callable[[str, dict[str, Any]], None]:
    def emit(name: str, payload: dict[str, Any]) -> None:
        if diagnostic is None:
            return
        try:
            diagnostic(name, payload)
        except Exception:  # noqa: BLE001 - hooks must never break logging
            logger.debug("Diagnostic hook raised for %s", name, exc_info=True)

    return emit


def create_process_log_event(
    *,
    settings: GelfSettings,
    transport: TransportPort,
    clock: ClockPort,
    fragmenter: Fragmenter | None = None,
    diagnostic: DiagnosticHook = None,
) -> ProcessCallable:
    """Build the callable that filters, encodes, and sends one event.

    Parameters
    ----------
    settings:
        Frozen configuration snapshot (destination, compression, allow-list,
        chunk size, threshold).
    transport:
        Adapter implementing :class:`TransportPort`.
    clock:
        Provider of the timestamp used when the caller supplies none.
    fragmenter:
        Optional pre-built :class:`Fragmenter`; defaults to one sized from
        ``settings.chunk_size`` with a secure random source.
    diagnostic:
        Optional callback receiving ``("below_threshold" | "message_too_large"
        | "emitted", payload)`` milestones.

    Returns
    -------
    Callable
        Function accepting ``level``, ``message``, optional ``metadata`` and
        ``timestamp``, returning a diagnostic dictionary.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> class DummyTransport:
    ...     def __init__(self):
    ...         self.sent = []
    ...     def send(self, datagram):
    ...         self.sent.append(datagram)
    ...     def close(self):
    ...         pass
    >>> class DummyClock:
    ...     def now(self):
    ...         return datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    >>> transport = DummyTransport()
    >>> process = create_process_log_event(
    ...     settings=GelfSettings(app="svc", level=LogLevel.INFO),
    ...     transport=transport,
    ...     clock=DummyClock(),
    ... )
    >>> process(level=LogLevel.DEBUG, message="noise")
    {'ok': False, 'reason': 'below_threshold'}
    >>> process(level=LogLevel.INFO, message="hello")
    {'ok': True, 'datagrams': 1}
    >>> len(transport.sent)
    1
    """

    emit = _build_diagnostic_emitter(diagnostic)
    chunker = fragmenter or Fragmenter(chunk_size=settings.chunk_size)

    def process(
        *,
        level: LogLevel,
        message: str | Iterable[Any],
        metadata: Mapping[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> ProcessResult:
        if not level.is_enabled_for(settings.level):
            emit("below_threshold", {"level": level.name, "threshold": settings.level.name})
            return {"ok": False, "reason": "below_threshold"}

        event = LogEvent(
            level=level,
            message=message,  # type: ignore[arg-type]
            timestamp=timestamp or clock.now(),
            metadata=metadata or {},
        )
        try:
            datagrams = encode_event(event, settings, chunker)
        except MessageTooLargeError as exc:
            logger.warning("Message too large (%d bytes, limit %d bytes), dropped", exc.size, exc.limit)
            emit("message_too_large", {"level": level.name, "size": exc.size, "limit": exc.limit})
            return {"ok": False, "reason": "message_too_large", "size": exc.size}

        for datagram in datagrams:
            transport.send(datagram)
        emit("emitted", {"level": level.name, "datagrams": len(datagrams)})
        return {"ok": True, "datagrams": len(datagrams)}

    return process


__all__ = ["DiagnosticHook", "ProcessCallable", "ProcessResult", "create_process_log_event"]
