"""Logging façade that wires domain, application, and adapter layers together.

Purpose
-------
Expose a minimal API (:func:`init`, :func:`get`, :func:`shutdown`) so host
applications can ship GELF records without touching the inner layers. This
module is the single composition point that turns keyword arguments and
environment overrides into a live sender.

Contents
--------
* :class:`LoggingRuntime` – captures the live wiring.
* :class:`LoggerProxy` – level helpers returning diagnostic dictionaries.
* Public API: :func:`init`, :func:`get`, :func:`shutdown`,
  :func:`is_initialised`, :func:`current_settings`, :func:`summary_info`.

System Role
-----------
Replaces a logging-framework subscription with an explicit call path: every
``LoggerProxy`` call becomes one ``(level, message, timestamp, metadata)``
event handed to the process use case.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable

from .adapters import UdpTransport
from .application.ports import ClockPort
from .application.use_cases.process_event import DiagnosticHook, ProcessCallable, create_process_log_event
from .application.use_cases.shutdown import create_shutdown
from .config import build_settings
from .domain.chunks import DEFAULT_CHUNK_SIZE, Fragmenter
from .domain.compression import Compression
from .domain.levels import LogLevel
from .domain.settings import DEFAULT_HOST, DEFAULT_PORT, GelfSettings


@dataclass(slots=True)
class LoggingRuntime:
    """Aggregate of live collaborators created by :func:`init`."""

    settings: GelfSettings
    process: ProcessCallable
    shutdown: Callable[[], None]


_STATE: LoggingRuntime | None = None
_STATE_LOCK = RLock()


class _SystemClock(ClockPort):
    """Concrete clock port returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class LoggerProxy:
    """Lightweight facade for GELF logging calls.

    Each helper records the caller's module, function, and line alongside the
    logger name as metadata; only keys on the configured allow-list reach the
    wire. Explicit ``metadata`` entries win over the captured ones.
    """

    def __init__(self, name: str, process: ProcessCallable) -> None:
        self._name = name
        self._process = process

    @property
    def name(self) -> str:
        return self._name

    def debug(self, message: str | Iterable[Any], *, metadata: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Emit a ``DEBUG`` message. See :meth:`_log` for return semantics."""
        return self._log(LogLevel.DEBUG, message, metadata)

    def info(self, message: str | Iterable[Any], *, metadata: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Emit an ``INFO`` message."""
        return self._log(LogLevel.INFO, message, metadata)

    def warn(self, message: str | Iterable[Any], *, metadata: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Emit a ``WARN`` message for notable but non-fatal conditions."""
        return self._log(LogLevel.WARN, message, metadata)

    warning = warn

    def error(self, message: str | Iterable[Any], *, metadata: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Emit an ``ERROR`` message."""
        return self._log(LogLevel.ERROR, message, metadata)

    def log(self, level: str | LogLevel, message: str | Iterable[Any], *, metadata: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Emit ``message`` at ``level`` given by name or enum."""
        resolved = level if isinstance(level, LogLevel) else LogLevel.from_name(level)
        return self._log(resolved, message, metadata)

    def _log(self, level: LogLevel, message: str | Iterable[Any], metadata: Mapping[str, Any] | None) -> dict[str, Any]:
        """Delegate to the process use case.

        Returns
        -------
        dict[str, Any]
            ``{"ok": True, "datagrams": n}`` on success, otherwise ``ok`` is
            ``False`` and ``reason`` names why the event was not sent.
        """
        frame = sys._getframe(2)
        captured: dict[str, Any] = {
            "logger": self._name,
            "module": frame.f_globals.get("__name__", "?"),
            "function": frame.f_code.co_name,
            "line": frame.f_lineno,
        }
        if metadata:
            captured.update(metadata)
        return self._process(level=level, message=message, metadata=captured)


def init(
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    compression: str | Compression = Compression.ZLIB,
    app: str | None = None,
    metadata: Iterable[str] = (),
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    level: str | LogLevel = LogLevel.DEBUG,
    diagnostic_hook: DiagnosticHook = None,
) -> GelfSettings:
    """Compose the GELF sender according to configuration inputs.

    Parameters
    ----------
    host, port:
        Collector destination; ``LOG_GELF_ENDPOINT`` (``host:port``) overrides.
    compression:
        ``"zlib"`` (default), ``"gzip"`` or ``"none"``; ``LOG_GELF_COMPRESSION``
        overrides.
    app:
        Application identity for the GELF ``host`` field (``LOG_GELF_APP``).
        Defaults to ``<program>@<hostname>``.
    metadata:
        Allow-list of metadata keys to ship (``LOG_GELF_METADATA``, comma
        separated). Captured keys are ``logger``, ``module``, ``function``,
        ``line``.
    chunk_size:
        Datagram payload budget (``LOG_GELF_CHUNK_SIZE``).
    level:
        Minimum severity shipped (``LOG_GELF_LEVEL``).
    diagnostic_hook:
        Callback receiving ``(name, payload)`` milestones such as
        ``message_too_large``. Exceptions raised by the hook are swallowed.

    Returns
    -------
    GelfSettings
        The effective settings after environment overrides.

    Raises
    ------
    RuntimeError
        When called twice without :func:`shutdown`.
    ValueError
        For invalid configuration values.
    TransportError
        When the UDP socket cannot be acquired.

    Examples
    --------
    >>> import lib_log_gelf as log  # doctest: +SKIP
    >>> log.init(app="svc", metadata=["line"])  # doctest: +SKIP
    >>> log.get("docs").info("ready")  # doctest: +SKIP
    {'ok': True, 'datagrams': 1}
    >>> log.shutdown()  # doctest: +SKIP
    """
    global _STATE
    with _STATE_LOCK:
        if _STATE is not None:
            raise RuntimeError("lib_log_gelf.init() cannot be called twice without shutdown(); call lib_log_gelf.shutdown() first")

        settings = build_settings(
            host=host,
            port=port,
            compression=compression,
            app=app,
            metadata=metadata,
            chunk_size=chunk_size,
            level=level,
        )
        transport = UdpTransport(settings.host, settings.port)
        process = create_process_log_event(
            settings=settings,
            transport=transport,
            clock=_SystemClock(),
            fragmenter=Fragmenter(chunk_size=settings.chunk_size),
            diagnostic=diagnostic_hook,
        )
        _STATE = LoggingRuntime(settings=settings, process=process, shutdown=create_shutdown(transport=transport))
        return settings


def _require_state() -> LoggingRuntime:
    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("lib_log_gelf.init() must be called before using the logging API")
        return _STATE


def get(name: str) -> LoggerProxy:
    """Return a logger proxy bound to the configured runtime."""

    return LoggerProxy(name, _require_state().process)


def is_initialised() -> bool:
    """Return ``True`` when :func:`init` has been called."""

    with _STATE_LOCK:
        return _STATE is not None


def current_settings() -> GelfSettings:
    """Return the settings snapshot of the active runtime."""

    return _require_state().settings


def shutdown() -> None:
    """Release the UDP socket and clear the runtime.

    Raises
    ------
    RuntimeError
        When no runtime is active.
    """
    global _STATE
    with _STATE_LOCK:
        runtime = _require_state()
        runtime.shutdown()
        _STATE = None


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> banner = summary_info()
    >>> "version" in banner
    True
    """
    from . import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = [
    "LoggerProxy",
    "LoggingRuntime",
    "current_settings",
    "get",
    "init",
    "is_initialised",
    "shutdown",
    "summary_info",
]
