"""Domain event describing a single log call handed to the GELF pipeline.

Purpose
-------
Provide an immutable representation of ``(level, message, timestamp,
metadata)`` tuples so the envelope builder works on plain data.

Contents
--------
* :class:`LogEvent` dataclass.
* ``_as_utc`` helper interpreting timestamps as UTC.

System Role
-----------
Sits in the domain layer; produced once per log call by the runtime façade
(or any host integration) and consumed once by the encode use case.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .levels import LogLevel


def _as_utc(ts: datetime) -> datetime:
    """Return ``ts`` in UTC; naive values are taken to already be UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _join_fragments(message: str | Iterable[Any]) -> str:
    """Flatten a message given as nested text fragments into one string."""
    if isinstance(message, str):
        return message
    if isinstance(message, (bytes, bytearray)):
        return bytes(message).decode("utf-8")
    return "".join(_join_fragments(part) for part in message)


@dataclass(slots=True, frozen=True)
class LogEvent:
    """Immutable log event transported through the GELF pipeline.

    Attributes
    ----------
    level:
        :class:`LogLevel` severity associated with the event.
    message:
        Rendered message. Lists/tuples of fragments are joined on construction.
    timestamp:
        Time of the event, normalised to UTC with microsecond resolution.
    metadata:
        Shallow copy of caller-supplied key/value pairs; filtered later by
        the allow-list.
    """

    level: LogLevel
    message: str
    timestamp: datetime
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.level, LogLevel):
            raise ValueError(f"Unknown log level: {self.level!r}")
        object.__setattr__(self, "message", _join_fragments(self.message))
        object.__setattr__(self, "timestamp", _as_utc(self.timestamp))
        object.__setattr__(self, "metadata", dict(self.metadata))


__all__ = ["LogEvent"]
