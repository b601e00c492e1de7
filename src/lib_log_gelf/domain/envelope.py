"""GELF envelope construction.

Purpose
-------
Turn a :class:`LogEvent` into the GELF 1.1 JSON object shape and serialise
it to bytes.

Contents
--------
* :func:`build_envelope` – event → ``dict`` following the GELF schema.
* :func:`serialize_envelope` – compact UTF-8 JSON encoding.
* :func:`epoch_seconds` – calendar timestamp → float seconds since epoch.

System Role
-----------
First stage of the sender pipeline; everything downstream treats the result
as opaque bytes.
"""

from __future__ import annotations

import calendar
import json
import math
import numbers
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from .events import LogEvent
from .levels import LogLevel

GELF_VERSION = "1.1"
SHORT_MESSAGE_LENGTH = 80

#: Additional field names GELF reserves for the server.
_RESERVED_FIELDS = frozenset({"_id"})


def epoch_seconds(ts: datetime) -> float:
    """Return ``ts`` as seconds since 1970-01-01T00:00:00Z with microseconds.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> epoch_seconds(datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc))
    1.5
    """
    whole = calendar.timegm(ts.utctimetuple())
    return whole + ts.microsecond / 1_000_000


def _field_value(value: Any) -> int | float | str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        number = float(value)
        # NaN and infinities have no JSON encoding.
        return number if math.isfinite(number) else str(value)
    return str(value)


def filter_metadata(metadata: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, int | float | str]:
    """Keep allow-listed keys, prefix them with ``_`` and coerce non-numbers to text.

    Examples
    --------
    >>> filter_metadata({"line": 42, "module": "x"}, {"line"})
    {'_line': 42}
    """
    allowed_keys = {str(key) for key in allowed}
    fields: dict[str, int | float | str] = {}
    for key, value in metadata.items():
        name = str(key)
        if name not in allowed_keys:
            continue
        field_name = f"_{name}"
        if field_name in _RESERVED_FIELDS:
            continue
        fields[field_name] = _field_value(value)
    return fields


def build_envelope(event: LogEvent, *, app: str, allowed_metadata: Iterable[str] = ()) -> dict[str, Any]:
    """Build the GELF object for ``event``.

    Parameters
    ----------
    event:
        Event to encode. Its timestamp is already normalised to UTC.
    app:
        Application identity placed in the ``host`` field.
    allowed_metadata:
        Metadata keys surfaced as additional ``_<name>`` fields.

    Raises
    ------
    ValueError
        When ``event.level`` is not one of the four shippable levels.
    """
    if not isinstance(event.level, LogLevel):
        raise ValueError(f"Unknown log level: {event.level!r}")
    message = event.message
    envelope: dict[str, Any] = {
        "version": GELF_VERSION,
        "timestamp": epoch_seconds(event.timestamp),
        "level": event.level.syslog_code,
        "host": app,
        "short_message": message[:SHORT_MESSAGE_LENGTH],
    }
    if len(message.encode("utf-8")) > SHORT_MESSAGE_LENGTH:
        envelope["full_message"] = message
    for key, value in filter_metadata(event.metadata, allowed_metadata).items():
        envelope.setdefault(key, value)
    return envelope


def serialize_envelope(envelope: Mapping[str, Any]) -> bytes:
    """Encode ``envelope`` as compact UTF-8 JSON."""

    return json.dumps(envelope, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


__all__ = [
    "GELF_VERSION",
    "SHORT_MESSAGE_LENGTH",
    "build_envelope",
    "epoch_seconds",
    "filter_metadata",
    "serialize_envelope",
]
