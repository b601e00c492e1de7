"""Rich-powered console adapter implementing :class:`ConsolePort`.

Purpose
-------
Render GELF records received by the listener as one styled line each.

Contents
--------
* :data:`_STYLE_MAP` - default syslog-code-to-style mapping.
* :class:`RichConsoleAdapter` - adapter used by ``lib_log_gelf listen``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from rich.console import Console

from lib_log_gelf.application.ports.console import ConsolePort
from lib_log_gelf.domain.levels import LogLevel


#: Default Rich styles keyed by GELF ``level`` value.
_STYLE_MAP: Mapping[int, str] = {
    LogLevel.DEBUG.syslog_code: "dim",
    LogLevel.INFO.syslog_code: "cyan",
    LogLevel.WARN.syslog_code: "yellow",
    LogLevel.ERROR.syslog_code: "red",
}

_CORE_FIELDS = ("version", "host", "short_message", "full_message", "timestamp", "level")


class RichConsoleAdapter(ConsolePort):
    """Render GELF records using Rich formatting with style overrides."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[LogLevel | str, str] | None = None,
    ) -> None:
        """Configure the console adapter with colour and style overrides."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color, no_color=no_color)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            level = LogLevel.from_name(key) if isinstance(key, str) else key
            merged[level.syslog_code] = value
        self._style_map = merged

    def emit(self, record: Mapping[str, Any], *, colorize: bool) -> None:
        """Print ``record`` using Rich with optional colour.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> adapter = RichConsoleAdapter(console=console)
        >>> adapter.emit({"level": 6, "host": "svc", "short_message": "msg", "_line": 3}, colorize=False)
        >>> 'msg' in console.export_text()
        True
        """
        code = _level_code(record.get("level"))
        style = self._style_map.get(code, "") if colorize and not self._no_color and code is not None else ""
        self._console.print(self._format_line(record), style=style, highlight=False, markup=False)

    @staticmethod
    def _format_line(record: Mapping[str, Any]) -> str:
        """Return a human-friendly console line for ``record``.

        Examples
        --------
        >>> RichConsoleAdapter._format_line({"level": 4, "host": "svc", "short_message": "careful", "timestamp": 0.0})
        '1970-01-01T00:00:00+00:00     WARN svc careful'
        """
        when = _format_time(record.get("timestamp"))
        level = _level_name(record.get("level"))
        message = record.get("full_message") or record.get("short_message", "")
        extras = {key: value for key, value in record.items() if key not in _CORE_FIELDS}
        extras_str = "" if not extras else " " + " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{when} {level:>8} {record.get('host', '-')} {message}{extras_str}"


def _level_code(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _level_name(value: Any) -> str:
    code = _level_code(value)
    if code is None:
        return "?" if value is None else str(value)
    try:
        return LogLevel(code).name
    except ValueError:
        return str(code)


def _format_time(value: Any) -> str:
    """Render a GELF timestamp; anything that is not a usable epoch value becomes ``-``.

    Examples
    --------
    >>> _format_time("abc"), _format_time(1e20), _format_time(None)
    ('-', '-', '-')
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "-"
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return "-"


__all__ = ["RichConsoleAdapter"]
