"""Log level abstraction mapping severities onto syslog codes.

Purpose
-------
Offer the four GELF-shippable severities together with the numeric syslog
code each one carries on the wire.

Contents
--------
* :class:`LogLevel` enum with name parsing and threshold helpers.

System Role
-----------
Used by the envelope builder to fill the ``level`` field and by the process
use case to drop events below the configured threshold.
"""

from __future__ import annotations

from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels; values are syslog severity codes."""

    DEBUG = 7
    INFO = 6
    WARN = 4
    ERROR = 3

    @property
    def severity(self) -> str:
        """Return the lowercase severity name."""

        return self.name.lower()

    @property
    def syslog_code(self) -> int:
        """Return the numeric syslog code written into the GELF ``level`` field."""

        return self.value

    def is_enabled_for(self, threshold: "LogLevel") -> bool:
        """Return ``True`` when this level is at least as severe as ``threshold``.

        Examples
        --------
        >>> LogLevel.ERROR.is_enabled_for(LogLevel.WARN)
        True
        >>> LogLevel.INFO.is_enabled_for(LogLevel.WARN)
        False
        """

        return self.value <= threshold.value

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc


_ALIASES = {"WARNING": "WARN"}


def coerce_level(level: str | LogLevel) -> LogLevel:
    """Normalise level inputs (string or enum) into :class:`LogLevel`.

    Examples
    --------
    >>> coerce_level("warning") is LogLevel.WARN
    True
    >>> coerce_level(LogLevel.ERROR) is LogLevel.ERROR
    True
    """
    if isinstance(level, LogLevel):
        return level
    if isinstance(level, str):
        return LogLevel.from_name(level)
    raise ValueError(f"Unknown log level: {level!r}")


__all__ = ["LogLevel", "coerce_level"]
