"""Console port describing how received GELF records are rendered.

Purpose
-------
Define the abstraction for adapters that print decoded records to an
interactive terminal so the receive use case never touches Rich directly.

Contents
--------
* :class:`ConsolePort` – runtime-checkable protocol with a single ``emit``
  method supporting optional colour control.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConsolePort(Protocol):
    """Render a decoded GELF record to an interactive console."""

    def emit(self, record: Mapping[str, Any], *, colorize: bool) -> None:
        """Render ``record`` with optional colour control."""


__all__ = ["ConsolePort"]
