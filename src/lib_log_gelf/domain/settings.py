"""Immutable configuration snapshot consumed by the sender pipeline."""

from __future__ import annotations

import socket
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .chunks import DEFAULT_CHUNK_SIZE, HEADER_LENGTH
from .compression import Compression
from .levels import LogLevel

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 12201


def default_app() -> str:
    """Return ``<program>@<hostname>`` as the default application identity."""
    program = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else ""
    hostname = socket.gethostname().split(".", 1)[0]
    return f"{program or 'python'}@{hostname or 'localhost'}"


@dataclass(slots=True, frozen=True)
class GelfSettings:
    """Destination, encoding, and filtering options for one GELF sender.

    Attributes
    ----------
    host, port:
        UDP destination of the collector.
    compression:
        Payload encoding applied before fragmentation.
    app:
        Application identity written into the GELF ``host`` field.
    metadata:
        Allow-list of metadata keys surfaced as ``_<name>`` fields.
    chunk_size:
        Datagram payload budget in bytes.
    level:
        Minimum severity shipped; less severe events are discarded.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    compression: Compression = Compression.ZLIB
    app: str = field(default_factory=default_app)
    metadata: tuple[str, ...] = ()
    chunk_size: int = DEFAULT_CHUNK_SIZE
    level: LogLevel = LogLevel.DEBUG

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be positive and below 65536, got {self.port}")
        if self.chunk_size <= HEADER_LENGTH:
            raise ValueError(f"chunk_size must be greater than {HEADER_LENGTH} bytes")
        object.__setattr__(self, "metadata", tuple(str(key) for key in self.metadata))

    def replace(self, **changes: Any) -> "GelfSettings":
        """Return a copy with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "GelfSettings", "default_app"]
