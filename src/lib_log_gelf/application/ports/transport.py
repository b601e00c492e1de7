"""Port describing datagram transports used by the sender."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TransportPort(Protocol):
    """Deliver encoded datagrams to the collector, fire-and-forget."""

    def send(self, datagram: bytes) -> None:
        """Send one datagram; no acknowledgement is awaited."""

    def close(self) -> None:
        """Release the underlying socket."""


__all__ = ["TransportPort"]
