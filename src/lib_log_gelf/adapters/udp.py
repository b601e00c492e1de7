"""UDP transport adapter implementing :class:`TransportPort`.

Purpose
-------
Own one datagram socket per destination and send each encoded unit as an
independent datagram.

Contents
--------
* :class:`UdpTransport` – fire-and-forget sender with a single-writer lock.

System Role
-----------
Last stage of the sender pipeline. The socket is opened and the destination
resolved once at construction; failure there is fatal for the runtime.
"""

from __future__ import annotations

import logging
import socket
import threading
from types import TracebackType

from lib_log_gelf.application.ports.transport import TransportPort
from lib_log_gelf.domain.errors import TransportError

logger = logging.getLogger(__name__)


class UdpTransport(TransportPort):
    """Send datagrams to ``(host, port)`` over a reused UDP socket.

    Parameters
    ----------
    host, port:
        Collector address. Resolved once, at construction.
    family:
        Address family; IPv4 unless told otherwise.

    Raises
    ------
    TransportError
        When the address cannot be resolved or the socket cannot be opened.
    """

    def __init__(self, host: str, port: int, *, family: int = socket.AF_INET) -> None:
        self._host = host
        self._port = port
        try:
            infos = socket.getaddrinfo(host, port, family, socket.SOCK_DGRAM)
        except OSError as exc:
            raise TransportError(f"cannot resolve GELF destination {host}:{port}: {exc}") from exc
        if not infos:
            raise TransportError(f"cannot resolve GELF destination {host}:{port}")
        resolved_family, sock_type, proto, _canon, address = infos[0]
        try:
            self._sock: socket.socket | None = socket.socket(resolved_family, sock_type, proto)
        except OSError as exc:
            raise TransportError(f"cannot open UDP socket for {host}:{port}: {exc}") from exc
        self._address = address
        self._lock = threading.Lock()
        logger.debug("GELF UDP transport ready for %s:%d (%s)", host, port, address[0])

    @property
    def address(self) -> tuple[str, int]:
        """Resolved destination address."""

        return self._address[0], self._address[1]

    def send(self, datagram: bytes) -> None:
        """Send ``datagram`` without waiting for any acknowledgement."""
        with self._lock:
            if self._sock is None:
                raise TransportError("transport is closed")
            try:
                self._sock.sendto(datagram, self._address)
            except OSError as exc:
                raise TransportError(f"sending {len(datagram)} bytes to {self._host}:{self._port} failed: {exc}") from exc

    def close(self) -> None:
        """Close the socket; further sends raise :class:`TransportError`."""
        with self._lock:
            if self._sock is not None:
                self._sock.close()
                self._sock = None

    def __enter__(self) -> "UdpTransport":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["UdpTransport"]
