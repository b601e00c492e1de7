"""UDP listener feeding inbound datagrams through the receive use case."""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable
from typing import Any

from lib_log_gelf.application.use_cases.receive_datagram import RecordSink, create_receive_datagram
from lib_log_gelf.domain.errors import TransportError
from lib_log_gelf.domain.reassembly import ChunkReassembler

logger = logging.getLogger(__name__)

MAX_DATAGRAM_SIZE = 65535
RECEIVE_BUFFER_BYTES = 8192 * 10


class GelfUdpListener:
    """Receive GELF datagrams on one socket and hand out decoded records.

    Datagrams are processed one at a time on the serving thread, so the
    reassembly buffer never sees interleaved updates for the same message.

    Parameters
    ----------
    host, port:
        Bind address; port ``0`` picks a free port (see :attr:`address`).
    on_record:
        Callback receiving each decoded GELF object.
    reassembler:
        Optional pre-configured :class:`ChunkReassembler` (e.g. with ``ttl``).
    poll_interval:
        Socket timeout used to notice :meth:`stop` requests.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 12201,
        *,
        on_record: RecordSink | None = None,
        reassembler: ChunkReassembler | None = None,
        poll_interval: float = 0.2,
    ) -> None:
        self._reassembler = reassembler or ChunkReassembler()
        self._receive: Callable[[bytes], dict[str, Any] | None] = create_receive_datagram(
            reassembler=self._reassembler,
            on_record=on_record,
        )
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as exc:
            raise TransportError(f"cannot open UDP socket for {host}:{port}: {exc}") from exc
        try:
            self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, RECEIVE_BUFFER_BYTES)
            self._sock.settimeout(poll_interval)
            self._sock.bind((host, port))
        except OSError as exc:
            self._sock.close()
            raise TransportError(f"cannot bind GELF listener on {host}:{port}: {exc}") from exc
        self.address: tuple[str, int] = self._sock.getsockname()[:2]

    @property
    def reassembler(self) -> ChunkReassembler:
        return self._reassembler

    def handle(self, datagram: bytes) -> dict[str, Any] | None:
        """Process one datagram synchronously (exposed for tests and tooling)."""

        return self._receive(datagram)

    def serve_forever(self, *, max_records: int | None = None) -> int:
        """Receive until :meth:`stop` is called or ``max_records`` arrive.

        Returns the number of decoded records.
        """
        received = 0
        logger.info("GELF listener on %s:%d", self.address[0], self.address[1])
        while not self._stop_event.is_set():
            try:
                data, peer = self._sock.recvfrom(MAX_DATAGRAM_SIZE)
            except socket.timeout:
                continue
            except OSError:
                if self._stop_event.is_set():
                    break
                raise
            logger.debug("Datagram from %s (%d bytes)", peer, len(data))
            if self._receive(data) is not None:
                received += 1
                if max_records is not None and received >= max_records:
                    break
        return received

    def start(self) -> None:
        """Serve on a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.serve_forever, name="gelf-udp-listener", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 2.0) -> None:
        """Stop serving and close the socket."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            self._thread = None
        self._sock.close()

    def __enter__(self) -> "GelfUdpListener":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.stop()


__all__ = ["GelfUdpListener"]
