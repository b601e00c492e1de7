from __future__ import annotations

import socket
import threading
from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

import lib_log_gelf
from lib_log_gelf import config as log_config


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=200, color_system=None)


@pytest.fixture(autouse=True)
def reset_runtime(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        log_config.ENDPOINT_ENV_VAR,
        log_config.COMPRESSION_ENV_VAR,
        log_config.APP_ENV_VAR,
        log_config.METADATA_ENV_VAR,
        log_config.CHUNK_SIZE_ENV_VAR,
        log_config.LEVEL_ENV_VAR,
        log_config.DOTENV_ENV_VAR,
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    if lib_log_gelf.is_initialised():
        lib_log_gelf.shutdown()


class UdpSink:
    """Loopback UDP socket collecting raw datagrams on a background thread."""

    def __init__(self) -> None:
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, 8192 * 10)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.settimeout(0.1)
        self.port: int = self._sock.getsockname()[1]
        self.datagrams: list[bytes] = []
        self._arrived = threading.Condition()
        self._running = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)

    def start(self) -> None:
        self._running.set()
        self._thread.start()

    def close(self) -> None:
        self._running.clear()
        self._thread.join(timeout=1)
        self._sock.close()

    def wait_for(self, count: int, timeout: float = 2.0) -> list[bytes]:
        with self._arrived:
            self._arrived.wait_for(lambda: len(self.datagrams) >= count, timeout=timeout)
            return list(self.datagrams)

    def _run(self) -> None:
        while self._running.is_set():
            try:
                data = self._sock.recv(65535)
            except socket.timeout:
                continue
            except OSError:
                break
            with self._arrived:
                self.datagrams.append(data)
                self._arrived.notify_all()


@pytest.fixture
def udp_sink() -> Iterator[UdpSink]:
    sink = UdpSink()
    sink.start()
    try:
        yield sink
    finally:
        sink.close()
