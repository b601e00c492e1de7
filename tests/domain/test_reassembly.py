from __future__ import annotations

import os
import random
import threading

import pytest

from lib_log_gelf.domain.chunks import CHUNK_MAGIC, Chunk, Fragmenter
from lib_log_gelf.domain.errors import MalformedChunkError
from lib_log_gelf.domain.reassembly import ChunkReassembler


def _feed_all(reassembler: ChunkReassembler, datagrams: list[bytes]) -> list[bytes]:
    completed = []
    for datagram in datagrams:
        payload = reassembler.feed(datagram)
        if payload is not None:
            completed.append(payload)
    return completed


def test_unframed_datagram_passes_through() -> None:
    assert ChunkReassembler().feed(b'{"a":1}') == b'{"a":1}'


def test_chunks_in_order_reassemble() -> None:
    payload = os.urandom(1000)
    datagrams = Fragmenter(chunk_size=112).fragment(payload)

    assert _feed_all(ChunkReassembler(), datagrams) == [payload]


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_chunks_in_any_order_reassemble(seed: int) -> None:
    payload = os.urandom(1000)
    datagrams = Fragmenter(chunk_size=112).fragment(payload)
    random.Random(seed).shuffle(datagrams)
    reassembler = ChunkReassembler()

    assert _feed_all(reassembler, datagrams) == [payload]
    assert reassembler.pending == 0


def test_interleaved_messages_are_kept_apart() -> None:
    fragmenter = Fragmenter(chunk_size=20)
    first, second = os.urandom(60), os.urandom(45)
    a, b = fragmenter.fragment(first), fragmenter.fragment(second)
    interleaved = [d for pair in zip(a, b) for d in pair] + a[len(b) :]

    assert sorted(_feed_all(ChunkReassembler(), interleaved)) == sorted([first, second])


def test_duplicate_chunk_does_not_complete_early() -> None:
    datagrams = Fragmenter(chunk_size=20).fragment(b"0123456789" * 3)
    reassembler = ChunkReassembler()

    assert reassembler.feed(datagrams[0]) is None
    assert reassembler.feed(datagrams[0]) is None
    assert reassembler.pending == 1
    assert _feed_all(reassembler, datagrams[1:]) == [b"0123456789" * 3]


def test_count_mismatch_is_malformed() -> None:
    message_id = b"\xaa" * 8
    reassembler = ChunkReassembler()
    reassembler.feed(Chunk(message_id, 0, 3, b"a").encode())

    with pytest.raises(MalformedChunkError, match="disagrees"):
        reassembler.feed(Chunk(message_id, 1, 4, b"b").encode())


def test_truncated_chunk_is_malformed() -> None:
    with pytest.raises(MalformedChunkError):
        ChunkReassembler().feed(CHUNK_MAGIC + b"\x00" * 4)


def test_incomplete_messages_are_kept_without_bounds() -> None:
    reassembler = ChunkReassembler()
    for n in range(50):
        reassembler.feed(Chunk(n.to_bytes(8, "big"), 0, 2, b"x").encode())

    assert reassembler.pending == 50


def test_ttl_evicts_stale_messages() -> None:
    now = [0.0]
    reassembler = ChunkReassembler(ttl=5.0, clock=lambda: now[0])
    reassembler.feed(Chunk(b"\x01" * 8, 0, 2, b"x").encode())
    now[0] = 10.0
    reassembler.feed(Chunk(b"\x02" * 8, 0, 2, b"y").encode())

    assert reassembler.pending == 1
    assert reassembler.feed(Chunk(b"\x01" * 8, 1, 2, b"z").encode()) is None


def test_max_pending_evicts_oldest() -> None:
    reassembler = ChunkReassembler(max_pending=2)
    for n in range(3):
        reassembler.feed(Chunk(bytes([n]) * 8, 0, 2, b"x").encode())

    assert reassembler.pending == 2
    assert reassembler.feed(Chunk(b"\x00" * 8, 1, 2, b"y").encode()) is None
    assert reassembler.feed(Chunk(b"\x02" * 8, 1, 2, b"y").encode()) == b"xy"


@pytest.mark.parametrize("kwargs", [{"ttl": 0}, {"max_pending": 0}])
def test_bounds_must_be_positive(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        ChunkReassembler(**kwargs)


def test_clear_drops_pending() -> None:
    reassembler = ChunkReassembler()
    reassembler.feed(Chunk(b"\x05" * 8, 0, 2, b"x").encode())
    reassembler.clear()

    assert reassembler.pending == 0


def test_concurrent_feeding_reassembles_every_message() -> None:
    fragmenter = Fragmenter(chunk_size=20)
    payloads = [os.urandom(80) for _ in range(20)]
    reassembler = ChunkReassembler()
    results: list[bytes] = []
    lock = threading.Lock()

    def worker(payload: bytes) -> None:
        for datagram in reversed(fragmenter.fragment(payload)):
            completed = reassembler.feed(datagram)
            if completed is not None:
                with lock:
                    results.append(completed)

    threads = [threading.Thread(target=worker, args=(p,)) for p in payloads]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == sorted(payloads)
