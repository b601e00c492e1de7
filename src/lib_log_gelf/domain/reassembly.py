"""Receiver-side chunk reassembly.

Purpose
-------
Regroup framed chunks by message id, independent of arrival order, and hand
out the complete payload once every slot is filled.

Contents
--------
* :class:`ChunkReassembler` – thread-safe reassembly state machine.

System Role
-----------
First stage of the receiver pipeline. Unframed datagrams pass straight
through; framed ones are buffered until complete.

Alignment Notes
---------------
Without ``ttl``/``max_pending`` an incomplete message stays buffered until its
final chunk arrives, so a sender that loses a chunk leaks that entry for the
lifetime of the reassembler. Both bounds are opt-in.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from .chunks import Chunk, is_chunk
from .errors import MalformedChunkError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Pending:
    slots: list[bytes | None]
    created: float
    filled: int = 0


class ChunkReassembler:
    """Buffer chunks per message id until each message is complete.

    Parameters
    ----------
    ttl:
        Optional lifetime in seconds for an incomplete message, measured from
        its first chunk. ``None`` keeps entries until completion.
    max_pending:
        Optional cap on concurrently incomplete messages; the oldest entry is
        evicted when a new message id would exceed it.
    clock:
        Monotonic clock used for ``ttl`` bookkeeping.

    Examples
    --------
    >>> from lib_log_gelf.domain.chunks import Fragmenter
    >>> datagrams = Fragmenter(chunk_size=16).fragment(b"0123456789")
    >>> reassembler = ChunkReassembler()
    >>> [reassembler.feed(d) for d in reversed(datagrams)]
    [None, None, b'0123456789']
    >>> reassembler.pending
    0
    """

    def __init__(
        self,
        *,
        ttl: float | None = None,
        max_pending: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_pending is not None and max_pending <= 0:
            raise ValueError("max_pending must be positive")
        self._ttl = ttl
        self._max_pending = max_pending
        self._clock = clock
        self._buffers: OrderedDict[bytes, _Pending] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Number of messages still waiting for chunks."""

        with self._lock:
            return len(self._buffers)

    def feed(self, datagram: bytes) -> bytes | None:
        """Consume one datagram and return a complete payload when available.

        Raises
        ------
        MalformedChunkError
            When a framed datagram has an invalid header or disagrees with
            earlier chunks of the same message about the chunk count.
        """
        if not is_chunk(datagram):
            return bytes(datagram)
        chunk = Chunk.parse(datagram)
        with self._lock:
            now = self._clock()
            self._expire(now)
            return self._store(chunk, now)

    def _store(self, chunk: Chunk, now: float) -> bytes | None:
        entry = self._buffers.get(chunk.message_id)
        if entry is None:
            self._make_room()
            entry = _Pending(slots=[None] * chunk.count, created=now)
            self._buffers[chunk.message_id] = entry
        elif len(entry.slots) != chunk.count:
            raise MalformedChunkError(
                f"chunk count {chunk.count} disagrees with {len(entry.slots)} for message {chunk.message_id.hex()}"
            )

        if entry.slots[chunk.index] is None:
            entry.filled += 1
        entry.slots[chunk.index] = chunk.body

        if entry.filled < len(entry.slots):
            return None
        del self._buffers[chunk.message_id]
        return b"".join(part for part in entry.slots if part is not None)

    def _expire(self, now: float) -> None:
        if self._ttl is None:
            return
        cutoff = now - self._ttl
        while self._buffers:
            message_id, entry = next(iter(self._buffers.items()))
            if entry.created > cutoff:
                break
            del self._buffers[message_id]
            logger.debug("Evicted incomplete message %s after %.3fs (%d/%d chunks)", message_id.hex(), self._ttl, entry.filled, len(entry.slots))

    def _make_room(self) -> None:
        if self._max_pending is None:
            return
        while len(self._buffers) >= self._max_pending:
            message_id, entry = self._buffers.popitem(last=False)
            logger.debug("Evicted incomplete message %s to respect max_pending=%d (%d/%d chunks)", message_id.hex(), self._max_pending, entry.filled, len(entry.slots))

    def clear(self) -> None:
        """Drop every incomplete message."""

        with self._lock:
            self._buffers.clear()


__all__ = ["ChunkReassembler"]
