"""Use case decoding inbound datagrams into GELF records.

Malformed chunks, undecodable payloads, and records the sink fails on are
logged and discarded: UDP input is untrusted and lossy, so none of them is
fatal to the receiver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from lib_log_gelf.domain.decoder import decode_payload
from lib_log_gelf.domain.errors import DecodeError, MalformedChunkError
from lib_log_gelf.domain.reassembly import ChunkReassembler

logger = logging.getLogger(__name__)

RecordSink = Callable[[dict[str, Any]], None]


def create_receive_datagram(
    *,
    reassembler: ChunkReassembler,
    on_record: RecordSink | None = None,
) -> Callable[[bytes], dict[str, Any] | None]:
    """Return a callable feeding one datagram through reassembly and decoding.

    The callable returns the decoded record once a message completes and
    ``None`` while chunks are outstanding or when the datagram was discarded.

    Examples
    --------
    >>> records = []
    >>> receive = create_receive_datagram(reassembler=ChunkReassembler(), on_record=records.append)
    >>> receive(b'{"short_message":"hi"}')
    {'short_message': 'hi'}
    >>> receive(b"not json") is None
    True
    >>> len(records)
    1
    """

    def receive(datagram: bytes) -> dict[str, Any] | None:
        try:
            payload = reassembler.feed(datagram)
        except MalformedChunkError as exc:
            logger.warning("Discarding malformed chunk (%d bytes): %s", len(datagram), exc)
            return None
        if payload is None:
            return None
        try:
            record = decode_payload(payload)
        except DecodeError as exc:
            logger.warning("Discarding undecodable payload (%d bytes): %s", len(payload), exc)
            return None
        if on_record is not None:
            try:
                on_record(record)
            except Exception:  # noqa: BLE001 - one bad record must not stop the receiver
                logger.warning("Record sink failed for %d-byte payload", len(payload), exc_info=True)
        return record

    return receive


__all__ = ["RecordSink", "create_receive_datagram"]
