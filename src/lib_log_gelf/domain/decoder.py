"""Decode a complete GELF payload into its JSON object."""

from __future__ import annotations

import json
import zlib
from typing import Any

from .compression import decompress, detect_compression
from .errors import DecodeError


def decode_payload(payload: bytes) -> dict[str, Any]:
    """Detect compression by magic bytes, decompress, and parse the GELF object.

    Examples
    --------
    >>> decode_payload(b'{"version":"1.1","short_message":"hi"}')["short_message"]
    'hi'
    >>> import zlib
    >>> decode_payload(zlib.compress(b'{"level":7}'))
    {'level': 7}
    """
    scheme = detect_compression(payload)
    try:
        raw = decompress(payload, scheme)
    except (zlib.error, OSError, EOFError) as exc:
        raise DecodeError(f"{scheme.value} decompression failed: {exc}") from exc
    try:
        message = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"payload is not valid GELF JSON: {exc}") from exc
    if not isinstance(message, dict):
        raise DecodeError(f"GELF payload must be a JSON object, got {type(message).__name__}")
    return message


__all__ = ["decode_payload"]
