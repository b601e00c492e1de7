"""Shutdown orchestration for the GELF sender.

Purpose
-------
Provide one teardown routine releasing the transport socket so the runtime
façade does not need to know which adapters hold resources.
"""

from __future__ import annotations

import logging
from typing import Callable

from lib_log_gelf.application.ports.transport import TransportPort

logger = logging.getLogger(__name__)


def create_shutdown(*, transport: TransportPort | None) -> Callable[[], None]:
    """Return a callable performing the shutdown sequence."""

    def shutdown() -> None:
        """Close the transport; sends are fire-and-forget so nothing is drained."""
        if transport is not None:
            transport.close()
            logger.debug("GELF transport closed")

    return shutdown


__all__ = ["create_shutdown"]
