"""Concrete adapters implementing the application ports."""

from __future__ import annotations

from .console.rich_console import RichConsoleAdapter
from .listener import GelfUdpListener
from .udp import UdpTransport

__all__ = ["GelfUdpListener", "RichConsoleAdapter", "UdpTransport"]
