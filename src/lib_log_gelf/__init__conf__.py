"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

import sys
from typing import Callable

name = "lib_log_gelf"
title = "GELF over UDP: envelope building, chunking, and reassembly"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_gelf"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_gelf"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Write the metadata banner through ``writer`` (defaults to stdout).

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_gelf:\\n\\n'
    """
    write = writer or sys.stdout.write
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    write(f"Info for {name}:\n\n")
    for label, value in fields:
        write(f"    {label:<{pad}} = {value}\n")


__all__ = ["print_info", "shell_command", "version"]
