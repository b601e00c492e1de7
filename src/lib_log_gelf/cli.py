"""Click command line interface: ship one message or watch a collector port.

Purpose
-------
Give operators a quick way to verify a GELF path end-to-end: ``send`` pushes a
single record through the full sender pipeline, ``listen`` binds a UDP port
and renders whatever arrives with Rich.

Contents
--------
* :func:`cli` – root group with ``--traceback`` and ``--use-dotenv`` toggles.
* ``info`` / ``send`` / ``listen`` subcommands.
* :func:`main` – entry point delegating to :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as config_module
from .adapters import GelfUdpListener, RichConsoleAdapter, UdpTransport
from .application.use_cases.process_event import create_process_log_event
from .domain.chunks import DEFAULT_CHUNK_SIZE
from .domain.levels import LogLevel
from .domain.settings import DEFAULT_HOST, DEFAULT_PORT
from .lib_log_gelf import summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_LEVEL_CHOICES = click.Choice([level.severity for level in LogLevel] + ["warning"], case_sensitive=False)
_COMPRESSION_CHOICES = click.Choice(["zlib", "gzip", "none"], case_sensitive=False)


class _UtcClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def _parse_meta(values: Sequence[str]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--meta")
        metadata[key.strip()] = value
    return metadata


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command)
@click.option(
    "--traceback/--no-traceback",
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (also via {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Ship and inspect GELF records over UDP."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    env_toggle = os.getenv(config_module.DOTENV_ENV_VAR)
    if config_module.should_use_dotenv(explicit=explicit, env_value=env_toggle):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Collector host.")
@click.option("--port", default=DEFAULT_PORT, show_default=True, type=int, help="Collector UDP port.")
@click.option("--level", "level_name", default="info", show_default=True, type=_LEVEL_CHOICES)
@click.option("--app", default=None, help="Application identity for the GELF host field.")
@click.option("--compression", default="zlib", show_default=True, type=_COMPRESSION_CHOICES)
@click.option("--chunk-size", default=DEFAULT_CHUNK_SIZE, show_default=True, type=int)
@click.option("--meta", multiple=True, metavar="KEY=VALUE", help="Additional field; repeatable.")
def cli_send(
    message: str,
    host: str,
    port: int,
    level_name: str,
    app: str | None,
    compression: str,
    chunk_size: int,
    meta: tuple[str, ...],
) -> None:
    """Send MESSAGE as one GELF record."""

    metadata = _parse_meta(meta)
    settings = config_module.build_settings(
        host=host,
        port=port,
        compression=compression,
        app=app,
        metadata=tuple(metadata),
        chunk_size=chunk_size,
    )
    with UdpTransport(settings.host, settings.port) as transport:
        process = create_process_log_event(settings=settings, transport=transport, clock=_UtcClock())
        result = process(level=LogLevel.from_name(level_name), message=message, metadata=metadata)
    if result.get("reason") == "message_too_large":
        raise click.ClickException(f"Message too large ({result['size']} bytes); nothing was sent")
    if not result["ok"]:
        raise click.ClickException(f"Message not sent: {result['reason']}")
    click.echo(f"sent {result['datagrams']} datagram(s) to {settings.host}:{settings.port}")


@cli.command("listen", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--host", default="127.0.0.1", show_default=True, help="Address to bind.")
@click.option("--port", default=DEFAULT_PORT, show_default=True, type=int, help="UDP port to bind.")
@click.option("--count", default=None, type=int, help="Exit after this many records.")
@click.option("--no-color", is_flag=True, default=False, help="Disable colour output.")
def cli_listen(host: str, port: int, count: int | None, no_color: bool) -> None:
    """Print GELF records received on HOST:PORT."""

    console = RichConsoleAdapter(no_color=no_color)

    def render(record: dict[str, object]) -> None:
        console.emit(record, colorize=not no_color)

    with GelfUdpListener(host, port, on_record=render) as listener:
        listener.serve_forever(max_records=count)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli` and return the exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    unless ``restore_traceback`` is ``False``.
    """
    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
