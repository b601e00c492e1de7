"""Configuration helpers: environment overrides and optional ``.env`` loading.

Purpose
-------
Translate call arguments plus ``LOG_GELF_*`` environment variables into a
frozen :class:`~lib_log_gelf.domain.settings.GelfSettings` snapshot, and offer
an opt-in loader for ``.env`` files so CLI users can keep endpoints out of
their shell profile.

Contents
--------
* :func:`build_settings` – arguments + environment → settings.
* :func:`parse_endpoint` / :func:`parse_metadata` – string parsers with
  precise error messages.
* :func:`enable_dotenv` / :func:`should_use_dotenv` – python-dotenv bridge.

System Role
-----------
Used by the runtime façade (:func:`lib_log_gelf.init`) and the CLI. Values
found in the environment take precedence over call arguments so deployments
can retarget a service without code changes.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .domain.chunks import DEFAULT_CHUNK_SIZE
from .domain.compression import Compression, coerce_compression
from .domain.levels import LogLevel, coerce_level
from .domain.settings import DEFAULT_HOST, DEFAULT_PORT, GelfSettings

DOTENV_ENV_VAR = "LOG_USE_DOTENV"
ENDPOINT_ENV_VAR = "LOG_GELF_ENDPOINT"
COMPRESSION_ENV_VAR = "LOG_GELF_COMPRESSION"
APP_ENV_VAR = "LOG_GELF_APP"
METADATA_ENV_VAR = "LOG_GELF_METADATA"
CHUNK_SIZE_ENV_VAR = "LOG_GELF_CHUNK_SIZE"
LEVEL_ENV_VAR = "LOG_GELF_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOCK = threading.Lock()
_DOTENV_LOADED: Path | None = None


def parse_endpoint(value: str) -> tuple[str, int]:
    """Parse ``HOST:PORT`` into a tuple.

    Examples
    --------
    >>> parse_endpoint("graylog.local:12201")
    ('graylog.local', 12201)
    >>> parse_endpoint("localhost")
    Traceback (most recent call last):
    ...
    ValueError: LOG_GELF_ENDPOINT must look like HOST:PORT, got 'localhost'
    """
    host, sep, port_str = value.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"{ENDPOINT_ENV_VAR} must look like HOST:PORT, got {value!r}")
    try:
        port = int(port_str)
    except ValueError as exc:
        raise ValueError(f"{ENDPOINT_ENV_VAR} port must be an integer, got {port_str!r}") from exc
    if port <= 0:
        raise ValueError(f"{ENDPOINT_ENV_VAR} port must be positive, got {port}")
    return host.strip("[]"), port


def parse_metadata(value: str) -> tuple[str, ...]:
    """Split a comma separated allow-list, ignoring blanks.

    Examples
    --------
    >>> parse_metadata("line, module,,function")
    ('line', 'module', 'function')
    """
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_chunk_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError as exc:
        raise ValueError(f"{CHUNK_SIZE_ENV_VAR} must be an integer, got {value!r}") from exc
    if size <= 0:
        raise ValueError(f"{CHUNK_SIZE_ENV_VAR} must be positive, got {size}")
    return size


def build_settings(
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    compression: str | Compression = Compression.ZLIB,
    app: str | None = None,
    metadata: Iterable[str] = (),
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    level: str | LogLevel = LogLevel.DEBUG,
) -> GelfSettings:
    """Merge arguments with ``LOG_GELF_*`` environment overrides.

    Raises
    ------
    ValueError
        For malformed endpoints, chunk sizes, compression names, or levels.
    """
    endpoint = os.getenv(ENDPOINT_ENV_VAR)
    if endpoint:
        host, port = parse_endpoint(endpoint)

    compression = os.getenv(COMPRESSION_ENV_VAR) or compression
    app = os.getenv(APP_ENV_VAR) or app
    raw_metadata = os.getenv(METADATA_ENV_VAR)
    allowed = parse_metadata(raw_metadata) if raw_metadata is not None else tuple(metadata)
    raw_chunk_size = os.getenv(CHUNK_SIZE_ENV_VAR)
    if raw_chunk_size:
        chunk_size = _parse_chunk_size(raw_chunk_size)
    level = os.getenv(LEVEL_ENV_VAR) or level

    settings = GelfSettings(
        host=host,
        port=port,
        compression=coerce_compression(compression),
        metadata=allowed,
        chunk_size=chunk_size,
        level=coerce_level(level),
    )
    if app:
        settings = settings.replace(app=app)
    return settings


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is enabled; an explicit flag wins.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalized = env_value.strip().lower()
    if normalized in _FALSY:
        return False
    return normalized in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` (searching upwards) without overriding variables.

    Returns the resolved path of the loaded file, or ``None`` when no file
    exists. Repeated calls reuse the first result.
    """
    global _DOTENV_LOADED
    with _DOTENV_LOCK:
        if _DOTENV_LOADED is not None:
            return _DOTENV_LOADED
        if search_from is not None:
            candidate = _find_upwards(search_from)
        else:
            found = find_dotenv(usecwd=True)
            candidate = Path(found).resolve() if found else None
        if candidate is None:
            return None
        load_dotenv(candidate, override=False)
        _DOTENV_LOADED = candidate
        return candidate


def _find_upwards(start: Path) -> Path | None:
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    with _DOTENV_LOCK:
        _DOTENV_LOADED = None


__all__ = [
    "APP_ENV_VAR",
    "CHUNK_SIZE_ENV_VAR",
    "COMPRESSION_ENV_VAR",
    "DOTENV_ENV_VAR",
    "ENDPOINT_ENV_VAR",
    "LEVEL_ENV_VAR",
    "METADATA_ENV_VAR",
    "build_settings",
    "enable_dotenv",
    "parse_endpoint",
    "parse_metadata",
    "should_use_dotenv",
]
