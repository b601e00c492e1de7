from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest
from click.testing import CliRunner

from lib_log_gelf import cli as cli_module
from lib_log_gelf import config as log_config
from lib_log_gelf.domain.compression import Compression
from lib_log_gelf.domain.levels import LogLevel


@pytest.fixture(autouse=True)
def _reset_dotenv_state() -> Iterator[None]:
    """Reset shared dotenv state around each test."""

    log_config._reset_dotenv_state_for_testing()
    yield
    log_config._reset_dotenv_state_for_testing()


def test_build_settings_uses_arguments_without_environment() -> None:
    settings = log_config.build_settings(host="collector", port=5000, compression="gzip", app="svc", metadata=["line"], level="info")

    assert (settings.host, settings.port) == ("collector", 5000)
    assert settings.compression is Compression.GZIP
    assert settings.app == "svc"
    assert settings.metadata == ("line",)
    assert settings.level is LogLevel.INFO


def test_build_settings_defaults() -> None:
    settings = log_config.build_settings()

    assert (settings.host, settings.port) == ("localhost", 12201)
    assert settings.compression is Compression.ZLIB
    assert settings.chunk_size == 1452
    assert settings.level is LogLevel.DEBUG
    assert "@" in settings.app


def test_environment_overrides_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(log_config.ENDPOINT_ENV_VAR, "graylog.internal:12345")
    monkeypatch.setenv(log_config.COMPRESSION_ENV_VAR, "none")
    monkeypatch.setenv(log_config.APP_ENV_VAR, "env-app")
    monkeypatch.setenv(log_config.METADATA_ENV_VAR, "line,module")
    monkeypatch.setenv(log_config.CHUNK_SIZE_ENV_VAR, "512")
    monkeypatch.setenv(log_config.LEVEL_ENV_VAR, "warning")

    settings = log_config.build_settings(host="ignored", port=1, compression="gzip", app="arg-app", metadata=["function"], chunk_size=2000)

    assert (settings.host, settings.port) == ("graylog.internal", 12345)
    assert settings.compression is Compression.NONE
    assert settings.app == "env-app"
    assert settings.metadata == ("line", "module")
    assert settings.chunk_size == 512
    assert settings.level is LogLevel.WARN


def test_empty_metadata_variable_clears_allow_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(log_config.METADATA_ENV_VAR, "")

    assert log_config.build_settings(metadata=["line"]).metadata == ()


@pytest.mark.parametrize(
    "value, message",
    [("nohost", "HOST:PORT"), ("host:abc", "must be an integer"), ("host:0", "must be positive")],
)
def test_bad_endpoint_is_rejected(monkeypatch: pytest.MonkeyPatch, value: str, message: str) -> None:
    monkeypatch.setenv(log_config.ENDPOINT_ENV_VAR, value)

    with pytest.raises(ValueError, match=message):
        log_config.build_settings()


def test_ipv6_endpoint_brackets_are_stripped() -> None:
    assert log_config.parse_endpoint("[::1]:12201") == ("::1", 12201)


@pytest.mark.parametrize("value", ["big", "-5"])
def test_bad_chunk_size_is_rejected(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv(log_config.CHUNK_SIZE_ENV_VAR, value)

    with pytest.raises(ValueError, match=log_config.CHUNK_SIZE_ENV_VAR):
        log_config.build_settings()


def test_unknown_compression_in_environment_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(log_config.COMPRESSION_ENV_VAR, "lz4")

    with pytest.raises(ValueError, match="Unknown compression"):
        log_config.build_settings()


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values without overriding call arguments."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_GELF_APP=dotenv-app\n")
    monkeypatch.chdir(nested)

    loaded = log_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["LOG_GELF_APP"] == "dotenv-app"
    assert log_config.build_settings(app="arg-app").app == "dotenv-app"

    os.environ.pop("LOG_GELF_APP", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    (tmp_path / ".env").write_text("LOG_GELF_APP=dotenv-app\n")
    monkeypatch.setenv("LOG_GELF_APP", "real-app")

    result = log_config.enable_dotenv(search_from=tmp_path)

    assert result == (tmp_path / ".env").resolve()
    assert os.environ["LOG_GELF_APP"] == "real-app"


def test_enable_dotenv_without_file_returns_none(tmp_path: Path) -> None:
    assert log_config.enable_dotenv(search_from=tmp_path) is None


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()

    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def record_enable(*args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr(log_config, "enable_dotenv", record_enable)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["info"], env={log_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env={log_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert calls == []

    result = runner.invoke(cli_module.cli, ["info"])
    assert result.exit_code == 0
    assert calls == []
