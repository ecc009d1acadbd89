"""Tests for loading application settings from YAML."""

# ruff: noqa: PLR2004

from __future__ import annotations

from pathlib import Path

import pytest

from sqlconsole.core.cli import build_parser, load_cli_settings
from sqlconsole.core.config import DEFAULT_DATABASE_URL, DatabaseSettings, load_settings


def test_load_settings_parses_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "dev.yaml"
    config_path.write_text(
        """
server:
  host: 0.0.0.0
  port: 9000
query:
  rows_limit: 25
  null_text: "(null)"
database:
  url: sqlite:///console.db
  driver_name: sqlite+pysqlite
audit:
  log_statements: false
  redact_literals: true
  logs_dir: logs/audit
        """,
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.server.host == "0.0.0.0"
    assert settings.server.port == 9000
    assert settings.query.rows_limit == 25
    assert settings.query.null_text == "(null)"
    assert settings.database.url == "sqlite:///console.db"
    assert settings.database.driver_name == "sqlite+pysqlite"
    assert settings.audit.log_statements is False
    assert settings.audit.redact_literals is True
    assert settings.audit.logs_dir == "logs/audit"


def test_load_settings_applies_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    settings = load_settings(config_path)

    assert settings.server.port == 8080
    assert settings.query.rows_limit == 50
    assert settings.query.null_text == "NULL"
    assert settings.database.resolve_url() == DEFAULT_DATABASE_URL
    assert settings.audit.logs_dir is None


def test_negative_rows_limit_is_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("query:\n  rows_limit: -1\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(config_path)


def test_url_env_overrides_configured_url(monkeypatch: pytest.MonkeyPatch) -> None:
    settings = DatabaseSettings(url="sqlite://", url_env="CONSOLE_DB_URL")
    monkeypatch.setenv("CONSOLE_DB_URL", "sqlite:///from-env.db")

    assert settings.resolve_url() == "sqlite:///from-env.db"


def test_missing_url_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CONSOLE_DB_URL", raising=False)
    settings = DatabaseSettings(url="", url_env="CONSOLE_DB_URL")

    with pytest.raises(OSError):
        settings.resolve_url()


def test_command_line_overrides_file(tmp_path: Path) -> None:
    config_path = tmp_path / "dev.yaml"
    config_path.write_text(
        "query:\n  rows_limit: 10\ndatabase:\n  url_env: CONSOLE_DB_URL\n",
        encoding="utf-8",
    )
    args = build_parser("test").parse_args(
        [
            "--config",
            str(config_path),
            "--port",
            "9999",
            "--rows-limit",
            "3",
            "--data-source-name",
            "sqlite://",
        ]
    )

    settings = load_cli_settings(args)

    assert settings.server.port == 9999
    assert settings.query.rows_limit == 3
    assert settings.database.url == "sqlite://"
    assert settings.database.url_env is None
