"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

from tastypath.config import get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("TASTYPATH_DATABASE_PATH", raising=False)
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.database_path == Path("./data/tastypath.db")
    assert settings.api_token is None
    assert settings.log_level == "INFO"
    assert settings.log_requests is True
    assert settings.server_port == 8000


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TASTYPATH_DATABASE_PATH", str(tmp_path / "list.db"))
    monkeypatch.setenv("TASTYPATH_LOG_FORMAT", "json")
    monkeypatch.setenv("TASTYPATH_LOG_REQUESTS", "off")
    monkeypatch.setenv("TASTYPATH_SERVER_PORT", "9001")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.database_path == tmp_path / "list.db"
    assert settings.log_format == "json"
    assert settings.log_requests is False
    assert settings.server_port == 9001


def test_invalid_values_are_ignored(monkeypatch, caplog):
    monkeypatch.setenv("TASTYPATH_SERVER_PORT", "not-a-port")
    get_settings.cache_clear()

    with caplog.at_level("WARNING", logger="tastypath.config"):
        settings = get_settings()

    assert settings.server_port == 8000
    assert "TASTYPATH_SERVER_PORT" in caplog.text


def test_env_file_values(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TASTYPATH_LOG_LEVEL", raising=False)
    (tmp_path / ".env").write_text('TASTYPATH_LOG_LEVEL="DEBUG"\n# comment\nTASTYPATH_API_TOKEN=abc\n', encoding="utf-8")
    (tmp_path / ".env.local").write_text("TASTYPATH_API_TOKEN=local-token\n", encoding="utf-8")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.api_token == "local-token"
