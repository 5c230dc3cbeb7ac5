"""Tests for settings."""

from __future__ import annotations

from flagstore.core.config import DEFAULT_FLAG_TYPES, Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("FLAGSTORE_DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///./flagstore.db"
    assert settings.seed_default_flag_types is True
    assert settings.default_flag_types == DEFAULT_FLAG_TYPES
    assert settings.sqlite_busy_timeout == 30


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FLAGSTORE_DATABASE_URL", "postgresql+asyncpg://flags@db/flags")
    monkeypatch.setenv("FLAGSTORE_DEFAULT_FLAG_TYPES", '["star", "pin"]')
    monkeypatch.setenv("FLAGSTORE_SEED_DEFAULT_FLAG_TYPES", "false")

    settings = Settings(_env_file=None)

    assert settings.database_url == "postgresql+asyncpg://flags@db/flags"
    assert settings.default_flag_types == ["star", "pin"]
    assert settings.seed_default_flag_types is False
