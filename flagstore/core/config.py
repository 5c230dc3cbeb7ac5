"""Flag store configuration using pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FLAG_TYPES = ["like", "follow", "favorite", "bookmark", "upvote", "downvote"]


class Settings(BaseSettings):
    """Flag store settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLAGSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./flagstore.db",
        description="Database connection URL",
    )
    sqlite_busy_timeout: int = Field(
        default=30,
        ge=0,
        description="Seconds a SQLite connection waits on a locked database",
    )

    # Seed data
    seed_default_flag_types: bool = Field(
        default=True,
        description="Insert the default flag type vocabulary on bootstrap",
    )
    default_flag_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FLAG_TYPES),
        description="Flag type names inserted on bootstrap",
    )


# Global settings instance
settings = Settings()
