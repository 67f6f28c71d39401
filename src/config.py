# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    DATABASE_URL: str = Field(default="sqlite:///./vacaytrack.db")
    SQL_ECHO: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # Overlapping submissions are accepted by default; admins decide.
    BLOCK_OVERLAPPING_REQUESTS: bool = Field(default=False)

    CORS_ORIGINS: list[str] = Field(default=["http://localhost:5173"])


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
