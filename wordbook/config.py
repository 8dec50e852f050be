"""
Configuration settings for the wordbook review engine.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with ``WORDBOOK_`` (e.g. ``WORDBOOK_LOG_LEVEL=DEBUG``).
"""
from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wordbook.core.errors import ConfigurationError
from wordbook.core.policies import DEFAULT_START_TIME, parse_start_time

DATA_DIR = Path.home() / ".wordbook"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORDBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default=f"sqlite:///{DATA_DIR / 'wordbook.db'}",
        description="SQLAlchemy connection string for review records and settings",
    )

    # ========================================
    # Review Checker
    # ========================================
    check_interval_seconds: int = Field(
        default=60,
        ge=1,
        description="Seconds between background review checks",
    )
    default_start_time: str = Field(
        default=DEFAULT_START_TIME,
        description="Start time (HH:MM) used when a policy has none configured",
    )
    notifications_enabled_by_default: bool = Field(
        default=True,
        description="Global notification permission before the user changes it",
    )
    timezone: str | None = Field(
        default=None,
        description="IANA zone for policy start times (None = system local zone)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("default_start_time")
    @classmethod
    def _validate_start_time(cls, value: str) -> str:
        try:
            parse_start_time(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Replace loguru's default sink with the configured stderr/file sinks."""
    settings = settings or get_settings()

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="5 MB",
            retention=3,
            encoding="utf-8",
        )
