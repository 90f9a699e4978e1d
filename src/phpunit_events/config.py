"""Configuration settings for phpunit-events."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``PHPUNIT_EVENTS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PHPUNIT_EVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"
    log_json_format: bool = False

    # Correlation
    strict_finish: bool = False  # raise on a finish with no stored record
    audit_open_keys: bool = True  # log tests still open when a run closes


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
