"""
Application settings using Pydantic.

Provides environment-based configuration loading with VHOSTCTL_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment settings that override the config file."""

    model_config = SettingsConfigDict(
        env_prefix="VHOSTCTL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Explicit config file (same as --config)
    config_file: str | None = None

    # Registry location (same as --registry)
    registry_path: str | None = None

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
