"""
Configuration Management for WorkWorth

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here. Every value has a default so the
package works with no environment at all; a `.env` file or `WORKWORTH_*`
variables override them.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkworthSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="WORKWORTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (allows the month offset control)"
    )

    # Storage
    storage_path: Path = Field(
        default=Path.home() / ".workworth" / "settings.json",
        description="Location of the JSON key-value store"
    )
    cascade_max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a label cascade before giving up"
    )

    # Calculation
    hours_per_workday: int = Field(
        default=8,
        ge=1,
        le=24,
        description="Assumed working hours in one day"
    )
    month_key_format: str = Field(
        default="%B %Y",
        description="strftime format of the month-year bucket"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    log_json: bool = Field(
        default=True,
        description="Render log lines as JSON (console renderer otherwise)"
    )

    @field_validator('storage_path')
    @classmethod
    def expand_storage_path(cls, v: Path) -> Path:
        """Expand a leading ~ so env values like ~/data/ww.json work."""
        return v.expanduser()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level


@lru_cache()
def get_settings() -> WorkworthSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return WorkworthSettings()
