"""
Configuration Management for Receipt Log

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every component accepts its settings object explicitly (tests pass their own)
and falls back to get_settings() when none is given.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Record storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECEIPTLOG_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="sqlite",
        pattern="^(sqlite|memory)$",
        description="Storage backend: 'sqlite' (durable) or 'memory' (ephemeral)"
    )
    database_url: str = Field(
        default="sqlite:///receipts.db",
        description="SQLAlchemy database URL"
    )
    echo_sql: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    # Write retry policy
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per write before giving up"
    )
    retry_wait_multiplier: float = Field(
        default=0.5,
        ge=0.0,
        description="Exponential backoff multiplier in seconds"
    )
    retry_wait_min: float = Field(
        default=0.5,
        ge=0.0,
        description="Minimum wait between write attempts in seconds"
    )
    retry_wait_max: float = Field(
        default=4.0,
        ge=0.0,
        description="Maximum wait between write attempts in seconds"
    )


class ImageSettings(BaseSettings):
    """Receipt photo encoding configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECEIPTLOG_IMAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    jpeg_quality: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Lossy compression quality (1.0 = best)"
    )
    max_dimension: Optional[int] = Field(
        default=None,
        ge=16,
        description="Bound on the longest side in pixels; None keeps the original size"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECEIPTLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )

    # Amount entry
    currency_symbol: str = Field(
        default="£",
        min_length=1,
        max_length=3,
        description="Currency symbol accepted on input and shown on output"
    )
    reject_negative_amounts: bool = Field(
        default=False,
        description="Treat negative amounts as invalid input"
    )

    # Entry workflow
    submit_on_photo_capture: bool = Field(
        default=False,
        description="Submit the entry as soon as a photo is captured"
    )

    # Display
    timestamp_format: str = Field(
        default="%d/%m/%Y, %H:%M:%S",
        description="strftime format for entry timestamps"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any case, store upper case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def store(self) -> StoreSettings:
        return StoreSettings()

    @property
    def image(self) -> ImageSettings:
        return ImageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the groups that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("store", "image", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
