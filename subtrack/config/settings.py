"""
Configuration Management for Subscription Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The billing core itself takes everything as arguments; only the
orchestrator reads settings, so calculations stay reproducible.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from subtrack.models.currency import CurrencyCode


class TrackerSettings(BaseSettings):
    """
    Tracker behaviour settings.

    Environment variables use the SUBTRACK_ prefix, e.g.
    SUBTRACK_DISPLAY_CURRENCY=USD.
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    display_currency: CurrencyCode = Field(
        default=CurrencyCode.CNY,
        description="Currency totals are shown in"
    )
    upcoming_window_days: int = Field(
        default=7,
        ge=0,
        le=366,
        description="Look-ahead window for 'due soon' counts and lists"
    )

    @field_validator("display_currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SUBTRACK_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render JSON lines (False = human-readable console output)"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level


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
    def tracker(self) -> TrackerSettings:
        return TrackerSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
