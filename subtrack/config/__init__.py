"""Configuration package."""

from subtrack.config.settings import (
    LoggingSettings,
    Settings,
    TrackerSettings,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "Settings",
    "TrackerSettings",
    "get_settings",
]
