"""Configuration management using pydantic-settings."""

from .settings import (
    FutureMonadSettings,
    JsonFormatter,
    LoggingSettings,
    clear_settings_cache,
    configure_logging,
    get_settings,
)

__all__ = [
    "FutureMonadSettings",
    "JsonFormatter",
    "LoggingSettings",
    "clear_settings_cache",
    "configure_logging",
    "get_settings",
]
