"""Environment-based configuration using pydantic-settings.

Example:
    >>> from futuremonad.foundation.config import get_settings
    >>> get_settings().logging.level
    'WARNING'

    # Or with environment variables:
    # FUTUREMONAD_TRACE_SETTLEMENTS=true
    # FUTUREMONAD_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Literal

import orjson
from pydantic import Field, PositiveFloat, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode()


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FUTUREMONAD_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class FutureMonadSettings(BaseSettings):
    """Root settings for futuremonad.

    Example environment variables:
        FUTUREMONAD_TRACE_SETTLEMENTS=true
        FUTUREMONAD_WAIT_TIMEOUT=5
        FUTUREMONAD_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="FUTUREMONAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    trace_settlements: bool = Field(
        default=False,
        description="Debug-log every combinator transition",
    )
    wait_timeout: PositiveFloat | None = Field(
        default=None,
        description="Default timeout in seconds for interop.wait (None waits forever)",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> FutureMonadSettings:
    """Get the global settings instance (cached)."""
    return FutureMonadSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()


def configure_logging(settings: FutureMonadSettings | None = None) -> logging.Logger:
    """Apply logging settings to the ``futuremonad`` logger hierarchy.

    Installs a single stderr handler; calling again replaces it.
    """
    cfg = (settings or get_settings()).logging
    logger = logging.getLogger("futuremonad")
    logger.setLevel(cfg.level)
    for handler in [h for h in logger.handlers if getattr(h, "_futuremonad", False)]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if cfg.format == "json" else logging.Formatter(_TEXT_FORMAT))
    handler._futuremonad = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
