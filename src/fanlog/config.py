"""
Logging Configuration.

Settings are read from ``FANLOG_*`` environment variables or a ``.env`` file:

    FANLOG_DESTINATION=logs/app.log
    FANLOG_SHIFT_AGE=daily
    FANLOG_EXTRA_DESTINATIONS=stderr,logs/audit.log
"""

from enum import Enum
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"
    UNKNOWN = "UNKNOWN"


class LoggingSettings(BaseSettings):
    """Configuration for a facade built with ``FanoutLogger.from_settings``."""

    model_config = SettingsConfigDict(
        env_prefix="FANLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    destination: str = Field(default="stdout", description="stdout, stderr, or a file path")
    shift_age: Union[int, str] = Field(default=0, description="Rotated files to keep, or hourly/daily/weekly")
    shift_size: int = Field(default=0, ge=0, description="Byte threshold for size-based rotation")
    level: LogLevel = Field(default=LogLevel.INFO, description="Minimum severity written by every sink")
    extra_destinations: str = Field(default="", description="Comma-separated destinations attached after the first")
    diagnostics_level: LogLevel = Field(default=LogLevel.WARN, description="Threshold for fanlog's own diagnostics")

    @field_validator("shift_age", mode="before")
    @classmethod
    def _numeric_age(cls, v: Union[int, str]) -> Union[int, str]:
        if isinstance(v, str) and v.strip().isdigit():
            return int(v)
        return v

    @property
    def extra_destination_list(self) -> list[str]:
        return [d.strip() for d in self.extra_destinations.split(",") if d.strip()]


# Singleton instance
settings = LoggingSettings()

__all__ = ["LogLevel", "LoggingSettings", "settings"]
