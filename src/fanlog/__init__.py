"""
fanlog: one logger, many destinations.

Provides a fan-out logging facade:
- FanoutLogger: forwards every log call to all attached sinks, in order
- time / log_exceptions / monitor: scope decorators for elapsed time and
  exception detail
- LineSink: stream or file destination with size/period rotation

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog for diagnostics and structlog-backed sinks, orjson for
rendering container payloads, pydantic-settings for configuration.
"""

from .config import LoggingSettings, LogLevel
from .core import FanoutLogger
from .diagnostics import configure_logging, get_logger
from .exceptions import FanlogError, RotationPolicyError, UnknownSeverityError
from .formatters import basic_formatter, default_formatter, message_to_str
from .severity import Severity
from .sinks import BaseSink, LineSink, StructlogSink
from .types import RotationPolicy

__all__ = [
    "BaseSink",
    "FanlogError",
    "FanoutLogger",
    "LineSink",
    "LogLevel",
    "LoggingSettings",
    "RotationPolicy",
    "RotationPolicyError",
    "Severity",
    "StructlogSink",
    "UnknownSeverityError",
    "basic_formatter",
    "configure_logging",
    "default_formatter",
    "get_logger",
    "message_to_str",
]
