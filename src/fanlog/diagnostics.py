"""
Structured logging for fanlog's own diagnostics (attach, detach, lookups).

These events describe the facade, not the application. They are built with
structlog and handed to the stdlib ``fanlog`` logger, so they stay silent
until an application enables that logger or calls ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog
from structlog.typing import EventDict, WrappedLogger

ROOT_LOGGER = "fanlog"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
    "UNKNOWN": logging.CRITICAL,
}


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger bridged onto the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name or ROOT_LOGGER),
        processors=[
            structlog.stdlib.filter_by_level,
            add_timestamp,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(*, level: str | None = None, stream: TextIO | None = None) -> logging.Handler:
    """
    Render fanlog diagnostics to a stream.

    Args:
        level: Threshold name (DEBUG, INFO, WARN, ERROR, FATAL); defaults to
            ``FANLOG_DIAGNOSTICS_LEVEL``
        stream: Output stream (default: stderr)

    Returns:
        The handler installed on the ``fanlog`` logger.
    """
    if level is None:
        from .config import settings

        level = settings.diagnostics_level.value

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.ExtraAdder(),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.dev.ConsoleRenderer(colors=False),
            ],
        )
    )

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.handlers = [handler]
    root_logger.setLevel(_LEVELS.get(level.upper(), logging.WARNING))
    root_logger.propagate = False
    return handler
