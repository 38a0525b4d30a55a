"""
Line formatters and message rendering.

A formatter is any callable ``(severity, timestamp, tag, message) -> str``
returning one complete line, trailing newline included.
"""

from __future__ import annotations

import os
import traceback
from datetime import datetime
from typing import Any, Callable, Optional

import orjson

Formatter = Callable[[str, Any, Optional[str], str], str]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"


# =============================================================================
# Message Rendering
# =============================================================================


def orjson_dumps(v: Any) -> str:
    """Compact JSON using orjson; values of unsupported types fall back to str().

    Raises ``orjson.JSONEncodeError`` for input orjson rejects outright, such as
    integers wider than 64 bits or tuple keys.
    """
    return orjson.dumps(v, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def message_to_str(message: Any) -> str:
    """Render an arbitrary log payload as text."""
    if isinstance(message, str):
        return message
    if isinstance(message, BaseException):
        text = f"{message} ({type(message).__name__})"
        if message.__traceback__ is not None:
            text += "\n" + "".join(traceback.format_tb(message.__traceback__)).rstrip("\n")
        return text
    if isinstance(message, (dict, list, tuple)):
        try:
            return orjson_dumps(message)
        except orjson.JSONEncodeError:
            return repr(message)
    return repr(message)


# =============================================================================
# Formatters
# =============================================================================


def _format_timestamp(timestamp: Any) -> str:
    if isinstance(timestamp, datetime):
        return timestamp.strftime(TIMESTAMP_FORMAT).rstrip()
    return str(timestamp)


def default_formatter(severity: str, timestamp: Any, tag: Optional[str], message: str) -> str:
    """Format used by every sink the facade builds.

    ``2024-05-01 12:00:00 +0000 [INFO] [worker] Job done``; the tag segment
    is left out entirely when ``tag`` is None.
    """
    line = f"{_format_timestamp(timestamp)} [{severity}] "
    if tag is not None:
        line += f"[{tag}] "
    return f"{line}{message}\n"


def basic_formatter(severity: str, timestamp: Any, tag: Optional[str], message: str) -> str:
    """Stock format of a standalone LineSink."""
    if isinstance(timestamp, datetime):
        stamp = timestamp.isoformat(timespec="microseconds")
    else:
        stamp = str(timestamp)
    return f"{severity[:1]}, [{stamp} #{os.getpid()}] {severity:>5} -- {tag or ''}: {message}\n"
