"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import logging
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .exceptions import RotationPolicyError
from .formatters import Formatter, basic_formatter, message_to_str
from .severity import Severity
from .types import RotationAge, RotationPolicy

SeverityLike = Union[Severity, int, str]

_TIMED_ROTATION = {
    "hourly": "H",
    "daily": "midnight",
    "weekly": "W6",
}


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks.

    A sink accepts leveled log calls and exposes ``stream`` and ``name`` so a
    facade can select it by destination.
    """

    def __init__(self, *, level: SeverityLike = Severity.DEBUG) -> None:
        self.level = Severity.parse(level)

    @property
    def stream(self) -> Any:
        """Destination handle, or None when the sink has none."""
        return None

    @property
    def name(self) -> Optional[str]:
        """Destination name, or None when the sink has none."""
        return None

    @abstractmethod
    def log(self, severity: SeverityLike, message: Any, tag: Optional[str] = None) -> bool:
        """Record one event. Returns True whether or not it passed the level filter."""
        ...

    @abstractmethod
    def write(self, text: str) -> int:
        """Append raw text, bypassing formatting and level filtering."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...

    def debug(self, message: Any, tag: Optional[str] = None) -> bool:
        return self.log(Severity.DEBUG, message, tag)

    def info(self, message: Any, tag: Optional[str] = None) -> bool:
        return self.log(Severity.INFO, message, tag)

    def warn(self, message: Any, tag: Optional[str] = None) -> bool:
        return self.log(Severity.WARN, message, tag)

    def error(self, message: Any, tag: Optional[str] = None) -> bool:
        return self.log(Severity.ERROR, message, tag)

    def fatal(self, message: Any, tag: Optional[str] = None) -> bool:
        return self.log(Severity.FATAL, message, tag)

    def unknown(self, message: Any, tag: Optional[str] = None) -> bool:
        return self.log(Severity.UNKNOWN, message, tag)

    warning = warn
    critical = fatal

    def is_enabled_for(self, severity: SeverityLike) -> bool:
        return Severity.parse(severity) >= self.level

    def set_level(self, severity: SeverityLike) -> None:
        self.level = Severity.parse(severity)


# =============================================================================
# Line Sink
# =============================================================================


class _PropagateErrorsMixin:
    """Re-raise write errors instead of printing them to stderr."""

    def handleError(self, record: logging.LogRecord) -> None:
        raise


class _FileHandler(_PropagateErrorsMixin, logging.FileHandler):
    pass


class _RotatingFileHandler(_PropagateErrorsMixin, RotatingFileHandler):
    pass


class _TimedRotatingFileHandler(_PropagateErrorsMixin, TimedRotatingFileHandler):
    pass


def _build_file_handler(path: str, policy: RotationPolicy) -> logging.FileHandler:
    """Pick the stdlib handler that implements ``policy`` for ``path``."""
    when = None
    if isinstance(policy.age, str):
        when = _TIMED_ROTATION.get(policy.age.strip().lower())
        if when is None:
            raise RotationPolicyError(age=policy.age)
    elif policy.age < 0:
        raise RotationPolicyError(age=policy.age)
    if policy.size < 0:
        raise RotationPolicyError(size=policy.size)

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if when is not None:
        handler: logging.FileHandler = _TimedRotatingFileHandler(path, when=when, encoding="utf-8")
    elif policy.size > 0:
        # With no age given, keep a single rotated file.
        handler = _RotatingFileHandler(
            path,
            maxBytes=policy.size,
            backupCount=policy.age or 1,
            encoding="utf-8",
        )
    else:
        handler = _FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.terminator = ""
    return handler


class LineSink(BaseSink):
    """Writes one formatted line per event to a stream or a file path.

    Args:
        destination: Anything with ``write`` (used as-is, never closed by the
            sink) or a file path (opened in append mode).
        shift_age: Rotated files to keep, or ``"hourly"``/``"daily"``/``"weekly"``.
        shift_size: Byte threshold for size-based rotation.
        level: Events below this severity are dropped.
        formatter: Line formatter; defaults to ``basic_formatter``.
        tag: Tag used when a call does not supply one.
    """

    def __init__(
        self,
        destination: Any,
        shift_age: RotationAge = 0,
        shift_size: int = 0,
        *,
        level: SeverityLike = Severity.DEBUG,
        formatter: Optional[Formatter] = None,
        tag: Optional[str] = None,
    ) -> None:
        super().__init__(level=level)
        self.destination = destination
        self.policy = RotationPolicy(shift_age or 0, shift_size or 0)
        self.formatter: Formatter = formatter or basic_formatter
        self.tag = tag
        self._lock = threading.RLock()
        self._closed = False

        if hasattr(destination, "write"):
            # Rotation only applies to files.
            self._handler: Optional[logging.FileHandler] = None
            self._name: Optional[str] = None
        else:
            self._name = os.fspath(destination)
            self._handler = _build_file_handler(self._name, self.policy)

    @property
    def stream(self) -> Any:
        if self._handler is None:
            return self.destination
        return self._handler.stream

    @property
    def name(self) -> Optional[str]:
        return self._name

    def log(self, severity: SeverityLike, message: Any, tag: Optional[str] = None) -> bool:
        severity = Severity.parse(severity)
        if severity < self.level:
            return True
        line = self.formatter(
            severity.label,
            datetime.now().astimezone(),
            tag if tag is not None else self.tag,
            message_to_str(message),
        )
        self._write_line(line)
        return True

    def write(self, text: str) -> int:
        self._write_line(text)
        return len(text)

    def _write_line(self, line: str) -> None:
        with self._lock:
            if self._closed:
                raise ValueError(f"I/O operation on closed sink {self!r}")
            if self._handler is None:
                self.destination.write(line)
                flush = getattr(self.destination, "flush", None)
                if flush is not None:
                    flush()
                return

            self._handler.handle(logging.makeLogRecord({"msg": line}))

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._handler is not None:
                self._handler.close()

    def __repr__(self) -> str:
        target = self._name if self._name is not None else self.destination
        return f"<{type(self).__name__} {target!r} level={self.level.name}>"


# =============================================================================
# Structlog Sink
# =============================================================================

_STRUCTLOG_METHODS = {
    Severity.DEBUG: "debug",
    Severity.INFO: "info",
    Severity.WARN: "warning",
    Severity.ERROR: "error",
    Severity.FATAL: "critical",
    Severity.UNKNOWN: "critical",
}


class StructlogSink(BaseSink):
    """Forwards events into a structlog logger so its pipeline renders them."""

    def __init__(
        self,
        logger: Any = None,
        name: Optional[str] = None,
        *,
        level: SeverityLike = Severity.DEBUG,
    ) -> None:
        super().__init__(level=level)
        self._name = name or "fanlog"
        self.logger = logger if logger is not None else structlog.get_logger(self._name)

    @property
    def name(self) -> Optional[str]:
        return self._name

    def log(self, severity: SeverityLike, message: Any, tag: Optional[str] = None) -> bool:
        severity = Severity.parse(severity)
        if severity < self.level:
            return True
        kwargs = {"tag": tag} if tag is not None else {}
        getattr(self.logger, _STRUCTLOG_METHODS[severity])(message_to_str(message), **kwargs)
        return True

    def write(self, text: str) -> int:
        self.logger.info(text.rstrip("\n"))
        return len(text)

    def close(self) -> None:
        pass
