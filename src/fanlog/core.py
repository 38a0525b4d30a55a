"""
The fan-out facade: one logger that forwards every call to many sinks.
"""

from __future__ import annotations

import os
import re
import sys
import time as _time
import traceback
from contextlib import contextmanager
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from .diagnostics import get_logger
from .formatters import default_formatter
from .sinks import BaseSink, LineSink, SeverityLike
from .types import RotationAge, RotationPolicy

if TYPE_CHECKING:
    from .config import LoggingSettings

logger = get_logger("fanlog.core")

_STANDARD_STREAMS = {
    "stdout": lambda: sys.stdout,
    "stderr": lambda: sys.stderr,
}


class FanoutLogger:
    """Multiplexes log calls to every attached sink, in attach order.

    Construct it like a single sink; the first sink is built from the same
    arguments and gets ``default_formatter``. The rotation policy given here
    is reused by later ``attach`` calls that omit one.

    Any public attribute the facade does not define is forwarded to all sinks,
    so ``fanout.flush()`` returns ``[sink.flush() for sink in targets]``.
    """

    def __init__(self, destination: Any, shift_age: RotationAge = 0, shift_size: int = 0) -> None:
        self._default_policy = RotationPolicy(shift_age or 0, shift_size or 0)
        self._targets: list[BaseSink] = [self._build_sink(destination, self._default_policy)]

    @classmethod
    def from_settings(cls, settings: Optional["LoggingSettings"] = None) -> "FanoutLogger":
        """Build a facade from ``LoggingSettings`` (environment driven by default)."""
        if settings is None:
            from .config import settings as env_settings

            settings = env_settings

        fanout = cls(_resolve_destination(settings.destination), settings.shift_age, settings.shift_size)
        for destination in settings.extra_destination_list:
            fanout.attach(_resolve_destination(destination))
        fanout.set_level(settings.level.value)
        return fanout

    # =========================================================================
    # Target Registry
    # =========================================================================

    @property
    def targets(self) -> list[BaseSink]:
        return list(self._targets)

    @property
    def default_policy(self) -> RotationPolicy:
        return self._default_policy

    @staticmethod
    def _build_sink(destination: Any, policy: RotationPolicy) -> LineSink:
        return LineSink(destination, policy.age, policy.size, formatter=default_formatter)

    def attach(
        self,
        target: Any,
        shift_age: Optional[RotationAge] = None,
        shift_size: Optional[int] = None,
    ) -> None:
        """Attach a sink.

        A ``BaseSink`` is attached as-is. Anything else is taken as a
        destination for a new ``LineSink``; rotation fields left as None fall
        back to the policy given at construction.
        """
        if isinstance(target, BaseSink):
            sink = target
        else:
            sink = self._build_sink(target, self._default_policy.with_overrides(shift_age, shift_size))
        self._targets.append(sink)
        logger.debug("fanlog.attach", sink=repr(sink), targets=len(self._targets))

    def detach(self, key: Any) -> None:
        """Detach every sink matching ``key`` (see ``find_targets``)."""
        matched = self.find_targets(key)
        if not matched:
            return
        self._targets = [t for t in self._targets if not any(t is m for m in matched)]
        logger.debug("fanlog.detach", key=repr(key), removed=len(matched), targets=len(self._targets))

    # =========================================================================
    # Target Matcher
    # =========================================================================

    def find_targets(self, key: Any) -> list[BaseSink]:
        """Select attached sinks by destination.

        ``key`` may be a stream (matched by identity), a path string (exact
        name match) or a compiled regular expression (searched in the name).
        Any other key matches nothing.
        """
        if isinstance(key, re.Pattern):
            return [t for t in self._targets if t.name is not None and key.search(t.name)]
        if isinstance(key, (str, os.PathLike)):
            name = os.fspath(key)
            return [t for t in self._targets if t.name == name]
        if hasattr(key, "write"):
            return [t for t in self._targets if t.stream is key]

        logger.debug("fanlog.find_targets.unsupported_key", key_type=type(key).__name__)
        return []

    # =========================================================================
    # Dispatcher
    # =========================================================================

    def dispatch(self, method: str, *args: Any, **kwargs: Any) -> list[Any]:
        """Call ``method`` on every sink in order and collect the results.

        The first sink to raise aborts the call; sinks after it are skipped.
        """
        return [getattr(target, method)(*args, **kwargs) for target in self._targets]

    def __getattr__(self, name: str) -> Callable[..., list[Any]]:
        if name.startswith("_"):
            raise AttributeError(name)
        return partial(self.dispatch, name)

    def log(self, severity: SeverityLike, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("log", severity, message, tag)

    def debug(self, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("debug", message, tag)

    def info(self, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("info", message, tag)

    def warn(self, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("warn", message, tag)

    def error(self, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("error", message, tag)

    def fatal(self, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("fatal", message, tag)

    def unknown(self, message: Any, tag: Optional[str] = None) -> list[Any]:
        return self.dispatch("unknown", message, tag)

    warning = warn
    critical = fatal

    def write(self, text: str) -> list[Any]:
        return self.dispatch("write", text)

    def set_level(self, severity: SeverityLike) -> list[Any]:
        return self.dispatch("set_level", severity)

    def is_enabled_for(self, severity: SeverityLike) -> list[Any]:
        return self.dispatch("is_enabled_for", severity)

    def close(self) -> list[Any]:
        return self.dispatch("close")

    def __enter__(self) -> "FanoutLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # =========================================================================
    # Scope Decorators
    # =========================================================================

    def exception(self, exc: BaseException) -> list[Any]:
        """Log ``exc`` at error level with its kind, message and traceback."""
        message = f"{type(exc).__name__}: {exc}"
        if exc.__traceback__ is not None:
            trace = [entry.rstrip("\n") for entry in traceback.format_tb(exc.__traceback__)]
            message += "\n" + "\n".join(trace)
        return self.error(message)

    @contextmanager
    def time(self) -> Iterator[None]:
        """Log the elapsed time of the block, however it exits."""
        began = _time.monotonic()
        try:
            yield
        finally:
            self.info("Finished in %.1f sec." % (_time.monotonic() - began))

    @contextmanager
    def log_exceptions(self) -> Iterator[None]:
        """Log any exception escaping the block, then re-raise it unchanged."""
        try:
            yield
        except BaseException as exc:
            self.exception(exc)
            raise

    @contextmanager
    def monitor(self) -> Iterator[None]:
        """``time`` around ``log_exceptions``."""
        with self.time():
            with self.log_exceptions():
                yield

    def __repr__(self) -> str:
        return f"<{type(self).__name__} targets={self._targets!r}>"


def _resolve_destination(destination: str) -> Any:
    stream = _STANDARD_STREAMS.get(destination.strip().lower())
    return stream() if stream is not None else destination
