from __future__ import annotations

import io
from typing import Any, Optional

import pytest

from fanlog import FanoutLogger
from fanlog.sinks import BaseSink, SeverityLike
from fanlog.severity import Severity


class RecordingSink(BaseSink):
    """Sink that appends ``(name, severity, message, tag)`` to a shared journal."""

    def __init__(self, label: str, journal: list, *, fail_with: Optional[BaseException] = None) -> None:
        super().__init__()
        self.label = label
        self.journal = journal
        self.fail_with = fail_with
        self.closed = False

    @property
    def name(self) -> Optional[str]:
        return self.label

    def log(self, severity: SeverityLike, message: Any, tag: Optional[str] = None) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        self.journal.append((self.label, Severity.parse(severity), message, tag))
        return True

    def write(self, text: str) -> int:
        self.journal.append((self.label, None, text, None))
        return len(text)

    def ping(self) -> str:
        return f"pong:{self.label}"

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def journal() -> list:
    return []


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def fanout(stream: io.StringIO) -> FanoutLogger:
    """Facade over a single in-memory stream sink."""
    return FanoutLogger(stream)


@pytest.fixture
def recorded(journal: list) -> FanoutLogger:
    """Facade whose only sinks record into ``journal``."""
    facade = FanoutLogger(io.StringIO())
    facade.detach(facade.targets[0].stream)
    facade.attach(RecordingSink("primary", journal))
    return facade


@pytest.fixture
def make_sink(journal: list):
    """Factory for recording sinks sharing ``journal``."""

    def _make(label: str, *, fail_with: Optional[BaseException] = None) -> RecordingSink:
        return RecordingSink(label, journal, fail_with=fail_with)

    return _make
