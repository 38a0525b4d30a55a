"""
Scope decorator tests: time, log_exceptions and monitor.
"""

from __future__ import annotations

import re
from types import SimpleNamespace

import pytest

from fanlog import FanoutLogger, core
from fanlog.severity import Severity

FINISHED = re.compile(r"Finished in \d+\.\d sec\.")


class RuntimeFailure(Exception):
    pass


def fake_clock(monkeypatch, *readings: float) -> None:
    monkeypatch.setattr(core, "_time", SimpleNamespace(monotonic=iter(readings).__next__))


class TestTime:
    """time scope"""

    def test_logs_duration_on_success(self, recorded: FanoutLogger, journal, monkeypatch) -> None:
        fake_clock(monkeypatch, 10.0, 12.34)
        with recorded.time():
            pass
        assert journal == [("primary", Severity.INFO, "Finished in 2.3 sec.", None)]

    def test_decorator_passes_return_value(self, recorded: FanoutLogger, journal) -> None:
        @recorded.time()
        def compute(x: int) -> int:
            return x * 2

        assert compute(21) == 42
        assert compute(1) == 2
        assert len(journal) == 2

    def test_logs_duration_before_error_propagates(self, recorded: FanoutLogger, journal) -> None:
        seen_at_raise = []

        with pytest.raises(RuntimeFailure, match="boom"):
            try:
                with recorded.time():
                    raise RuntimeFailure("boom")
            except RuntimeFailure:
                seen_at_raise.extend(journal)
                raise

        assert len(seen_at_raise) == 1
        _, severity, message, _ = seen_at_raise[0]
        assert severity is Severity.INFO
        assert FINISHED.fullmatch(message)

    def test_nested_timers_are_independent(self, recorded: FanoutLogger, journal, monkeypatch) -> None:
        fake_clock(monkeypatch, 0.0, 1.0, 1.5, 5.0)
        with recorded.time():
            with recorded.time():
                pass
        assert [entry[2] for entry in journal] == ["Finished in 0.5 sec.", "Finished in 5.0 sec."]


class TestLogExceptions:
    """log_exceptions scope"""

    def test_success_logs_nothing(self, recorded: FanoutLogger, journal) -> None:
        @recorded.log_exceptions()
        def ok() -> str:
            return "fine"

        assert ok() == "fine"
        assert journal == []

    def test_logs_and_reraises_same_error(self, recorded: FanoutLogger, journal) -> None:
        error = RuntimeFailure("boom")
        with pytest.raises(RuntimeFailure) as info:
            with recorded.log_exceptions():
                raise error
        assert info.value is error
        assert len(journal) == 1
        _, severity, message, _ = journal[0]
        assert severity is Severity.ERROR
        first, trace = message.split("\n", 1)
        assert first == "RuntimeFailure: boom"
        assert "test_logs_and_reraises_same_error" in trace
        assert "raise error" in trace
        assert not message.endswith("\n")

    def test_cause_is_preserved(self, recorded: FanoutLogger) -> None:
        with pytest.raises(KeyError) as info:
            with recorded.log_exceptions():
                try:
                    {}["missing"]
                except LookupError as exc:
                    raise KeyError("wrapped") from exc
        assert isinstance(info.value.__cause__, KeyError)

    def test_base_exceptions_are_logged_too(self, recorded: FanoutLogger, journal) -> None:
        with pytest.raises(KeyboardInterrupt):
            with recorded.log_exceptions():
                raise KeyboardInterrupt()
        assert journal[0][2].startswith("KeyboardInterrupt: ")

    def test_exception_without_traceback(self, recorded: FanoutLogger, journal) -> None:
        recorded.exception(ValueError("bad value"))
        assert journal == [("primary", Severity.ERROR, "ValueError: bad value", None)]


class TestMonitor:
    """monitor scope"""

    def test_failure_order(self, recorded: FanoutLogger, make_sink, journal) -> None:
        recorded.attach(make_sink("second"))
        with pytest.raises(RuntimeFailure, match="^boom$"):
            with recorded.monitor():
                raise RuntimeFailure("boom")

        assert [(label, severity) for label, severity, _, _ in journal] == [
            ("primary", Severity.ERROR),
            ("second", Severity.ERROR),
            ("primary", Severity.INFO),
            ("second", Severity.INFO),
        ]
        assert journal[0][2].startswith("RuntimeFailure: boom\n")
        assert FINISHED.fullmatch(journal[2][2])

    def test_success_logs_only_duration(self, recorded: FanoutLogger, journal) -> None:
        @recorded.monitor()
        def job() -> dict:
            return {"rows": 3}

        assert job() == {"rows": 3}
        assert [entry[1] for entry in journal] == [Severity.INFO]

    def test_duration_includes_exception_logging(self, recorded: FanoutLogger, journal, monkeypatch) -> None:
        fake_clock(monkeypatch, 0.0, 0.25)
        with pytest.raises(RuntimeFailure):
            with recorded.monitor():
                raise RuntimeFailure("late")
        assert journal[-1][2] == "Finished in 0.2 sec."

    def test_sink_failure_inside_scope_propagates(self, recorded: FanoutLogger, make_sink) -> None:
        recorded.attach(make_sink("broken", fail_with=OSError("disk gone")))
        with pytest.raises(OSError, match="disk gone"):
            with recorded.time():
                pass
