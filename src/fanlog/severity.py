"""
Log severities, ordered from least to most severe.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from .exceptions import UnknownSeverityError


class Severity(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4
    UNKNOWN = 5

    @property
    def label(self) -> str:
        """Name rendered into log lines."""
        return "ANY" if self is Severity.UNKNOWN else self.name

    @classmethod
    def parse(cls, value: Union["Severity", int, str]) -> "Severity":
        """Coerce an int, member or case-insensitive name into a Severity."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise UnknownSeverityError(value=value) from None
        if isinstance(value, str):
            key = value.strip().upper()
            key = _ALIASES.get(key, key)
            if key in cls.__members__:
                return cls[key]
        raise UnknownSeverityError(value=value)


_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
    "ANY": "UNKNOWN",
}
