"""
Exception hierarchy for fanlog.

The facade itself never raises for attach/detach/lookup; these errors come
from building sinks and parsing severities.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class FanlogError(Exception):
    """Base class for all fanlog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class RotationPolicyError(FanlogError, ValueError):
    """Raised when a sink is given a rotation age or size it cannot honour."""

    def __init__(self, *, age: Any = None, size: Any = None) -> None:
        if size is not None:
            message = f"Unsupported rotation size {size!r}"
            details = {"size": size}
        else:
            message = f"Unsupported rotation age {age!r}"
            details = {"age": age}

        super().__init__(message, code="UNSUPPORTED_ROTATION_POLICY", details=details)


class UnknownSeverityError(FanlogError, ValueError):
    """Raised when a value cannot be parsed as a severity."""

    def __init__(self, *, value: Any) -> None:
        super().__init__(
            f"Unknown severity {value!r}",
            code="UNKNOWN_SEVERITY",
            details={"value": value},
        )
