"""
Value types shared by sinks and the facade.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

RotationAge = Union[int, str]


@dataclass(frozen=True)
class RotationPolicy:
    """When a file sink rolls over.

    ``age`` is either a count of rotated files to keep (used together with
    ``size``) or a period name such as ``"daily"``. ``size`` is a byte
    threshold. Zero for both means no rotation.
    """

    age: RotationAge = 0
    size: int = 0

    @property
    def is_enabled(self) -> bool:
        return bool(self.age) or bool(self.size)

    def with_overrides(
        self,
        age: Optional[RotationAge] = None,
        size: Optional[int] = None,
    ) -> "RotationPolicy":
        """Return a policy where omitted fields keep this policy's values."""
        return replace(
            self,
            age=self.age if age is None else age,
            size=self.size if size is None else size,
        )
