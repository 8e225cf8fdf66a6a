"""Shallow structural check for UI component arrays.

Only the ``type`` tag of each element is inspected; every other field is
opaque payload passed through as-is.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ComponentType(str, Enum):
    FORM = "form"
    TEXT = "text"
    IMAGE = "image"


ALLOWED_TYPES = frozenset(t.value for t in ComponentType)


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    index: Optional[int] = None
    type: Any = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str:
        if self.ok:
            return ""
        if self.index is None:
            return self.reason
        return f"Invalid component type at index {self.index}: {self.type}"


def validate_components(candidate: Any) -> ValidationResult:
    """Return the first failure in ``candidate``, or an ok result."""
    if not isinstance(candidate, list) or len(candidate) == 0:
        return ValidationResult(
            ok=False, reason="Schema is required and must be a non-empty array",
        )

    for index, component in enumerate(candidate):
        component_type = component.get("type") if isinstance(component, dict) else None
        if not isinstance(component_type, str) or component_type not in ALLOWED_TYPES:
            return ValidationResult(
                ok=False, index=index, type=component_type,
                reason="Invalid component type",
            )

    return ValidationResult(ok=True)
