from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional, Sequence, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name}. Must be one of: {allowed}") from None


def require_embedding(value: Any, field_name: str = "embedding", *, dimension: Optional[int] = None) -> tuple[float, ...]:
    """Validate a JSON-ish embedding into a tuple of finite floats."""

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValidationError(f"{field_name} must be an array of numbers")
    if len(value) == 0:
        raise ValidationError(f"{field_name} must not be empty")

    out: list[float] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise ValidationError(f"{field_name} must be an array of numbers")
        f = float(item)
        if not math.isfinite(f):
            raise ValidationError(f"{field_name} contains non-finite values")
        out.append(f)

    if dimension is not None and len(out) != dimension:
        raise ValidationError(f"{field_name} must have {dimension} dimensions, got {len(out)}")
    return tuple(out)


def require_unit_interval(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    f = float(value)
    if not 0.0 <= f <= 1.0:
        raise ValidationError(f"{field_name} must be between 0 and 1")
    return f
