from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str | None, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return number


def require_amount(value: Any, field_name: str = "Amount") -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return amount


_NATURAL_SPLIT = re.compile(r"(\d+)")


def natural_key(value: str | None) -> list:
    """Sort key comparing digit runs numerically ("CS2" < "CS10")."""
    parts = _NATURAL_SPLIT.split((value or "").lower())
    return [int(p) if p.isdigit() else p for p in parts]


def matches_query(query: str | None, *values: str | None) -> bool:
    """Case-insensitive substring search over the given fields."""
    if not query or not query.strip():
        return True
    q = query.strip().lower()
    return any(q in (v or "").lower() for v in values)
