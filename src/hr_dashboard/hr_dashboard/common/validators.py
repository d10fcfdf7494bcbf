from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def optional_text(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    """Trim free text; blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    value = value.strip()
    if not value:
        return None
    if len(value) > max_len:
        raise ValidationError(f"{field_name} is limited to {max_len} characters")
    return value


def require_month(month: int) -> int:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}")
    return int(month)


def require_year(year: int) -> int:
    if not 1970 <= int(year) <= 9999:
        raise ValidationError(f"year out of range: {year}")
    return int(year)


def require_positive_id(value, field_name: str) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid id")
    if value <= 0:
        raise ValidationError(f"{field_name} is not a valid id")
    return value


def require_enum(value, enum_cls: type[E], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_date_range(start: date, end: date, max_days: int) -> tuple[date, date]:
    if end < start:
        raise ValidationError(f"end ({end}) is before start ({start})")
    if (end - start).days + 1 > max_days:
        raise ValidationError(f"date range is limited to {max_days} days")
    return start, end
