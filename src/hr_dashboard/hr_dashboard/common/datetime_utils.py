from __future__ import annotations

import calendar
from datetime import date, datetime, time
from typing import Protocol

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_calendar(year: int, month: int) -> tuple[int, int]:
    """Return (days_in_month, weekday_of_day_1) with Monday == 0."""
    first_weekday, days_in_month = calendar.monthrange(year, month)
    return days_in_month, first_weekday


def format_hours(hours: float | None) -> str:
    """Render decimal hours as e.g. ``8h 25m``."""
    if not hours or hours <= 0:
        return "0h 0m"
    total_minutes = int(round(hours * 60))
    return f"{total_minutes // 60}h {total_minutes % 60}m"


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_local()
