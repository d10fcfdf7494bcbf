from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_WEEKEND_DAYS, DEFAULT_WORKDAY_START
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class GracePolicy:
    """Workday start plus grace minutes; a clock-in after the cutoff is late."""

    workday_start: time = DEFAULT_WORKDAY_START
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES

    def __post_init__(self):
        if self.grace_minutes < 0:
            raise ValidationError("grace_minutes must not be negative")

    def cutoff_for(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.workday_start) + timedelta(minutes=self.grace_minutes)


@dataclass(frozen=True)
class WorkWeek:
    weekend_days: tuple[int, ...] = DEFAULT_WEEKEND_DAYS

    def __post_init__(self):
        if any(d not in range(7) for d in self.weekend_days):
            raise ValidationError(f"weekend days must be weekday numbers 0-6: {self.weekend_days}")

    def is_weekend_weekday(self, weekday: int) -> bool:
        return weekday in self.weekend_days
