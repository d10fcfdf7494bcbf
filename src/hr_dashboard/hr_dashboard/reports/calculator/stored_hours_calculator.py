from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...attendance.duration import DurationCalculator
from ...attendance.model import AttendanceDay
from .base import HoursCalculator


class StoredHoursCalculator(HoursCalculator):
    """Standard rule: the gross hours stored at clock-out, live minutes for today's open day.

    Closed rows written before ``total_hours`` existed fall back to their
    timestamps. A day left open on a past date counts 0.
    """

    def __init__(self, calculator: DurationCalculator | None = None):
        self._calc = calculator or DurationCalculator()

    def worked_minutes(self, day: AttendanceDay, *, today: date, now: Optional[datetime] = None) -> int:
        if day.is_closed:
            if day.total_hours is not None:
                return max(int(round(day.total_hours * 60)), 0)
            return self._calc.worked_minutes(day, day.check_out_time)
        if day.check_in_time is not None and day.work_date == today and now is not None:
            return self._calc.worked_minutes(day, now)
        return 0
