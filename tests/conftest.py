from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from src.hr_dashboard.hr_dashboard.attendance.model import AttendanceDay, BreakInterval
from src.hr_dashboard.hr_dashboard.core.enums import AttendanceStatus
from src.hr_dashboard.hr_dashboard.core.exceptions import AlreadyClockedIn, BreakAlreadyActive


class InMemoryAttendance:
    """Repository fake with the same uniqueness and compare-and-set rules as the MySQL one."""

    def __init__(self):
        self.days: dict[tuple[int, date], AttendanceDay] = {}
        self.breaks: dict[int, BreakInterval] = {}
        self._day_id = 0
        self._break_id = 0

    def seed(self, day: AttendanceDay) -> AttendanceDay:
        self._day_id += 1
        stored = day.with_id(self._day_id)
        self.days[(day.employee_id, day.work_date)] = stored
        return stored

    def get_day(self, employee_id: int, work_date: date) -> Optional[AttendanceDay]:
        return self.days.get((employee_id, work_date))

    def create_day(self, day: AttendanceDay) -> int:
        if (day.employee_id, day.work_date) in self.days:
            raise AlreadyClockedIn()
        return self.seed(day).attendance_id

    def _active_break(self, employee_id: int, work_date: date) -> Optional[BreakInterval]:
        for b in self.breaks.values():
            if b.employee_id == employee_id and b.work_date == work_date and b.is_active:
                return b
        return None

    def close_day(self, day: AttendanceDay) -> bool:
        key = (day.employee_id, day.work_date)
        current = self.days.get(key)
        if current is None or current.check_out_time is not None:
            return False
        if self._active_break(day.employee_id, day.work_date) is not None:
            return False
        self.days[key] = day
        return True

    def mark_day(self, day: AttendanceDay) -> Optional[int]:
        key = (day.employee_id, day.work_date)
        current = self.days.get(key)
        if current is None:
            return self.seed(day).attendance_id
        if current.check_in_time is not None:
            return None
        self.days[key] = day.with_id(current.attendance_id)
        return current.attendance_id

    def list_days(self, employee_id: int, start: date, end: date):
        items = [d for d in self.days.values() if d.employee_id == employee_id and start <= d.work_date <= end]
        return sorted(items, key=lambda d: d.work_date)

    def list_all_days(self, start: date, end: date, status: Optional[AttendanceStatus] = None):
        items = [
            d
            for d in self.days.values()
            if start <= d.work_date <= end and (status is None or d.status == status)
        ]
        return sorted(items, key=lambda d: (d.work_date, d.employee_id))

    def get_recent_days(self, employee_id: int, limit: int):
        items = [d for d in self.days.values() if d.employee_id == employee_id]
        items.sort(key=lambda d: d.work_date, reverse=True)
        return items[:limit]

    def list_breaks(self, employee_id: int, work_date: date):
        items = [b for b in self.breaks.values() if b.employee_id == employee_id and b.work_date == work_date]
        return sorted(items, key=lambda b: b.start_time)

    def create_break(self, interval: BreakInterval) -> Optional[int]:
        day = self.days.get((interval.employee_id, interval.work_date))
        if day is None or day.check_out_time is not None:
            return None
        if self._active_break(interval.employee_id, interval.work_date) is not None:
            raise BreakAlreadyActive()
        self._break_id += 1
        self.breaks[self._break_id] = interval.with_id(self._break_id)
        return self._break_id

    def close_break(self, interval: BreakInterval) -> bool:
        current = self.breaks.get(interval.break_id)
        if current is None or not current.is_active:
            return False
        self.breaks[interval.break_id] = interval
        return True


class FixedClock:
    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)
