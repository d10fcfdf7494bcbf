from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceDay, BreakInterval


class AttendanceRepository(Protocol):
    """Persistence for attendance days and their break intervals.

    Writes are single compare-and-set statements so two concurrent calls for
    the same employee-day cannot both succeed.
    """

    def get_day(self, employee_id: int, work_date: date) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def create_day(self, day: AttendanceDay) -> int:
        """Insert the clock-in row. Raises ``AlreadyClockedIn`` on a duplicate (employee, date)."""

        raise NotImplementedError

    def close_day(self, day: AttendanceDay) -> bool:
        """Store clock-out fields only if the row is still open and no break is active."""

        raise NotImplementedError

    def mark_day(self, day: AttendanceDay) -> Optional[int]:
        """Insert or overwrite a day that has no clock-in; returns its id.

        Returns None when the row already carries a clock-in.
        """

        raise NotImplementedError

    def list_days(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceDay]:
        raise NotImplementedError

    def list_all_days(
        self, start: date, end: date, status: Optional[AttendanceStatus] = None
    ) -> Sequence[AttendanceDay]:
        """Days of every employee in the range, ordered by date then employee."""

        raise NotImplementedError

    def get_recent_days(self, employee_id: int, limit: int) -> Sequence[AttendanceDay]:
        raise NotImplementedError

    def list_breaks(self, employee_id: int, work_date: date) -> Sequence[BreakInterval]:
        raise NotImplementedError

    def create_break(self, interval: BreakInterval) -> Optional[int]:
        """Insert an active break only while the day is open.

        Returns None when the day was closed concurrently. Raises
        ``BreakAlreadyActive`` when another active break exists.
        """

        raise NotImplementedError

    def close_break(self, interval: BreakInterval) -> bool:
        """Store end time/duration only if the break is still active."""

        raise NotImplementedError
