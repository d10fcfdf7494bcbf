from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from ..attendance.duration import DurationCalculator
from ..attendance.model import AttendanceDay
from ..attendance.policy import WorkWeek
from ..common.datetime_utils import month_calendar
from ..core.enums import AttendanceStatus, DayClassification
from .calculator.base import HoursCalculator
from .calculator.stored_hours_calculator import StoredHoursCalculator
from .model import DayEntry, MonthlyAggregate

_MARKED = {
    AttendanceStatus.HALF_DAY: DayClassification.HALF_DAY,
    AttendanceStatus.ON_LEAVE: DayClassification.ON_LEAVE,
    AttendanceStatus.ABSENT: DayClassification.ABSENT,
}

# Days whose hours feed the average.
_WORKED = {DayClassification.PRESENT, DayClassification.LATE, DayClassification.HALF_DAY}


def rate_percent(numerator: int, denominator: int) -> int:
    """Integer percentage rounded half up; 0 when the denominator is 0."""
    if denominator <= 0:
        return 0
    return (200 * numerator + denominator) // (2 * denominator)


@dataclass
class _Totals:
    counts: dict = field(default_factory=dict)
    worked_minutes_by_class: dict = field(default_factory=dict)

    def add(self, classification: DayClassification, minutes: int) -> None:
        self.counts[classification] = self.counts.get(classification, 0) + 1
        self.worked_minutes_by_class[classification] = self.worked_minutes_by_class.get(classification, 0) + minutes

    def count(self, classification: DayClassification) -> int:
        return self.counts.get(classification, 0)


class MonthlyAggregator:
    """Fold one employee's attendance days of a month into a ``MonthlyAggregate``.

    Weekends are excluded from every count. A weekday with no record is
    ``absent`` only when it is already in the past; later days are ``none``.
    Today's open session is its own ``active`` bucket and is not part of the
    rate numerator until it is closed.
    """

    def __init__(
        self,
        *,
        work_week: WorkWeek | None = None,
        hours_calculator: HoursCalculator | None = None,
    ):
        self._week = work_week or WorkWeek()
        self._hours = hours_calculator or StoredHoursCalculator()

    def classify(self, record: Optional[AttendanceDay], day: date, today: date) -> DayClassification:
        if record is None:
            return DayClassification.ABSENT if day < today else DayClassification.NONE

        marked = _MARKED.get(record.status)
        if marked is not None:
            return marked

        if record.check_in_time is None:
            return DayClassification.ABSENT if day < today else DayClassification.NONE
        if record.check_out_time is None and day == today:
            return DayClassification.ACTIVE
        if record.status == AttendanceStatus.LATE:
            return DayClassification.LATE
        return DayClassification.PRESENT

    def working_days_cutoff(self, *, year: int, month: int, days_in_month: int, today: date) -> int:
        """Last day of the month that counts as a working day candidate (0 for a future month)."""
        if (year, month) < (today.year, today.month):
            return days_in_month
        if (year, month) == (today.year, today.month):
            return today.day
        return 0

    def compute(
        self,
        employee_id: int,
        month: int,
        year: int,
        records: Iterable[AttendanceDay],
        *,
        today: date,
        now: Optional[datetime] = None,
        live_break_minutes: int = 0,
        calendar_info: Optional[tuple[int, int]] = None,
    ) -> MonthlyAggregate:
        days_in_month, first_weekday = calendar_info or month_calendar(year, month)

        by_date: dict[date, AttendanceDay] = {}
        for r in records:
            if r.employee_id == employee_id and r.work_date.year == year and r.work_date.month == month:
                by_date[r.work_date] = r

        cutoff = self.working_days_cutoff(year=year, month=month, days_in_month=days_in_month, today=today)
        totals = _Totals()
        entries: list[DayEntry] = []
        working_days = 0
        total_minutes = 0
        total_break_minutes = 0

        for d in range(1, days_in_month + 1):
            current = date(year, month, d)
            record = by_date.get(current)

            minutes = self._hours.worked_minutes(record, today=today, now=now) if record else 0
            total_minutes += minutes
            if record is not None:
                if record.is_closed:
                    total_break_minutes += int(record.total_break_minutes or 0)
                elif current == today:
                    total_break_minutes += int(live_break_minutes)

            if self._week.is_weekend_weekday((first_weekday + d - 1) % 7):
                entries.append(DayEntry(current, DayClassification.WEEKEND, DurationCalculator.minutes_to_hours(minutes)))
                continue

            if d <= cutoff:
                working_days += 1

            classification = self.classify(record, current, today)
            entries.append(DayEntry(current, classification, DurationCalculator.minutes_to_hours(minutes)))
            if classification != DayClassification.NONE:
                totals.add(classification, minutes)

        present = totals.count(DayClassification.PRESENT)
        late = totals.count(DayClassification.LATE)
        worked_days = sum(totals.count(c) for c in _WORKED)
        worked_minutes = sum(totals.worked_minutes_by_class.get(c, 0) for c in _WORKED)

        return MonthlyAggregate(
            employee_id=employee_id,
            month=month,
            year=year,
            present_days=present,
            late_days=late,
            absent_days=totals.count(DayClassification.ABSENT),
            half_days=totals.count(DayClassification.HALF_DAY),
            on_leave_days=totals.count(DayClassification.ON_LEAVE),
            active_days=totals.count(DayClassification.ACTIVE),
            working_days=working_days,
            total_hours=DurationCalculator.minutes_to_hours(total_minutes),
            total_break_minutes=total_break_minutes,
            attendance_rate_percent=rate_percent(present + late, working_days),
            average_hours=round(worked_minutes / 60 / worked_days, 2) if worked_days else 0.0,
            days=tuple(entries),
        )
