from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from ..attendance.model import AttendanceDay
from ..core.enums import AttendanceStatus, DayClassification


@dataclass(frozen=True)
class DayEntry:
    """One calendar day of a monthly report."""

    work_date: date
    classification: DayClassification
    hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "classification": self.classification.value,
            "hours": self.hours,
        }


@dataclass(frozen=True)
class MonthlyAggregate:
    employee_id: int
    month: int
    year: int
    present_days: int = 0
    late_days: int = 0
    absent_days: int = 0
    half_days: int = 0
    on_leave_days: int = 0
    active_days: int = 0
    working_days: int = 0
    total_hours: float = 0.0
    total_break_minutes: int = 0
    attendance_rate_percent: int = 0
    average_hours: float = 0.0
    days: tuple[DayEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "month": self.month,
            "year": self.year,
            "present_days": self.present_days,
            "late_days": self.late_days,
            "absent_days": self.absent_days,
            "half_days": self.half_days,
            "on_leave_days": self.on_leave_days,
            "active_days": self.active_days,
            "working_days": self.working_days,
            "total_hours": self.total_hours,
            "total_break_minutes": self.total_break_minutes,
            "attendance_rate_percent": self.attendance_rate_percent,
            "average_hours": self.average_hours,
            "days": [d.to_dict() for d in self.days],
        }


@dataclass(frozen=True)
class StatusCounts:
    """How many stored days carry each attendance status."""

    present: int = 0
    late: int = 0
    absent: int = 0
    half_day: int = 0
    on_leave: int = 0

    @classmethod
    def from_days(cls, days: Iterable[AttendanceDay]) -> "StatusCounts":
        c = Counter(d.status for d in days)
        return cls(
            present=c[AttendanceStatus.PRESENT],
            late=c[AttendanceStatus.LATE],
            absent=c[AttendanceStatus.ABSENT],
            half_day=c[AttendanceStatus.HALF_DAY],
            on_leave=c[AttendanceStatus.ON_LEAVE],
        )

    @property
    def total(self) -> int:
        return self.present + self.late + self.absent + self.half_day + self.on_leave

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "half_day": self.half_day,
            "on_leave": self.on_leave,
            "total": self.total,
        }


@dataclass(frozen=True)
class DateSummary:
    work_date: date
    counts: StatusCounts

    def to_dict(self) -> dict:
        return {"date": self.work_date.isoformat(), **self.counts.to_dict()}


@dataclass(frozen=True)
class AttendanceStats:
    """Employer overview of every employee's days in a date range."""

    start: date
    end: date
    totals: StatusCounts
    attendance_rate_percent: int = 0
    dates: tuple[DateSummary, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "totals": self.totals.to_dict(),
            "attendance_rate_percent": self.attendance_rate_percent,
            "dates": [d.to_dict() for d in self.dates],
        }
