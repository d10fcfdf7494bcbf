from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, BreakState, ClockState


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceDay:
    """Domain entity: one employee's attendance record for one calendar date.

    ``total_hours`` and ``total_break_minutes`` are filled in at clock-out and
    read back by the monthly report instead of recomputing from timestamps.
    """

    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None
    location: Optional[str] = None
    total_hours: Optional[float] = None
    total_break_minutes: Optional[int] = None
    attendance_id: Optional[int] = None

    @property
    def is_closed(self) -> bool:
        return self.check_out_time is not None

    def with_id(self, attendance_id: int) -> "AttendanceDay":
        return replace(self, attendance_id=attendance_id)

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in": _iso(self.check_in_time),
            "check_out": _iso(self.check_out_time),
            "status": self.status.value,
            "total_hours": self.total_hours,
            "total_break_minutes": self.total_break_minutes,
            "location": self.location,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class BreakInterval:
    """Domain entity: one start/end span an employee was on break."""

    employee_id: int
    work_date: date
    start_time: datetime
    end_time: Optional[datetime] = None
    state: BreakState = BreakState.ACTIVE
    reason: Optional[str] = None
    duration_minutes: Optional[int] = None
    break_id: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.state == BreakState.ACTIVE

    def with_id(self, break_id: int) -> "BreakInterval":
        return replace(self, break_id=break_id)

    def to_dict(self) -> dict:
        return {
            "id": self.break_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "state": self.state.value,
            "reason": self.reason,
            "duration_minutes": self.duration_minutes,
        }


@dataclass(frozen=True)
class DailySnapshot:
    """Derived, point-in-time view of a day. Never persisted."""

    employee_id: int
    work_date: date
    state: ClockState
    gross_worked_minutes: int
    total_break_minutes: int
    can_clock_in: bool
    can_clock_out: bool
    can_start_break: bool
    can_end_break: bool
    attendance_status: Optional[AttendanceStatus] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    active_break_id: Optional[int] = None
    active_break_started_at: Optional[datetime] = None
    breaks_taken: int = 0

    @property
    def is_on_break(self) -> bool:
        return self.state == ClockState.ON_BREAK

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "status": self.state.value,
            "attendance_status": self.attendance_status.value if self.attendance_status else None,
            "check_in": _iso(self.check_in_time),
            "check_out": _iso(self.check_out_time),
            "gross_worked_minutes": self.gross_worked_minutes,
            "total_break_minutes": self.total_break_minutes,
            "can_clock_in": self.can_clock_in,
            "can_clock_out": self.can_clock_out,
            "can_start_break": self.can_start_break,
            "can_end_break": self.can_end_break,
            "is_on_break": self.is_on_break,
            "active_break_id": self.active_break_id,
            "active_break_started_at": _iso(self.active_break_started_at),
            "breaks_taken": self.breaks_taken,
        }
