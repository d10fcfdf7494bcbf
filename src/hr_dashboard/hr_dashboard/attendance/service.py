from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import Clock, SystemClock, format_hours
from ..common.validators import optional_text, require_enum, require_positive_id
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_LOCATION_LENGTH, MAX_NOTES_LENGTH
from ..core.enums import MARKABLE_STATUSES, AttendanceStatus
from ..core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    AttendanceError,
    BreakStillActive,
    NoActiveBreak,
    ValidationError,
)
from .clock import AttendanceClock
from .duration import DurationCalculator
from .factory import AttendanceStrategyFactory
from .model import AttendanceDay, BreakInterval, DailySnapshot
from .policy import GracePolicy
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Clock-in/out and break operations for the API layer.

    Every mutating call loads the employee-day, lets ``AttendanceClock``
    validate the transition, persists the result with a compare-and-set write
    and returns the refreshed snapshot.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        clock: Clock | None = None,
        policy: GracePolicy | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        calculator: DurationCalculator | None = None,
    ):
        self._attendance = attendance
        self._clock = clock or SystemClock()
        self._policy = policy or GracePolicy()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._calc = calculator or DurationCalculator()

    def _now(self, now: datetime | None) -> datetime:
        return now or self._clock.now()

    def _load(self, employee_id: int, work_date: date) -> AttendanceClock:
        day = self._attendance.get_day(employee_id, work_date)
        breaks = self._attendance.list_breaks(employee_id, work_date) if day else ()
        return AttendanceClock(
            employee_id,
            work_date,
            day,
            breaks,
            policy=self._policy,
            strategy_factory=self._factory,
            calculator=self._calc,
        )

    def _rejected(self, op: str, employee_id: int, work_date: date, error: AttendanceError) -> None:
        logger.info("%s rejected: employee=%s date=%s code=%s", op, employee_id, work_date, error.code)

    def clock_in(
        self,
        employee_id: int,
        *,
        now: datetime | None = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> DailySnapshot:
        employee_id = require_positive_id(employee_id, "employee_id")
        location = optional_text(location, "location", MAX_LOCATION_LENGTH)
        notes = optional_text(notes, "notes", MAX_NOTES_LENGTH)
        now = self._now(now)
        clock = self._load(employee_id, now.date())

        try:
            day = clock.clock_in(now, location=location, notes=notes)
            self._attendance.create_day(day)
        except AttendanceError as e:
            self._rejected("clock_in", employee_id, now.date(), e)
            raise

        logger.info("clock_in: employee=%s date=%s status=%s", employee_id, now.date(), day.status.value)
        return self.today(employee_id, now=now)

    def clock_out(
        self,
        employee_id: int,
        *,
        now: datetime | None = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> DailySnapshot:
        employee_id = require_positive_id(employee_id, "employee_id")
        location = optional_text(location, "location", MAX_LOCATION_LENGTH)
        notes = optional_text(notes, "notes", MAX_NOTES_LENGTH)
        now = self._now(now)
        clock = self._load(employee_id, now.date())

        try:
            day = clock.clock_out(now, location=location, notes=notes)
            if not self._attendance.close_day(day):
                # Lost a race: re-read to report what happened in between.
                raise self._closing_conflict(employee_id, now.date())
        except AttendanceError as e:
            self._rejected("clock_out", employee_id, now.date(), e)
            raise

        logger.info(
            "clock_out: employee=%s date=%s hours=%s break_minutes=%s",
            employee_id,
            now.date(),
            day.total_hours,
            day.total_break_minutes,
        )
        return self.today(employee_id, now=now)

    def _closing_conflict(self, employee_id: int, work_date: date) -> AttendanceError:
        current = self._load(employee_id, work_date)
        if current.tracker.active is not None:
            return BreakStillActive()
        return AlreadyClockedOut()

    def start_break(
        self,
        employee_id: int,
        *,
        now: datetime | None = None,
        reason: Optional[str] = None,
    ) -> DailySnapshot:
        employee_id = require_positive_id(employee_id, "employee_id")
        reason = optional_text(reason, "reason", 200)
        now = self._now(now)
        clock = self._load(employee_id, now.date())

        try:
            interval = clock.start_break(now, reason=reason)
            break_id = self._attendance.create_break(interval)
            if break_id is None:
                raise AlreadyClockedOut()
        except AttendanceError as e:
            self._rejected("start_break", employee_id, now.date(), e)
            raise

        logger.info("start_break: employee=%s date=%s break_id=%s", employee_id, now.date(), break_id)
        return self.today(employee_id, now=now)

    def end_break(
        self,
        employee_id: int,
        break_id: int,
        *,
        now: datetime | None = None,
    ) -> DailySnapshot:
        employee_id = require_positive_id(employee_id, "employee_id")
        break_id = require_positive_id(break_id, "break_id")
        now = self._now(now)
        clock = self._load(employee_id, now.date())

        try:
            interval = clock.end_break(break_id, now)
            if not self._attendance.close_break(interval):
                raise NoActiveBreak()
        except AttendanceError as e:
            self._rejected("end_break", employee_id, now.date(), e)
            raise

        logger.info(
            "end_break: employee=%s date=%s break_id=%s minutes=%s",
            employee_id,
            now.date(),
            break_id,
            interval.duration_minutes,
        )
        return self.today(employee_id, now=now)

    def mark_day(
        self,
        employee_id: int,
        status: AttendanceStatus | str,
        *,
        work_date: date | None = None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceDay:
        """Employer-side marking of absent, half-day or on-leave days.

        A day that already has a clock-in keeps the status the clock gave it.
        """
        employee_id = require_positive_id(employee_id, "employee_id")
        status = require_enum(status, AttendanceStatus, "status")
        if status not in MARKABLE_STATUSES:
            raise ValidationError(f"{status.value} is set by clock-in and cannot be marked")
        notes = optional_text(notes, "notes", MAX_NOTES_LENGTH)
        work_date = work_date or self._now(now).date()

        day = AttendanceDay(employee_id=employee_id, work_date=work_date, status=status, notes=notes)
        try:
            existing = self._attendance.get_day(employee_id, work_date)
            if existing is not None and existing.check_in_time is not None:
                raise AlreadyClockedIn("Day has a clock-in; its status comes from the clock")
            attendance_id = self._attendance.mark_day(day)
            if attendance_id is None:
                raise AlreadyClockedIn("Day has a clock-in; its status comes from the clock")
        except AttendanceError as e:
            self._rejected("mark_day", employee_id, work_date, e)
            raise

        logger.info("mark_day: employee=%s date=%s status=%s", employee_id, work_date, status.value)
        return day.with_id(attendance_id)

    def today(self, employee_id: int, *, now: datetime | None = None) -> DailySnapshot:
        """Pure read of today's state against ``now``; never writes."""
        employee_id = require_positive_id(employee_id, "employee_id")
        now = self._now(now)
        return self._load(employee_id, now.date()).snapshot(now)

    def list_breaks(self, employee_id: int, *, now: datetime | None = None) -> list[BreakInterval]:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = self._now(now)
        return self._load(employee_id, now.date()).tracker.live_intervals(now)

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT, now: datetime | None = None) -> list[dict]:
        employee_id = require_positive_id(employee_id, "employee_id")
        now = self._now(now)
        rows = self._attendance.get_recent_days(employee_id, max(1, int(limit)))
        return [self._to_history_row(r, now) for r in rows]

    def _to_history_row(self, day, now: datetime) -> dict:
        if day.total_hours is not None:
            hours = day.total_hours
        elif day.is_closed or day.work_date == now.date():
            hours = self._calc.minutes_to_hours(self._calc.worked_minutes(day, now))
        else:
            # Left open on a past date: no trustworthy end time.
            hours = 0.0

        row = day.to_dict()
        row["day"] = day.work_date.strftime("%A")
        row["total_hours"] = hours
        row["hours_display"] = format_hours(hours)
        return row
