from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import ClockState
from ..core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    BreakAlreadyActive,
    BreakStillActive,
    InvalidTimeOrdering,
    NoActiveBreak,
    NoActiveSession,
)
from .breaks import BreakTracker
from .duration import DurationCalculator
from .factory import AttendanceStrategyFactory
from .model import AttendanceDay, BreakInterval, DailySnapshot
from .policy import GracePolicy


def derive_state(day: Optional[AttendanceDay], tracker: BreakTracker) -> ClockState:
    """The single place a day's clock state is computed."""
    if day is None:
        return ClockState.NOT_CLOCKED_IN
    # A day without check-in (leave/absence marked elsewhere) is closed for clocking.
    if day.check_out_time is not None or day.check_in_time is None:
        return ClockState.CLOCKED_OUT
    if tracker.active is not None:
        return ClockState.ON_BREAK
    return ClockState.WORKING


class AttendanceClock:
    """State machine for one employee-day.

    NOT_CLOCKED_IN -> WORKING -> ON_BREAK <-> WORKING -> CLOCKED_OUT

    Each transition validates against the current state, applies to this
    in-memory copy and returns the value the caller must persist. A rejected
    transition raises an ``AttendanceError`` and changes nothing.
    """

    def __init__(
        self,
        employee_id: int,
        work_date: date,
        day: Optional[AttendanceDay] = None,
        breaks: Iterable[BreakInterval] = (),
        *,
        policy: GracePolicy | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        calculator: DurationCalculator | None = None,
    ):
        self.employee_id = employee_id
        self.work_date = work_date
        self._day = day
        self._calc = calculator or DurationCalculator()
        self._tracker = BreakTracker(employee_id, work_date, breaks, calculator=self._calc)
        self._policy = policy or GracePolicy()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def day(self) -> Optional[AttendanceDay]:
        return self._day

    @property
    def tracker(self) -> BreakTracker:
        return self._tracker

    @property
    def state(self) -> ClockState:
        return derive_state(self._day, self._tracker)

    def _require_open_session(self) -> ClockState:
        state = self.state
        if state == ClockState.NOT_CLOCKED_IN:
            raise NoActiveSession()
        if state == ClockState.CLOCKED_OUT:
            raise AlreadyClockedOut()
        return state

    def clock_in(self, now: datetime, *, location: Optional[str] = None, notes: Optional[str] = None) -> AttendanceDay:
        if self.state != ClockState.NOT_CLOCKED_IN:
            raise AlreadyClockedIn()

        strategy = self._factory.for_checkin(now=now, today=self.work_date, policy=self._policy)
        decision = strategy.decide_checkin(now=now, today=self.work_date, cutoff=self._policy.cutoff_for(self.work_date))

        self._day = AttendanceDay(
            employee_id=self.employee_id,
            work_date=self.work_date,
            status=decision.status,
            check_in_time=now,
            notes=notes or decision.note,
            location=location,
        )
        return self._day

    def clock_out(self, now: datetime, *, location: Optional[str] = None, notes: Optional[str] = None) -> AttendanceDay:
        state = self._require_open_session()
        if state == ClockState.ON_BREAK:
            raise BreakStillActive()

        day = self._day
        gross = self._calc.elapsed(day.check_in_time, now).raise_if_invalid()

        self._day = replace(
            day,
            check_out_time=now,
            notes=notes or day.notes,
            location=location or day.location,
            total_hours=self._calc.minutes_to_hours(gross),
            total_break_minutes=self._tracker.total_break_minutes(now),
        )
        return self._day

    def start_break(self, now: datetime, *, reason: Optional[str] = None) -> BreakInterval:
        state = self._require_open_session()
        if state == ClockState.ON_BREAK:
            raise BreakAlreadyActive()
        if now < self._day.check_in_time:
            raise InvalidTimeOrdering("Break cannot start before clock-in")
        return self._tracker.start_break(now, reason)

    def end_break(self, break_id: Optional[int], now: datetime) -> BreakInterval:
        state = self._require_open_session()
        if state != ClockState.ON_BREAK:
            raise NoActiveBreak()
        return self._tracker.end_break(break_id, now)

    def snapshot(self, now: datetime) -> DailySnapshot:
        state = self.state
        day = self._day
        active = self._tracker.active
        return DailySnapshot(
            employee_id=self.employee_id,
            work_date=self.work_date,
            state=state,
            attendance_status=day.status if day else None,
            check_in_time=day.check_in_time if day else None,
            check_out_time=day.check_out_time if day else None,
            gross_worked_minutes=self._calc.worked_minutes(day, now),
            total_break_minutes=self._tracker.total_break_minutes(now),
            can_clock_in=state == ClockState.NOT_CLOCKED_IN,
            can_clock_out=state == ClockState.WORKING,
            can_start_break=state == ClockState.WORKING,
            can_end_break=state == ClockState.ON_BREAK,
            active_break_id=active.break_id if active else None,
            active_break_started_at=active.start_time if active else None,
            breaks_taken=len(self._tracker.intervals),
        )
