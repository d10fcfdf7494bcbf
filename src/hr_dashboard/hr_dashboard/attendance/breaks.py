from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import BreakState
from ..core.exceptions import BreakAlreadyActive, BreakMismatch, NoActiveBreak
from .duration import DurationCalculator
from .model import BreakInterval


class BreakTracker:
    """Break intervals of one employee-day; at most one of them is active."""

    def __init__(
        self,
        employee_id: int,
        work_date: date,
        intervals: Iterable[BreakInterval] = (),
        *,
        calculator: DurationCalculator | None = None,
    ):
        self.employee_id = employee_id
        self.work_date = work_date
        self._intervals: list[BreakInterval] = sorted(intervals, key=lambda b: b.start_time)
        self._calc = calculator or DurationCalculator()

    @property
    def intervals(self) -> tuple[BreakInterval, ...]:
        return tuple(self._intervals)

    @property
    def active(self) -> Optional[BreakInterval]:
        for interval in self._intervals:
            if interval.is_active:
                return interval
        return None

    def start_break(self, now: datetime, reason: Optional[str] = None) -> BreakInterval:
        if self.active is not None:
            raise BreakAlreadyActive()

        interval = BreakInterval(
            employee_id=self.employee_id,
            work_date=self.work_date,
            start_time=now,
            state=BreakState.ACTIVE,
            reason=reason,
        )
        self._intervals.append(interval)
        return interval

    def end_break(self, break_id: Optional[int], now: datetime) -> BreakInterval:
        active = self.active
        if active is None:
            raise NoActiveBreak()
        if break_id != active.break_id:
            raise BreakMismatch(f"Break {break_id} is not the active break ({active.break_id})")

        minutes = self._calc.elapsed(active.start_time, now).raise_if_invalid()
        completed = replace(active, end_time=now, state=BreakState.COMPLETED, duration_minutes=minutes)
        self._intervals = [completed if b is active else b for b in self._intervals]
        return completed

    def total_break_minutes(self, now: datetime) -> int:
        # Recomputed on every call: the open interval grows with ``now``.
        total = 0
        for interval in self._intervals:
            if interval.is_active:
                total += self._calc.interval_minutes(interval.start_time, now)
            elif interval.end_time is not None:
                total += self._calc.interval_minutes(interval.start_time, interval.end_time)
        return total

    def live_intervals(self, now: datetime) -> list[BreakInterval]:
        """Intervals with the active one's duration filled in against ``now``."""
        out = []
        for interval in self._intervals:
            if interval.is_active:
                interval = replace(
                    interval, duration_minutes=self._calc.interval_minutes(interval.start_time, now)
                )
            out.append(interval)
        return out
