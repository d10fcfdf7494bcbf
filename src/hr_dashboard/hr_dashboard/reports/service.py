from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Optional

from ..attendance.breaks import BreakTracker
from ..attendance.model import AttendanceDay
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, SystemClock, format_hours, month_calendar
from ..common.validators import (
    require_date_range,
    require_enum,
    require_month,
    require_positive_id,
    require_year,
)
from ..core.constants import MAX_REPORT_RANGE_DAYS
from ..core.enums import AttendanceStatus
from .aggregator import MonthlyAggregator, rate_percent
from .model import AttendanceStats, DateSummary, MonthlyAggregate, StatusCounts

logger = logging.getLogger(__name__)


class MonthlyReportService:
    """Loads a month of attendance days and merges in today's live figures."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        aggregator: Optional[MonthlyAggregator] = None,
        clock: Clock | None = None,
    ):
        self._attendance = attendance
        self._aggregator = aggregator or MonthlyAggregator()
        self._clock = clock or SystemClock()

    def compute(self, employee_id: int, month: int, year: int, *, now: datetime | None = None) -> MonthlyAggregate:
        employee_id = require_positive_id(employee_id, "employee_id")
        month = require_month(month)
        year = require_year(year)
        now = now or self._clock.now()
        today = now.date()

        days_in_month, first_weekday = month_calendar(year, month)
        records = self._attendance.list_days(employee_id, date(year, month, 1), date(year, month, days_in_month))

        live_break_minutes = 0
        if (year, month) == (today.year, today.month):
            todays = next((r for r in records if r.work_date == today), None)
            if todays is not None and not todays.is_closed:
                tracker = BreakTracker(employee_id, today, self._attendance.list_breaks(employee_id, today))
                live_break_minutes = tracker.total_break_minutes(now)

        aggregate = self._aggregator.compute(
            employee_id,
            month,
            year,
            records,
            today=today,
            now=now,
            live_break_minutes=live_break_minutes,
            calendar_info=(days_in_month, first_weekday),
        )
        logger.debug(
            "monthly report: employee=%s %04d-%02d rate=%s%% hours=%s",
            employee_id,
            year,
            month,
            aggregate.attendance_rate_percent,
            format_hours(aggregate.total_hours),
        )
        return aggregate


class AttendanceOverviewService:
    """Cross-employee listing and per-date status counts for the employer view."""

    def __init__(self, attendance: AttendanceRepository, *, clock: Clock | None = None):
        self._attendance = attendance
        self._clock = clock or SystemClock()

    def list_days(
        self,
        start: date | None = None,
        end: date | None = None,
        *,
        status: AttendanceStatus | str | None = None,
        now: datetime | None = None,
    ) -> list[AttendanceDay]:
        today = (now or self._clock.now()).date()
        start, end = require_date_range(start or today, end or start or today, MAX_REPORT_RANGE_DAYS)
        if status is not None:
            status = require_enum(status, AttendanceStatus, "status")
        return list(self._attendance.list_all_days(start, end, status))

    def stats(self, start: date | None = None, end: date | None = None, *, now: datetime | None = None) -> AttendanceStats:
        """Counts per date from ``start`` (default: first of this month) to ``end`` (default: today).

        Every date of the range gets a summary, zero-filled when nothing is stored.
        The rate counts present and late days against all stored days.
        """
        today = (now or self._clock.now()).date()
        end = end or today
        start = start or end.replace(day=1)
        start, end = require_date_range(start, end, MAX_REPORT_RANGE_DAYS)

        days = self._attendance.list_all_days(start, end)
        by_date: dict[date, list[AttendanceDay]] = defaultdict(list)
        for d in days:
            by_date[d.work_date].append(d)

        summaries = []
        current = start
        while current <= end:
            summaries.append(DateSummary(current, StatusCounts.from_days(by_date.get(current, ()))))
            current += timedelta(days=1)

        totals = StatusCounts.from_days(days)
        stats = AttendanceStats(
            start=start,
            end=end,
            totals=totals,
            attendance_rate_percent=rate_percent(totals.present + totals.late, totals.total),
            dates=tuple(summaries),
        )
        logger.debug("attendance stats: %s..%s records=%s", start, end, totals.total)
        return stats
