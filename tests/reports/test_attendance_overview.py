from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_dashboard.hr_dashboard.attendance.model import AttendanceDay
from src.hr_dashboard.hr_dashboard.core.enums import AttendanceStatus
from src.hr_dashboard.hr_dashboard.core.exceptions import ValidationError
from src.hr_dashboard.hr_dashboard.reports.service import AttendanceOverviewService


def _day(employee_id, d, status):
    check_in = datetime(2025, 3, d, 9, 0) if status in (AttendanceStatus.PRESENT, AttendanceStatus.LATE) else None
    return AttendanceDay(employee_id=employee_id, work_date=date(2025, 3, d), status=status, check_in_time=check_in)


@pytest.fixture
def overview(attendance_repo, clock):
    for employee_id, d, status in [
        (1, 3, AttendanceStatus.PRESENT),
        (2, 3, AttendanceStatus.LATE),
        (3, 3, AttendanceStatus.ON_LEAVE),
        (1, 4, AttendanceStatus.PRESENT),
        (2, 4, AttendanceStatus.ABSENT),
        (3, 4, AttendanceStatus.HALF_DAY),
        (1, 10, AttendanceStatus.LATE),
    ]:
        attendance_repo.seed(_day(employee_id, d, status))
    return AttendanceOverviewService(attendance_repo, clock=clock)


def test_list_days_defaults_to_today(overview):
    (only,) = overview.list_days()

    assert only.employee_id == 1
    assert only.work_date == date(2025, 3, 10)


def test_list_days_in_range_ordered_by_date_then_employee(overview):
    days = overview.list_days(date(2025, 3, 3), date(2025, 3, 4))

    assert [(d.work_date.day, d.employee_id) for d in days] == [(3, 1), (3, 2), (3, 3), (4, 1), (4, 2), (4, 3)]


def test_list_days_status_filter(overview):
    days = overview.list_days(date(2025, 3, 1), date(2025, 3, 31), status="late")

    assert [(d.employee_id, d.work_date.day) for d in days] == [(2, 3), (1, 10)]


def test_list_days_rejects_unknown_status_and_reversed_range(overview):
    with pytest.raises(ValidationError):
        overview.list_days(date(2025, 3, 1), date(2025, 3, 31), status="sick")
    with pytest.raises(ValidationError):
        overview.list_days(date(2025, 3, 5), date(2025, 3, 1))


def test_list_days_range_is_bounded(overview):
    with pytest.raises(ValidationError):
        overview.list_days(date(2024, 1, 1), date(2025, 3, 1))


def test_stats_default_to_month_so_far(overview):
    stats = overview.stats()

    assert stats.start == date(2025, 3, 1)
    assert stats.end == date(2025, 3, 10)
    assert len(stats.dates) == 10
    assert stats.totals.total == 7
    assert stats.totals.present == 2
    assert stats.totals.late == 2
    # 4 of 7 stored days are present or late
    assert stats.attendance_rate_percent == 57


def test_stats_per_date_summary(overview):
    stats = overview.stats(date(2025, 3, 3), date(2025, 3, 5))
    by_day = {s.work_date.day: s.counts for s in stats.dates}

    assert by_day[3].to_dict() == {"present": 1, "late": 1, "absent": 0, "half_day": 0, "on_leave": 1, "total": 3}
    assert by_day[4].to_dict() == {"present": 1, "late": 0, "absent": 1, "half_day": 1, "on_leave": 0, "total": 3}
    assert by_day[5].total == 0


def test_stats_empty_range_has_zero_rate(attendance_repo, clock):
    stats = AttendanceOverviewService(attendance_repo, clock=clock).stats(date(2025, 2, 1), date(2025, 2, 28))

    assert stats.totals.total == 0
    assert stats.attendance_rate_percent == 0
    assert len(stats.dates) == 28
