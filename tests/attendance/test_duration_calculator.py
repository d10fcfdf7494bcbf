from datetime import date, datetime

import pytest

from src.hr_dashboard.hr_dashboard.attendance.duration import DurationCalculator
from src.hr_dashboard.hr_dashboard.attendance.model import AttendanceDay
from src.hr_dashboard.hr_dashboard.core.enums import AttendanceStatus
from src.hr_dashboard.hr_dashboard.core.exceptions import InvalidTimeOrdering


def _day(check_in=None, check_out=None):
    return AttendanceDay(
        employee_id=1,
        work_date=date(2025, 3, 10),
        status=AttendanceStatus.PRESENT,
        check_in_time=check_in,
        check_out_time=check_out,
    )


def test_worked_minutes_closed_day_ignores_now():
    day = _day(datetime(2025, 3, 10, 9, 0), datetime(2025, 3, 10, 17, 30))

    assert DurationCalculator.worked_minutes(day, datetime(2025, 3, 10, 23, 0)) == 510


def test_worked_minutes_open_day_is_live():
    day = _day(datetime(2025, 3, 10, 9, 0))

    assert DurationCalculator.worked_minutes(day, datetime(2025, 3, 10, 11, 15)) == 135


def test_worked_minutes_without_checkin_is_zero():
    assert DurationCalculator.worked_minutes(_day(), datetime(2025, 3, 10, 12, 0)) == 0
    assert DurationCalculator.worked_minutes(None, datetime(2025, 3, 10, 12, 0)) == 0


def test_partial_minutes_are_truncated():
    start = datetime(2025, 3, 10, 9, 0, 0)

    assert DurationCalculator.interval_minutes(start, datetime(2025, 3, 10, 9, 1, 59)) == 1


def test_negative_interval_clamps_to_zero_and_flags():
    elapsed = DurationCalculator.elapsed(datetime(2025, 3, 10, 10, 0), datetime(2025, 3, 10, 9, 0))

    assert elapsed.minutes == 0
    assert elapsed.invalid_ordering is True
    with pytest.raises(InvalidTimeOrdering):
        elapsed.raise_if_invalid()


def test_minutes_to_hours_rounds_to_two_decimals():
    assert DurationCalculator.minutes_to_hours(505) == 8.42
