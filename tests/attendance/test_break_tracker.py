from datetime import date, datetime

import pytest

from src.hr_dashboard.hr_dashboard.attendance.breaks import BreakTracker
from src.hr_dashboard.hr_dashboard.attendance.model import BreakInterval
from src.hr_dashboard.hr_dashboard.core.enums import BreakState
from src.hr_dashboard.hr_dashboard.core.exceptions import BreakAlreadyActive, BreakMismatch, NoActiveBreak

DAY = date(2025, 3, 10)


def _at(hour, minute=0):
    return datetime(2025, 3, 10, hour, minute)


def _completed(break_id, start, end):
    return BreakInterval(
        break_id=break_id,
        employee_id=1,
        work_date=DAY,
        start_time=start,
        end_time=end,
        state=BreakState.COMPLETED,
        duration_minutes=int((end - start).total_seconds() // 60),
    )


def test_start_break_twice_fails():
    tracker = BreakTracker(1, DAY)
    tracker.start_break(_at(10))

    with pytest.raises(BreakAlreadyActive):
        tracker.start_break(_at(10, 5))


def test_end_break_without_active_fails():
    tracker = BreakTracker(1, DAY, [_completed(1, _at(10), _at(10, 15))])

    with pytest.raises(NoActiveBreak):
        tracker.end_break(1, _at(11))


def test_end_break_with_stale_id_keeps_active_open():
    active = BreakInterval(break_id=7, employee_id=1, work_date=DAY, start_time=_at(13))
    tracker = BreakTracker(1, DAY, [_completed(6, _at(10), _at(10, 10)), active])

    with pytest.raises(BreakMismatch):
        tracker.end_break(6, _at(13, 30))

    assert tracker.active.break_id == 7


def test_end_break_sets_duration_and_completes():
    tracker = BreakTracker(1, DAY, [BreakInterval(break_id=3, employee_id=1, work_date=DAY, start_time=_at(13))])

    completed = tracker.end_break(3, _at(13, 30))

    assert completed.state == BreakState.COMPLETED
    assert completed.end_time == _at(13, 30)
    assert completed.duration_minutes == 30
    assert tracker.active is None


def test_total_includes_open_interval_against_now():
    active = BreakInterval(break_id=2, employee_id=1, work_date=DAY, start_time=_at(15))
    tracker = BreakTracker(1, DAY, [_completed(1, _at(10), _at(10, 20)), active])

    assert tracker.total_break_minutes(_at(15, 10)) == 30
    assert tracker.total_break_minutes(_at(15, 40)) == 60


def test_live_intervals_fill_active_duration():
    tracker = BreakTracker(1, DAY, [BreakInterval(break_id=2, employee_id=1, work_date=DAY, start_time=_at(15))])

    (live,) = tracker.live_intervals(_at(15, 12))

    assert live.duration_minutes == 12
    assert live.is_active
