from datetime import date, datetime, time

import pytest

from src.hr_dashboard.hr_dashboard.attendance.clock import AttendanceClock
from src.hr_dashboard.hr_dashboard.attendance.policy import GracePolicy
from src.hr_dashboard.hr_dashboard.core.enums import AttendanceStatus, ClockState
from src.hr_dashboard.hr_dashboard.core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    BreakAlreadyActive,
    BreakStillActive,
    InvalidTimeOrdering,
    NoActiveBreak,
    NoActiveSession,
)

DAY = date(2025, 3, 10)
POLICY = GracePolicy(workday_start=time(9, 0), grace_minutes=30)


def _at(hour, minute=0):
    return datetime(2025, 3, 10, hour, minute)


def _clock():
    return AttendanceClock(1, DAY, policy=POLICY)


def _persist_break(clock, interval, break_id):
    # What the service does once the repository has assigned an id.
    return AttendanceClock(1, DAY, clock.day, [interval.with_id(break_id)], policy=POLICY)


def test_late_clock_in_break_and_clock_out_scenario():
    clock = _clock()
    day = clock.clock_in(_at(9, 35))
    assert day.status == AttendanceStatus.LATE

    interval = clock.start_break(_at(13, 0))
    clock = _persist_break(clock, interval, 1)
    clock.end_break(1, _at(13, 30))
    closed = clock.clock_out(_at(18, 0))

    snap = clock.snapshot(_at(19, 0))
    assert snap.state == ClockState.CLOCKED_OUT
    assert snap.total_break_minutes == 30
    assert snap.gross_worked_minutes == 505
    assert closed.total_hours == 8.42
    assert closed.total_break_minutes == 30
    assert closed.status == AttendanceStatus.LATE


def test_clock_in_before_cutoff_is_present():
    clock = _clock()

    assert clock.clock_in(_at(9, 30)).status == AttendanceStatus.PRESENT


def test_snapshot_flags_follow_state():
    clock = _clock()
    snap = clock.snapshot(_at(8))
    assert snap.state == ClockState.NOT_CLOCKED_IN
    assert (snap.can_clock_in, snap.can_clock_out, snap.can_start_break, snap.can_end_break) == (True, False, False, False)

    clock.clock_in(_at(9))
    snap = clock.snapshot(_at(10))
    assert snap.state == ClockState.WORKING
    assert (snap.can_clock_in, snap.can_clock_out, snap.can_start_break, snap.can_end_break) == (False, True, True, False)

    interval = clock.start_break(_at(11))
    clock = _persist_break(clock, interval, 4)
    snap = clock.snapshot(_at(11, 5))
    assert snap.state == ClockState.ON_BREAK
    assert snap.is_on_break
    assert snap.active_break_id == 4
    assert (snap.can_clock_in, snap.can_clock_out, snap.can_start_break, snap.can_end_break) == (False, False, False, True)


def test_snapshot_does_not_mutate():
    clock = _clock()
    clock.clock_in(_at(9))
    before = clock.day

    clock.snapshot(_at(12))
    clock.snapshot(_at(15))

    assert clock.day == before
    assert clock.state == ClockState.WORKING


def test_worked_minutes_never_decrease_while_open():
    clock = _clock()
    clock.clock_in(_at(9))
    assert clock.snapshot(_at(10)).gross_worked_minutes <= clock.snapshot(_at(10, 1)).gross_worked_minutes

    interval = clock.start_break(_at(12))
    clock = _persist_break(clock, interval, 1)
    first = clock.snapshot(_at(12, 10))
    second = clock.snapshot(_at(12, 20))
    assert first.gross_worked_minutes <= second.gross_worked_minutes
    assert first.total_break_minutes == 10
    assert second.total_break_minutes == 20


def test_clock_in_twice_fails():
    clock = _clock()
    clock.clock_in(_at(9))

    with pytest.raises(AlreadyClockedIn):
        clock.clock_in(_at(9, 5))


def test_operations_before_clock_in_fail_with_no_active_session():
    clock = _clock()

    with pytest.raises(NoActiveSession):
        clock.clock_out(_at(17))
    with pytest.raises(NoActiveSession):
        clock.start_break(_at(12))
    with pytest.raises(NoActiveSession):
        clock.end_break(1, _at(12))


def test_clock_out_while_on_break_fails():
    clock = _clock()
    clock.clock_in(_at(9))
    interval = clock.start_break(_at(12))
    clock = _persist_break(clock, interval, 1)

    with pytest.raises(BreakStillActive):
        clock.clock_out(_at(12, 30))
    assert clock.state == ClockState.ON_BREAK


def test_break_transitions_from_wrong_state():
    clock = _clock()
    clock.clock_in(_at(9))

    with pytest.raises(NoActiveBreak):
        clock.end_break(1, _at(10))

    interval = clock.start_break(_at(10))
    clock = _persist_break(clock, interval, 1)
    with pytest.raises(BreakAlreadyActive):
        clock.start_break(_at(10, 5))


def test_after_clock_out_everything_fails_with_already_clocked_out():
    clock = _clock()
    clock.clock_in(_at(9))
    clock.clock_out(_at(17))

    with pytest.raises(AlreadyClockedOut):
        clock.clock_out(_at(18))
    with pytest.raises(AlreadyClockedOut):
        clock.start_break(_at(18))
    with pytest.raises(AlreadyClockedOut):
        clock.end_break(1, _at(18))
    with pytest.raises(AlreadyClockedIn):
        clock.clock_in(_at(18))


def test_clock_out_before_clock_in_time_is_rejected():
    clock = _clock()
    clock.clock_in(_at(10))

    with pytest.raises(InvalidTimeOrdering):
        clock.clock_out(_at(9))
    assert clock.state == ClockState.WORKING


def test_break_cannot_start_before_clock_in():
    clock = _clock()
    clock.clock_in(_at(10))

    with pytest.raises(InvalidTimeOrdering):
        clock.start_break(_at(9, 45))
    assert clock.tracker.active is None
