from __future__ import annotations

from enum import Enum


class ClockState(str, Enum):
    """State of one employee-day, derived from the stored day and its breaks."""

    NOT_CLOCKED_IN = "NOT_CLOCKED_IN"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"


class AttendanceStatus(str, Enum):
    """Stored status of an attendance day."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"


class BreakState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class DayClassification(str, Enum):
    """Bucket a calendar day falls into when a month is aggregated."""

    WEEKEND = "weekend"
    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"
    ABSENT = "absent"
    ACTIVE = "active"
    NONE = "none"


# Set by an employer; present/late only ever come from clock-in.
MARKABLE_STATUSES = (AttendanceStatus.ABSENT, AttendanceStatus.HALF_DAY, AttendanceStatus.ON_LEAVE)
