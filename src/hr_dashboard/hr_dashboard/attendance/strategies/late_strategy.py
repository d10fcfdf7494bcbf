from __future__ import annotations

from datetime import date, datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Clock-in after the grace cutoff."""

    def decide_checkin(self, *, now: datetime, today: date, cutoff: datetime) -> StatusDecision:
        late_minutes = int((now - cutoff).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {late_minutes} min after grace cutoff")
