from __future__ import annotations

from datetime import date, datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """Clock-in at or before the grace cutoff."""

    def decide_checkin(self, *, now: datetime, today: date, cutoff: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
