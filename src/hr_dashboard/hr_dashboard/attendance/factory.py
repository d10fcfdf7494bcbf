from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from .policy import GracePolicy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, today: date, policy: GracePolicy) -> AttendanceStrategy:
        if now <= policy.cutoff_for(today):
            return NormalStrategy()
        return LateStrategy()
