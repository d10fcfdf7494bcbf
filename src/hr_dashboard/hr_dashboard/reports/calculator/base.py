from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from ...attendance.model import AttendanceDay


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for report hour totals)."""

    @abstractmethod
    def worked_minutes(self, day: AttendanceDay, *, today: date, now: Optional[datetime] = None) -> int:
        raise NotImplementedError
