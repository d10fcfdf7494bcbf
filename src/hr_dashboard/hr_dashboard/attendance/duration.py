from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.exceptions import InvalidTimeOrdering
from .model import AttendanceDay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Elapsed:
    minutes: int
    invalid_ordering: bool = False

    def raise_if_invalid(self) -> int:
        if self.invalid_ordering:
            raise InvalidTimeOrdering()
        return self.minutes


class DurationCalculator:
    """Elapsed-time rules shared by the break tracker, the clock and reports.

    Minutes are whole minutes, truncated. Worked time is always gross: break
    time is reported separately and never subtracted here.
    """

    @staticmethod
    def elapsed(start: datetime, end: datetime) -> Elapsed:
        seconds = (end - start).total_seconds()
        if seconds < 0:
            logger.warning("Negative interval clamped to 0: start=%s end=%s", start, end)
            return Elapsed(minutes=0, invalid_ordering=True)
        return Elapsed(minutes=int(seconds // 60))

    @classmethod
    def interval_minutes(cls, start: datetime, end: datetime) -> int:
        return cls.elapsed(start, end).minutes

    @classmethod
    def worked_minutes(cls, day: Optional[AttendanceDay], now: datetime) -> int:
        if day is None or day.check_in_time is None:
            return 0
        if day.check_out_time is not None:
            return cls.interval_minutes(day.check_in_time, day.check_out_time)
        return cls.interval_minutes(day.check_in_time, now)

    @staticmethod
    def minutes_to_hours(minutes: int) -> float:
        return round(minutes / 60, 2)
