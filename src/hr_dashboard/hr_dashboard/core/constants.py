"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_WORKDAY_START = time(9, 0)
DEFAULT_LATE_GRACE_MINUTES = 30
DEFAULT_WEEKEND_DAYS = (5, 6)
DEFAULT_HISTORY_LIMIT = 30
MAX_NOTES_LENGTH = 500
MAX_LOCATION_LENGTH = 120
MAX_REPORT_RANGE_DAYS = 366
