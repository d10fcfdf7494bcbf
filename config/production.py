import os

from .config import Config

DB_CONFIG = Config.db_config()

WORKDAY_START = Config.WORKDAY_START
LATE_GRACE_MINUTES = Config.LATE_GRACE_MINUTES
WEEKEND_DAYS = Config.WEEKEND_DAYS

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
