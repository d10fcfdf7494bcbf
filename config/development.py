import os

from .config import Config

DB_CONFIG = Config.db_config()

WORKDAY_START = Config.WORKDAY_START
LATE_GRACE_MINUTES = Config.LATE_GRACE_MINUTES
WEEKEND_DAYS = Config.WEEKEND_DAYS

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
