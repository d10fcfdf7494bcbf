import os


class Config:
    # Database
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "hr_dashboard")

    # Attendance policy
    WORKDAY_START = os.environ.get("WORKDAY_START", "09:00")
    LATE_GRACE_MINUTES = int(os.environ.get("LATE_GRACE_MINUTES", "30"))
    WEEKEND_DAYS = os.environ.get("WEEKEND_DAYS", "5,6")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
