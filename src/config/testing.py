import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

REFERENCE_TIMEZONE = "UTC"
BATCH_POOL_SIZE = 2

SCHEDULER_ENABLED = False
SCHEDULE_WEEKDAY = 0
SCHEDULE_HOUR = 1
SCHEDULE_MINUTE = 0

MANUAL_TRIGGER_TIMEOUT_SECONDS = 5
TRIGGER_POOL_SIZE = 2

AUTO_INIT_DB = False
