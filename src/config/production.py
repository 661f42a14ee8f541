import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "timesheet"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")

BATCH_POOL_SIZE = int(os.getenv("BATCH_POOL_SIZE", "8"))

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
SCHEDULE_WEEKDAY = int(os.getenv("SCHEDULE_WEEKDAY", "0"))
SCHEDULE_HOUR = int(os.getenv("SCHEDULE_HOUR", "1"))
SCHEDULE_MINUTE = int(os.getenv("SCHEDULE_MINUTE", "0"))

MANUAL_TRIGGER_TIMEOUT_SECONDS = float(os.getenv("MANUAL_TRIGGER_TIMEOUT_SECONDS", "30"))
# Workers for manual runs; different weeks run side by side
TRIGGER_POOL_SIZE = int(os.getenv("TRIGGER_POOL_SIZE", "4"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
