import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Day/week boundaries are computed in this timezone.
REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")

BATCH_POOL_SIZE = int(os.getenv("BATCH_POOL_SIZE", "4"))

# Weekly run, default Monday 01:00 (weekday: 0=Monday .. 6=Sunday)
SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "0")))
SCHEDULE_WEEKDAY = int(os.getenv("SCHEDULE_WEEKDAY", "0"))
SCHEDULE_HOUR = int(os.getenv("SCHEDULE_HOUR", "1"))
SCHEDULE_MINUTE = int(os.getenv("SCHEDULE_MINUTE", "0"))

# 0 = wait for the manual run to finish
MANUAL_TRIGGER_TIMEOUT_SECONDS = float(os.getenv("MANUAL_TRIGGER_TIMEOUT_SECONDS", "30"))
# Workers for manual runs; different weeks run side by side
TRIGGER_POOL_SIZE = int(os.getenv("TRIGGER_POOL_SIZE", "4"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
