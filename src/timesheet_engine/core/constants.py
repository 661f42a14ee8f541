"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

REGULAR_HOURS_PER_DAY = 8
DAYS_PER_WEEK = 7
HOURS_DECIMALS = 2

DEFAULT_BATCH_POOL_SIZE = 4
DEFAULT_MANUAL_TRIGGER_TIMEOUT_SECONDS = 30
DEFAULT_TRIGGER_POOL_SIZE = 4

# Periodic run: Monday 01:00 in the reference timezone (weekday follows date.weekday()).
DEFAULT_SCHEDULE_WEEKDAY = 0
DEFAULT_SCHEDULE_HOUR = 1
DEFAULT_SCHEDULE_MINUTE = 0
