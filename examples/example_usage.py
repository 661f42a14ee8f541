"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the calculation lives in the services.
"""

import importlib
from datetime import timedelta

from config import get_settings_module

from timesheet_engine.common.datetime_utils import now_local, week_start_of
from timesheet_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, reference_timezone=settings.REFERENCE_TIMEZONE)

    last_week = week_start_of(now_local(container.tz).date()) - timedelta(days=7)
    for employee_id in container.employees_repo.list_employee_ids()[:5]:
        weekly = container.weekly_aggregator.build(employee_id, last_week)
        print(employee_id, weekly.total_hours, weekly.regular_hours, weekly.overtime_hours)


if __name__ == "__main__":
    main()
