"""Recompute weekly timesheets from the command line (no HTTP layer).

Usage:
    python scripts/run_timesheets.py                       # current week, all employees
    python scripts/run_timesheets.py --week-start 2025-01-19
    python scripts/run_timesheets.py --week-start 2025-01-19 --employee-id emp-42
    python scripts/run_timesheets.py --previous-week       # what the weekly schedule runs
"""

from __future__ import annotations

import argparse
import importlib
import sys

from config import get_settings_module

from timesheet_engine.common.datetime_utils import parse_iso_date
from timesheet_engine.common.logger import configure_logging
from timesheet_engine.container import build_container
from timesheet_engine.core.exceptions import DomainError
from timesheet_engine.summaries.model import WeeklySummary


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute weekly timesheet summaries")
    parser.add_argument("--week-start", help="Any day of the week to recompute (YYYY-MM-DD)")
    parser.add_argument("--employee-id", help="Only recompute this employee")
    parser.add_argument("--previous-week", action="store_true", help="Run the periodic job for the last completed week")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(
        db_config=settings.DB_CONFIG,
        reference_timezone=getattr(settings, "REFERENCE_TIMEZONE", "UTC"),
        batch_pool_size=int(getattr(settings, "BATCH_POOL_SIZE", 4)),
        manual_timeout=None,
    )

    try:
        if args.previous_week:
            report = container.scheduler.run_periodic()
            if report is None:
                return 1
            print(f"week {report.week_start}: {len(report.summaries)} processed, {len(report.failures)} failed")
            return 0 if report.is_complete else 2

        week_start = parse_iso_date(args.week_start) if args.week_start else None
        result = container.scheduler.trigger_manual(week_start=week_start, employee_id=args.employee_id)
    except DomainError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        container.scheduler.stop()

    summaries = [result] if isinstance(result, WeeklySummary) else result
    for s in summaries:
        print(
            f"{s.employee_id}: {s.total_hours:.2f}h total, "
            f"{s.regular_hours:.2f}h regular, {s.overtime_hours:.2f}h overtime "
            f"({s.week_start} to {s.week_end})"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
