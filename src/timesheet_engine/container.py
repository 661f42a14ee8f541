from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .batch.service import BatchProcessor
from .common.datetime_utils import load_timezone
from .core.constants import (
    DEFAULT_BATCH_POOL_SIZE,
    DEFAULT_MANUAL_TRIGGER_TIMEOUT_SECONDS,
    DEFAULT_SCHEDULE_HOUR,
    DEFAULT_SCHEDULE_MINUTE,
    DEFAULT_SCHEDULE_WEEKDAY,
    DEFAULT_TRIGGER_POOL_SIZE,
)
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeDirectory
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventStore
from .scheduler.service import TimesheetScheduler
from .summaries.mysql_summary_repository import MySQLSummaryRepository
from .summaries.repository import SummaryStore
from .summaries.service import MonthlyRollupService
from .timesheets.service import DailyTimesheetBuilder, WeeklyAggregator


@dataclass(frozen=True)
class Container:
    tz: tzinfo

    events_repo: EventStore
    employees_repo: EmployeeDirectory
    summaries_repo: SummaryStore

    daily_builder: DailyTimesheetBuilder
    weekly_aggregator: WeeklyAggregator
    batch_processor: BatchProcessor
    monthly_rollup_service: MonthlyRollupService
    scheduler: TimesheetScheduler

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    events_repo: EventStore,
    employees_repo: EmployeeDirectory,
    summaries_repo: SummaryStore,
    tz: tzinfo,
    batch_pool_size: int = DEFAULT_BATCH_POOL_SIZE,
    schedule_weekday: int = DEFAULT_SCHEDULE_WEEKDAY,
    schedule_hour: int = DEFAULT_SCHEDULE_HOUR,
    schedule_minute: int = DEFAULT_SCHEDULE_MINUTE,
    manual_timeout: Optional[float] = DEFAULT_MANUAL_TRIGGER_TIMEOUT_SECONDS,
    trigger_pool_size: int = DEFAULT_TRIGGER_POOL_SIZE,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations."""
    daily_builder = DailyTimesheetBuilder(events_repo, tz=tz)
    weekly_aggregator = WeeklyAggregator(daily_builder)
    batch_processor = BatchProcessor(
        employees_repo,
        weekly_aggregator,
        summaries_repo,
        pool_size=batch_pool_size,
        tz=tz,
    )
    monthly_rollup_service = MonthlyRollupService(summaries_repo, employees_repo)
    scheduler = TimesheetScheduler(
        batch_processor,
        employees_repo,
        tz=tz,
        weekday=schedule_weekday,
        hour=schedule_hour,
        minute=schedule_minute,
        manual_timeout=manual_timeout,
        trigger_pool_size=trigger_pool_size,
    )

    return Container(
        tz=tz,
        events_repo=events_repo,
        employees_repo=employees_repo,
        summaries_repo=summaries_repo,
        daily_builder=daily_builder,
        weekly_aggregator=weekly_aggregator,
        batch_processor=batch_processor,
        monthly_rollup_service=monthly_rollup_service,
        scheduler=scheduler,
        conn=conn,
    )


def build_container(*, db_config: dict, reference_timezone: str = "UTC", **options) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    tz = load_timezone(reference_timezone)

    return build_services(
        events_repo=MySQLEventRepository(conn, tz=tz),
        employees_repo=MySQLEmployeeRepository(conn),
        summaries_repo=MySQLSummaryRepository(conn),
        tz=tz,
        conn=conn,
        **options,
    )
