from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, tzinfo
from typing import Optional, Union

from ..common.datetime_utils import now_local, require_week_start, week_end_of
from ..core.constants import DEFAULT_BATCH_POOL_SIZE
from ..core.exceptions import PerEmployeeComputationFailed
from ..employees.repository import EmployeeDirectory
from ..summaries.model import WeeklySummary
from ..summaries.repository import SummaryStore
from ..timesheets.service import WeeklyAggregator
from .model import BatchReport

logger = logging.getLogger(__name__)


class BatchProcessor:
    """Compute and store the weekly summary of every employee in the directory.

    Each employee runs on its own worker; the only shared write is the
    summary upsert, which is atomic per (employee_id, week_start). A failure is
    logged and recorded on the report, never raised, so one bad event stream
    cannot abort the organization's run.
    """

    def __init__(
        self,
        employees: EmployeeDirectory,
        aggregator: WeeklyAggregator,
        summaries: SummaryStore,
        *,
        pool_size: int = DEFAULT_BATCH_POOL_SIZE,
        tz: Optional[tzinfo] = None,
    ):
        if int(pool_size) <= 0:
            raise ValueError("pool_size must be positive")
        self._employees = employees
        self._aggregator = aggregator
        self._summaries = summaries
        self._pool_size = int(pool_size)
        self._tz = tz

    def process_employee(self, employee_id: str, week_start: date) -> WeeklySummary:
        """Single-employee path: aggregate the week and upsert its summary."""
        weekly = self._aggregator.build(employee_id, week_start)

        for anomaly in weekly.anomalies:
            logger.warning(
                "Ignored %s event for employee %s at %s (%s)",
                anomaly.event.kind.value,
                employee_id,
                anomaly.event.timestamp.isoformat(),
                anomaly.reason.value,
            )

        return self._summaries.upsert(
            employee_id=employee_id,
            week_start=weekly.week_start,
            week_end=weekly.week_end,
            total_hours=weekly.total_hours,
            regular_hours=weekly.regular_hours,
            overtime_hours=weekly.overtime_hours,
        )

    def _process_isolated(self, employee_id: str, week_start: date) -> Union[WeeklySummary, PerEmployeeComputationFailed]:
        try:
            return self.process_employee(employee_id, week_start)
        except Exception as e:
            logger.exception("Timesheet computation failed for employee %s (week %s)", employee_id, week_start)
            return PerEmployeeComputationFailed(employee_id, week_start, e)

    def run(self, week_start: date) -> BatchReport:
        require_week_start(week_start)
        started_at = now_local(self._tz)

        # Directory failures propagate: there is nothing to process without it.
        employee_ids = list(self._employees.list_employee_ids())
        logger.info("Calculating timesheets for %d employees, week starting %s", len(employee_ids), week_start)

        summaries: list[WeeklySummary] = []
        failures: list[PerEmployeeComputationFailed] = []

        if employee_ids:
            workers = min(self._pool_size, len(employee_ids))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="timesheet-batch") as pool:
                # map() keeps directory order
                for outcome in pool.map(lambda eid: self._process_isolated(eid, week_start), employee_ids):
                    if isinstance(outcome, PerEmployeeComputationFailed):
                        failures.append(outcome)
                    else:
                        summaries.append(outcome)

        report = BatchReport(
            week_start=week_start,
            week_end=week_end_of(week_start),
            summaries=summaries,
            failures=failures,
            started_at=started_at,
            finished_at=now_local(self._tz),
        )
        self._log_report(report)
        return report

    @staticmethod
    def _log_report(report: BatchReport) -> None:
        logger.info(
            "Processed timesheets for %d employees (week %s to %s)",
            len(report.summaries),
            report.week_start,
            report.week_end,
        )

        overtime = [s for s in report.summaries if s.overtime_hours > 0]
        if overtime:
            logger.info("%d employees worked overtime this week", len(overtime))
            for s in overtime:
                logger.info("  - %s: %.2fh total (%.2fh overtime)", s.employee_id, s.total_hours, s.overtime_hours)

        if report.failures:
            logger.error(
                "%d employees missing from the week %s run: %s",
                len(report.failures),
                report.week_start,
                ", ".join(report.failed_employee_ids),
            )
