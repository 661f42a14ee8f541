from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from functools import partial
from typing import Callable, Iterator, Optional, Union

from ..batch.model import BatchReport
from ..batch.service import BatchProcessor
from ..common.datetime_utils import now_local, resolve_week_start, week_start_of
from ..common.validators import require_non_empty
from ..core.constants import (
    DEFAULT_SCHEDULE_HOUR,
    DEFAULT_SCHEDULE_MINUTE,
    DEFAULT_SCHEDULE_WEEKDAY,
    DEFAULT_TRIGGER_POOL_SIZE,
)
from ..core.enums import TriggerSource
from ..core.exceptions import InvalidRangeError, TriggerTimeoutError, ValidationError
from ..employees.repository import EmployeeDirectory
from ..summaries.model import WeeklySummary

logger = logging.getLogger(__name__)

_WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass
class _WeekSlot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class TimesheetScheduler:
    """Weekly batch trigger plus a manual trigger for ad-hoc recomputation.

    The instance owns its lifecycle (``start``/``stop``); create one per process
    and inject it where needed. Runs for the same week are serialized, runs for
    different weeks may overlap, and an overlapping periodic run is skipped.
    A manual request identical to one still in flight joins it instead of
    queueing a second run.
    """

    def __init__(
        self,
        batch: BatchProcessor,
        employees: EmployeeDirectory,
        *,
        tz: tzinfo,
        weekday: int = DEFAULT_SCHEDULE_WEEKDAY,
        hour: int = DEFAULT_SCHEDULE_HOUR,
        minute: int = DEFAULT_SCHEDULE_MINUTE,
        manual_timeout: Optional[float] = None,
        trigger_pool_size: int = DEFAULT_TRIGGER_POOL_SIZE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not 0 <= int(weekday) <= 6 or not 0 <= int(hour) <= 23 or not 0 <= int(minute) <= 59:
            raise ValidationError(f"Invalid schedule weekday={weekday} hour={hour} minute={minute}")
        if int(trigger_pool_size) <= 0:
            raise ValidationError("trigger_pool_size must be positive")

        self._batch = batch
        self._employees = employees
        self._tz = tz
        self._weekday = int(weekday)
        self._at = time(int(hour), int(minute))
        self._manual_timeout = manual_timeout or None
        self._trigger_pool_size = int(trigger_pool_size)
        self._clock = clock or (lambda: now_local(tz))

        self._periodic_lock = threading.Lock()
        # Guards week slots, pending manual runs, the trigger pool and last_run.
        self._guard = threading.Lock()
        self._week_slots: dict[date, _WeekSlot] = {}
        self._pending: dict[tuple[date, Optional[str]], Future] = {}

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._trigger_pool: Optional[ThreadPoolExecutor] = None
        self._last_run: Optional[dict] = None

    # ----- lifecycle -----

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def schedule_description(self) -> str:
        return f"Every {_WEEKDAY_NAMES[self._weekday]} at {self._at.strftime('%H:%M')}"

    def start(self) -> None:
        with self._guard:
            if self.is_running:
                logger.info("Timesheet scheduler already running")
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._loop, name="timesheet-scheduler", daemon=True)
            self._thread.start()
        logger.info("Weekly timesheet scheduler started (%s)", self.schedule_description)

    def stop(self, *, wait: bool = True, timeout: Optional[float] = None) -> None:
        """Stop the periodic loop. Manual runs already submitted still finish."""
        with self._guard:
            thread = self._thread
            self._stop_event.set()
            self._thread = None
            pool = self._trigger_pool
            self._trigger_pool = None

        if thread is not None and wait:
            thread.join(timeout)
        if pool is not None:
            pool.shutdown(wait=wait)
        logger.info("Weekly timesheet scheduler stopped")

    def next_run_at(self, now: Optional[datetime] = None) -> datetime:
        local = (now or self._clock()).astimezone(self._tz)
        days_ahead = (self._weekday - local.weekday()) % 7
        candidate = datetime.combine(local.date() + timedelta(days=days_ahead), self._at, tzinfo=self._tz)
        if candidate <= local:
            candidate += timedelta(days=7)
        return candidate

    def _loop(self) -> None:
        stop_event = self._stop_event
        while not stop_event.is_set():
            now = self._clock()
            delay = max((self.next_run_at(now) - now).total_seconds(), 0.0)
            if stop_event.wait(delay):
                break
            self.run_periodic()

    # ----- triggers -----

    def previous_week_start(self, now: Optional[datetime] = None) -> date:
        """Start of the last completed week relative to ``now``."""
        local = (now or self._clock()).astimezone(self._tz)
        return week_start_of(local.date() - timedelta(days=7))

    def run_periodic(self, now: Optional[datetime] = None) -> Optional[BatchReport]:
        """Run the batch for the previous week; skip if a periodic run is in progress."""
        if not self._periodic_lock.acquire(blocking=False):
            logger.warning("Periodic timesheet run already in progress; skipping this tick")
            return None

        try:
            week_start = self.previous_week_start(now)
            logger.info("Running weekly timesheet calculation for week starting %s", week_start)
            return self._run_batch(week_start, TriggerSource.PERIODIC)
        except Exception:
            logger.exception("Error in weekly timesheet run")
            return None
        finally:
            self._periodic_lock.release()

    def trigger_manual(
        self,
        *,
        week_start: Optional[date] = None,
        employee_id: Optional[str] = None,
        timeout: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> Union[WeeklySummary, list[WeeklySummary]]:
        """Recompute one week now.

        ``week_start`` may be any day of the week; it resolves to that week's
        Sunday. With ``employee_id`` only that employee is recomputed and its
        summary is returned; otherwise the whole batch runs and its summaries are
        returned. If ``timeout`` seconds pass first, TriggerTimeoutError is raised
        and the run carries on in the background.
        """
        local_now = (now or self._clock()).astimezone(self._tz)
        current_week = week_start_of(local_now.date())
        week_start = resolve_week_start(week_start) if week_start is not None else current_week
        if week_start > current_week:
            raise InvalidRangeError(f"week_start {week_start.isoformat()} is in the future")

        if employee_id is not None:
            employee_id = require_non_empty(employee_id, "employee_id")
            if not self._employees.get_by_id(employee_id):
                raise ValidationError(f"Unknown employee {employee_id}")
            task = partial(self._run_single, week_start, employee_id)
        else:
            task = partial(self._run_manual_batch, week_start)

        future = self._submit_manual((week_start, employee_id), task)
        timeout = timeout if timeout is not None else self._manual_timeout
        try:
            return future.result(timeout=timeout or None)
        except FuturesTimeoutError:
            logger.warning("Manual timesheet run for week %s exceeded %ss; continuing in background", week_start, timeout)
            raise TriggerTimeoutError(week_start, float(timeout)) from None

    def status(self) -> dict:
        with self._guard:
            last_run = dict(self._last_run) if self._last_run else None
        return {
            "running": self.is_running,
            "schedule": self.schedule_description,
            "description": "Calculates weekly timesheets for all employees",
            "next_run_at": self.next_run_at().isoformat() if self.is_running else None,
            "last_run": last_run,
        }

    # ----- internals -----

    def _submit_manual(self, key: tuple[date, Optional[str]], task: Callable) -> Future:
        week_start, employee_id = key
        with self._guard:
            future = self._pending.get(key)
            if future is not None and not future.done():
                logger.info("Manual timesheet run for week %s already in flight; joining it", week_start)
                return future

            if self._trigger_pool is None:
                self._trigger_pool = ThreadPoolExecutor(
                    max_workers=self._trigger_pool_size, thread_name_prefix="timesheet-trigger"
                )
            future = self._trigger_pool.submit(task)
            self._pending[key] = future

        logger.info(
            "Manual timesheet calculation triggered for week %s%s",
            week_start,
            f" (employee {employee_id})" if employee_id else "",
        )
        # Outside the guard: the callback runs inline when the future is already done.
        future.add_done_callback(partial(self._forget_pending, key))
        return future

    def _forget_pending(self, key: tuple[date, Optional[str]], future: Future) -> None:
        with self._guard:
            if self._pending.get(key) is future:
                del self._pending[key]

    @contextmanager
    def _hold_week(self, week_start: date) -> Iterator[None]:
        with self._guard:
            slot = self._week_slots.setdefault(week_start, _WeekSlot())
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._guard:
                slot.users -= 1
                if slot.users == 0:
                    del self._week_slots[week_start]

    def _run_batch(self, week_start: date, source: TriggerSource) -> BatchReport:
        with self._hold_week(week_start):
            report = self._batch.run(week_start)

        last_run = {
            "source": source.value,
            "week_start": report.week_start.isoformat(),
            "finished_at": report.finished_at.isoformat() if report.finished_at else None,
            "processed": len(report.summaries),
            "failed": len(report.failures),
        }
        with self._guard:
            self._last_run = last_run
        return report

    def _run_manual_batch(self, week_start: date) -> list[WeeklySummary]:
        return self._run_batch(week_start, TriggerSource.MANUAL).summaries

    def _run_single(self, week_start: date, employee_id: str) -> WeeklySummary:
        with self._hold_week(week_start):
            return self._batch.process_employee(employee_id, week_start)
