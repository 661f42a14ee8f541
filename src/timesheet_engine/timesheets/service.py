from __future__ import annotations

from datetime import date, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import day_bounds, require_week_start, round_hours, week_end_of
from ..core.constants import DAYS_PER_WEEK
from ..events.model import TimeEvent
from ..events.repository import EventStore
from .calculator.base import HoursCalculator
from .calculator.daily_calculator import DailyHoursCalculator
from .model import DailyTimesheet, WeeklyTimesheet


class DailyTimesheetBuilder:
    """Fetch one employee's events for one day and turn them into hours."""

    def __init__(
        self,
        events: EventStore,
        *,
        tz: tzinfo,
        calculator: Optional[HoursCalculator] = None,
    ):
        self._events = events
        self._tz = tz
        self._calculator = calculator or DailyHoursCalculator()

    def build(self, employee_id: str, work_date: date) -> DailyTimesheet:
        start, end = day_bounds(work_date, self._tz)
        raw = self._events.list_events(employee_id=employee_id, range_start=start, range_end=end)
        ordered = tuple(sorted(raw, key=TimeEvent.sort_key))

        hours = self._calculator.calculate(ordered)
        return DailyTimesheet(
            work_date=work_date,
            total_hours=hours.total_hours,
            regular_hours=hours.regular_hours,
            overtime_hours=hours.overtime_hours,
            events=ordered,
            anomalies=hours.anomalies,
        )


class WeeklyAggregator:
    """Sum seven daily timesheets (Sunday..Saturday).

    Weekly overtime is only the sum of daily overtime: regular hours are not
    re-capped at 40 per week.
    """

    def __init__(self, daily: DailyTimesheetBuilder):
        self._daily = daily

    def build(self, employee_id: str, week_start: date) -> WeeklyTimesheet:
        require_week_start(week_start)

        days = tuple(
            self._daily.build(employee_id, week_start + timedelta(days=offset)) for offset in range(DAYS_PER_WEEK)
        )

        return WeeklyTimesheet(
            employee_id=employee_id,
            week_start=week_start,
            week_end=week_end_of(week_start),
            total_hours=round_hours(sum(d.total_hours for d in days)),
            regular_hours=round_hours(sum(d.regular_hours for d in days)),
            overtime_hours=round_hours(sum(d.overtime_hours for d in days)),
            days=days,
        )
