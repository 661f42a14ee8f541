from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, round_hours
from ..employees.repository import EmployeeDirectory
from .model import MonthlyRollup, WeeklySummary
from .repository import SummaryStore


class MonthlyRollupService:
    """Sum stored weekly summaries whose week starts inside a month.

    Weeks without a stored summary contribute zero; this is not an error.
    """

    def __init__(self, summaries: SummaryStore, employees: Optional[EmployeeDirectory] = None):
        self._summaries = summaries
        self._employees = employees

    def build(self, *, employee_id: str, year: int, month: int) -> MonthlyRollup:
        month_start, month_end = month_bounds(year, month)
        weeks = tuple(
            self._summaries.list_by_employee_and_range(employee_id=employee_id, start=month_start, end=month_end)
        )
        return self._rollup(employee_id, month_start, month_end, weeks)

    def build_for_all(self, *, year: int, month: int) -> list[MonthlyRollup]:
        if self._employees is None:
            raise RuntimeError("MonthlyRollupService.build_for_all needs an employee directory")

        out: list[MonthlyRollup] = []
        for employee_id in self._employees.list_employee_ids():
            rollup = self.build(employee_id=employee_id, year=year, month=month)
            employee = self._employees.get_by_id(employee_id)
            if employee:
                rollup = replace(rollup, employee_name=employee.full_name)
            out.append(rollup)
        return out

    @staticmethod
    def _rollup(employee_id, month_start, month_end, weeks: Sequence[WeeklySummary]) -> MonthlyRollup:
        return MonthlyRollup(
            employee_id=employee_id,
            month_start=month_start,
            month_end=month_end,
            total_hours=round_hours(sum(w.total_hours for w in weeks)),
            regular_hours=round_hours(sum(w.regular_hours for w in weeks)),
            overtime_hours=round_hours(sum(w.overtime_hours for w in weeks)),
            weeks=tuple(weeks),
        )
