from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import WeeklySummary


class SummaryStore(Protocol):
    def upsert(
        self,
        *,
        employee_id: str,
        week_start: date,
        week_end: date,
        total_hours: float,
        regular_hours: float,
        overtime_hours: float,
    ) -> WeeklySummary:
        """Create or overwrite the row keyed by (employee_id, week_start).

        Must be atomic per key; running it twice leaves exactly one row.
        """

        raise NotImplementedError

    def get(self, *, employee_id: str, week_start: date) -> Optional[WeeklySummary]:
        raise NotImplementedError

    def list_by_employee_and_range(self, *, employee_id: str, start: date, end: date) -> Sequence[WeeklySummary]:
        """Rows whose week_start is within [start, end], oldest first."""

        raise NotImplementedError
