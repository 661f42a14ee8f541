from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import PerEmployeeComputationFailed
from ..summaries.model import WeeklySummary


@dataclass(frozen=True)
class BatchReport:
    """Outcome of one batch run.

    ``summaries`` may be a strict subset of the directory: failed employees are
    listed in ``failures`` instead.
    """

    week_start: date
    week_end: date
    summaries: list[WeeklySummary] = field(default_factory=list)
    failures: list[PerEmployeeComputationFailed] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        return not self.failures

    @property
    def failed_employee_ids(self) -> list[str]:
        return [f.employee_id for f in self.failures]

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "processed": len(self.summaries),
            "failed_employee_ids": self.failed_employee_ids,
            "summaries": [s.to_dict() for s in self.summaries],
        }
