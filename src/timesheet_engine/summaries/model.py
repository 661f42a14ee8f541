from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class WeeklySummary:
    """Thực thể miền (domain): tổng hợp giờ công theo tuần, duy nhất theo (employee_id, week_start)."""

    employee_id: str
    week_start: date
    week_end: date
    total_hours: float
    regular_hours: float
    overtime_hours: float
    summary_id: Optional[int] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "summary_id": self.summary_id,
            "employee_id": self.employee_id,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class MonthlyRollup:
    """Read-model tính khi đọc; tuần không có bản ghi được tính là 0."""

    employee_id: str
    month_start: date
    month_end: date
    total_hours: float
    regular_hours: float
    overtime_hours: float
    weeks: tuple[WeeklySummary, ...] = field(default_factory=tuple)
    employee_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "period": f"{self.month_start.isoformat()} to {self.month_end.isoformat()}",
            "month_start": self.month_start.isoformat(),
            "month_end": self.month_end.isoformat(),
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "weeks": [w.to_dict() for w in self.weeks],
        }
