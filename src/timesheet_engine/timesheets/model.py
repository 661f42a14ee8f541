from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import AnomalyReason
from ..events.model import TimeEvent


@dataclass(frozen=True)
class EventAnomaly:
    """An event the state machine ignored (or an interval it could not close)."""

    event: TimeEvent
    reason: AnomalyReason

    def to_dict(self) -> dict:
        return {"reason": self.reason.value, "event": self.event.to_dict()}


@dataclass(frozen=True)
class DailyHours:
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    anomalies: tuple[EventAnomaly, ...] = ()


@dataclass(frozen=True)
class DailyTimesheet:
    """Read-model: giờ công của một ngày, không lưu xuống CSDL."""

    work_date: date
    total_hours: float
    regular_hours: float
    overtime_hours: float
    events: tuple[TimeEvent, ...] = ()
    anomalies: tuple[EventAnomaly, ...] = ()

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "events": [e.to_dict() for e in self.events],
            "anomalies": [a.to_dict() for a in self.anomalies],
        }


@dataclass(frozen=True)
class WeeklyTimesheet:
    """Read-model: tổng hợp 7 ngày (Chủ nhật -> Thứ bảy)."""

    employee_id: str
    week_start: date
    week_end: date
    total_hours: float
    regular_hours: float
    overtime_hours: float
    days: tuple[DailyTimesheet, ...] = field(default_factory=tuple)

    @property
    def anomalies(self) -> tuple[EventAnomaly, ...]:
        return tuple(a for d in self.days for a in d.anomalies)

    def day(self, work_date: date) -> Optional[DailyTimesheet]:
        return next((d for d in self.days if d.work_date == work_date), None)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_hours": self.total_hours,
            "regular_hours": self.regular_hours,
            "overtime_hours": self.overtime_hours,
            "days": [d.to_dict() for d in self.days],
        }
