"""In-memory repositories and event helpers shared by the tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from timesheet_engine.core.enums import TimeEventKind
from timesheet_engine.core.exceptions import StoreUnavailableError
from timesheet_engine.employees.model import Employee
from timesheet_engine.events.model import TimeEvent
from timesheet_engine.summaries.model import WeeklySummary

UTC = timezone.utc


def at(day: date, hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=UTC)


def ev(employee_id: str, kind: TimeEventKind, ts: datetime, note: Optional[str] = None) -> TimeEvent:
    return TimeEvent(employee_id=employee_id, kind=kind, timestamp=ts, note=note)


def shift(employee_id: str, day: date, start_hour: int, end_hour: int) -> list[TimeEvent]:
    """Plain clock-in/clock-out day, returned out of order on purpose."""
    return [
        ev(employee_id, TimeEventKind.CLOCK_OUT, at(day, end_hour)),
        ev(employee_id, TimeEventKind.CLOCK_IN, at(day, start_hour)),
    ]


class InMemoryEvents:
    def __init__(self, events=None):
        self._events: list[TimeEvent] = list(events or [])
        self.calls: list[tuple[str, datetime, datetime]] = []
        self.fail_for: set[str] = set()

    def add(self, *events: TimeEvent) -> None:
        self._events.extend(events)

    def list_events(self, *, employee_id: str, range_start: datetime, range_end: datetime):
        self.calls.append((employee_id, range_start, range_end))
        if employee_id in self.fail_for:
            raise RuntimeError(f"corrupt event stream for {employee_id}")
        # Newest first: the engine must not rely on store ordering.
        out = [
            e for e in self._events if e.employee_id == employee_id and range_start <= e.timestamp <= range_end
        ]
        return sorted(out, key=lambda e: e.timestamp, reverse=True)


@dataclass
class InMemoryEmployees:
    employees: dict[str, Employee] = field(default_factory=dict)

    @classmethod
    def of(cls, *employee_ids: str) -> "InMemoryEmployees":
        return cls({eid: Employee(employee_id=eid, full_name=f"Employee {eid}") for eid in employee_ids})

    def list_employee_ids(self):
        return list(self.employees)

    def get_by_id(self, employee_id: str):
        return self.employees.get(employee_id)


class InMemorySummaries:
    """Upsert keyed on (employee_id, week_start), like the UNIQUE KEY in MySQL."""

    def __init__(self):
        self._rows: dict[tuple[str, date], WeeklySummary] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.upsert_calls = 0

    def upsert(self, *, employee_id, week_start, week_end, total_hours, regular_hours, overtime_hours):
        with self._lock:
            self.upsert_calls += 1
            existing = self._rows.get((employee_id, week_start))
            summary_id = existing.summary_id if existing else self._next_id
            if not existing:
                self._next_id += 1
            row = WeeklySummary(
                summary_id=summary_id,
                employee_id=employee_id,
                week_start=week_start,
                week_end=week_end,
                total_hours=total_hours,
                regular_hours=regular_hours,
                overtime_hours=overtime_hours,
            )
            self._rows[(employee_id, week_start)] = row
            return row

    def get(self, *, employee_id, week_start):
        return self._rows.get((employee_id, week_start))

    def list_by_employee_and_range(self, *, employee_id, start, end):
        rows = [r for (eid, ws), r in self._rows.items() if eid == employee_id and start <= ws <= end]
        return sorted(rows, key=lambda r: r.week_start)

    def all_rows(self) -> list[WeeklySummary]:
        return list(self._rows.values())


class BlockingEvents:
    """Event store whose reads wait until the test releases them."""

    def __init__(self, inner):
        self._inner = inner
        self.release = threading.Event()

    def list_events(self, **kwargs):
        self.release.wait(5)
        return self._inner.list_events(**kwargs)


class UnavailableDirectory:
    def list_employee_ids(self):
        raise StoreUnavailableError("directory down")

    def get_by_id(self, employee_id):
        raise StoreUnavailableError("directory down")
