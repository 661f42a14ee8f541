from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import mysql.connector
import pytest

from timesheet_engine.core.enums import TimeEventKind
from timesheet_engine.core.exceptions import StoreUnavailableError
from timesheet_engine.database.bootstrap import _strip_create_db_and_use, _strip_line_comments, iter_sql_statements
from timesheet_engine.events.mysql_event_repository import MySQLEventRepository
from timesheet_engine.summaries.mysql_summary_repository import MySQLSummaryRepository

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"
PLUS_7 = timezone(timedelta(hours=7))


class FakeCursor:
    def __init__(self, results, fail=False):
        self._results = list(results)
        self._current = []
        self._fail = fail
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        if self._fail:
            raise mysql.connector.Error("lost connection")
        self.executed.append((" ".join(sql.split()), params))
        self._current = self._results.pop(0) if self._results else []

    def fetchone(self):
        return self._current[0] if self._current else None

    def fetchall(self):
        return self._current

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, *results, fail=False):
        self.cursor = FakeCursor(results, fail=fail)
        self.conn = FakeConnection(self.cursor)

    def connect(self):
        return self.conn


def summary_row(**overrides):
    row = {
        "summary_id": 7,
        "employee_id": "alice",
        "week_start": date(2025, 1, 19),
        "week_end": date(2025, 1, 25),
        "total_hours": Decimal("42.50"),
        "regular_hours": Decimal("40.00"),
        "overtime_hours": Decimal("2.50"),
        "updated_at": datetime(2025, 1, 27, 1, 0),
    }
    row.update(overrides)
    return row


def test_upsert_reads_back_the_stored_row():
    factory = FakeConnFactory([], [summary_row()])
    repo = MySQLSummaryRepository(factory)

    summary = repo.upsert(
        employee_id="alice",
        week_start=date(2025, 1, 19),
        week_end=date(2025, 1, 25),
        total_hours=42.5,
        regular_hours=40.0,
        overtime_hours=2.5,
    )

    insert_sql, _ = factory.cursor.executed[0]
    assert "ON DUPLICATE KEY UPDATE" in insert_sql
    assert summary.summary_id == 7
    assert summary.overtime_hours == 2.5
    assert isinstance(summary.total_hours, float)
    assert factory.conn.committed and factory.conn.closed


def test_get_missing_summary_returns_none():
    repo = MySQLSummaryRepository(FakeConnFactory([]))
    assert repo.get(employee_id="alice", week_start=date(2025, 1, 19)) is None


def test_driver_errors_become_store_unavailable():
    factory = FakeConnFactory(fail=True)
    repo = MySQLSummaryRepository(factory)

    with pytest.raises(StoreUnavailableError):
        repo.list_by_employee_and_range(employee_id="alice", start=date(2025, 1, 1), end=date(2025, 1, 31))

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.cursor.closed and factory.conn.closed


def test_event_rows_are_read_in_reference_timezone():
    row = {
        "event_id": 1,
        "employee_id": "alice",
        "kind": "CLOCK_IN",
        "occurred_at": datetime(2025, 1, 20, 8, 0),
        "note": None,
    }
    factory = FakeConnFactory([row])
    repo = MySQLEventRepository(factory, tz=PLUS_7)

    events = repo.list_events(
        employee_id="alice",
        range_start=datetime(2025, 1, 20, 0, 0, tzinfo=PLUS_7),
        range_end=datetime(2025, 1, 20, 23, 59, 59, tzinfo=PLUS_7),
    )

    _, params = factory.cursor.executed[0]
    assert params[1] == datetime(2025, 1, 20, 0, 0)
    assert params[1].tzinfo is None
    assert events[0].kind is TimeEventKind.CLOCK_IN
    assert events[0].timestamp == datetime(2025, 1, 20, 1, 0, tzinfo=timezone.utc)
    assert events[0].event_id == "1"


def test_schema_splits_into_table_statements():
    sql = _strip_line_comments(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    assert [s.split("(")[0].split()[-1] for s in statements] == ["employees", "time_events", "weekly_summaries"]


def test_splitter_keeps_semicolons_inside_quotes():
    statements = list(iter_sql_statements("INSERT INTO t VALUES('a;b'); SELECT 1;"))
    assert statements == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]
