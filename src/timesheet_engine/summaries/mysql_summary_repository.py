from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WeeklySummary
from .repository import SummaryStore

_COLUMNS = "summary_id, employee_id, week_start, week_end, total_hours, regular_hours, overtime_hours, updated_at"


def _row_to_summary(r: dict) -> WeeklySummary:
    return WeeklySummary(
        summary_id=int(r["summary_id"]),
        employee_id=str(r["employee_id"]),
        week_start=r["week_start"],
        week_end=r["week_end"],
        # DECIMAL columns come back as Decimal
        total_hours=float(r["total_hours"]),
        regular_hours=float(r["regular_hours"]),
        overtime_hours=float(r["overtime_hours"]),
        updated_at=r.get("updated_at"),
    )


class MySQLSummaryRepository(SummaryStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO weekly_summaries(employee_id, week_start, week_end, total_hours, regular_hours, overtime_hours)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    week_end=VALUES(week_end),
                    total_hours=VALUES(total_hours),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours)
                """,
                (str(employee_id), week_start, week_end, total_hours, regular_hours, overtime_hours),
            )

            # Read back in the same transaction: lastrowid is 0 when the row was updated.
            cur.execute(
                f"SELECT {_COLUMNS} FROM weekly_summaries WHERE employee_id=%s AND week_start=%s",
                (str(employee_id), week_start),
            )
            return _row_to_summary(fetchone(cur))

    def get(self, *, employee_id: str, week_start: date) -> Optional[WeeklySummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM weekly_summaries WHERE employee_id=%s AND week_start=%s",
                (str(employee_id), week_start),
            )
            r = fetchone(cur)
            return _row_to_summary(r) if r else None

    def list_by_employee_and_range(self, *, employee_id: str, start: date, end: date) -> Sequence[WeeklySummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM weekly_summaries
                WHERE employee_id=%s AND week_start BETWEEN %s AND %s
                ORDER BY week_start ASC
                """,
                (str(employee_id), start, end),
            )
            return [_row_to_summary(r) for r in fetchall(cur)]
