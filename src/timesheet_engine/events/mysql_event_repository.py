from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Sequence

from ..core.enums import TimeEventKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_db_datetime, to_db_datetime
from .model import TimeEvent
from .repository import EventStore


class MySQLEventRepository(EventStore):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def list_events(self, *, employee_id: str, range_start: datetime, range_end: datetime) -> Sequence[TimeEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, employee_id, kind, occurred_at, note
                FROM time_events
                WHERE employee_id=%s AND occurred_at BETWEEN %s AND %s
                """,
                (str(employee_id), to_db_datetime(range_start, self._tz), to_db_datetime(range_end, self._tz)),
            )
            rows = fetchall(cur)
            return [
                TimeEvent(
                    event_id=str(r["event_id"]),
                    employee_id=str(r["employee_id"]),
                    kind=TimeEventKind(r["kind"]),
                    timestamp=from_db_datetime(r["occurred_at"], self._tz),
                    note=r.get("note"),
                )
                for r in rows
            ]
