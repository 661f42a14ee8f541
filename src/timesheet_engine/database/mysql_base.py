from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreUnavailableError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``; commit on success, rollback on error.

    Connector errors surface as StoreUnavailableError so services never see
    driver-specific exceptions.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StoreUnavailableError(f"Cannot connect to database: {e}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        _safe_rollback(conn)
        raise StoreUnavailableError(f"Database operation failed: {e}") from e
    except Exception:
        _safe_rollback(conn)
        raise
    finally:
        conn.close()


def _safe_rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        # Connection already broken; the original error is what matters.
        pass


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_db_datetime(value: datetime, tz: tzinfo) -> datetime:
    """Aware instant -> naive wall time in the reference timezone (DATETIME column)."""
    if value.tzinfo is None:
        return value
    return value.astimezone(tz).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    """Naive DATETIME column value -> aware instant in the reference timezone."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(tz)
    return value.replace(tzinfo=tz)
