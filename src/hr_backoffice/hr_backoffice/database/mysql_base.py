from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, StoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor).

    Joins the caller's open transaction when there is one; otherwise commits
    on success. Driver errors leave as `StoreError`, unique-key violations as
    `ConflictError`.
    """
    shared = conn_factory.active
    try:
        conn = shared if shared is not None else conn_factory.connect()
    except mysql.connector.Error as e:
        raise StoreError("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            if shared is None:
                conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        if shared is None:
            conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError("Record already exists") from e
        raise StoreError("Database integrity error") from e
    except mysql.connector.Error as e:
        if shared is None:
            conn.rollback()
        raise StoreError("Database error") from e
    except Exception:
        if shared is None:
            conn.rollback()
        raise
    finally:
        if shared is None:
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values) -> str:
    return ",".join(["%s"] * len(values))


def as_float(value: Any) -> float:
    """DECIMAL columns come back as Decimal."""
    return float(value) if value is not None else 0.0


def as_optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def load_json(value: Any) -> Optional[dict]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return value

