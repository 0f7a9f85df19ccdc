from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, user_id, work_date, time_in, time_out, status, note
    FROM attendance_records
"""


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # DATETIME columns hold civil wall time without an offset.
    return value.replace(tzinfo=None) if value is not None else None


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=as_date(r["work_date"]),
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        status=AttendanceStatus(r["status"]),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get(self, cur, attendance_id: int) -> AttendanceRecord:
        cur.execute(_SELECT + " WHERE attendance_id=%s", (int(attendance_id),))
        r = fetchone(cur)
        if not r:
            raise StoreError(f"Attendance record {attendance_id} vanished")
        return _row_to_record(r)

    def find_attendance(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s AND work_date=%s", (int(user_id), work_date))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_attendance(
        self,
        *,
        user_id: int,
        work_date: date,
        status: AttendanceStatus,
        time_in: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, time_in, status, note)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, _naive(time_in), status.value, note),
            )
            return self._get(cur, int(cur.lastrowid))

    def update_attendance(
        self,
        *,
        attendance_id: int,
        time_in: Optional[datetime],
        time_out: Optional[datetime],
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET time_in=%s, time_out=%s, status=%s, note=%s
                WHERE attendance_id=%s
                """,
                (_naive(time_in), _naive(time_out), status.value, note, int(attendance_id)),
            )
            return self._get(cur, attendance_id)

    def list_attendance(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY work_date ASC, user_id ASC",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE user_id=%s ORDER BY work_date DESC LIMIT %s",
                (int(user_id), int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def delete_attendance(self, *, start: date, end: date, user_id: Optional[int] = None) -> int:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM attendance_records WHERE {' AND '.join(clauses)}", tuple(params))
            return int(cur.rowcount)
