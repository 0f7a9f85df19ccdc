from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT leave_id, user_id, start_date, end_date, is_paid, reason, status, created_at, decided_at
    FROM leave_requests
"""


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        is_paid=bool(r.get("is_paid")),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r.get("created_at"),
        decided_at=r.get("decided_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_leaves(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if start is not None:
            clauses.append("end_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("start_date <= %s")
            params.append(end)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY start_date ASC, leave_id ASC", tuple(params))
            return [_row_to_leave(r) for r in fetchall(cur)]

    def get_leave(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def create_leave(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        is_paid: bool,
        reason: str,
        created_at: datetime,
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, end_date, is_paid, reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    start_date,
                    end_date,
                    int(bool(is_paid)),
                    reason,
                    RequestStatus.PENDING.value,
                    created_at.replace(tzinfo=None),
                ),
            )
            leave_id = int(cur.lastrowid)
            cur.execute(_SELECT + " WHERE leave_id=%s", (leave_id,))
            return _row_to_leave(fetchone(cur))

    def decide_leave(self, *, leave_id: int, status: RequestStatus, decided_at: datetime) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET status=%s, decided_at=%s WHERE leave_id=%s",
                (status.value, decided_at.replace(tzinfo=None), int(leave_id)),
            )
            cur.execute(_SELECT + " WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            if not r:
                raise StoreError(f"Leave request {leave_id} not found")
            return _row_to_leave(r)
