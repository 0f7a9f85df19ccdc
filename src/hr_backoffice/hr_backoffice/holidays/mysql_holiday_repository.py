from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import HolidayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository

_SELECT = """
    SELECT holiday_id, name, holiday_date, kind, description
    FROM holidays
"""


def _row_to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        name=r["name"],
        holiday_date=as_date(r["holiday_date"]),
        kind=HolidayType(r["kind"]),
        description=r.get("description"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_holidays(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("holiday_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("holiday_date <= %s")
            params.append(end)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY holiday_date ASC", tuple(params))
            return [_row_to_holiday(r) for r in fetchall(cur)]

    def get_holiday(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _row_to_holiday(r) if r else None

    def create_holiday(
        self,
        *,
        name: str,
        holiday_date: date,
        kind: HolidayType,
        description: Optional[str] = None,
    ) -> Holiday:
        # uq_holiday_date turns a second holiday on the same date into ConflictError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(name, holiday_date, kind, description) VALUES(%s,%s,%s,%s)",
                (name, holiday_date, kind.value, description),
            )
            holiday_id = int(cur.lastrowid)
            cur.execute(_SELECT + " WHERE holiday_id=%s", (holiday_id,))
            return _row_to_holiday(fetchone(cur))

    def delete_holiday(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return int(cur.rowcount) > 0
