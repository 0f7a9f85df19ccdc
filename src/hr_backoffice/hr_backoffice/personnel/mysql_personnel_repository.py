from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_float, db_cursor, fetchall, fetchone
from .model import Personnel
from .repository import PersonnelRepository

_SELECT = """
    SELECT u.user_id, u.full_name, u.email, u.is_active,
           pt.name AS personnel_type_name,
           pt.basic_salary,
           COALESCE(pt.is_active, 0) AS type_is_active
    FROM users u
    LEFT JOIN personnel_types pt ON pt.personnel_type_id = u.personnel_type_id
"""


def _row_to_personnel(r: dict) -> Personnel:
    return Personnel(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r["email"],
        is_active=bool(r.get("is_active", True)),
        personnel_type_name=r.get("personnel_type_name"),
        basic_salary=as_optional_float(r.get("basic_salary")),
        type_is_active=bool(r.get("type_is_active")),
    )


class MySQLPersonnelRepository(PersonnelRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_personnel(self) -> Sequence[Personnel]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.is_active=1 AND u.role='PERSONNEL' ORDER BY u.user_id ASC")
            return [_row_to_personnel(r) for r in fetchall(cur)]

    def get_personnel(self, user_id: int) -> Optional[Personnel]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _row_to_personnel(r) if r else None
