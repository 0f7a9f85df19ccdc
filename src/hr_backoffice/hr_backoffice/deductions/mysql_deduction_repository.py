from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import CalculationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_float, db_cursor, fetchall, fetchone, in_clause
from .model import Deduction, DeductionType
from .repository import DeductionRepository

_SELECT_TYPE = """
    SELECT deduction_type_id, name, description, calculation_type, amount, percentage_value, is_mandatory, is_active
    FROM deduction_types
"""

_SELECT_DEDUCTION = """
    SELECT d.deduction_id, d.user_id, d.deduction_type_id, d.amount, d.applied_at, d.archived_at, d.notes,
           t.name AS type_name, t.is_mandatory
    FROM deductions d
    JOIN deduction_types t ON t.deduction_type_id = d.deduction_type_id
"""


def _row_to_type(r: dict) -> DeductionType:
    return DeductionType(
        deduction_type_id=int(r["deduction_type_id"]),
        name=r["name"],
        calculation_type=CalculationType(r["calculation_type"]),
        amount=as_float(r.get("amount")),
        percentage_value=as_optional_float(r.get("percentage_value")),
        is_mandatory=bool(r.get("is_mandatory")),
        is_active=bool(r.get("is_active", True)),
        description=r.get("description"),
    )


def _row_to_deduction(r: dict) -> Deduction:
    return Deduction(
        deduction_id=int(r["deduction_id"]),
        user_id=int(r["user_id"]),
        deduction_type_id=int(r["deduction_type_id"]),
        amount=as_float(r["amount"]),
        applied_at=r["applied_at"],
        archived_at=r.get("archived_at"),
        notes=r.get("notes"),
        type_name=r.get("type_name"),
        is_mandatory=bool(r.get("is_mandatory")),
    )


class MySQLDeductionRepository(DeductionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_deduction_types(self, mandatory: Optional[bool] = None, *, active_only: bool = True) -> Sequence[DeductionType]:
        clauses: list[str] = []
        params: list[object] = []
        if mandatory is not None:
            clauses.append("is_mandatory=%s")
            params.append(int(bool(mandatory)))
        if active_only:
            clauses.append("is_active=1")

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_TYPE + where + " ORDER BY deduction_type_id ASC", tuple(params))
            return [_row_to_type(r) for r in fetchall(cur)]

    def get_deduction_type(self, deduction_type_id: int) -> Optional[DeductionType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_TYPE + " WHERE deduction_type_id=%s", (int(deduction_type_id),))
            r = fetchone(cur)
            return _row_to_type(r) if r else None

    def create_deduction_type(
        self,
        *,
        name: str,
        calculation_type: CalculationType,
        amount: float,
        percentage_value: Optional[float],
        is_mandatory: bool,
        description: Optional[str] = None,
    ) -> DeductionType:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO deduction_types(name, description, calculation_type, amount, percentage_value, is_mandatory, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (name, description, calculation_type.value, amount, percentage_value, int(bool(is_mandatory))),
            )
            type_id = int(cur.lastrowid)
            cur.execute(_SELECT_TYPE + " WHERE deduction_type_id=%s", (type_id,))
            return _row_to_type(fetchone(cur))

    def list_deductions(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_archived: bool = False,
    ) -> Sequence[Deduction]:
        clauses = ["d.user_id=%s"]
        params: list[object] = [int(user_id)]
        if start is not None:
            clauses.append("DATE(d.applied_at) >= %s")
            params.append(start)
        if end is not None:
            clauses.append("DATE(d.applied_at) <= %s")
            params.append(end)
        if not include_archived:
            clauses.append("d.archived_at IS NULL")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_DEDUCTION + f" WHERE {' AND '.join(clauses)} ORDER BY d.applied_at ASC, d.deduction_id ASC",
                tuple(params),
            )
            return [_row_to_deduction(r) for r in fetchall(cur)]

    def create_deduction(
        self,
        *,
        user_id: int,
        deduction_type_id: int,
        amount: float,
        applied_at: datetime,
        notes: Optional[str] = None,
        mandatory: bool = False,
    ) -> Deduction:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO deductions(user_id, deduction_type_id, amount, applied_at, notes, mandatory_key)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(deduction_type_id),
                    amount,
                    applied_at.replace(tzinfo=None),
                    notes,
                    int(deduction_type_id) if mandatory else None,
                ),
            )
            deduction_id = int(cur.lastrowid)
            cur.execute(_SELECT_DEDUCTION + " WHERE d.deduction_id=%s", (deduction_id,))
            return _row_to_deduction(fetchone(cur))

    def archive_deductions(self, ids: Iterable[int], archived_at: datetime) -> int:
        ids = [int(i) for i in ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE deductions SET archived_at=%s WHERE archived_at IS NULL AND deduction_id IN ({in_clause(ids)})",
                (archived_at.replace(tzinfo=None), *ids),
            )
            return int(cur.rowcount)
