from __future__ import annotations

import json
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AdditionalPayKind, PayrollStatus
from ..core.exceptions import ConflictError, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, fetchall, fetchone, in_clause, load_json
from .model import AdditionalPay, PayrollEntry
from .repository import PayrollRepository

_SELECT_ENTRY = """
    SELECT payroll_entry_id, user_id, period_start, period_end, basic_salary, deductions, net_pay,
           status, created_at, released_at, archived_at, breakdown_snapshot
    FROM payroll_entries
"""

_SELECT_PAY = """
    SELECT additional_pay_id, user_id, kind, amount, applied_at, archived_at, notes
    FROM additional_pay
"""


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    return value.replace(tzinfo=None) if value is not None else None


def _row_to_entry(r: dict) -> PayrollEntry:
    return PayrollEntry(
        payroll_entry_id=int(r["payroll_entry_id"]),
        user_id=int(r["user_id"]),
        period_start=as_date(r["period_start"]),
        period_end=as_date(r["period_end"]),
        basic_salary=as_float(r["basic_salary"]),
        deductions=as_float(r["deductions"]),
        net_pay=as_float(r["net_pay"]),
        status=PayrollStatus(r["status"]),
        created_at=r.get("created_at"),
        released_at=r.get("released_at"),
        archived_at=r.get("archived_at"),
        breakdown_snapshot=load_json(r.get("breakdown_snapshot")),
    )


def _row_to_pay(r: dict) -> AdditionalPay:
    return AdditionalPay(
        additional_pay_id=int(r["additional_pay_id"]),
        user_id=int(r["user_id"]),
        kind=AdditionalPayKind(r["kind"]),
        amount=as_float(r["amount"]),
        applied_at=r["applied_at"],
        archived_at=r.get("archived_at"),
        notes=r.get("notes"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_payroll_entries(
        self,
        *,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        status: Optional[PayrollStatus] = None,
        user_id: Optional[int] = None,
        for_update: bool = False,
    ) -> Sequence[PayrollEntry]:
        clauses: list[str] = []
        params: list[object] = []
        if period_start is not None:
            clauses.append("period_start=%s")
            params.append(period_start)
        if period_end is not None:
            clauses.append("period_end=%s")
            params.append(period_end)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        # Next-key locks on the user/period index also hold off concurrent inserts.
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ENTRY + where + " ORDER BY payroll_entry_id ASC" + lock, tuple(params))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_payroll_entry(self, payroll_entry_id: int) -> Optional[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_ENTRY + " WHERE payroll_entry_id=%s", (int(payroll_entry_id),))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def create_payroll_entry(
        self,
        *,
        user_id: int,
        period_start: date,
        period_end: date,
        basic_salary: float,
        deductions: float,
        net_pay: float,
        created_at: datetime,
    ) -> PayrollEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_entries(user_id, period_start, period_end, basic_salary, deductions, net_pay, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    period_start,
                    period_end,
                    round(basic_salary, 2),
                    round(deductions, 2),
                    round(net_pay, 2),
                    PayrollStatus.PENDING.value,
                    _naive(created_at),
                ),
            )
            entry_id = int(cur.lastrowid)
            cur.execute(_SELECT_ENTRY + " WHERE payroll_entry_id=%s", (entry_id,))
            return _row_to_entry(fetchone(cur))

    def update_payroll_entry(
        self, entry: PayrollEntry, *, expected_status: Optional[PayrollStatus] = None
    ) -> PayrollEntry:
        snapshot = json.dumps(entry.breakdown_snapshot, sort_keys=True) if entry.breakdown_snapshot is not None else None
        with db_cursor(self._conn_factory) as (_, cur):
            if expected_status is not None:
                cur.execute(
                    "SELECT status FROM payroll_entries WHERE payroll_entry_id=%s FOR UPDATE",
                    (int(entry.payroll_entry_id),),
                )
                current = fetchone(cur)
                if not current:
                    raise StoreError(f"Payroll entry {entry.payroll_entry_id} not found")
                if current["status"] != expected_status.value:
                    raise ConflictError(
                        f"Payroll entry {entry.payroll_entry_id} is {current['status'].lower()}, "
                        f"not {expected_status.value.lower()}"
                    )

            cur.execute(
                """
                UPDATE payroll_entries
                SET basic_salary=%s, deductions=%s, net_pay=%s, status=%s,
                    released_at=%s, archived_at=%s, breakdown_snapshot=%s
                WHERE payroll_entry_id=%s
                """,
                (
                    round(entry.basic_salary, 2),
                    round(entry.deductions, 2),
                    round(entry.net_pay, 2),
                    entry.status.value,
                    _naive(entry.released_at),
                    _naive(entry.archived_at),
                    snapshot,
                    int(entry.payroll_entry_id),
                ),
            )
            cur.execute(_SELECT_ENTRY + " WHERE payroll_entry_id=%s", (int(entry.payroll_entry_id),))
            r = fetchone(cur)
            if not r:
                raise StoreError(f"Payroll entry {entry.payroll_entry_id} not found")
            return _row_to_entry(r)

    def archive_payroll_entries(self, ids: Iterable[int], archived_at: datetime) -> int:
        ids = [int(i) for i in ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE payroll_entries SET status=%s, archived_at=%s
                WHERE status<>%s AND payroll_entry_id IN ({in_clause(ids)})
                """,
                (PayrollStatus.ARCHIVED.value, _naive(archived_at), PayrollStatus.ARCHIVED.value, *ids),
            )
            return int(cur.rowcount)

    def list_additional_pay(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_archived: bool = False,
    ) -> Sequence[AdditionalPay]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if start is not None:
            clauses.append("DATE(applied_at) >= %s")
            params.append(start)
        if end is not None:
            clauses.append("DATE(applied_at) <= %s")
            params.append(end)
        if not include_archived:
            clauses.append("archived_at IS NULL")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_PAY + f" WHERE {' AND '.join(clauses)} ORDER BY applied_at ASC", tuple(params))
            return [_row_to_pay(r) for r in fetchall(cur)]

    def create_additional_pay(
        self,
        *,
        user_id: int,
        kind: AdditionalPayKind,
        amount: float,
        applied_at: datetime,
        notes: Optional[str] = None,
    ) -> AdditionalPay:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO additional_pay(user_id, kind, amount, applied_at, notes) VALUES(%s,%s,%s,%s,%s)",
                (int(user_id), kind.value, amount, _naive(applied_at), notes),
            )
            pay_id = int(cur.lastrowid)
            cur.execute(_SELECT_PAY + " WHERE additional_pay_id=%s", (pay_id,))
            return _row_to_pay(fetchone(cur))

    def archive_additional_pay(self, ids: Iterable[int], archived_at: datetime) -> int:
        ids = [int(i) for i in ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE additional_pay SET archived_at=%s WHERE archived_at IS NULL AND additional_pay_id IN ({in_clause(ids)})",
                (_naive(archived_at), *ids),
            )
            return int(cur.rowcount)
