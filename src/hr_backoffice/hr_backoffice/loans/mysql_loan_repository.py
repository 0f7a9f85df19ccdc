from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import LoanStatus
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import Loan
from .repository import LoanRepository

_SELECT = """
    SELECT loan_id, user_id, amount, balance, monthly_payment_percent, term_months,
           status, purpose, created_at, archived_at
    FROM loans
"""


def _row_to_loan(r: dict) -> Loan:
    return Loan(
        loan_id=int(r["loan_id"]),
        user_id=int(r["user_id"]),
        amount=as_float(r["amount"]),
        balance=as_float(r["balance"]),
        monthly_payment_percent=as_float(r["monthly_payment_percent"]),
        term_months=int(r["term_months"]),
        status=LoanStatus(r["status"]),
        purpose=r.get("purpose"),
        created_at=r.get("created_at"),
        archived_at=r.get("archived_at"),
    )


class MySQLLoanRepository(LoanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_loans(self, user_id: Optional[int] = None) -> Sequence[Loan]:
        clauses = ["status=%s", "archived_at IS NULL"]
        params: list[object] = [LoanStatus.ACTIVE.value]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY loan_id ASC", tuple(params))
            return [_row_to_loan(r) for r in fetchall(cur)]

    def get_loan(self, loan_id: int) -> Optional[Loan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE loan_id=%s", (int(loan_id),))
            r = fetchone(cur)
            return _row_to_loan(r) if r else None

    def create_loan(
        self,
        *,
        user_id: int,
        amount: float,
        monthly_payment_percent: float,
        term_months: int,
        purpose: Optional[str],
        created_at: datetime,
    ) -> Loan:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO loans(user_id, amount, balance, monthly_payment_percent, term_months, status, purpose, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    amount,
                    amount,
                    monthly_payment_percent,
                    int(term_months),
                    LoanStatus.ACTIVE.value,
                    purpose,
                    created_at.replace(tzinfo=None),
                ),
            )
            loan_id = int(cur.lastrowid)
            cur.execute(_SELECT + " WHERE loan_id=%s", (loan_id,))
            return _row_to_loan(fetchone(cur))

    def update_loan(self, loan: Loan) -> Loan:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE loans SET balance=%s, status=%s, archived_at=%s WHERE loan_id=%s",
                (
                    loan.balance,
                    loan.status.value,
                    loan.archived_at.replace(tzinfo=None) if loan.archived_at else None,
                    int(loan.loan_id),
                ),
            )
            if cur.rowcount == 0:
                cur.execute("SELECT loan_id FROM loans WHERE loan_id=%s", (int(loan.loan_id),))
                if not fetchone(cur):
                    raise StoreError(f"Loan {loan.loan_id} not found")
            return loan
