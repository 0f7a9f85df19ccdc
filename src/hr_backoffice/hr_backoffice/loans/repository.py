from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Loan


class LoanRepository(Protocol):
    def list_active_loans(self, user_id: Optional[int] = None) -> Sequence[Loan]:
        raise NotImplementedError

    def get_loan(self, loan_id: int) -> Optional[Loan]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_loan(self, loan: Loan) -> Loan:
        """Persist balance, status and archived_at."""

        raise NotImplementedError
