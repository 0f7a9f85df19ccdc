from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LoanStatus


@dataclass(frozen=True)
class Loan:
    loan_id: int
    user_id: int
    amount: float
    balance: float
    monthly_payment_percent: float
    term_months: int
    status: LoanStatus = LoanStatus.ACTIVE
    purpose: Optional[str] = None
    created_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE and self.archived_at is None

    def to_dict(self) -> dict:
        return {
            "loan_id": self.loan_id,
            "user_id": self.user_id,
            "amount": self.amount,
            "balance": self.balance,
            "monthly_payment_percent": self.monthly_payment_percent,
            "term_months": self.term_months,
            "status": self.status.value,
            "purpose": self.purpose,
            "archived_at": self.archived_at.isoformat() if self.archived_at else None,
        }
