from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.clock import Clock
from ..common.validators import require_positive
from ..core.exceptions import ValidationError
from ..personnel.repository import PersonnelRepository
from .model import Loan
from .repository import LoanRepository

logger = logging.getLogger(__name__)


class LoanService:
    def __init__(self, loans: LoanRepository, personnel: PersonnelRepository, clock: Clock):
        self._loans = loans
        self._personnel = personnel
        self._clock = clock

    def create_loan(
        self,
        *,
        user_id: int,
        amount,
        monthly_payment_percent,
        term_months,
        purpose: Optional[str] = None,
    ) -> Loan:
        if not self._personnel.get_personnel(int(user_id)):
            raise ValidationError(f"Personnel {user_id} does not exist")

        amount = require_positive(amount, "amount")
        percent = require_positive(monthly_payment_percent, "monthly_payment_percent")
        if percent > 100:
            raise ValidationError("monthly_payment_percent must not exceed 100")
        term = require_positive(term_months, "term_months")
        if term != int(term):
            raise ValidationError("term_months must be a whole number")

        loan = self._loans.create_loan(
            user_id=int(user_id),
            amount=amount,
            monthly_payment_percent=percent,
            term_months=int(term),
            purpose=(purpose or "").strip() or None,
            created_at=self._clock.now(),
        )
        logger.info("Loan %s created for user %s: %.2f at %.2f%%", loan.loan_id, user_id, amount, percent)
        return loan

    def list_active(self, user_id: Optional[int] = None) -> Sequence[Loan]:
        return self._loans.list_active_loans(user_id)
