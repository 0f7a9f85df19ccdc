"""Loan installments and balance reduction.

A period always collects half of the monthly installment; see
`SEMI_MONTHLY_FACTOR`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from ..core.constants import SEMI_MONTHLY_FACTOR
from ..core.enums import LoanStatus
from ..core.exceptions import ConflictError
from .model import Loan


@dataclass(frozen=True)
class PaymentOutcome:
    paid: float
    new_balance: float
    completed: bool


def installment(loan: Loan, factor: float = SEMI_MONTHLY_FACTOR) -> float:
    return float(loan.amount) * float(loan.monthly_payment_percent) / 100 * float(factor)


def apply_payment(loan: Loan, amount: float) -> PaymentOutcome:
    if not loan.is_active:
        raise ConflictError(f"Loan {loan.loan_id} is {loan.status.value.lower()}; no further payments")

    balance = max(0.0, float(loan.balance))
    paid = min(balance, max(0.0, float(amount)))
    # Cents: repeated float subtraction must still land on exactly 0.
    new_balance = round(max(0.0, balance - paid), 2)
    return PaymentOutcome(paid=paid, new_balance=new_balance, completed=new_balance == 0)


def settle(loan: Loan, amount: float, now: datetime) -> Loan:
    """Loan after one period's payment; completion archives it."""
    outcome = apply_payment(loan, amount)
    if outcome.completed:
        return replace(loan, balance=0.0, status=LoanStatus.COMPLETED, archived_at=now)
    return replace(loan, balance=outcome.new_balance)
