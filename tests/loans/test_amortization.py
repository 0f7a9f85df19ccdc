from __future__ import annotations

import pytest

from src.hr_backoffice.hr_backoffice.core.enums import LoanStatus
from src.hr_backoffice.hr_backoffice.core.exceptions import ConflictError, ValidationError
from src.hr_backoffice.hr_backoffice.loans.amortization import apply_payment, installment, settle
from src.hr_backoffice.hr_backoffice.loans.model import Loan

from tests.fakes import civil


def _loan(**kw):
    values = dict(loan_id=1, user_id=1, amount=12000.0, balance=12000.0, monthly_payment_percent=20, term_months=5)
    values.update(kw)
    return Loan(**values)


def test_semi_monthly_installment():
    assert installment(_loan()) == pytest.approx(1200)
    assert installment(_loan(), factor=1) == pytest.approx(2400)


def test_ten_payments_complete_the_loan():
    loan = _loan()
    seen = []
    for _ in range(10):
        loan = settle(loan, installment(loan), civil(2025, 1, 15))
        seen.append(loan.balance)

    assert seen == sorted(seen, reverse=True)
    assert loan.balance == 0
    assert loan.status == LoanStatus.COMPLETED
    assert loan.archived_at == civil(2025, 1, 15)

    with pytest.raises(ConflictError):
        settle(loan, 1200, civil(2025, 2, 1))


def test_payment_never_overshoots():
    outcome = apply_payment(_loan(balance=500.0), 1200)
    assert outcome.paid == 500
    assert outcome.new_balance == 0
    assert outcome.completed


def test_balance_lands_on_zero_despite_float_steps():
    loan = _loan(amount=3.0, balance=0.3, monthly_payment_percent=10)
    for _ in range(3):
        loan = settle(loan, 0.1, civil(2025, 1, 15))
    assert loan.balance == 0
    assert loan.status == LoanStatus.COMPLETED


def test_create_loan_validation(store, services):
    store.add_personnel(1)
    loans = services.loan_service

    loan = loans.create_loan(user_id=1, amount="12000", monthly_payment_percent=20, term_months=5, purpose=" tuition ")
    assert loan.balance == 12000
    assert loan.purpose == "tuition"
    assert loans.list_active(1) == [loan]

    for bad in (
        dict(amount=0, monthly_payment_percent=20, term_months=5),
        dict(amount=1000, monthly_payment_percent=120, term_months=5),
        dict(amount=1000, monthly_payment_percent=20, term_months=0),
        dict(amount=1000, monthly_payment_percent=20, term_months=2.5),
    ):
        with pytest.raises(ValidationError):
            loans.create_loan(user_id=1, **bad)

    with pytest.raises(ValidationError):
        loans.create_loan(user_id=42, amount=1000, monthly_payment_percent=20, term_months=5)
