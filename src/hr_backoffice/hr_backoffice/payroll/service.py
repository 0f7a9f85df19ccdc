from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence

from ..common.clock import Clock
from ..common.validators import require_positive
from ..core.enums import AdditionalPayKind, PayrollStatus
from ..core.exceptions import ConfigurationError, ConflictError, ValidationError
from ..database.connection import UnitOfWork
from ..deductions.repository import DeductionRepository
from ..loans.amortization import settle
from ..loans.repository import LoanRepository
from ..personnel.model import Personnel
from ..personnel.repository import PersonnelRepository
from ..settings.model import AttendanceSettings
from ..settings.service import SettingsService, require_period
from .aggregator import PayrollAggregator, PayrollComputation
from .model import AdditionalPay, PayrollEntry
from .repository import PayrollRepository
from .snapshot import BreakdownSnapshot

logger = logging.getLogger(__name__)


class PayrollService:
    """Payroll lifecycle: PENDING on generate, frozen on release, ARCHIVED when superseded.

    Generate and release each run in one transaction and read the rows they
    change under a lock, so overlapping runs for the same user serialize.
    """

    def __init__(
        self,
        *,
        payroll: PayrollRepository,
        personnel: PersonnelRepository,
        deductions: DeductionRepository,
        loans: LoanRepository,
        settings: SettingsService,
        aggregator: PayrollAggregator,
        clock: Clock,
        uow: UnitOfWork,
    ):
        self._payroll = payroll
        self._personnel = personnel
        self._deductions = deductions
        self._loans = loans
        self._settings = settings
        self._aggregator = aggregator
        self._clock = clock
        self._uow = uow

    def _period(
        self, settings: AttendanceSettings, period_start: Optional[date], period_end: Optional[date]
    ) -> tuple[date, date]:
        if (period_start is None) != (period_end is None):
            raise ValidationError("period_start and period_end must be given together")
        if period_start is None:
            period_start, period_end = require_period(settings)
        if period_start > period_end:
            raise ValidationError("period_start must not be after period_end")
        if self._aggregator.calendar.count_working_days(period_start, period_end) == 0:
            raise ConfigurationError("No working days in period")
        return period_start, period_end

    def _persist_materialized(self, computation: PayrollComputation, now) -> int:
        created = 0
        for line in computation.deduction_lines:
            if not line.materialized:
                continue
            try:
                self._deductions.create_deduction(
                    user_id=computation.user_id,
                    deduction_type_id=line.deduction_type_id,
                    amount=line.amount,
                    applied_at=now,
                    notes="mandatory",
                    mandatory=True,
                )
                created += 1
            except ConflictError:
                logger.info("Mandatory %s already applied to user %s", line.name, computation.user_id)
        return created

    def generate(self, period_start: Optional[date] = None, period_end: Optional[date] = None) -> List[PayrollEntry]:
        settings = self._settings.get()
        require_period(settings)
        start, end = self._period(settings, period_start, period_end)
        now = self._clock.now()

        created: List[PayrollEntry] = []
        with self._uow.transaction():
            for person in self._personnel.list_active_personnel():
                if not person.has_salary_basis:
                    logger.warning("Skipping user %s: no salary basis", person.user_id)
                    continue

                computation = self._aggregator.compute(person, start, end, settings, now)
                self._persist_materialized(computation, now)

                # One live entry per user: whatever was live becomes history.
                # The locked read makes a concurrent generate for this user wait.
                existing = self._payroll.list_payroll_entries(user_id=person.user_id, for_update=True)
                live = [e.payroll_entry_id for e in existing if e.is_live]
                if live:
                    self._payroll.archive_payroll_entries(live, now)

                created.append(
                    self._payroll.create_payroll_entry(
                        user_id=person.user_id,
                        period_start=start,
                        period_end=end,
                        basic_salary=computation.gross_salary,
                        deductions=computation.total_deductions,
                        net_pay=computation.net_salary,
                        created_at=now,
                    )
                )

        logger.info("Generated %d payroll entries for %s..%s", len(created), start, end)
        return created

    def release(
        self,
        next_period_start: Optional[date] = None,
        next_period_end: Optional[date] = None,
    ) -> List[PayrollEntry]:
        settings = self._settings.get()
        start, end = require_period(settings)

        def pending() -> Sequence[PayrollEntry]:
            entries = self._payroll.list_payroll_entries(
                period_start=start, period_end=end, status=PayrollStatus.PENDING, for_update=True
            )
            if not entries:
                raise ConflictError(f"No pending payroll entries for {start}..{end}")
            return entries

        return self._release(pending, settings, next_period_start, next_period_end)

    def release_entries(
        self,
        entry_ids: Iterable[int],
        next_period_start: Optional[date] = None,
        next_period_end: Optional[date] = None,
    ) -> List[PayrollEntry]:
        settings = self._settings.get()
        require_period(settings)
        ids = [int(entry_id) for entry_id in entry_ids]
        if not ids:
            raise ValidationError("No payroll entries selected")

        def selected() -> Sequence[PayrollEntry]:
            entries = []
            for entry_id in ids:
                entry = self._payroll.get_payroll_entry(entry_id)
                if not entry:
                    raise ValidationError(f"Payroll entry {entry_id} does not exist")
                if entry.status != PayrollStatus.PENDING:
                    raise ConflictError(f"Payroll entry {entry_id} is {entry.status.value.lower()}, not pending")
                entries.append(entry)
            return entries

        return self._release(selected, settings, next_period_start, next_period_end)

    def _release(
        self,
        load: Callable[[], Sequence[PayrollEntry]],
        settings: AttendanceSettings,
        next_start: Optional[date],
        next_end: Optional[date],
    ) -> List[PayrollEntry]:
        """Release what `load` returns, read inside the same transaction.

        Each entry moves PENDING -> RELEASED through a status-checked update
        before any loan or deduction is touched, so a second release of the
        same entry raises ConflictError and rolls back.
        """
        if (next_start is None) != (next_end is None):
            raise ValidationError("next_period_start and next_period_end must be given together")

        now = self._clock.now()
        released: List[PayrollEntry] = []
        with self._uow.transaction():
            for entry in load():
                person = self._require_personnel(entry.user_id)
                computation = self._aggregator.compute(person, entry.period_start, entry.period_end, settings, now)

                snapshot = BreakdownSnapshot.from_computation(computation, computed_at=now)
                released.append(
                    self._payroll.update_payroll_entry(
                        replace(
                            entry,
                            basic_salary=computation.gross_salary,
                            deductions=computation.total_deductions,
                            net_pay=computation.net_salary,
                            status=PayrollStatus.RELEASED,
                            released_at=now,
                            breakdown_snapshot=snapshot.to_dict(),
                        ),
                        expected_status=PayrollStatus.PENDING,
                    )
                )
                self._persist_materialized(computation, now)

                for line in computation.loan_lines:
                    loan = self._loans.get_loan(line.loan_id)
                    if not loan or not loan.is_active:
                        continue
                    settled = self._loans.update_loan(settle(loan, line.installment, now))
                    if not settled.is_active:
                        logger.info("Loan %s completed for user %s", settled.loan_id, settled.user_id)

                consumed = [
                    line.deduction_id
                    for line in computation.deduction_lines
                    if not line.is_mandatory and line.deduction_id is not None
                ]
                self._deductions.archive_deductions(consumed, now)
                self._payroll.archive_additional_pay([line.additional_pay_id for line in computation.addition_lines], now)

            if next_start is not None:
                self._settings.advance_period(next_start, next_end, current=settings)

        logger.info("Released %d payroll entries", len(released))
        return released

    def _require_personnel(self, user_id: int) -> Personnel:
        person = self._personnel.get_personnel(int(user_id))
        if not person:
            raise ValidationError(f"Personnel {user_id} does not exist")
        return person

    def view_entry(self, entry_id: int) -> dict:
        """RELEASED and ARCHIVED entries read back their snapshot; PENDING ones are live."""
        entry = self._payroll.get_payroll_entry(int(entry_id))
        if not entry:
            raise ValidationError(f"Payroll entry {entry_id} does not exist")

        if entry.status == PayrollStatus.PENDING:
            settings = self._settings.get()
            now = self._clock.now()
            person = self._require_personnel(entry.user_id)
            computation = self._aggregator.compute(person, entry.period_start, entry.period_end, settings, now)
            breakdown = BreakdownSnapshot.from_computation(computation, computed_at=now).to_dict()
            return {"entry": entry.to_dict(), "source": "live", "breakdown": breakdown}

        if entry.breakdown_snapshot is not None:
            breakdown = BreakdownSnapshot.from_dict(entry.breakdown_snapshot).to_dict()
            return {"entry": entry.to_dict(), "source": "snapshot", "breakdown": breakdown}

        # Superseded before it was ever released.
        figures = {
            "gross_salary": entry.basic_salary,
            "total_deductions": entry.deductions,
            "net_salary": entry.net_pay,
        }
        return {"entry": entry.to_dict(), "source": "stored", "breakdown": {"figures": figures}}

    def summary(self, period_start: Optional[date] = None, period_end: Optional[date] = None) -> dict:
        settings = self._settings.get()
        start, end = self._period(settings, period_start, period_end)
        now = self._clock.now()

        rows = []
        for person in self._personnel.list_active_personnel():
            if not person.has_salary_basis:
                continue
            computation = self._aggregator.compute(person, start, end, settings, now)
            rows.append({"user_id": person.user_id, "full_name": person.full_name, **computation.figures()})

        totals = {
            key: sum(r[key] for r in rows)
            for key in ("gross_salary", "total_deductions", "total_additions", "net_salary")
        }
        return {"period_start": start.isoformat(), "period_end": end.isoformat(), "rows": rows, "totals": totals}

    def archive_entry(self, entry_id: int) -> PayrollEntry:
        entry = self._payroll.get_payroll_entry(int(entry_id))
        if not entry:
            raise ValidationError(f"Payroll entry {entry_id} does not exist")
        if entry.status != PayrollStatus.RELEASED:
            raise ConflictError(f"Only released entries can be archived (entry {entry_id} is {entry.status.value})")

        self._payroll.archive_payroll_entries([entry.payroll_entry_id], self._clock.now())
        logger.info("Payroll entry %s archived", entry_id)
        return self._payroll.get_payroll_entry(entry.payroll_entry_id)

    def add_additional_pay(
        self,
        *,
        user_id: int,
        kind: AdditionalPayKind | str,
        amount,
        notes: Optional[str] = None,
    ) -> AdditionalPay:
        self._require_personnel(user_id)
        try:
            kind = AdditionalPayKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown additional pay kind: {kind!r}")

        pay = self._payroll.create_additional_pay(
            user_id=int(user_id),
            kind=kind,
            amount=require_positive(amount, "amount"),
            applied_at=self._clock.now(),
            notes=(notes or "").strip() or None,
        )
        logger.info("Added %s pay %.2f for user %s", kind.value, pay.amount, user_id)
        return pay
