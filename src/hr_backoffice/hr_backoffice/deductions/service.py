from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.clock import Clock
from ..common.validators import require_non_empty, require_positive
from ..core.enums import CalculationType
from ..core.exceptions import ConflictError, ValidationError
from ..payroll.calculator.base import DeductionCalculator
from ..personnel.repository import PersonnelRepository
from .model import Deduction, DeductionType
from .repository import DeductionRepository

logger = logging.getLogger(__name__)


class DeductionService:
    def __init__(
        self,
        deductions: DeductionRepository,
        personnel: PersonnelRepository,
        calculator: DeductionCalculator,
        clock: Clock,
    ):
        self._deductions = deductions
        self._personnel = personnel
        self._calculator = calculator
        self._clock = clock

    def create_type(
        self,
        *,
        name: str,
        calculation_type: CalculationType | str = CalculationType.FIXED,
        amount=0,
        percentage_value=None,
        is_mandatory: bool = False,
        description: Optional[str] = None,
    ) -> DeductionType:
        name = require_non_empty(name, "name")
        try:
            calc = CalculationType(calculation_type)
        except ValueError:
            raise ValidationError(f"Unknown calculation_type: {calculation_type!r}")

        if calc == CalculationType.PERCENTAGE:
            percentage_value = require_positive(percentage_value, "percentage_value")
            if percentage_value > 100:
                raise ValidationError("percentage_value must not exceed 100")
            amount = 0.0
        else:
            amount = require_positive(amount, "amount")
            percentage_value = None

        created = self._deductions.create_deduction_type(
            name=name,
            calculation_type=calc,
            amount=amount,
            percentage_value=percentage_value,
            is_mandatory=bool(is_mandatory),
            description=(description or "").strip() or None,
        )
        logger.info("Deduction type %s created (%s, mandatory=%s)", created.name, calc.value, created.is_mandatory)
        return created

    def apply_deduction(
        self,
        *,
        user_id: int,
        deduction_type_id: int,
        amount=None,
        notes: Optional[str] = None,
    ) -> Deduction:
        person = self._personnel.get_personnel(int(user_id))
        if not person:
            raise ValidationError(f"Personnel {user_id} does not exist")

        dtype = self._deductions.get_deduction_type(int(deduction_type_id))
        if not dtype or not dtype.is_active:
            raise ValidationError(f"Deduction type {deduction_type_id} does not exist or is inactive")

        if amount is None:
            value = self._calculator.standing_deduction_amount(dtype, person.monthly_salary)
        else:
            value = require_positive(amount, "amount")

        deduction = self._deductions.create_deduction(
            user_id=person.user_id,
            deduction_type_id=dtype.deduction_type_id,
            amount=value,
            applied_at=self._clock.now(),
            notes=(notes or "").strip() or None,
            mandatory=dtype.is_mandatory,
        )
        logger.info("Applied %s (%.2f) to user %s", dtype.name, value, person.user_id)
        return deduction

    def sync_mandatory(self) -> int:
        """Create the missing mandatory deductions for every active personnel."""
        mandatory = self._deductions.list_deduction_types(mandatory=True)
        if not mandatory:
            return 0

        now = self._clock.now()
        created = 0
        for person in self._personnel.list_active_personnel():
            have = {d.deduction_type_id for d in self._deductions.list_deductions(person.user_id, include_archived=True)}
            for dtype in mandatory:
                if dtype.deduction_type_id in have:
                    continue
                try:
                    self._deductions.create_deduction(
                        user_id=person.user_id,
                        deduction_type_id=dtype.deduction_type_id,
                        amount=self._calculator.standing_deduction_amount(dtype, person.monthly_salary),
                        applied_at=now,
                        notes="mandatory",
                        mandatory=True,
                    )
                    created += 1
                except ConflictError:
                    logger.info("Mandatory %s already applied to user %s", dtype.name, person.user_id)

        logger.info("Mandatory deduction sync created %d instance(s)", created)
        return created

    def list_for_user(self, user_id: int, *, include_archived: bool = False) -> Sequence[Deduction]:
        return self._deductions.list_deductions(int(user_id), include_archived=include_archived)
