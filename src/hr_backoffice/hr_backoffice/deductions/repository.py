from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import CalculationType
from .model import Deduction, DeductionType


class DeductionRepository(Protocol):
    def list_deduction_types(self, mandatory: Optional[bool] = None, *, active_only: bool = True) -> Sequence[DeductionType]:
        raise NotImplementedError

    def get_deduction_type(self, deduction_type_id: int) -> Optional[DeductionType]:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_deductions(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        include_archived: bool = False,
    ) -> Sequence[Deduction]:
        """Instances for a user; `start`/`end` bound the civil date of `applied_at`."""

        raise NotImplementedError

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
        """A second mandatory instance of the same type raises ConflictError."""

        raise NotImplementedError

    def archive_deductions(self, ids: Iterable[int], archived_at: datetime) -> int:
        raise NotImplementedError
