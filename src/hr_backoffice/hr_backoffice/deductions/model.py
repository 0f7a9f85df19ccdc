from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CalculationType


@dataclass(frozen=True)
class DeductionType:
    deduction_type_id: int
    name: str
    calculation_type: CalculationType = CalculationType.FIXED
    amount: float = 0.0
    percentage_value: Optional[float] = None
    is_mandatory: bool = False
    is_active: bool = True
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "deduction_type_id": self.deduction_type_id,
            "name": self.name,
            "calculation_type": self.calculation_type.value,
            "amount": self.amount,
            "percentage_value": self.percentage_value,
            "is_mandatory": self.is_mandatory,
            "is_active": self.is_active,
            "description": self.description,
        }


@dataclass(frozen=True)
class Deduction:
    """An applied deduction. Type fields are joined in for display and rules."""

    deduction_id: int
    user_id: int
    deduction_type_id: int
    amount: float
    applied_at: datetime
    archived_at: Optional[datetime] = None
    notes: Optional[str] = None
    type_name: Optional[str] = None
    is_mandatory: bool = False

    def to_dict(self) -> dict:
        return {
            "deduction_id": self.deduction_id,
            "user_id": self.user_id,
            "deduction_type_id": self.deduction_type_id,
            "type_name": self.type_name,
            "amount": self.amount,
            "is_mandatory": self.is_mandatory,
            "applied_at": self.applied_at.isoformat(),
            "archived_at": self.archived_at.isoformat() if self.archived_at else None,
            "notes": self.notes,
        }
