from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Personnel:
    """A user together with the personnel type that carries the salary.

    `basic_salary` is monthly; payroll always pays half of it per period.
    """

    user_id: int
    full_name: str
    email: str
    is_active: bool = True
    personnel_type_name: Optional[str] = None
    basic_salary: Optional[float] = None
    type_is_active: bool = True

    @property
    def has_salary_basis(self) -> bool:
        return self.type_is_active and self.basic_salary is not None and self.basic_salary > 0

    @property
    def monthly_salary(self) -> float:
        return float(self.basic_salary or 0.0)
