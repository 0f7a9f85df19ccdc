"""Frozen payroll breakdown written at release.

The stored JSON is a versioned schema. Readers upgrade older layouts and refuse
versions newer than they understand, so a released payroll stays readable
after the computation changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Tuple

from ..core.constants import SNAPSHOT_SCHEMA_VERSION
from ..core.exceptions import ValidationError

# Version 0: figures at the top level, no schema_version, no line groups.
_LEGACY_FIGURES = (
    "basis_salary",
    "gross_salary",
    "total_deductions",
    "total_additions",
    "net_salary",
    "attendance_deductions",
    "standing_deductions",
    "loan_deductions",
)
_LINE_GROUPS = ("attendance", "deductions", "loans", "additions")


@dataclass(frozen=True)
class BreakdownSnapshot:
    user_id: int
    period_start: date
    period_end: date
    computed_at: datetime
    figures: Mapping[str, Any]
    attendance: Tuple[dict, ...] = ()
    deductions: Tuple[dict, ...] = ()
    loans: Tuple[dict, ...] = ()
    additions: Tuple[dict, ...] = ()
    schema_version: int = field(default=SNAPSHOT_SCHEMA_VERSION)

    @property
    def net_salary(self) -> float:
        return float(self.figures.get("net_salary", 0.0))

    @classmethod
    def from_computation(cls, computation, *, computed_at: datetime) -> "BreakdownSnapshot":
        return cls(
            user_id=computation.user_id,
            period_start=computation.period_start,
            period_end=computation.period_end,
            computed_at=computed_at,
            figures=computation.figures(),
            attendance=tuple(line.to_dict() for line in computation.day_lines),
            deductions=tuple(line.to_dict() for line in computation.deduction_lines),
            loans=tuple(line.to_dict() for line in computation.loan_lines),
            additions=tuple(line.to_dict() for line in computation.addition_lines),
        )

    def to_dict(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "user_id": self.user_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "computed_at": self.computed_at.isoformat(),
            "figures": dict(self.figures),
            "attendance": [dict(x) for x in self.attendance],
            "deductions": [dict(x) for x in self.deductions],
            "loans": [dict(x) for x in self.loans],
            "additions": [dict(x) for x in self.additions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BreakdownSnapshot":
        if not isinstance(data, Mapping):
            raise ValidationError("Breakdown snapshot must be an object")

        version = data.get("schema_version", 0)
        if not isinstance(version, int) or version < 0:
            raise ValidationError(f"Invalid snapshot schema_version: {version!r}")
        if version > SNAPSHOT_SCHEMA_VERSION:
            raise ValidationError(
                f"Snapshot schema_version {version} is newer than supported ({SNAPSHOT_SCHEMA_VERSION})"
            )
        if version == 0:
            data = _upgrade_v0(data)

        try:
            return cls(
                user_id=int(data["user_id"]),
                period_start=date.fromisoformat(data["period_start"]),
                period_end=date.fromisoformat(data["period_end"]),
                computed_at=datetime.fromisoformat(data["computed_at"]),
                figures=dict(data["figures"]),
                attendance=tuple(data.get("attendance") or ()),
                deductions=tuple(data.get("deductions") or ()),
                loans=tuple(data.get("loans") or ()),
                additions=tuple(data.get("additions") or ()),
                schema_version=SNAPSHOT_SCHEMA_VERSION,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed breakdown snapshot: {e}") from e


def _upgrade_v0(data: Mapping[str, Any]) -> dict:
    upgraded = {k: v for k, v in data.items() if k not in _LEGACY_FIGURES}
    upgraded["figures"] = {k: data[k] for k in _LEGACY_FIGURES if k in data}
    upgraded.setdefault("computed_at", data.get("released_at") or f"{data.get('period_end')}T00:00:00")
    for group in _LINE_GROUPS:
        upgraded.setdefault(group, [])
    upgraded["schema_version"] = SNAPSHOT_SCHEMA_VERSION
    return upgraded
