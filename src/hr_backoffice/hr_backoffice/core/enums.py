from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Resolved status of one personnel on one civil day."""

    PENDING = "PENDING"
    PRESENT = "PRESENT"
    LATE = "LATE"
    PARTIAL = "PARTIAL"
    ABSENT = "ABSENT"
    NON_WORKING = "NON_WORKING"
    ON_LEAVE = "ON_LEAVE"


class PunchAction(str, Enum):
    TIME_IN = "TIME_IN"
    TIME_OUT = "TIME_OUT"


class CalculationType(str, Enum):
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DEFAULTED = "DEFAULTED"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    RELEASED = "RELEASED"
    ARCHIVED = "ARCHIVED"


class AdditionalPayKind(str, Enum):
    OVERLOAD = "OVERLOAD"
    BONUS = "BONUS"
    OVERTIME = "OVERTIME"


class RequestStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class HolidayType(str, Enum):
    NATIONAL = "NATIONAL"
    RELIGIOUS = "RELIGIOUS"
    COMPANY = "COMPANY"
