class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(DomainError):
    """Raised when required settings (time windows, period dates) are missing."""


class ConflictError(DomainError):
    """Raised when an operation would duplicate or repeat a state change."""


class ComputationGuardError(DomainError):
    """Internal: a rate computation hit a zero or negative divisor.

    Never propagated to callers; the calculator logs it and yields zero.
    """


class StoreError(DomainError):
    """Raised when the persistent store fails."""
