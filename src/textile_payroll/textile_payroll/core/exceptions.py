from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an employee or payroll record does not exist."""


class ConflictError(DomainError):
    """Raised on overlapping pay periods or duplicate generation.

    ``conflicting_period`` is the already stored period when the conflict is
    an overlap.
    """

    def __init__(self, message: str, *, conflicting_period: Optional[Any] = None):
        super().__init__(message)
        self.conflicting_period = conflicting_period


class PartialBatchFailure(DomainError):
    """Some employees failed during bulk generation (per-item, not fatal)."""

    def __init__(self, message: str, *, result: Any):
        super().__init__(message)
        self.result = result


class StorageError(DomainError):
    """Persistence layer failure (connectivity, constraint violation, ...)."""
