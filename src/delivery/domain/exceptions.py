"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class VariantLimitReachedError(ValidationError):
    """A multi-choice variant group already holds its maximum selections."""

    def __init__(self, group_name: str, maximum: int) -> None:
        noun = "option" if maximum == 1 else "options"
        super().__init__(
            f"Limit reached: you can select up to {maximum} {noun} for '{group_name}'"
        )
        self.group_name = group_name
        self.maximum = maximum


class StoreClosedError(ValidationError):
    """The tenant is not accepting orders right now."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class StoreError(DomainException):
    """The order store failed to read or write."""


class StorePermissionError(StoreError):
    """The order store rejected an operation because of its access rules.

    Carries enough context (path, operation, payload) for a developer to
    reproduce the rejected request.
    """

    def __init__(
        self,
        path: str,
        operation: str,
        request_data: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Missing or insufficient permissions: {operation} on '{path}'")
        self.path = path
        self.operation = operation
        self.request_data = request_data

    def context(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "operation": self.operation,
            "request_data": self.request_data,
        }


class SubmissionError(DomainException):
    """A validated order could not be written; the cart is left intact."""


class PlaybackBlockedError(DomainException):
    """The runtime refused to play audio until the user interacts."""
