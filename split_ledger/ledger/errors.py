"""Exceptions raised by the split ledger."""

from typing import Optional

from split_ledger.models.validation import ValidationIssue, ValidationResult


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """Input was rejected. Carries every error-level issue found."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationError":
        errors = result.errors
        message = "; ".join(issue.message for issue in errors) or "Invalid input"
        return cls(message, errors)


class NotFoundError(LedgerError):
    """Participant or bill not found in the ledger."""
    pass
