"""Input validation package."""

from split_ledger.validation.validator import LedgerInputValidator

__all__ = ["LedgerInputValidator"]
