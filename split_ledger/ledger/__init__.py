"""Split ledger package: the state container, its split calculation and persistence."""

from split_ledger.ledger.allocation import (
    calculate_split,
    total_fixed_dollar,
    total_fixed_percentage,
)
from split_ledger.ledger.errors import LedgerError, NotFoundError, ValidationError
from split_ledger.ledger.factory import create_ledger
from split_ledger.ledger.ledger import SplitLedger
from split_ledger.ledger.persistence import LedgerStore

__all__ = [
    "LedgerError",
    "LedgerStore",
    "NotFoundError",
    "SplitLedger",
    "ValidationError",
    "calculate_split",
    "create_ledger",
    "total_fixed_dollar",
    "total_fixed_percentage",
]
