"""
Data Models Package

This package contains all Pydantic models used in the Split Ledger.
"""

from split_ledger.models.allocation import AllocationLine, AllocationResult
from split_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from split_ledger.models.bill import Bill
from split_ledger.models.participant import (
    AllocationMode,
    FixedDollar,
    FixedPercentage,
    Flexible,
    Participant,
    classify_allocation_mode,
    new_id,
)
from split_ledger.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Roster models
    "AllocationMode",
    "Bill",
    "FixedDollar",
    "FixedPercentage",
    "Flexible",
    "Participant",
    "classify_allocation_mode",
    "new_id",
    # Derived models
    "AllocationLine",
    "AllocationResult",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
