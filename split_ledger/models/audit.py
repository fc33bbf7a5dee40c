"""
Audit Models for Split Ledger

Every ledger action produces one structured audit event. Events are written
to the local structured log only; the ledger keeps no history of them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


DESCRIPTION_MAX_LENGTH = 500


def _clip(text: str, limit: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Shorten text to fit an event description."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Roster changes
    PARTICIPANT_ADDED = "participant_added"
    PARTICIPANT_UPDATED = "participant_updated"
    PARTICIPANT_REMOVED = "participant_removed"
    BILL_ADDED = "bill_added"
    BILL_REMOVED = "bill_removed"
    LEDGER_CLEARED = "ledger_cleared"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # Input checks
    VALIDATION_WARNING = "validation_warning"

    # Change notification
    SUBSCRIBER_FAILED = "subscriber_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'participant', 'bill', 'storage')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.participant_added(participant_id, name, "flexible")
        event = AuditEventBuilder.storage_write_failed("split_ledger.bills", str(e))
    """

    @staticmethod
    def participant_added(
        participant_id: str,
        name: str,
        allocation_mode: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARTICIPANT_ADDED,
            entity_type="participant",
            entity_id=participant_id,
            description=_clip(f"Participant added: {name}"),
            details={
                "name": name,
                "allocation_mode": allocation_mode,
            },
        )

    @staticmethod
    def participant_updated(
        participant_id: str,
        name: str,
        allocation_mode: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARTICIPANT_UPDATED,
            entity_type="participant",
            entity_id=participant_id,
            description=_clip(f"Participant updated: {name}"),
            details={
                "name": name,
                "allocation_mode": allocation_mode,
            },
        )

    @staticmethod
    def participant_removed(participant_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARTICIPANT_REMOVED,
            entity_type="participant",
            entity_id=participant_id,
            description="Participant removed",
        )

    @staticmethod
    def bill_added(
        bill_id: str,
        amount: float,
        description: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_ADDED,
            entity_type="bill",
            entity_id=bill_id,
            description=_clip(f"Bill added: {amount:.2f}"),
            details={
                "total_amount": amount,
                "description": description,
            },
        )

    @staticmethod
    def bill_removed(bill_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BILL_REMOVED,
            entity_type="bill",
            entity_id=bill_id,
            description="Bill removed",
        )

    @staticmethod
    def ledger_cleared(participant_count: int, bill_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CLEARED,
            entity_type="ledger",
            description="All participants and bills cleared",
            details={
                "participants_removed": participant_count,
                "bills_removed": bill_count,
            },
        )

    @staticmethod
    def ledger_loaded(participant_count: int, bill_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            description=f"Ledger loaded with {participant_count} participants and {bill_count} bills",
            details={
                "participant_count": participant_count,
                "bill_count": bill_count,
            },
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            description=_clip(f"Could not read '{key}', starting with an empty roster"),
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            description=_clip(f"Could not write '{key}'"),
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def subscriber_failed(callback_name: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIBER_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="subscriber",
            description=_clip(f"Change subscriber {callback_name} raised"),
            details={"callback": callback_name},
            error_message=error_message,
        )

    @staticmethod
    def validation_warning(
        entity_type: str,
        entity_id: Optional[str],
        field: str,
        issue_type: str,
        message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_WARNING,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=_clip(message),
            details={
                "field": field,
                "issue_type": issue_type,
            },
        )
