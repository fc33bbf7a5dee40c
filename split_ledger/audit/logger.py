"""
Audit Logger

DESIGN DECISION: Every ledger action is logged as a structured event.
This provides:
1. Traceability of roster changes
2. Visibility into persistence failures, which are never raised
3. Debugging capability

The audit logger:
- Is synchronous, like the ledger itself
- Writes to the local structured log only
- Never raises; logging must not break a mutation
"""

from typing import Optional

import structlog

from split_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from split_ledger.models.participant import Participant
from split_ledger.models.validation import ValidationResult


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """Central audit logging service for ledger events."""

    def __init__(self, logger_name: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name or "split_ledger")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at a level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_participant_added(self, participant: Participant) -> None:
        self.log(AuditEventBuilder.participant_added(
            participant_id=participant.id,
            name=participant.name,
            allocation_mode=participant.allocation_mode.kind,
        ))

    def log_participant_updated(self, participant: Participant) -> None:
        self.log(AuditEventBuilder.participant_updated(
            participant_id=participant.id,
            name=participant.name,
            allocation_mode=participant.allocation_mode.kind,
        ))

    def log_participant_removed(self, participant_id: str) -> None:
        self.log(AuditEventBuilder.participant_removed(participant_id))

    def log_bill_added(self, bill_id: str, amount: float, description: str) -> None:
        self.log(AuditEventBuilder.bill_added(
            bill_id=bill_id,
            amount=amount,
            description=description,
        ))

    def log_bill_removed(self, bill_id: str) -> None:
        self.log(AuditEventBuilder.bill_removed(bill_id))

    def log_ledger_cleared(self, participant_count: int, bill_count: int) -> None:
        self.log(AuditEventBuilder.ledger_cleared(participant_count, bill_count))

    def log_ledger_loaded(self, participant_count: int, bill_count: int) -> None:
        self.log(AuditEventBuilder.ledger_loaded(participant_count, bill_count))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_read_failed(key, error_message))

    def log_storage_write_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_write_failed(key, error_message))

    def log_subscriber_failed(self, callback_name: str, error_message: str) -> None:
        self.log(AuditEventBuilder.subscriber_failed(callback_name, error_message))

    def log_validation_warnings(
        self,
        result: ValidationResult,
        entity_type: str,
        entity_id: Optional[str] = None,
    ) -> None:
        """Log each warning-level issue of an accepted input."""
        for issue in result.issues:
            if issue.severity != "warning":
                continue
            self.log(AuditEventBuilder.validation_warning(
                entity_type=entity_type,
                entity_id=entity_id,
                field=issue.field,
                issue_type=issue.issue_type,
                message=issue.message,
            ))
