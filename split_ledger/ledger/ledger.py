"""
Split Ledger

The single state container of the application. It owns the participant
roster and the bill roster, and is the whole API surface a UI calls:

- Mutations: add/update/remove participant, add/remove bill, clear all
- Queries: fixed totals, per-bill split, aggregate split, warnings

DESIGN DECISION: Every successful mutation
1. Updates the in-memory roster
2. Re-saves the affected roster (best-effort, never raises)
3. Logs an audit event
4. Notifies subscribers

Create one ledger per session and pass it to every consumer.
"""

from typing import Any, Callable, Optional

from split_ledger.audit import AuditLogger
from split_ledger.ledger.allocation import (
    calculate_split,
    total_fixed_dollar,
    total_fixed_percentage,
)
from split_ledger.ledger.errors import NotFoundError, ValidationError
from split_ledger.ledger.persistence import LedgerStore
from split_ledger.models.allocation import AllocationResult
from split_ledger.models.bill import Bill
from split_ledger.models.participant import Participant, classify_allocation_mode
from split_ledger.models.validation import ValidationResult
from split_ledger.validation import LedgerInputValidator


ChangeCallback = Callable[["SplitLedger"], Any]


class SplitLedger:
    """
    Participants, bills, and the split between them.

    The roster is shared by every bill. Allocation results are computed
    on demand from the current state and never stored.
    """

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[LedgerInputValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the ledger and load any persisted rosters.

        Args:
            store: Persistence adapter for both rosters
            validator: Input validator (default: LedgerInputValidator)
            audit_logger: Audit logger (default: local structured log)
        """
        self._store = store
        self._validator = validator or LedgerInputValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._subscribers: list[ChangeCallback] = []

        self._participants: list[Participant] = store.load_participants()
        self._bills: list[Bill] = store.load_bills()

        self._audit_logger.log_ledger_loaded(len(self._participants), len(self._bills))

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def participants(self) -> list[Participant]:
        """Current roster, in insertion order."""
        return list(self._participants)

    @property
    def bills(self) -> list[Bill]:
        """Current bills, in insertion order."""
        return list(self._bills)

    def _participant_index(self, participant_id: str) -> Optional[int]:
        for idx, participant in enumerate(self._participants):
            if participant.id == participant_id:
                return idx
        return None

    def _bill_index(self, bill_id: str) -> Optional[int]:
        for idx, bill in enumerate(self._bills):
            if bill.id == bill_id:
                return idx
        return None

    def get_participant(self, participant_id: str) -> Participant:
        """
        Look up a participant by id.

        Raises:
            NotFoundError: If the participant doesn't exist
        """
        idx = self._participant_index(participant_id)
        if idx is None:
            raise NotFoundError(f"Participant not found: {participant_id}")
        return self._participants[idx]

    def get_bill(self, bill_id: str) -> Bill:
        """
        Look up a bill by id.

        Raises:
            NotFoundError: If the bill doesn't exist
        """
        idx = self._bill_index(bill_id)
        if idx is None:
            raise NotFoundError(f"Bill not found: {bill_id}")
        return self._bills[idx]

    def total_bill_amount(self) -> float:
        """Sum of every bill's total."""
        return sum(bill.total_amount for bill in self._bills)

    # =========================================================================
    # Change notification
    # =========================================================================

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """
        Register a callback to run after every successful mutation.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception as e:
                # A broken view must not undo or block the mutation
                name = getattr(callback, "__qualname__", repr(callback))
                self._audit_logger.log_subscriber_failed(name, str(e))

    # =========================================================================
    # Participant mutations
    # =========================================================================

    def _validate_participant(
        self,
        name: Optional[str],
        percentage: Optional[float],
        dollar_amount: Optional[float],
        exclude_id: Optional[str] = None,
    ) -> ValidationResult:
        others = [p for p in self._participants if p.id != exclude_id]
        result = self._validator.validate_participant(
            name=name,
            percentage=percentage,
            dollar_amount=dollar_amount,
            other_fixed_percentage=total_fixed_percentage(others),
        )
        if result.has_errors:
            raise ValidationError.from_result(result)
        return result

    def add_participant(
        self,
        name: str,
        percentage: Optional[float] = None,
        dollar_amount: Optional[float] = None,
    ) -> Participant:
        """
        Add a participant to the shared roster.

        The allocation mode follows whichever of percentage and
        dollar_amount is positive; neither means flexible.

        Warnings (such as fixed percentages passing 100%) do not block
        the add; they are written to the audit log.

        Raises:
            ValidationError: Empty name, both shares set, or a share out of range
        """
        result = self._validate_participant(name, percentage, dollar_amount)

        participant = Participant(
            name=name,
            allocation_mode=classify_allocation_mode(percentage, dollar_amount),
        )
        self._participants.append(participant)
        self._store.save_participants(self._participants)

        self._audit_logger.log_participant_added(participant)
        self._audit_logger.log_validation_warnings(result, "participant", participant.id)
        self._notify()
        return participant

    def update_participant(
        self,
        participant_id: str,
        name: str,
        percentage: Optional[float] = None,
        dollar_amount: Optional[float] = None,
    ) -> Participant:
        """
        Replace a participant's name and allocation mode, keeping its id
        and its place in the roster.

        Raises:
            NotFoundError: If the participant doesn't exist
            ValidationError: Same rules as add_participant
        """
        idx = self._participant_index(participant_id)
        if idx is None:
            raise NotFoundError(f"Participant not found: {participant_id}")

        result = self._validate_participant(
            name, percentage, dollar_amount, exclude_id=participant_id
        )

        participant = Participant(
            id=participant_id,
            name=name,
            allocation_mode=classify_allocation_mode(percentage, dollar_amount),
        )
        self._participants[idx] = participant
        self._store.save_participants(self._participants)

        self._audit_logger.log_participant_updated(participant)
        self._audit_logger.log_validation_warnings(result, "participant", participant.id)
        self._notify()
        return participant

    def remove_participant(self, participant_id: str) -> bool:
        """
        Remove a participant.

        Returns:
            True if removed, False if there was no such participant
        """
        idx = self._participant_index(participant_id)
        if idx is None:
            return False

        del self._participants[idx]
        self._store.save_participants(self._participants)

        self._audit_logger.log_participant_removed(participant_id)
        self._notify()
        return True

    # =========================================================================
    # Bill mutations
    # =========================================================================

    def add_bill(self, amount: float, description: Optional[str] = None) -> Bill:
        """
        Record a bill.

        Raises:
            ValidationError: If amount is not a finite number above zero
        """
        result = self._validator.validate_bill(amount, description)
        if result.has_errors:
            raise ValidationError.from_result(result)

        bill = Bill(total_amount=float(amount), description=description or "")
        self._bills.append(bill)
        self._store.save_bills(self._bills)

        self._audit_logger.log_bill_added(bill.id, bill.total_amount, bill.description)
        self._notify()
        return bill

    def remove_bill(self, bill_id: str) -> bool:
        """
        Remove a bill.

        Returns:
            True if removed, False if there was no such bill
        """
        idx = self._bill_index(bill_id)
        if idx is None:
            return False

        del self._bills[idx]
        self._store.save_bills(self._bills)

        self._audit_logger.log_bill_removed(bill_id)
        self._notify()
        return True

    def clear_all(self) -> None:
        """Remove every participant and bill, and erase the persisted records."""
        participant_count = len(self._participants)
        bill_count = len(self._bills)

        self._participants = []
        self._bills = []
        self._store.clear()

        self._audit_logger.log_ledger_cleared(participant_count, bill_count)
        self._notify()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_total_fixed_percentage(self) -> float:
        """Sum of fixed percentages. May exceed 100."""
        return total_fixed_percentage(self._participants)

    def get_total_fixed_dollar(self) -> float:
        """Sum of fixed dollar amounts."""
        return total_fixed_dollar(self._participants)

    def calculate_bill_split(self, bill_id: str) -> AllocationResult:
        """
        Split one bill across the roster.

        Raises:
            NotFoundError: If the bill doesn't exist
        """
        bill = self.get_bill(bill_id)
        return calculate_split(self._participants, bill.total_amount)

    def calculate_aggregate_split(self) -> AllocationResult:
        """
        Split the sum of all bills across the roster.

        With no bills (or a zero total) the result has no lines, but still
        reports the fixed totals so over-allocation can be flagged.
        """
        total = self.total_bill_amount()
        if total <= 0:
            return AllocationResult(
                total_amount=0.0,
                total_fixed_percentage=self.get_total_fixed_percentage(),
                total_fixed_dollar=self.get_total_fixed_dollar(),
            )
        return calculate_split(self._participants, total)

    def get_allocation_warnings(self, bill_id: Optional[str] = None) -> list[str]:
        """
        Warnings for one bill's split, or for the aggregate split.

        Raises:
            NotFoundError: If bill_id is given and doesn't exist
        """
        if bill_id is not None:
            return self.calculate_bill_split(bill_id).warnings
        return self.calculate_aggregate_split().warnings
