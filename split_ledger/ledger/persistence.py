"""
Ledger Persistence Adapter

Loads and saves the two rosters through a key/value storage backend.

Record layout (camelCase, interchangeable with the browser app's local
storage records):

    participants: [{id, name, percentage?, dollarAmount?,
                    hasFixedPercentage, hasFixedDollarAmount}, ...]
    bills:        [{id, totalAmount, description, createdAt}, ...]

Ids are opaque strings. New ids are uuid4 text, but ids written by the
browser app (millisecond timestamps) load unchanged.

Persistence is best-effort:
- A missing record loads as an empty roster
- A corrupt or unreadable record loads as an empty roster and is logged
- A failed write or delete is logged and swallowed
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from split_ledger.audit import AuditLogger
from split_ledger.models.bill import Bill
from split_ledger.models.participant import (
    FixedDollar,
    FixedPercentage,
    Flexible,
    Participant,
)
from split_ledger.services.storage import KeyValueStorageInterface, StorageError


class ParticipantRecord(BaseModel):
    """Stored form of a participant."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    percentage: Optional[float] = None
    dollar_amount: Optional[float] = None
    has_fixed_percentage: bool = False
    has_fixed_dollar_amount: bool = False

    @model_validator(mode='after')
    def validate_single_mode(self) -> 'ParticipantRecord':
        if self.has_fixed_percentage and self.has_fixed_dollar_amount:
            raise ValueError("Participant record has both a fixed percentage and a fixed amount")
        return self

    @classmethod
    def from_participant(cls, participant: Participant) -> 'ParticipantRecord':
        return cls(
            id=participant.id,
            name=participant.name,
            percentage=participant.percentage,
            dollar_amount=participant.dollar_amount,
            has_fixed_percentage=participant.has_fixed_percentage,
            has_fixed_dollar_amount=participant.has_fixed_dollar_amount,
        )

    def to_participant(self) -> Participant:
        if self.has_fixed_percentage:
            mode = FixedPercentage(value=self.percentage or 0.0)
        elif self.has_fixed_dollar_amount:
            mode = FixedDollar(value=self.dollar_amount or 0.0)
        else:
            mode = Flexible()
        return Participant(id=self.id, name=self.name, allocation_mode=mode)


class BillRecord(BaseModel):
    """Stored form of a bill. createdAt is an ISO-8601 string on disk."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    total_amount: float
    description: str = ""
    created_at: datetime

    @classmethod
    def from_bill(cls, bill: Bill) -> 'BillRecord':
        return cls(
            id=bill.id,
            total_amount=bill.total_amount,
            description=bill.description,
            created_at=bill.created_at,
        )

    def to_bill(self) -> Bill:
        return Bill(
            id=self.id,
            total_amount=self.total_amount,
            description=self.description,
            created_at=self.created_at,
        )


_participant_records = TypeAdapter(list[ParticipantRecord])
_bill_records = TypeAdapter(list[BillRecord])


def participants_to_json(participants: list[Participant]) -> str:
    records = [ParticipantRecord.from_participant(p) for p in participants]
    return _participant_records.dump_json(
        records, by_alias=True, exclude_none=True
    ).decode("utf-8")


def participants_from_json(raw: str) -> list[Participant]:
    """
    Parse a stored participant roster.

    Raises:
        pydantic.ValidationError: If the record is malformed
    """
    return [record.to_participant() for record in _participant_records.validate_json(raw)]


def bills_to_json(bills: list[Bill]) -> str:
    records = [BillRecord.from_bill(b) for b in bills]
    return _bill_records.dump_json(records, by_alias=True).decode("utf-8")


def bills_from_json(raw: str) -> list[Bill]:
    """
    Parse a stored bill roster.

    Raises:
        pydantic.ValidationError: If the record is malformed
    """
    return [record.to_bill() for record in _bill_records.validate_json(raw)]


class LedgerStore:
    """
    Reads and writes the participant and bill rosters.

    Never raises to the caller: failures are logged and the ledger
    carries on with what it has in memory.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        participants_key: str,
        bills_key: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._participants_key = participants_key
        self._bills_key = bills_key
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def participants_key(self) -> str:
        return self._participants_key

    @property
    def bills_key(self) -> str:
        return self._bills_key

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._storage.get_item(key)
        except StorageError as e:
            self._audit_logger.log_storage_read_failed(key, str(e))
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self._storage.set_item(key, value)
            return True
        except StorageError as e:
            self._audit_logger.log_storage_write_failed(key, str(e))
            return False

    def load_participants(self) -> list[Participant]:
        """Load the participant roster; empty if missing or corrupt."""
        raw = self._read(self._participants_key)
        if raw is None:
            return []
        try:
            return participants_from_json(raw)
        except PydanticValidationError as e:
            self._audit_logger.log_storage_read_failed(self._participants_key, str(e))
            return []

    def load_bills(self) -> list[Bill]:
        """Load the bill roster; empty if missing or corrupt."""
        raw = self._read(self._bills_key)
        if raw is None:
            return []
        try:
            return bills_from_json(raw)
        except PydanticValidationError as e:
            self._audit_logger.log_storage_read_failed(self._bills_key, str(e))
            return []

    def save_participants(self, participants: list[Participant]) -> bool:
        """Write the full participant roster. Returns False if the write failed."""
        return self._write(self._participants_key, participants_to_json(participants))

    def save_bills(self, bills: list[Bill]) -> bool:
        """Write the full bill roster. Returns False if the write failed."""
        return self._write(self._bills_key, bills_to_json(bills))

    def clear(self) -> bool:
        """Delete both roster records. Returns False if either delete failed."""
        cleared = True
        for key in (self._participants_key, self._bills_key):
            try:
                self._storage.remove_item(key)
            except StorageError as e:
                self._audit_logger.log_storage_write_failed(key, str(e))
                cleared = False
        return cleared
