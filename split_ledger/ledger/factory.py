"""
Ledger Factory

Wires a SplitLedger to its storage, validator and audit logger from
settings. Call once per session and share the returned ledger.
"""

import logging
from typing import Optional

from split_ledger.audit import AuditLogger
from split_ledger.config import LedgerSettings, get_settings
from split_ledger.ledger.ledger import SplitLedger
from split_ledger.ledger.persistence import LedgerStore
from split_ledger.services.storage import JsonFileStorage, KeyValueStorageInterface
from split_ledger.validation import LedgerInputValidator


def create_ledger(
    settings: Optional[LedgerSettings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
) -> SplitLedger:
    """
    Build a ledger and load its persisted state.

    Args:
        settings: Ledger settings (default: loaded from the environment)
        storage: Storage backend. If None, JSON files in settings.storage_dir.

    Returns:
        A ready-to-use SplitLedger
    """
    settings = settings or get_settings()
    logging.getLogger("split_ledger").setLevel(settings.effective_log_level)

    audit_logger = AuditLogger()
    store = LedgerStore(
        storage=storage or JsonFileStorage(settings.storage_dir),
        participants_key=settings.participants_key,
        bills_key=settings.bills_key,
        audit_logger=audit_logger,
    )
    return SplitLedger(
        store=store,
        validator=LedgerInputValidator(),
        audit_logger=audit_logger,
    )
