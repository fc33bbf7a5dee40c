"""Shared fixtures. No test touches the real storage directory."""

import pytest

from split_ledger.ledger import LedgerStore, SplitLedger
from split_ledger.services.storage import InMemoryStorage


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage) -> LedgerStore:
    return LedgerStore(
        storage=storage,
        participants_key="test.participants",
        bills_key="test.bills",
    )


@pytest.fixture
def ledger(store) -> SplitLedger:
    return SplitLedger(store=store)
