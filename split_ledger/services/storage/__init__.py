"""
Storage Services Package

Provides the key/value storage interface and its implementations.
Local JSON files are the durable backend; in-memory storage is for tests.
"""

from split_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)
from split_ledger.services.storage.json_file import JsonFileStorage
from split_ledger.services.storage.memory import InMemoryStorage

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
