"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a tiny key/value interface
shaped like browser local storage: get, set and remove a string by key.
This allows us to:
1. Keep ledger records on local disk
2. Use in-memory storage for testing
3. Swap in another backend without touching ledger logic

Values are opaque strings; serialization is the persistence adapter's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key/value storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: The storage key
            value: The string to store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Delete a key. Removing an absent key is not an error.

        Args:
            key: The storage key

        Raises:
            StorageError: If the delete fails
        """
        pass

    def has_item(self, key: str) -> bool:
        """Check whether a key is present."""
        return self.get_item(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
