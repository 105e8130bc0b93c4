"""
Abstract Persistence Interface

DESIGN DECISION: The ledger persists through a plain key-value contract.
This allows us to:
1. Keep the log in a local file (the default)
2. Use in-memory storage for testing
3. Mirror the log to Google Sheets so it can be viewed there
4. Keep the engine decoupled from any storage implementation

The value is an opaque string. Serialization belongs to the ledger
core (see core.codec), not to the store.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PersistenceAdapter(ABC):
    """
    Abstract interface for the ledger's key-value store.

    Both operations are synchronous. Implementations raise StorageError
    (or a subclass) when the backend cannot be read or written.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key (e.g., "ledger_data")

        Returns:
            The stored string, or None if nothing is stored under the key

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized data to store

        Raises:
            StorageError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
