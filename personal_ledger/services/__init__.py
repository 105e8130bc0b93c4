"""Services package."""

from personal_ledger.services.storage import (
    ConnectionError,
    InMemoryStore,
    JsonFileStore,
    PersistenceAdapter,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "InMemoryStore",
    "JsonFileStore",
    "PersistenceAdapter",
    "StorageError",
]
