"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
The local JSON file store is the default; the Google Sheets store is
imported lazily so gspread is only loaded when it is selected.
"""

from personal_ledger.services.storage.interface import (
    ConnectionError,
    PersistenceAdapter,
    StorageError,
)
from personal_ledger.services.storage.json_file import JsonFileStore
from personal_ledger.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "PersistenceAdapter",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
