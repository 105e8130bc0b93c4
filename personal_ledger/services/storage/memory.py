"""
In-Memory Storage Implementation

Keeps values in a dict for the lifetime of the process. Used by the
test suite and for throwaway sessions (LEDGER_STORAGE_BACKEND=memory).
"""

from typing import Optional

from personal_ledger.services.storage.interface import PersistenceAdapter


class InMemoryStore(PersistenceAdapter):
    """Dict-backed key-value store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.save_count = 0

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        self._data[key] = value
        self.save_count += 1

    def __contains__(self, key: str) -> bool:
        return key in self._data
