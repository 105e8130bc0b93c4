"""
Transaction Store

Owns the ledger log: an ordered, newest-first sequence of transactions.
The only mutation is append, which inserts at the head.

The log is held as a tuple, so every snapshot handed out stays valid
after later appends.
"""

from typing import Iterable, Optional

from personal_ledger.models.transaction import Transaction


class TransactionStore:
    """In-memory holder of the newest-first transaction log."""

    def __init__(self, restored_log: Optional[Iterable[Transaction]] = None):
        self._log: tuple[Transaction, ...] = ()
        self.initialize(restored_log)

    def initialize(self, restored_log: Optional[Iterable[Transaction]] = None) -> None:
        """Replace the log with `restored_log`, or empty it."""
        self._log = tuple(restored_log) if restored_log is not None else ()

    def append(self, transaction: Transaction) -> None:
        """Insert a transaction at the head of the log."""
        self._log = (transaction,) + self._log

    @property
    def log(self) -> tuple[Transaction, ...]:
        """Immutable snapshot of the log, newest first."""
        return self._log

    @property
    def head(self) -> Optional[Transaction]:
        return self._log[0] if self._log else None

    def __len__(self) -> int:
        return len(self._log)
