"""Ledger core: the log store, the calculator and the log codec."""

from personal_ledger.core.calculator import EMPTY_SERIES, LedgerTotals, calculate, signed_amount
from personal_ledger.core.codec import deserialize, serialize
from personal_ledger.core.store import TransactionStore

__all__ = [
    "EMPTY_SERIES",
    "LedgerTotals",
    "TransactionStore",
    "calculate",
    "deserialize",
    "serialize",
    "signed_amount",
]
