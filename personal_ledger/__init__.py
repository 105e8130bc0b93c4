"""
Personal Ledger - Source Package

A personal ledger that records credits and debits, keeps a running
balance and a chronological balance series, and persists the
transaction log to a swappable key-value store.

DESIGN PRINCIPLES:
1. The transaction log is the single source of truth
2. Balance and series are always derived, never stored
3. Append-only: no edits, no deletes
4. No silent failures - rejected input is reported
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
