"""
Data Models Package

This package contains all Pydantic models used by the ledger.
All data the ledger stores or derives must conform to these schemas.
"""

from personal_ledger.models.transaction import (
    START_INDEX,
    IssueSeverity,
    LedgerSnapshot,
    SeriesPoint,
    SubmissionResult,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from personal_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "START_INDEX",
    "IssueSeverity",
    "LedgerSnapshot",
    "SeriesPoint",
    "SubmissionResult",
    "Transaction",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
