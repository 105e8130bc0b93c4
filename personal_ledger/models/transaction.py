"""
Core Data Models for Personal Ledger

These models define the strict schemas for everything the ledger stores
and derives. They are designed to:
1. Enforce type safety at runtime
2. Be immutable once created (the log is append-only)
3. Serialize to the persisted wire format (`desc`, `runningBalance`)
4. Provide clear validation error messages

DESIGN DECISION: Amounts are plain floats. The ledger accepts standard
floating-point drift rather than introducing a minor-unit representation.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from personal_ledger.exceptions import InvalidInputError


START_INDEX = "START"


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction.

    The stored amount is always a magnitude; the type carries the sign.
    """
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    @property
    def sign(self) -> int:
        return 1 if self is TransactionType.CREDIT else -1


class IssueSeverity(str, Enum):
    """Severity of a validation issue."""
    ERROR = "error"
    WARNING = "warning"


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded credit or debit.

    CRITICAL: Transactions are frozen. Nothing in the system edits or
    deletes a transaction after it has been appended to the log.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(
        ...,
        ge=0,
        description="Unique id derived from creation time (epoch ms)"
    )
    amount: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Magnitude of the transaction; sign comes from type"
    )
    description: str = Field(
        ...,
        alias="desc",
        min_length=1,
        description="Upper-cased free text label"
    )
    type: TransactionType = Field(
        ...,
        description="CREDIT increases the balance, DEBIT decreases it"
    )
    date: str = Field(
        ...,
        description="Human-readable creation time (display only)"
    )
    timestamp: int = Field(
        ...,
        ge=0,
        description="Creation instant in epoch milliseconds"
    )

    @property
    def signed_amount(self) -> float:
        """Amount with the sign implied by the transaction type."""
        return self.amount if self.type is TransactionType.CREDIT else -self.amount

    def to_record(self) -> dict:
        """Convert to the persisted record shape."""
        return self.model_dump(mode="json", by_alias=True)


class SeriesPoint(BaseModel):
    """
    Running balance immediately after one transaction.

    The synthetic starting point of an empty ledger uses index "START".
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: Union[int, Literal["START"]] = Field(
        ...,
        description="Chronological position, or START for the zero origin"
    )
    running_balance: float = Field(
        ...,
        alias="runningBalance",
        description="Balance after applying the transaction"
    )
    date: Optional[str] = Field(
        default=None,
        description="Display date of the transaction, None for START"
    )

    @property
    def is_start(self) -> bool:
        return self.index == START_INDEX


class LedgerSnapshot(BaseModel):
    """
    Complete observable state of the ledger.

    This is what the presentation layer renders after every change.
    """
    model_config = ConfigDict(frozen=True)

    log: tuple[Transaction, ...] = Field(
        default=(),
        description="Transactions, newest first"
    )
    balance: float = Field(
        default=0.0,
        description="Signed sum of the log"
    )
    series: tuple[SeriesPoint, ...] = Field(
        ...,
        description="Running balance per transaction, oldest first"
    )

    @property
    def latest(self) -> Optional[Transaction]:
        """Most recently recorded transaction, if any."""
        return self.log[0] if self.log else None

    @property
    def is_empty(self) -> bool:
        return not self.log

    def to_view(self) -> dict:
        """Plain dict using the wire field names (desc, runningBalance)."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a submission."""

    field: str = Field(
        ...,
        description="Input with the issue (amount, description, type)"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: IssueSeverity = Field(
        default=IssueSeverity.ERROR,
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating raw submission input.

    When valid, the parsed values are ready to build a Transaction.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)

    amount: Optional[float] = None
    description: Optional[str] = None
    type: Optional[TransactionType] = None

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == IssueSeverity.ERROR for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == IssueSeverity.ERROR)


class SubmissionResult(BaseModel):
    """
    Outcome of submit_transaction.

    A rejected submission is reported here rather than raised, and carries
    the unchanged snapshot so the caller can keep rendering.
    """

    accepted: bool
    snapshot: LedgerSnapshot
    transaction: Optional[Transaction] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def error(self) -> Optional[InvalidInputError]:
        """The rejection as an exception object, or None if accepted."""
        if self.accepted:
            return None
        return InvalidInputError(self.issues)

    def raise_for_rejection(self) -> None:
        """Raise InvalidInputError if the submission was rejected."""
        error = self.error
        if error is not None:
            raise error
