"""
Submission Validation

Checks the raw input of a transaction submission before anything is
built or stored:

- amount: present, a finite number, greater than zero
- description: present and not blank
- type: CREDIT or DEBIT

IMPORTANT: Validation NEVER silently fixes issues. A rejected submission
is reported back to the caller with every issue found, and the ledger is
left untouched.
"""

import math
import re
from typing import Optional, Union

from personal_ledger.models.transaction import (
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


RawAmount = Union[str, int, float, None]

# Plain ASCII decimal, optionally signed, with an optional exponent
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


class SubmissionValidator:
    """Validates raw submission input and parses it into typed values."""

    def _parse_amount(
        self,
        raw_amount: RawAmount,
    ) -> tuple[Optional[float], Optional[ValidationIssue]]:
        if raw_amount is None or (isinstance(raw_amount, str) and not raw_amount.strip()):
            return None, ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                suggested_fix="Enter an amount such as 250 or 99.50",
            )

        amount: Optional[float] = None
        if isinstance(raw_amount, str):
            text = raw_amount.strip()
            if _DECIMAL.fullmatch(text):
                amount = float(text)
        elif isinstance(raw_amount, (int, float)) and not isinstance(raw_amount, bool):
            try:
                amount = float(raw_amount)
            except OverflowError:
                amount = None

        if amount is None or not math.isfinite(amount):
            return None, ValidationIssue(
                field="amount",
                issue_type="not_a_number",
                message=f"Amount {raw_amount!r} is not a valid number",
                suggested_fix="Use digits with an optional decimal point",
            )

        if amount <= 0:
            return None, ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be greater than zero",
                suggested_fix="Choose DEBIT to record money going out",
            )

        return amount, None

    def _parse_description(
        self,
        raw_description: Optional[str],
    ) -> tuple[Optional[str], Optional[ValidationIssue]]:
        """
        Surrounding whitespace is dropped before upper-casing, so "  tea "
        is stored as "TEA" and a blank label counts as missing.
        """
        if raw_description is None or not str(raw_description).strip():
            return None, ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                suggested_fix="Describe the transaction, e.g. SALARY or COFFEE",
            )
        return str(raw_description).strip().upper(), None

    def _parse_type(
        self,
        raw_type: Union[TransactionType, str, None],
    ) -> tuple[Optional[TransactionType], Optional[ValidationIssue]]:
        if isinstance(raw_type, TransactionType):
            return raw_type, None
        if isinstance(raw_type, str):
            try:
                return TransactionType(raw_type.strip().upper()), None
            except ValueError:
                pass
        return None, ValidationIssue(
            field="type",
            issue_type="invalid_value",
            message=f"Transaction type {raw_type!r} is not CREDIT or DEBIT",
        )

    def validate(
        self,
        raw_amount: RawAmount,
        raw_description: Optional[str],
        raw_type: Union[TransactionType, str, None],
    ) -> ValidationResult:
        """
        Validate one submission.

        Every field is checked, so the result lists all issues at once.
        Parsed values are only set for fields that passed.
        """
        amount, amount_issue = self._parse_amount(raw_amount)
        description, description_issue = self._parse_description(raw_description)
        tx_type, type_issue = self._parse_type(raw_type)

        issues = [
            issue
            for issue in (amount_issue, description_issue, type_issue)
            if issue is not None
        ]

        return ValidationResult(
            issues=issues,
            amount=amount,
            description=description,
            type=tx_type,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text suitable for showing next to the input form."""
        if result.is_valid:
            return "✅ Transaction looks good."

        lines = ["❌ Transaction not recorded:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     💡 {issue.suggested_fix}")
        return "\n".join(lines)
