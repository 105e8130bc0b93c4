"""Submission validation package."""

from personal_ledger.validation.validator import SubmissionValidator

__all__ = ["SubmissionValidator"]
