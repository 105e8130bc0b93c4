"""
Ledger Exceptions

Every error the ledger core can raise or report derives from LedgerError.
Storage backends raise their own StorageError family (see
services.storage.interface); the engine wraps those in PersistenceError.
"""


class LedgerError(Exception):
    """Base exception for ledger errors."""
    pass


class InvalidInputError(LedgerError):
    """
    A submission was rejected by validation.

    The engine does not raise this from submit_transaction; it is carried
    in SubmissionResult and raised only by raise_for_rejection().
    """

    def __init__(self, issues: list, message: str = ""):
        self.issues = list(issues)
        if not message:
            message = "; ".join(issue.message for issue in self.issues) or "Invalid input"
        super().__init__(message)


class MalformedPersistedStateError(LedgerError):
    """Persisted data could not be parsed as a transaction log."""
    pass


class NotReadyError(LedgerError):
    """An engine operation was attempted before restore() completed."""
    pass


class PersistenceError(LedgerError):
    """The persistence adapter failed to load or save the log."""
    pass
