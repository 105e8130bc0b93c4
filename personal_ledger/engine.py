"""
Ledger Engine

This module ties the ledger components together and is the only thing
callers (the UI) talk to:

1. restore()            → load persisted log → derive balance/series
2. submit_transaction() → validate → append → derive → persist
3. get_snapshot()       → current {log, balance, series}

DESIGN DECISION: The engine enforces the boundaries:
- Nothing happens before restore() (NotReadyError)
- Invalid input is reported, never silently dropped
- Memory and storage never disagree: a failed save rolls the append back
- Every step is audited

Everything runs synchronously; each call finishes before it returns.
"""

from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Union

from personal_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from personal_ledger.config import LedgerSettings, get_settings
from personal_ledger.core import TransactionStore, calculate, deserialize, serialize
from personal_ledger.core.calculator import LedgerTotals
from personal_ledger.exceptions import (
    MalformedPersistedStateError,
    NotReadyError,
    PersistenceError,
)
from personal_ledger.models.transaction import (
    LedgerSnapshot,
    SubmissionResult,
    Transaction,
    TransactionType,
    ValidationResult,
)
from personal_ledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    PersistenceAdapter,
    StorageError,
)
from personal_ledger.validation import SubmissionValidator
from personal_ledger.validation.validator import RawAmount


DEFAULT_STORAGE_KEY = "ledger_data"
DEFAULT_TIME_FORMAT = "%I:%M:%S %p"


class EngineState(str, Enum):
    """Lifecycle of a LedgerEngine."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"


def local_now() -> datetime:
    """Current time in the local timezone."""
    return datetime.now().astimezone()


class LedgerEngine:
    """
    Orchestrates the transaction store, the calculator and persistence.

    Flow for a submission:
    1. Validate raw input (reject → reported result, no mutation)
    2. Build the Transaction (id and timestamp from the clock)
    3. Append at the head of the log
    4. Recompute balance and series
    5. Persist the whole log under the storage key

    The adapter is injected; the engine holds no global state.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        storage_key: str = DEFAULT_STORAGE_KEY,
        validator: Optional[SubmissionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        time_format: str = DEFAULT_TIME_FORMAT,
    ):
        self._adapter = adapter
        self._key = storage_key
        self._validator = validator or SubmissionValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or local_now
        self._time_format = time_format

        self._store = TransactionStore()
        self._totals: Optional[LedgerTotals] = None
        self._state = EngineState.UNINITIALIZED
        self._last_id = 0

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is EngineState.READY

    @property
    def storage_key(self) -> str:
        return self._key

    def _require_ready(self, operation: str) -> None:
        if self._state is not EngineState.READY:
            raise NotReadyError(f"Cannot {operation} before restore() has completed")

    def _snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            log=self._store.log,
            balance=self._totals.balance,
            series=self._totals.series,
        )

    def restore(self) -> LedgerSnapshot:
        """
        Load the persisted log and make the engine READY.

        Missing or empty data starts an empty ledger. Data that cannot be
        parsed is logged and also starts an empty ledger; it is replaced
        on the next successful submission. Nothing is written here.

        Raises:
            PersistenceError: If the store cannot be read. The engine
                keeps its previous state.
        """
        correlation_id = create_correlation_id()

        try:
            raw = self._adapter.load(self._key)
        except StorageError as e:
            self._audit_logger.log_load_failed(
                key=self._key,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise PersistenceError(f"Failed to load ledger: {e}") from e

        log: tuple[Transaction, ...] = ()
        if not raw:
            self._audit_logger.log_state_empty(
                key=self._key,
                correlation_id=correlation_id,
            )
        else:
            try:
                log = deserialize(raw)
            except MalformedPersistedStateError as e:
                self._audit_logger.log_persisted_state_malformed(
                    key=self._key,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )

        self._store.initialize(log)
        self._totals = calculate(self._store.log)
        self._last_id = max((t.id for t in log), default=0)
        self._state = EngineState.READY

        if log:
            self._audit_logger.log_state_restored(
                key=self._key,
                transaction_count=len(log),
                balance=self._totals.balance,
                correlation_id=correlation_id,
            )

        return self._snapshot()

    def _build_transaction(self, parsed: ValidationResult) -> Transaction:
        now = self._clock()
        millis = int(now.timestamp() * 1000)
        # Ids stay unique and increasing even within one millisecond
        # or after the clock steps backwards.
        transaction_id = millis if millis > self._last_id else self._last_id + 1

        return Transaction(
            id=transaction_id,
            amount=parsed.amount,
            description=parsed.description,
            type=parsed.type,
            date=now.strftime(self._time_format),
            timestamp=millis,
        )

    def submit_transaction(
        self,
        raw_amount: RawAmount,
        raw_description: Optional[str],
        transaction_type: Union[TransactionType, str],
    ) -> SubmissionResult:
        """
        Record a credit or debit.

        Args:
            raw_amount: Amount as typed by the user (e.g., "250.50")
            raw_description: Free-text label; stored upper-cased
            transaction_type: CREDIT or DEBIT

        Returns:
            SubmissionResult. When accepted is False the ledger is
            unchanged and issues explains why.

        Raises:
            NotReadyError: If restore() has not completed
            PersistenceError: If the updated log could not be saved. The
                append is rolled back first.
        """
        self._require_ready("submit a transaction")
        correlation_id = create_correlation_id()

        parsed = self._validator.validate(raw_amount, raw_description, transaction_type)
        if not parsed.is_valid:
            self._audit_logger.log_submission_rejected(
                issues=[issue.model_dump(mode="json") for issue in parsed.issues],
                correlation_id=correlation_id,
            )
            return SubmissionResult(
                accepted=False,
                snapshot=self._snapshot(),
                issues=parsed.issues,
            )

        transaction = self._build_transaction(parsed)
        previous_log = self._store.log

        self._store.append(transaction)
        totals = calculate(self._store.log)

        try:
            self._adapter.save(self._key, serialize(self._store.log))
        except StorageError as e:
            self._store.initialize(previous_log)
            self._audit_logger.log_persist_failed(
                key=self._key,
                transaction_id=transaction.id,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise PersistenceError(f"Failed to save ledger: {e}") from e

        self._totals = totals
        self._last_id = transaction.id

        self._audit_logger.log_transaction_recorded(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=transaction.amount,
            balance=totals.balance,
            correlation_id=correlation_id,
        )

        return SubmissionResult(
            accepted=True,
            snapshot=self._snapshot(),
            transaction=transaction,
        )

    def get_snapshot(self) -> LedgerSnapshot:
        """Current {log, balance, series}; never mutates anything."""
        self._require_ready("read the ledger")
        return self._snapshot()


def create_persistence_adapter(settings: LedgerSettings) -> PersistenceAdapter:
    """Build the store selected by LEDGER_STORAGE_BACKEND."""
    if settings.storage_backend == "memory":
        return InMemoryStore()
    if settings.storage_backend == "google_sheets":
        # Imported here so gspread is only loaded when selected
        from personal_ledger.services.storage.google_sheets import GoogleSheetsKeyValueStore
        return GoogleSheetsKeyValueStore()
    return JsonFileStore(settings.data_dir)


def create_ledger_engine(
    settings: Optional[LedgerSettings] = None,
    adapter: Optional[PersistenceAdapter] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> LedgerEngine:
    """
    Factory function to create a configured, not yet restored, engine.

    Args:
        settings: Ledger settings; loaded from the environment if None
        adapter: Overrides the configured storage backend
        clock: Overrides the wall clock (tests)
    """
    settings = settings or get_settings().ledger
    configure_logging(settings.log_level)

    return LedgerEngine(
        adapter=adapter or create_persistence_adapter(settings),
        storage_key=settings.storage_key,
        clock=clock,
        time_format=settings.time_format,
    )
