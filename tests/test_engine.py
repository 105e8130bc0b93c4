"""
Tests for LedgerEngine

Covers the lifecycle (UNINITIALIZED → READY), the submit protocol,
restore paths and persistence failures. Storage is in-memory or a
temporary directory; the clock is fixed.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from personal_ledger.config import LedgerSettings
from personal_ledger.core import deserialize, serialize
from personal_ledger.engine import (
    EngineState,
    LedgerEngine,
    create_ledger_engine,
    create_persistence_adapter,
)
from personal_ledger.exceptions import InvalidInputError, NotReadyError, PersistenceError
from personal_ledger.models.transaction import START_INDEX, Transaction, TransactionType
from personal_ledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    StorageError,
)


CREDIT = TransactionType.CREDIT
DEBIT = TransactionType.DEBIT
KEY = "ledger_data"


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FlakyStore(InMemoryStore):
    """In-memory store whose reads or writes can be made to fail."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_load = False
        self.fail_save = False

    def load(self, key: str) -> Optional[str]:
        if self.fail_load:
            raise StorageError("backend unavailable")
        return super().load(key)

    def save(self, key: str, value: str) -> None:
        if self.fail_save:
            raise StorageError("disk full")
        super().save(key, value)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def engine(store, clock):
    engine = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)
    engine.restore()
    return engine


class TestLifecycle:
    """Tests for the UNINITIALIZED → READY state machine."""

    def test_starts_uninitialized(self, store, clock):
        """Test that a new engine is not ready."""
        engine = LedgerEngine(adapter=store, clock=clock)
        assert engine.state is EngineState.UNINITIALIZED
        assert not engine.is_ready

    def test_submit_before_restore_fails(self, store, clock):
        """Test that submissions are refused before restore()."""
        engine = LedgerEngine(adapter=store, clock=clock)
        with pytest.raises(NotReadyError):
            engine.submit_transaction("100", "salary", CREDIT)
        assert store.save_count == 0

    def test_snapshot_before_restore_fails(self, store, clock):
        """Test that reading is refused before restore()."""
        engine = LedgerEngine(adapter=store, clock=clock)
        with pytest.raises(NotReadyError):
            engine.get_snapshot()

    def test_restore_makes_ready(self, engine):
        """Test that restore() moves the engine to READY."""
        assert engine.state is EngineState.READY


class TestRestore:
    """Tests for restore()."""

    def test_restore_empty(self, store, clock):
        """Test that a missing key starts an empty ledger without writing."""
        engine = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)
        snapshot = engine.restore()

        assert snapshot.log == ()
        assert snapshot.balance == 0
        assert len(snapshot.series) == 1
        assert snapshot.series[0].index == START_INDEX
        assert snapshot.series[0].running_balance == 0
        assert store.save_count == 0
        assert KEY not in store

    def test_restore_existing_log(self, clock):
        """Test that persisted transactions are loaded with derived totals."""
        log = (
            Transaction(id=2, amount=30.0, description="COFFEE", type=DEBIT, date="b", timestamp=2),
            Transaction(id=1, amount=100.0, description="SALARY", type=CREDIT, date="a", timestamp=1),
        )
        store = InMemoryStore({KEY: serialize(log)})
        engine = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)

        snapshot = engine.restore()

        assert snapshot.log == log
        assert snapshot.balance == 70.0
        assert [p.running_balance for p in snapshot.series] == [100.0, 70.0]
        assert store.save_count == 0

    @pytest.mark.parametrize("raw", ["", "garbage{", "{}", "[{\"id\": 1}]"])
    def test_restore_malformed_starts_empty(self, clock, raw):
        """Test that unreadable or empty persisted data is treated as no prior state."""
        store = InMemoryStore({KEY: raw})
        engine = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)

        snapshot = engine.restore()

        assert engine.is_ready
        assert snapshot.log == ()
        assert snapshot.series[0].index == START_INDEX
        assert store.save_count == 0

    def test_restore_load_failure(self, store, clock):
        """Test that a storage failure leaves the engine uninitialized."""
        store.fail_load = True
        engine = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)

        with pytest.raises(PersistenceError, match="backend unavailable"):
            engine.restore()
        assert engine.state is EngineState.UNINITIALIZED

    def test_state_survives_restart(self, engine, store, clock):
        """Test that a second engine on the same store sees the same ledger."""
        engine.submit_transaction("100", "salary", CREDIT)
        clock.advance(seconds=1)
        engine.submit_transaction("30", "coffee", DEBIT)

        restarted = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)
        assert restarted.restore() == engine.get_snapshot()


class TestSubmitTransaction:
    """Tests for submit_transaction()."""

    def test_salary_then_coffee(self, engine, clock):
        """Test the credit-then-debit scenario end to end."""
        result = engine.submit_transaction("100", "salary", CREDIT)

        assert result.accepted
        snapshot = result.snapshot
        assert snapshot.balance == 100
        assert len(snapshot.log) == 1
        assert snapshot.log[0].amount == 100
        assert snapshot.log[0].type is CREDIT
        assert [(p.index, p.running_balance) for p in snapshot.series] == [(0, 100)]

        clock.advance(minutes=5)
        result = engine.submit_transaction("30", "coffee", DEBIT)

        snapshot = result.snapshot
        assert snapshot.balance == 70
        assert snapshot.log[0].type is DEBIT
        assert snapshot.log[0].description == "COFFEE"
        assert [(p.index, p.running_balance) for p in snapshot.series] == [(0, 100), (1, 70)]

    def test_transaction_fields(self, engine, clock):
        """Test how a new transaction is built."""
        result = engine.submit_transaction("12.5", "Chai and samosa", DEBIT)
        transaction = result.transaction
        millis = int(clock.now.timestamp() * 1000)

        assert transaction.id == millis
        assert transaction.timestamp == millis
        assert transaction.amount == 12.5
        assert transaction.description == "CHAI AND SAMOSA"
        assert transaction.date == clock.now.strftime("%I:%M:%S %p")
        assert result.snapshot.latest == transaction

    def test_head_insertion_preserves_order(self, engine, clock):
        """Test that each new transaction lands at index 0."""
        for desc in ("first", "second", "third"):
            engine.submit_transaction("1", desc, CREDIT)
            clock.advance(seconds=1)

        result = engine.submit_transaction("2", "fourth", DEBIT)
        assert [t.description for t in result.snapshot.log] == ["FOURTH", "THIRD", "SECOND", "FIRST"]

    def test_log_is_persisted_after_each_submission(self, engine, store, clock):
        """Test that storage always holds the current log."""
        engine.submit_transaction("100", "salary", CREDIT)
        clock.advance(seconds=1)
        engine.submit_transaction("30", "coffee", DEBIT)

        assert store.save_count == 2
        assert deserialize(store.load(KEY)) == engine.get_snapshot().log

    def test_ids_unique_within_same_millisecond(self, engine):
        """Test that ids stay unique when the clock does not move."""
        first = engine.submit_transaction("1", "a", CREDIT).transaction
        second = engine.submit_transaction("1", "b", CREDIT).transaction

        assert second.id == first.id + 1
        assert second.timestamp == first.timestamp

    def test_ids_increase_when_clock_steps_back(self, engine, clock):
        """Test that ids keep increasing after a clock adjustment."""
        first = engine.submit_transaction("1", "a", CREDIT).transaction
        clock.advance(hours=-1)
        second = engine.submit_transaction("1", "b", CREDIT).transaction

        assert second.id > first.id
        assert second.timestamp < first.timestamp
        assert engine.get_snapshot().log[0] == second

    def test_ids_continue_after_restore(self, store, clock):
        """Test that restored ids are never reused."""
        future = Transaction(
            id=int(clock.now.timestamp() * 1000) + 10_000,
            amount=1.0, description="X", type=CREDIT, date="d", timestamp=1,
        )
        store.save(KEY, serialize((future,)))
        engine = LedgerEngine(adapter=store, storage_key=KEY, clock=clock)
        engine.restore()

        new = engine.submit_transaction("1", "y", CREDIT).transaction
        assert new.id == future.id + 1

    @pytest.mark.parametrize("amount,desc", [("", "desc"), ("10", "")])
    def test_invalid_input_is_a_reported_no_op(self, engine, store, amount, desc):
        """Test that rejected input leaves log, balance and series unchanged."""
        engine.submit_transaction("50", "opening", CREDIT)
        before = engine.get_snapshot()
        saves = store.save_count

        result = engine.submit_transaction(amount, desc, CREDIT)

        assert not result.accepted
        assert result.transaction is None
        assert result.issues
        assert result.snapshot == before
        assert engine.get_snapshot() == before
        assert store.save_count == saves
        with pytest.raises(InvalidInputError):
            result.raise_for_rejection()

    def test_save_failure_rolls_back(self, engine, store, clock):
        """Test that memory is not ahead of storage after a failed save."""
        engine.submit_transaction("100", "salary", CREDIT)
        before = engine.get_snapshot()

        store.fail_save = True
        clock.advance(seconds=1)
        with pytest.raises(PersistenceError, match="disk full"):
            engine.submit_transaction("30", "coffee", DEBIT)

        assert engine.get_snapshot() == before
        assert deserialize(store.load(KEY)) == before.log

        store.fail_save = False
        result = engine.submit_transaction("30", "coffee", DEBIT)
        assert result.snapshot.balance == 70

    def test_get_snapshot_does_not_mutate(self, engine, store):
        """Test that reading is side-effect free."""
        engine.submit_transaction("5", "tea", DEBIT)
        saves = store.save_count
        assert engine.get_snapshot() == engine.get_snapshot()
        assert store.save_count == saves


class TestFactory:
    """Tests for create_ledger_engine and create_persistence_adapter."""

    def test_memory_backend(self):
        """Test that the memory backend is selected from settings."""
        settings = LedgerSettings(storage_backend="memory")
        assert isinstance(create_persistence_adapter(settings), InMemoryStore)

    def test_json_file_backend(self, tmp_path):
        """Test that the file backend uses the configured directory."""
        settings = LedgerSettings(storage_backend="json_file", data_dir=tmp_path)
        adapter = create_persistence_adapter(settings)
        assert isinstance(adapter, JsonFileStore)
        assert adapter.data_dir == tmp_path

    def test_engine_persists_to_file(self, tmp_path, clock):
        """Test a full restart cycle through the JSON file store."""
        settings = LedgerSettings(
            storage_backend="json_file",
            data_dir=tmp_path,
            storage_key="my_ledger",
            time_format="%H:%M",
        )
        engine = create_ledger_engine(settings, clock=clock)
        engine.restore()
        result = engine.submit_transaction("100", "salary", CREDIT)
        assert result.transaction.date == "09:30"
        assert (tmp_path / "my_ledger.json").exists()

        restarted = create_ledger_engine(settings, clock=clock)
        assert restarted.restore().balance == 100
        assert restarted.storage_key == "my_ledger"

    def test_adapter_override(self, clock):
        """Test that an explicit adapter wins over the configured backend."""
        adapter = InMemoryStore()
        settings = LedgerSettings(storage_backend="json_file")
        engine = create_ledger_engine(settings, adapter=adapter, clock=clock)
        engine.restore()
        engine.submit_transaction("1", "x", CREDIT)
        assert settings.storage_key in adapter


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
