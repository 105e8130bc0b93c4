"""
Ledger Log Codec

The persisted form of the log is a JSON array of records in storage
(newest-first) order:

    [{"id": ..., "amount": ..., "desc": ..., "type": ..., "date": ..., "timestamp": ...}]

deserialize(serialize(log)) reproduces the log field for field. Floats
are written in shortest round-trip form, so amounts read back exactly.
"""

from typing import Sequence

from pydantic import TypeAdapter, ValidationError

from personal_ledger.exceptions import MalformedPersistedStateError
from personal_ledger.models.transaction import Transaction


_LOG_ADAPTER = TypeAdapter(list[Transaction])


def serialize(log: Sequence[Transaction]) -> str:
    """Encode a log as a JSON array string."""
    return _LOG_ADAPTER.dump_json(list(log), by_alias=True).decode("utf-8")


def deserialize(raw: str) -> tuple[Transaction, ...]:
    """
    Decode a JSON array string into a log.

    Raises:
        MalformedPersistedStateError: If the data is not valid JSON or any
            record does not validate as a Transaction
    """
    try:
        return tuple(_LOG_ADAPTER.validate_json(raw))
    except ValidationError as e:
        raise MalformedPersistedStateError(
            f"Persisted ledger is malformed ({e.error_count()} errors): "
            f"{e.errors(include_url=False)[0]['msg']}"
        ) from e
