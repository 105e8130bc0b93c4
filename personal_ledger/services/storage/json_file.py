"""
Local File Storage Implementation

DESIGN DECISION: Each key is stored as its own file under a data
directory. This is the closest local analogue of browser storage:
one opaque string per key, readable by hand, nothing to set up.

Writes go to a temporary file in the same directory and are moved into
place with os.replace, so a crash mid-write never leaves a truncated log.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from personal_ledger.services.storage.interface import PersistenceAdapter, StorageError


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore(PersistenceAdapter):
    """
    File-per-key store.

    The key "ledger_data" maps to <data_dir>/ledger_data.json.
    """

    def __init__(self, data_dir: Union[str, Path], encoding: str = "utf-8"):
        self._data_dir = Path(data_dir)
        self._encoding = encoding

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """Get the file path backing a key."""
        if not _SAFE_KEY.match(key) or key in {".", ".."}:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        """Read a key's file, or None if it does not exist."""
        path = self.path_for(key)
        try:
            return path.read_text(encoding=self._encoding)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def save(self, key: str, value: str) -> None:
        """Atomically replace a key's file."""
        path = self.path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding=self._encoding) as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")
