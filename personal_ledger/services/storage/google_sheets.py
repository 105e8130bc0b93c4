"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a remote backend because:
1. Non-technical users can look at their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

The worksheet is a tiny key-value table:

    key | value | updated_at | chunks

TRADEOFFS:
- A single cell holds at most 50,000 characters, so longer values are
  split across consecutive chunk rows and joined again on load
- Every load/save is a network round trip (fine for personal use)
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from personal_ledger.config import GoogleSheetsSettings, get_settings
from personal_ledger.services.storage.interface import (
    ConnectionError,
    PersistenceAdapter,
    StorageError,
)


STORE_COLUMNS = ["key", "value", "updated_at", "chunks"]

# Google Sheets per-cell character limit
MAX_CELL_CHARS = 50_000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the key-value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.worksheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.worksheet_name,
                rows=100,
                cols=len(STORE_COLUMNS),
            )
            sheet.append_row(STORE_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(PersistenceAdapter):
    """
    Google Sheets implementation of the ledger's key-value store.

    The first row is the header. A value longer than one cell allows is
    split across rows: the row for `key` holds the first chunk and the
    chunk count, and rows `key#1`, `key#2`, ... hold the rest in order.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        chunk_size: int = MAX_CELL_CHARS,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._client = client or GoogleSheetsClient()
        self._chunk_size = chunk_size

    @staticmethod
    def _chunk_key(key: str, index: int) -> str:
        return key if index == 0 else f"{key}#{index}"

    @staticmethod
    def _index_rows(rows: list[list[str]]) -> dict[str, int]:
        """Map each key to its 1-based sheet row number, skipping the header."""
        index: dict[str, int] = {}
        for row_number, row in enumerate(rows[1:], start=2):
            if row and row[0]:
                index.setdefault(row[0], row_number)
        return index

    @staticmethod
    def _cell(row: list[str], column: int) -> str:
        return row[column] if len(row) > column else ""

    def _split(self, value: str) -> list[str]:
        if not value:
            return [""]
        return [
            value[start:start + self._chunk_size]
            for start in range(0, len(value), self._chunk_size)
        ]

    def _fetch(self) -> tuple[gspread.Worksheet, list[list[str]]]:
        sheet = self._client.get_store_sheet()
        return sheet, sheet.get_all_values()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        reraise=True,
    )
    def _read_rows(self) -> list[list[str]]:
        _, rows = self._fetch()
        return rows

    def _join(self, rows: list[list[str]], key: str) -> Optional[str]:
        index = self._index_rows(rows)
        if key not in index:
            return None

        head = rows[index[key] - 1]
        raw_count = self._cell(head, 3)
        try:
            chunk_count = int(raw_count) if raw_count else 1
        except ValueError:
            raise StorageError(f"Invalid chunk count for key {key!r}: {raw_count!r}")
        if chunk_count < 1:
            raise StorageError(f"Invalid chunk count for key {key!r}: {raw_count!r}")

        parts = [self._cell(head, 1)]
        for i in range(1, chunk_count):
            chunk_key = self._chunk_key(key, i)
            if chunk_key not in index:
                raise StorageError(
                    f"Key {key!r} is missing chunk {i} of {chunk_count}"
                )
            parts.append(self._cell(rows[index[chunk_key] - 1], 1))
        return "".join(parts)

    def load(self, key: str) -> Optional[str]:
        """Read the value stored under a key, joining its chunks."""
        try:
            rows = self._read_rows()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read key {key!r}: {e}")

        return self._join(rows, key)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        reraise=True,
    )
    def _write(self, key: str, value: str) -> None:
        sheet, rows = self._fetch()
        updated_at = datetime.now(timezone.utc).isoformat()
        index = self._index_rows(rows)
        chunks = self._split(value)
        chunk_count = str(len(chunks))

        new_rows = []
        updates = []
        for i, chunk in enumerate(chunks):
            chunk_key = self._chunk_key(key, i)
            count_cell = chunk_count if i == 0 else ""
            if chunk_key in index:
                row_number = index[chunk_key]
                updates.append({
                    "range": f"B{row_number}:D{row_number}",
                    "values": [[chunk, updated_at, count_cell]],
                })
            else:
                new_rows.append([chunk_key, chunk, updated_at, count_cell])

        # Blank continuation rows left over from a longer value
        stale = len(chunks)
        while self._chunk_key(key, stale) in index:
            row_number = index[self._chunk_key(key, stale)]
            updates.append({
                "range": f"B{row_number}:D{row_number}",
                "values": [["", updated_at, ""]],
            })
            stale += 1

        # New rows go in first; the head row's count only changes in the
        # final batch, so an interrupted write still loads the old value.
        if new_rows:
            sheet.append_rows(new_rows, value_input_option="RAW")
        if updates:
            sheet.batch_update(updates, value_input_option="RAW")

    def save(self, key: str, value: str) -> None:
        """Insert or replace the rows for a key."""
        try:
            self._write(key, value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write key {key!r}: {e}")
