"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from personal_ledger.config import LedgerSettings, get_settings, validate_all_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and .env file."""
    for name in (
        "LEDGER_STORAGE_BACKEND",
        "LEDGER_STORAGE_KEY",
        "LEDGER_DATA_DIR",
        "LEDGER_TIME_FORMAT",
        "LEDGER_CURRENCY_SYMBOL",
        "LEDGER_LOG_LEVEL",
        "GOOGLE_SHEETS_CREDENTIALS_PATH",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "GOOGLE_SHEETS_WORKSHEET_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLedgerSettings:
    """Tests for LedgerSettings."""

    def test_defaults(self):
        """Test default values."""
        settings = LedgerSettings()
        assert settings.storage_backend == "json_file"
        assert settings.storage_key == "ledger_data"
        assert settings.data_dir == Path(".ledger")
        assert settings.currency_symbol == "₹"
        assert settings.log_level == "INFO"

    def test_environment_override(self, monkeypatch):
        """Test that LEDGER_ variables are read."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("LEDGER_STORAGE_KEY", "household")
        settings = LedgerSettings()
        assert settings.storage_backend == "memory"
        assert settings.storage_key == "household"

    def test_unknown_backend_rejected(self):
        """Test that only known backends are accepted."""
        with pytest.raises(ValueError):
            LedgerSettings(storage_backend="postgres")

    def test_log_level_normalized(self):
        """Test that log level is case-insensitive."""
        assert LedgerSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValueError):
            LedgerSettings(log_level="loud")


class TestValidateAllSettings:
    """Tests for validate_all_settings."""

    def test_default_configuration_is_valid(self):
        """Test that the defaults need nothing else configured."""
        status = validate_all_settings()
        assert status["ledger"] is True
        assert "google_sheets" not in status

    def test_google_sheets_missing_configuration(self, monkeypatch):
        """Test that selecting Sheets without credentials is reported."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "google_sheets")
        status = validate_all_settings()
        assert status["google_sheets"] is False
        assert "google_sheets_error" in status

    def test_google_sheets_configured(self, monkeypatch, tmp_path):
        """Test that a complete Sheets configuration passes."""
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}", encoding="utf-8")
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "google_sheets")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        status = validate_all_settings()
        assert status["google_sheets"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
