"""Tests for settings."""

import pytest
from pydantic import ValidationError

from card_ledger.config import (
    AlertSettings,
    AppSettings,
    ExportSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for defaults and environment overrides."""

    def test_alert_defaults(self):
        settings = AlertSettings()
        assert settings.payment_due_days == 7
        assert settings.annual_fee_days == 30
        assert settings.category_limit_percentage == 80.0
        assert settings.credit_limit_percentage == 80.0
        assert settings.fee_waiver_threshold == 1000.0

    def test_storage_defaults(self):
        settings = StorageSettings()
        assert (settings.cards_key, settings.alerts_key, settings.paid_periods_key) == (
            "creditCards",
            "alerts",
            "paidPaymentPeriods",
        )

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CARD_LEDGER_ALERT_PAYMENT_DUE_DAYS", "3")
        monkeypatch.setenv("CARD_LEDGER_STORAGE_PATH", "/tmp/cards.json")
        settings = get_settings()
        assert settings.alerts.payment_due_days == 3
        assert settings.storage.path == "/tmp/cards.json"

    def test_invalid_threshold(self):
        with pytest.raises(ValidationError):
            AlertSettings(payment_due_days=-1)

    def test_filename_format_needs_date(self):
        with pytest.raises(ValidationError):
            ExportSettings(filename_format="backup.json")

    def test_quick_spend_amounts(self):
        settings = AppSettings(quick_spend_amounts="10, 20,,50")
        assert settings.quick_spend_amounts_list == [10.0, 20.0, 50.0]

    def test_validate_all_settings(self, monkeypatch):
        assert validate_all_settings() == {"alerts": True, "storage": True, "export": True, "app": True}

        monkeypatch.setenv("CARD_LEDGER_EXPORT_FILENAME_FORMAT", "backup.json")
        status = validate_all_settings()
        assert status["export"] is False
        assert "export_error" in status
