"""Tests for import validation and the export adapter."""

import json

from card_ledger.config import ExportSettings
from card_ledger.models import LedgerSnapshot
from card_ledger.transfer import DataExchange
from card_ledger.validation import ImportValidator

from conftest import NOW, make_card


def document(**overrides):
    data = {
        "version": "1.0.0",
        "exportedAt": "2024-03-10T10:00:00",
        "cards": [make_card().to_record()],
        "alerts": [],
        "paidPaymentPeriods": [],
    }
    data.update(overrides)
    return json.dumps(data)


class TestImportValidator:
    """Tests for the two-stage validator."""

    def test_valid_document(self):
        result, snapshot = ImportValidator().validate(document())
        assert result.is_valid
        assert result.schema_valid and result.semantic_valid
        assert [card.id for card in snapshot.cards] == ["card_test"]

    def test_schema_failure_skips_semantic_stage(self):
        result, snapshot = ImportValidator().validate('{"cards": "nope"}')
        assert not result.schema_valid
        assert not result.semantic_valid
        assert snapshot is None

    def test_duplicate_card_ids(self):
        record = make_card().to_record()
        result, snapshot = ImportValidator().validate(document(cards=[record, record]))
        assert result.schema_valid
        assert not result.semantic_valid
        assert result.error_count == 1
        assert snapshot is None

    def test_version_mismatch_is_warning(self):
        result, snapshot = ImportValidator().validate(document(version="0.9.0"))
        assert result.is_valid
        assert len(result.warnings) == 1
        assert snapshot is not None

    def test_non_list_alerts(self):
        result, _ = ImportValidator().validate(document(alerts={"a": 1}))
        assert not result.is_valid
        assert result.errors[0].field == "alerts"

    def test_summary_messages(self):
        validator = ImportValidator()
        ok, _ = validator.validate(document())
        assert validator.get_user_friendly_summary(ok) == "All checks passed"

        bad, _ = validator.validate('{"cards": [1, 2]}')
        assert validator.get_user_friendly_summary(bad) == "Card 1 is not an object (and 1 more problems)"


class TestDataExchange:
    """Tests for export documents."""

    def test_export(self):
        exchange = DataExchange()
        snapshot = LedgerSnapshot(cards=[make_card()], paid_periods={"card_test_2024_1", "card_test_2024_0"})

        exported = exchange.export(snapshot, now=NOW)

        assert exported.version == "1.0.0"
        assert exported.exported_at == NOW
        assert exported.paid_payment_periods == ["card_test_2024_0", "card_test_2024_1"]

    def test_dumps_is_indented_camel_case(self):
        exchange = DataExchange()
        text = exchange.dumps(exchange.export(LedgerSnapshot(cards=[make_card()]), now=NOW))
        assert text.startswith("{\n  ")
        assert '"paidPaymentPeriods": []' in text

    def test_parse_round_trip(self):
        exchange = DataExchange()
        snapshot = LedgerSnapshot(cards=[make_card()], paid_periods={"card_test_2024_2"})
        outcome = exchange.parse(exchange.dumps(exchange.export(snapshot, now=NOW)))
        assert outcome.success
        assert outcome.snapshot == snapshot

    def test_parse_failure(self):
        outcome = DataExchange().parse("")
        assert not outcome.success
        assert outcome.snapshot is None
        assert outcome.message.startswith("Invalid JSON")

    def test_custom_version_and_filename(self):
        settings = ExportSettings(data_version="2.0.0", filename_format="ledger-{date}.json")
        exchange = DataExchange(settings)
        assert exchange.export(LedgerSnapshot(), now=NOW).version == "2.0.0"
        assert exchange.export_filename(NOW) == "ledger-2024-03-10.json"
