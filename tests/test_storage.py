"""Tests for the key-value stores and the ledger repository."""

import json

import pytest

from card_ledger.config import StorageSettings
from card_ledger.models import LedgerSnapshot
from card_ledger.services.storage import (
    CorruptRecordError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    LedgerRepository,
    StorageUnavailableError,
)

from conftest import make_card


class TestInMemoryStore:
    def test_get_set_delete(self):
        store = InMemoryKeyValueStore()
        assert store.get("a") is None
        store.set("a", "1")
        assert store.get("a") == "1"
        store.delete("a")
        store.delete("a")
        assert store.keys() == []


class TestJsonFileStore:
    """Tests for the JSON file store."""

    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "missing.json")
        assert store.get("creditCards") is None

    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "ledger.json"
        JsonFileKeyValueStore(path).set("alerts", "[]")
        assert JsonFileKeyValueStore(path).get("alerts") == "[]"

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "ledger.json"
        JsonFileKeyValueStore(path).set("k", "v")
        assert json.loads(path.read_text()) == {"k": "v"}

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "ledger.json")
        store.set("a", "1")
        store.set("b", "2")
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_delete(self, tmp_path):
        path = tmp_path / "ledger.json"
        store = JsonFileKeyValueStore(path)
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert json.loads(path.read_text()) == {"b": "2"}

    def test_delete_absent_key_writes_nothing(self, tmp_path):
        path = tmp_path / "ledger.json"
        JsonFileKeyValueStore(path).delete("a")
        assert not path.exists()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{broken")
        store = JsonFileKeyValueStore(path)

        with pytest.raises(CorruptRecordError):
            store.get("alerts")

        # Writing replaces the corrupt file
        store.set("alerts", "[]")
        assert JsonFileKeyValueStore(path).get("alerts") == "[]"

    def test_non_object_file_is_corrupt(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(CorruptRecordError):
            JsonFileKeyValueStore(path).get("alerts")

    def test_unreadable_path(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path)
        with pytest.raises(StorageUnavailableError):
            store.get("alerts")
        with pytest.raises(StorageUnavailableError):
            store.set("alerts", "[]")


class TestLedgerRepository:
    """Tests for snapshot persistence."""

    def test_save_and_load(self):
        store = InMemoryKeyValueStore()
        repository = LedgerRepository(store)
        snapshot = LedgerSnapshot(cards=[make_card()], paid_periods={"b", "a"})

        assert repository.save(snapshot) is True

        assert json.loads(store.get("paidPaymentPeriods")) == ["a", "b"]
        assert json.loads(store.get("creditCards"))[0]["id"] == "card_test"
        assert repository.load() == snapshot

    def test_empty_store(self):
        assert LedgerRepository(InMemoryKeyValueStore()).load() == LedgerSnapshot()

    def test_custom_keys(self):
        store = InMemoryKeyValueStore()
        settings = StorageSettings(cards_key="cards_v2")
        LedgerRepository(store, settings=settings).save(LedgerSnapshot(cards=[make_card()]))
        assert store.get("cards_v2") is not None
        assert store.get("creditCards") is None

    def test_invalid_items_skipped(self):
        store = InMemoryKeyValueStore({
            "creditCards": json.dumps([make_card().to_record(), {"id": "card_broken"}]),
        })
        snapshot = LedgerRepository(store).load()
        assert [card.id for card in snapshot.cards] == ["card_test"]

    def test_corrupt_file_loads_empty(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("not json at all")
        repository = LedgerRepository(JsonFileKeyValueStore(path))
        assert repository.load() == LedgerSnapshot()

    def test_unavailable_store_reports_failure(self, tmp_path):
        repository = LedgerRepository(JsonFileKeyValueStore(tmp_path))
        assert repository.load() == LedgerSnapshot()
        assert repository.save(LedgerSnapshot()) is False
        assert repository.clear() is False
