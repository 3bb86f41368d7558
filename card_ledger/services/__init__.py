"""Services package."""

from card_ledger.services.storage import (
    CorruptRecordError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    LedgerRepository,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    "CorruptRecordError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LedgerRepository",
    "StorageError",
    "StorageUnavailableError",
]
