"""
Storage Services Package

Provides the key-value store interface, its implementations, and the
repository that maps ledger state onto it.
"""

from card_ledger.services.storage.interface import (
    CorruptRecordError,
    KeyValueStore,
    StorageError,
    StorageUnavailableError,
)
from card_ledger.services.storage.memory import InMemoryKeyValueStore
from card_ledger.services.storage.json_file import JsonFileKeyValueStore
from card_ledger.services.storage.repository import LedgerRepository

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "CorruptRecordError",
    "StorageError",
    "StorageUnavailableError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repository
    "LedgerRepository",
]
