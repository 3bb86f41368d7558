"""
Abstract Storage Interface

The ledger persists through a plain key-value interface: named string
records, read whole and written whole. Implementations:

1. InMemoryKeyValueStore - tests and ephemeral sessions
2. JsonFileKeyValueStore - one JSON file on local disk

The interface is intentionally tiny. Mapping records to models is the
job of LedgerRepository, not of the store.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a key-value blob store.

    Values are opaque strings (the repository stores JSON text).
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a record.

        Args:
            key: Record name

        Returns:
            The stored value, or None if the key is absent

        Raises:
            StorageUnavailableError: If the medium cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a record, replacing any previous value.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a record. Removing an absent key is not an error.

        Raises:
            StorageUnavailableError: If the medium cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The storage medium is absent or cannot be read/written."""
    pass


class CorruptRecordError(StorageError):
    """A stored record could not be decoded."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Record {key!r} is corrupt: {reason}")
