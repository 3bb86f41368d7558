"""
Ledger Repository

Maps the ledger's three collections to three records in a key-value
store:

    creditCards          -> list of Card records
    alerts               -> list of Alert records
    paidPaymentPeriods   -> list of paid-period keys (restored as a set)

The repository never mutates ledger state; it only serializes snapshots
and restores them. Storage failures degrade to in-memory operation: they
are logged and reported through the return value, never raised.
"""

import json
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from card_ledger.audit import AuditLogger
from card_ledger.config import StorageSettings
from card_ledger.models import Alert, Card, LedgerSnapshot
from card_ledger.services.storage.interface import (
    CorruptRecordError,
    KeyValueStore,
    StorageUnavailableError,
)


ModelT = TypeVar("ModelT", bound=BaseModel)


class LedgerRepository:
    """Persistence adapter between the ledger and a KeyValueStore."""

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[StorageSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._settings = settings or StorageSettings()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def keys(self) -> tuple[str, str, str]:
        s = self._settings
        return (s.cards_key, s.alerts_key, s.paid_periods_key)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _read_list(self, key: str) -> list[Any]:
        """Read a JSON list record. Absent, unreadable or corrupt -> []."""
        try:
            raw = self._store.get(key)
        except StorageUnavailableError as e:
            self._audit_logger.log_storage_unavailable(operation=f"load:{key}", error_message=str(e))
            return []
        except CorruptRecordError as e:
            self._audit_logger.log_record_corrupt(key=key, error_message=str(e))
            return []

        if raw is None:
            return []

        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            self._audit_logger.log_record_corrupt(key=key, error_message=str(e))
            return []

        if not isinstance(value, list):
            self._audit_logger.log_record_corrupt(key=key, error_message="record is not a list")
            return []
        return value

    def _parse_items(self, key: str, items: list[Any], model: type[ModelT]) -> list[ModelT]:
        parsed = []
        for index, item in enumerate(items):
            try:
                parsed.append(model.model_validate(item))
            except ValidationError as e:
                self._audit_logger.log_record_corrupt(
                    key=f"{key}[{index}]",
                    error_message=str(e),
                )
        return parsed

    def load(self) -> LedgerSnapshot:
        """Restore the three collections. Never raises."""
        cards_key, alerts_key, paid_key = self.keys

        cards = self._parse_items(cards_key, self._read_list(cards_key), Card)
        alerts = self._parse_items(alerts_key, self._read_list(alerts_key), Alert)
        paid_periods = {str(item) for item in self._read_list(paid_key)}

        return LedgerSnapshot(cards=cards, alerts=alerts, paid_periods=paid_periods)

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    def save(self, snapshot: LedgerSnapshot) -> bool:
        """
        Persist a snapshot.

        Returns:
            True if every record was written, False if storage was unavailable
        """
        cards_key, alerts_key, paid_key = self.keys
        records = {
            cards_key: [card.to_record() for card in snapshot.cards],
            alerts_key: [alert.to_record() for alert in snapshot.alerts],
            paid_key: sorted(snapshot.paid_periods),
        }
        try:
            for key, value in records.items():
                self._store.set(key, json.dumps(value))
        except StorageUnavailableError as e:
            self._audit_logger.log_storage_unavailable(operation="save", error_message=str(e))
            return False
        return True

    def clear(self) -> bool:
        """Remove all three records."""
        try:
            for key in self.keys:
                self._store.delete(key)
        except StorageUnavailableError as e:
            self._audit_logger.log_storage_unavailable(operation="clear", error_message=str(e))
            return False
        return True
