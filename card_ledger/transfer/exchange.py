"""
Import/Export Adapter

Export turns a ledger snapshot into a versioned, portable JSON document.
Import validates a document and hands back a snapshot; replacing the
ledger's state with it is the ledger's job. Nothing here raises past
its boundary: parse failures come back as a failed ImportOutcome.
"""

import json
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from card_ledger.config import ExportSettings
from card_ledger.models import ExportDocument, LedgerSnapshot, ValidationResult
from card_ledger.validation import ImportValidator


class ImportOutcome(BaseModel):
    """Parsed document, or the reason it was rejected."""

    success: bool
    message: str
    validation: ValidationResult
    snapshot: Optional[LedgerSnapshot] = None


class DataExchange:
    """Serializes ledger state to and from export documents."""

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        validator: Optional[ImportValidator] = None,
    ):
        self._settings = settings or ExportSettings()
        self._validator = validator or ImportValidator(self._settings)

    def export(self, snapshot: LedgerSnapshot, now: datetime) -> ExportDocument:
        return ExportDocument(
            version=self._settings.data_version,
            exported_at=now,
            cards=snapshot.cards,
            alerts=snapshot.alerts,
            paid_payment_periods=sorted(snapshot.paid_periods),
        )

    def dumps(self, document: ExportDocument) -> str:
        """Render a document as indented JSON."""
        return json.dumps(document.to_record(), indent=2)

    def export_filename(self, now: datetime) -> str:
        return self._settings.filename_format.replace("{date}", now.strftime("%Y-%m-%d"))

    def parse(self, raw: Union[str, bytes]) -> ImportOutcome:
        """Validate an export document."""
        result, snapshot = self._validator.validate(raw)
        message = self._validator.get_user_friendly_summary(result)
        if snapshot is None:
            return ImportOutcome(success=False, message=message, validation=result)
        return ImportOutcome(
            success=True,
            message=message,
            validation=result,
            snapshot=snapshot,
        )
