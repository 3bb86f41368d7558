"""
Import/Export Models

The export document is the portable form of the whole ledger. Import
results are returned to the caller rather than raised, so a UI can
render them directly.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from card_ledger.models.alert import Alert
from card_ledger.models.card import Card, LedgerModel


class LedgerSnapshot(BaseModel):
    """The three collections owned by the ledger."""

    cards: list[Card] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)
    paid_periods: set[str] = Field(default_factory=set)


class ExportDocument(LedgerModel):
    """
    Versioned export of the full ledger state.

    Wire shape:
        {version, exportedAt, cards, alerts, paidPaymentPeriods}
    """

    version: str
    exported_at: datetime
    cards: list[Card] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)
    paid_payment_periods: list[str] = Field(default_factory=list)


class ValidationIssue(BaseModel):
    """A single problem found in an import document."""

    field: str = Field(
        ...,
        description="Field or path with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_type', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage import validation.

    Stage 1: Schema validation (shape, types, model constraints)
    Stage 2: Semantic validation (duplicates, dangling references)
    """

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]


class ImportResult(BaseModel):
    """Outcome of importing a document into the ledger."""

    success: bool
    message: str
    cards_imported: int = 0
    alerts_imported: int = 0
    warnings: list[str] = Field(default_factory=list)
