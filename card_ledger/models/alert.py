"""
Alert Models for Card Ledger

Alerts are created only by the alert rule engine. The ledger may mark
them read or remove them, but never edits their content.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from card_ledger.models.card import LedgerModel


class AlertType(str, Enum):
    """Kinds of alerts the rule engine can raise."""
    PAYMENT_DUE = "payment_due"
    ANNUAL_FEE = "annual_fee"
    FEE_WAIVER = "fee_waiver"
    CATEGORY_LIMIT = "category_limit"
    CREDIT_LIMIT = "credit_limit"


# Alerts that can be marked resolved (payment_due also records a paid period)
RESOLVABLE_ALERT_TYPES = frozenset({
    AlertType.PAYMENT_DUE,
    AlertType.CATEGORY_LIMIT,
    AlertType.CREDIT_LIMIT,
})


class Alert(LedgerModel):
    """A time-sensitive notice about one card."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique alert ID"
    )
    card_id: str = Field(
        ...,
        description="Card this alert is about"
    )
    type: AlertType
    title: str
    message: str
    due_date: date = Field(
        ...,
        description="Date the alert refers to"
    )
    category: Optional[str] = Field(
        default=None,
        description="Spend category (category_limit alerts only)"
    )
    is_read: bool = False
    created_at: datetime

    @field_validator('due_date', mode='before')
    @classmethod
    def truncate_datetime(cls, v: Any) -> Any:
        """Older exports store full ISO timestamps; keep the date part."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @property
    def dedup_key(self) -> tuple:
        """Identity used to decide whether an alert is already open."""
        if self.type == AlertType.CATEGORY_LIMIT:
            return (self.card_id, self.type, self.category)
        return (self.card_id, self.type)

    @property
    def is_resolvable(self) -> bool:
        return self.type in RESOLVABLE_ALERT_TYPES


def paid_period_key(card_id: str, payment_date: date) -> str:
    """
    Key marking a card's billing cycle as settled.

    The month is zero-based (January = 0) so keys match documents
    exported by earlier versions of the dashboard.
    """
    return f"{card_id}_{payment_date.year}_{payment_date.month - 1}"
