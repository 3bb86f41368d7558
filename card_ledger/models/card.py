"""
Card Models for Card Ledger

These models define the strict schemas for card state:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the camelCase JSON written by the storage and export layers

Python code uses snake_case field names; every model also accepts and
emits the camelCase aliases (``spendByCategory``, ``isActive``, ...).
"""

import calendar
import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


MONTH_DAY_PATTERN = re.compile(r"^(\d{2})-(\d{2})$")

Money = Annotated[float, Field(ge=0)]


class LedgerModel(BaseModel):
    """Base model: camelCase aliases on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> dict:
        """Dump to the JSON-compatible camelCase shape used for storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ENUMS
# =============================================================================

class CardType(str, Enum):
    """
    Reward currency of a card.

    Miles cards express rates as miles per dollar; cashback cards
    express rates as a percentage of spend.
    """
    MILES = "miles"
    CASHBACK = "cashback"


# =============================================================================
# CARD COMPONENTS
# =============================================================================

class EarningRate(LedgerModel):
    """Reward rate for one spend category, optionally capped per month."""

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Spend category this rate applies to"
    )
    rate: float = Field(
        ...,
        ge=0,
        description="Miles per dollar, or cashback percentage"
    )
    cap: Optional[float] = Field(
        default=None,
        gt=0,
        description="Monthly dollar cap on the spend that earns this rate"
    )
    current_month_earned: Optional[float] = Field(
        default=None,
        description="Carried through from older exports; never computed"
    )


class CategorySpend(LedgerModel):
    """Recorded spend for one category in the current month."""

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    amount: Money


def _check_unique_categories(entries: list, what: str) -> None:
    seen = set()
    for entry in entries:
        if entry.category in seen:
            raise ValueError(f"Duplicate {what} category: {entry.category}")
        seen.add(entry.category)


class CardFields(LedgerModel):
    """
    Caller-supplied card fields.

    Shared by CardInput (new cards) and Card (stored cards).
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Card product name"
    )
    bank: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Issuing bank"
    )
    card_type: CardType

    earning_rates: list[EarningRate] = Field(default_factory=list)

    # Limits and fees
    credit_limit: Money = 0.0
    annual_fee: Money = 0.0
    annual_fee_waiver: Money = Field(
        default=0.0,
        description="Minimum annual spend for the annual fee to be waived (0 = no waiver)"
    )

    # Important dates
    payment_due_date: int = Field(
        ...,
        ge=1,
        le=31,
        description="Payment due day of month"
    )
    annual_fee_date: str = Field(
        ...,
        description="Annual fee date in MM-DD format"
    )

    # Current month tracking
    spend_by_category: list[CategorySpend] = Field(default_factory=list)
    last_reset_date: Optional[str] = Field(
        default=None,
        description="Month of the last spend reset (YYYY-MM), carried through"
    )

    is_active: bool = True

    @field_validator('annual_fee_date')
    @classmethod
    def validate_annual_fee_date(cls, v: str) -> str:
        """MM-DD must name a real calendar day (02-29 allowed)."""
        match = MONTH_DAY_PATTERN.match(v)
        if not match:
            raise ValueError(f"Annual fee date must be MM-DD, got {v!r}")
        month, day = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month in annual fee date: {v!r}")
        # 2000 is a leap year, so 02-29 passes
        if not 1 <= day <= calendar.monthrange(2000, month)[1]:
            raise ValueError(f"Invalid day in annual fee date: {v!r}")
        return v

    @field_validator('earning_rates')
    @classmethod
    def validate_earning_rates(cls, v: list[EarningRate]) -> list[EarningRate]:
        _check_unique_categories(v, "earning rate")
        return v

    @field_validator('spend_by_category')
    @classmethod
    def validate_spend(cls, v: list[CategorySpend]) -> list[CategorySpend]:
        """Drop zero entries; categories must be unique."""
        v = [entry for entry in v if entry.amount > 0]
        _check_unique_categories(v, "spend")
        return v


class CardInput(CardFields):
    """Data for a new card. The ledger assigns id and timestamps."""

    model_config = ConfigDict(extra="forbid")


class Card(CardFields):
    """
    A stored credit card.

    Identity and timestamps are owned by the ledger.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Unique card ID"
    )
    created_at: datetime
    updated_at: datetime

    def spend_for(self, category: str) -> float:
        """Recorded spend for a category (0 if none)."""
        for entry in self.spend_by_category:
            if entry.category == category:
                return entry.amount
        return 0.0


class CardPatch(LedgerModel):
    """
    Partial update for a card.

    Every updatable field is listed explicitly; unknown keys are rejected.
    Only fields that were explicitly set are merged.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    bank: Optional[str] = None
    card_type: Optional[CardType] = None
    earning_rates: Optional[list[EarningRate]] = None
    credit_limit: Optional[float] = None
    annual_fee: Optional[float] = None
    annual_fee_waiver: Optional[float] = None
    payment_due_date: Optional[int] = None
    annual_fee_date: Optional[str] = None
    spend_by_category: Optional[list[CategorySpend]] = None
    last_reset_date: Optional[str] = None
    is_active: Optional[bool] = None

    def changes(self) -> dict:
        """Explicitly-set fields as a snake_case dict."""
        return self.model_dump(exclude_unset=True)
