"""
Derived read models.

Nothing here is stored; these are computed from cards on demand.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CategoryReward(BaseModel):
    """Reward breakdown for one spend category of one card."""

    category: str
    amount: float = Field(ge=0, description="Recorded spend")
    capped_amount: float = Field(ge=0, description="Spend that earns the rate")
    rate: float = 0.0
    cap: Optional[float] = None
    reward: float = 0.0
    cap_usage_pct: Optional[float] = Field(
        default=None,
        description="Spend as a percentage of the cap (None when uncapped)"
    )
    is_orphaned: bool = Field(
        default=False,
        description="No earning rate exists for the category"
    )


class MilesStats(BaseModel):
    """Aggregate over miles cards."""

    total_spend: float = 0.0
    total_miles: float = 0.0
    effective_rate: float = 0.0


class CashbackStats(BaseModel):
    """Aggregate over cashback cards."""

    total_spend: float = 0.0
    total_cashback: float = 0.0
    effective_rate: float = 0.0


class BestRate(BaseModel):
    """Highest rate offered for a category and the cards offering it."""

    rate: float
    card_names: list[str] = Field(default_factory=list)


class PaymentStatus(BaseModel):
    """Where a card stands relative to its next payment."""

    card_id: str
    next_due: date
    days_until: int
    is_paid: bool
    label: str


class PortfolioSummary(BaseModel):
    """Headline counts for the dashboard."""

    total_cards: int = 0
    active_cards: int = 0
    unread_alerts: int = 0
    total_alerts: int = 0
