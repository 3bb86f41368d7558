"""Read-only portfolio queries."""

from card_ledger.queries.portfolio import (
    best_rates_by_category,
    cashback_stats,
    miles_stats,
    payment_status,
    portfolio_summary,
    sort_alerts,
    total_spend,
)

__all__ = [
    "best_rates_by_category",
    "cashback_stats",
    "miles_stats",
    "payment_status",
    "portfolio_summary",
    "sort_alerts",
    "total_spend",
]
