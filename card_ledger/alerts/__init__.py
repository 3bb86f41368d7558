"""Alert rule engine package."""

from card_ledger.alerts.engine import AlertRuleEngine
from card_ledger.alerts.schedule import (
    days_until,
    first_day_of_next_month,
    next_annual_fee_date,
    next_payment_date,
)

__all__ = [
    "AlertRuleEngine",
    "days_until",
    "first_day_of_next_month",
    "next_annual_fee_date",
    "next_payment_date",
]
