"""
Portfolio Queries

Read-only views over the card list: aggregate reward stats, the best
rate per category, and per-card payment status. Results are computed
from the cards passed in; nothing here touches the ledger.
"""

from datetime import date
from typing import Iterable

from card_ledger.alerts.schedule import days_until, next_payment_date
from card_ledger.models import (
    Alert,
    BestRate,
    Card,
    CardType,
    CashbackStats,
    MilesStats,
    PaymentStatus,
    PortfolioSummary,
    paid_period_key,
)
from card_ledger.rewards import calculator


def total_spend(cards: Iterable[Card]) -> float:
    return sum(calculator.total_spend(card) for card in cards)


def miles_stats(cards: Iterable[Card]) -> MilesStats:
    """Spend and miles across miles cards only."""
    miles_cards = [card for card in cards if card.card_type == CardType.MILES]
    spend = total_spend(miles_cards)
    miles = sum(calculator.miles_earned(card) for card in miles_cards)
    return MilesStats(
        total_spend=spend,
        total_miles=miles,
        effective_rate=calculator.effective_rate(miles, spend),
    )


def cashback_stats(cards: Iterable[Card]) -> CashbackStats:
    """Spend and cashback across cashback cards only."""
    cashback_cards = [card for card in cards if card.card_type == CardType.CASHBACK]
    spend = total_spend(cashback_cards)
    cashback = sum(calculator.cashback_earned(card) for card in cashback_cards)
    return CashbackStats(
        total_spend=spend,
        total_cashback=cashback,
        effective_rate=calculator.effective_rate(cashback, spend),
    )


def best_rates_by_category(cards: Iterable[Card], card_type: CardType) -> dict[str, BestRate]:
    """
    Highest rate per category among active cards of one type.

    Cards tied on the best rate are all listed, in card order.
    """
    best: dict[str, BestRate] = {}
    for card in cards:
        if card.card_type != card_type or not card.is_active:
            continue
        for rate in card.earning_rates:
            current = best.get(rate.category)
            if current is None or rate.rate > current.rate:
                best[rate.category] = BestRate(rate=rate.rate, card_names=[card.name])
            elif rate.rate == current.rate:
                current.card_names.append(card.name)
    return best


def _payment_label(days: int) -> str:
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"{days} days left"


def payment_status(card: Card, paid_periods: set[str], today: date) -> PaymentStatus:
    due = next_payment_date(card.payment_due_date, today)
    days = days_until(due, today)
    is_paid = paid_period_key(card.id, due) in paid_periods
    return PaymentStatus(
        card_id=card.id,
        next_due=due,
        days_until=days,
        is_paid=is_paid,
        label="Payment Paid" if is_paid else _payment_label(days),
    )


def portfolio_summary(cards: Iterable[Card], alerts: Iterable[Alert]) -> PortfolioSummary:
    cards = list(cards)
    alerts = list(alerts)
    return PortfolioSummary(
        total_cards=len(cards),
        active_cards=sum(1 for card in cards if card.is_active),
        unread_alerts=sum(1 for alert in alerts if not alert.is_read),
        total_alerts=len(alerts),
    )


def sort_alerts(alerts: Iterable[Alert]) -> list[Alert]:
    """Unread first, then by due date."""
    return sorted(alerts, key=lambda alert: (alert.is_read, alert.due_date))
