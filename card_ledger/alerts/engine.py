"""
Alert Rule Engine

A recomputation pass looks at the current cards, the alerts that already
exist and the paid-period set, and returns the alerts that are warranted
but not yet present. It never edits or removes existing alerts; marking
and removal belong to the ledger.

RULES (evaluated independently for every active card):
1. payment_due    - next payment date within payment_due_days, cycle unpaid
2. annual_fee     - next annual fee date within annual_fee_days
3. fee_waiver     - remaining spend to the waiver at most fee_waiver_threshold
4. category_limit - capped category spend at category_limit_percentage of cap
5. credit_limit   - total spend at credit_limit_percentage of credit limit

An alert is only emitted if no alert with the same dedup key exists,
whatever its read state. The key is (card, type), plus the category for
category_limit. Running a pass twice on unchanged input yields nothing
the second time.
"""

from datetime import date, datetime
from typing import Callable, Iterable, Optional
from uuid import uuid4

from card_ledger.alerts.schedule import (
    days_until,
    first_day_of_next_month,
    next_annual_fee_date,
    next_payment_date,
)
from card_ledger.config import AlertSettings
from card_ledger.models import Alert, AlertType, Card, paid_period_key
from card_ledger.rewards import find_earning_rate, total_spend


_ID_PREFIXES = {
    AlertType.PAYMENT_DUE: "payment",
    AlertType.ANNUAL_FEE: "annual",
    AlertType.FEE_WAIVER: "waiver",
    AlertType.CATEGORY_LIMIT: "category",
    AlertType.CREDIT_LIMIT: "credit",
}


def _due_phrase(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "in 1 day"
    return f"in {days} days"


class AlertRuleEngine:
    """Evaluates the alert rules against ledger state."""

    def __init__(
        self,
        settings: Optional[AlertSettings] = None,
        id_factory: Optional[Callable[[AlertType, str], str]] = None,
    ):
        """
        Args:
            settings: Thresholds; defaults come from the environment.
            id_factory: Builds alert IDs from (type, card_id).
        """
        self._settings = settings or AlertSettings()
        self._id_factory = id_factory or self._default_id

    @property
    def settings(self) -> AlertSettings:
        return self._settings

    @staticmethod
    def _default_id(alert_type: AlertType, card_id: str) -> str:
        return f"{_ID_PREFIXES[alert_type]}_{card_id}_{uuid4().hex[:12]}"

    def evaluate(
        self,
        cards: Iterable[Card],
        existing_alerts: Iterable[Alert],
        paid_periods: set[str],
        now: datetime,
    ) -> list[Alert]:
        """
        Run one recomputation pass.

        Returns:
            Only the new alerts, in card order then rule order
        """
        open_keys = {alert.dedup_key for alert in existing_alerts}
        new_alerts: list[Alert] = []

        for card in cards:
            if not card.is_active:
                continue
            for alert in self._evaluate_card(card, paid_periods, now):
                if alert.dedup_key in open_keys:
                    continue
                open_keys.add(alert.dedup_key)
                new_alerts.append(alert)

        return new_alerts

    def _evaluate_card(self, card: Card, paid_periods: set[str], now: datetime) -> list[Alert]:
        today = now.date()
        candidates = [
            self._payment_due(card, paid_periods, today, now),
            self._annual_fee(card, today, now),
            self._fee_waiver(card, today, now),
        ]
        candidates.extend(self._category_limits(card, today, now))
        candidates.append(self._credit_limit(card, today, now))
        return [alert for alert in candidates if alert is not None]

    def _build(
        self,
        card: Card,
        alert_type: AlertType,
        title: str,
        message: str,
        due_date: date,
        now: datetime,
        category: Optional[str] = None,
    ) -> Alert:
        return Alert(
            id=self._id_factory(alert_type, card.id),
            card_id=card.id,
            type=alert_type,
            title=title,
            message=message,
            due_date=due_date,
            category=category,
            created_at=now,
        )

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _payment_due(
        self,
        card: Card,
        paid_periods: set[str],
        today: date,
        now: datetime,
    ) -> Optional[Alert]:
        due = next_payment_date(card.payment_due_date, today)
        days = days_until(due, today)
        if not 0 <= days <= self._settings.payment_due_days:
            return None
        if paid_period_key(card.id, due) in paid_periods:
            return None
        return self._build(
            card,
            AlertType.PAYMENT_DUE,
            title="Payment Due Soon",
            message=f"Payment for {card.name} is due {_due_phrase(days)}",
            due_date=due,
            now=now,
        )

    def _annual_fee(self, card: Card, today: date, now: datetime) -> Optional[Alert]:
        due = next_annual_fee_date(card.annual_fee_date, today)
        days = days_until(due, today)
        if not 0 <= days <= self._settings.annual_fee_days:
            return None
        return self._build(
            card,
            AlertType.ANNUAL_FEE,
            title="Annual Fee Due",
            message=(
                f"Annual fee of {card.annual_fee:,.2f} for {card.name} "
                f"is due {_due_phrase(days)}"
            ),
            due_date=due,
            now=now,
        )

    def _fee_waiver(self, card: Card, today: date, now: datetime) -> Optional[Alert]:
        if card.annual_fee_waiver <= 0:
            return None
        spend = total_spend(card)
        if spend >= card.annual_fee_waiver:
            return None
        remaining = card.annual_fee_waiver - spend
        if remaining > self._settings.fee_waiver_threshold:
            return None
        return self._build(
            card,
            AlertType.FEE_WAIVER,
            title="Fee Waiver Opportunity",
            message=f"Spend {remaining:,.2f} more on {card.name} to waive the annual fee",
            due_date=first_day_of_next_month(today),
            now=now,
        )

    def _category_limits(self, card: Card, today: date, now: datetime) -> list[Alert]:
        alerts = []
        for entry in card.spend_by_category:
            rate = find_earning_rate(card, entry.category)
            if rate is None or rate.cap is None:
                continue
            usage_pct = entry.amount / rate.cap * 100
            if usage_pct < self._settings.category_limit_percentage:
                continue
            headroom = max(rate.cap - entry.amount, 0.0)
            alerts.append(self._build(
                card,
                AlertType.CATEGORY_LIMIT,
                title="Category Limit Approaching",
                message=(
                    f"{entry.category} spend on {card.name} is at {usage_pct:.0f}% "
                    f"of its {rate.cap:,.2f} cap ({headroom:,.2f} remaining)"
                ),
                due_date=first_day_of_next_month(today),
                now=now,
                category=entry.category,
            ))
        return alerts

    def _credit_limit(self, card: Card, today: date, now: datetime) -> Optional[Alert]:
        if card.credit_limit <= 0:
            return None
        spend = total_spend(card)
        utilization = spend / card.credit_limit * 100
        if utilization < self._settings.credit_limit_percentage:
            return None
        headroom = max(card.credit_limit - spend, 0.0)
        return self._build(
            card,
            AlertType.CREDIT_LIMIT,
            title="Credit Limit Approaching",
            message=(
                f"{card.name} is at {utilization:.0f}% of its "
                f"{card.credit_limit:,.2f} credit limit ({headroom:,.2f} remaining)"
            ),
            due_date=next_payment_date(card.payment_due_date, today),
            now=now,
        )
