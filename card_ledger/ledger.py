"""
Card Ledger

The ledger owns the cards, the alerts and the paid-period set, and is
the only component that mutates them. Every mutating call finishes its
work before returning:

1. Update the in-memory collections
2. Run an alert recomputation pass (where the mutation can change what
   is warranted)
3. Persist the snapshot through the repository
4. Log an audit event

Lookups by ID that miss return None/False rather than raising.

The ledger is not safe for concurrent mutation on its own. An embedding
that calls it from several threads holds `ledger.lock` around each unit
of work.
"""

import threading
from datetime import date, datetime
from typing import Callable, Optional, Union
from uuid import uuid4

from card_ledger.alerts import AlertRuleEngine
from card_ledger.audit import AuditLogger
from card_ledger.config import get_settings
from card_ledger.models import (
    Alert,
    AlertType,
    Card,
    CardInput,
    CardPatch,
    CardType,
    CashbackStats,
    ImportResult,
    LedgerSnapshot,
    MilesStats,
    paid_period_key,
)
from card_ledger.queries import portfolio
from card_ledger.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    LedgerRepository,
)
from card_ledger.transfer import DataExchange


class Ledger:
    """
    Card and alert store.

    Construction has no side effects; call init() to load persisted state.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        alert_engine: Optional[AlertRuleEngine] = None,
        exchange: Optional[DataExchange] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._repository = repository
        self._alert_engine = alert_engine or AlertRuleEngine()
        self._exchange = exchange or DataExchange()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or datetime.now
        self.lock = threading.RLock()

        self._cards: list[Card] = []
        self._alerts: list[Alert] = []
        self._paid_periods: set[str] = set()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def init(self) -> "Ledger":
        """Load persisted state and bring alerts up to date."""
        snapshot = self._repository.load()
        self._cards = list(snapshot.cards)
        self._alerts = list(snapshot.alerts)
        self._paid_periods = set(snapshot.paid_periods)
        self._recompute_alerts()
        self._persist()
        return self

    def flush(self) -> bool:
        """Persist the current state explicitly."""
        return self._persist()

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            cards=[card.model_copy(deep=True) for card in self._cards],
            alerts=[alert.model_copy() for alert in self._alerts],
            paid_periods=set(self._paid_periods),
        )

    def _persist(self) -> bool:
        return self._repository.save(LedgerSnapshot(
            cards=self._cards,
            alerts=self._alerts,
            paid_periods=self._paid_periods,
        ))

    def _recompute_alerts(self) -> list[Alert]:
        new_alerts = self._alert_engine.evaluate(
            cards=self._cards,
            existing_alerts=self._alerts,
            paid_periods=self._paid_periods,
            now=self._clock(),
        )
        if new_alerts:
            self._alerts.extend(new_alerts)
            self._audit_logger.log_alerts_raised(
                alert_ids=[alert.id for alert in new_alerts],
                alert_types=[alert.type.value for alert in new_alerts],
            )
        return new_alerts

    def refresh_alerts(self) -> list[Alert]:
        """Run a recomputation pass and persist; returns the new alerts."""
        new_alerts = self._recompute_alerts()
        if new_alerts:
            self._persist()
        return [alert.model_copy() for alert in new_alerts]

    # -------------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------------

    def _find_card_index(self, card_id: str) -> Optional[int]:
        for index, card in enumerate(self._cards):
            if card.id == card_id:
                return index
        return None

    def get_cards(
        self,
        card_type: Optional[CardType] = None,
        active_only: bool = False,
    ) -> list[Card]:
        cards = self._cards
        if card_type is not None:
            cards = [card for card in cards if card.card_type == card_type]
        if active_only:
            cards = [card for card in cards if card.is_active]
        return [card.model_copy(deep=True) for card in cards]

    def get_card(self, card_id: str) -> Optional[Card]:
        index = self._find_card_index(card_id)
        if index is None:
            return None
        return self._cards[index].model_copy(deep=True)

    def add_card(self, data: Union[CardInput, dict]) -> Card:
        """
        Add a new card.

        Raises:
            pydantic.ValidationError: If the card data is invalid
        """
        if not isinstance(data, CardInput):
            data = CardInput.model_validate(data)

        now = self._clock()
        card = Card(
            **data.model_dump(),
            id=f"card_{uuid4().hex}",
            created_at=now,
            updated_at=now,
        )
        self._cards.append(card)
        self._recompute_alerts()
        self._persist()
        self._audit_logger.log_card_added(card_id=card.id, name=card.name)
        return card.model_copy(deep=True)

    def update_card(self, card_id: str, patch: Union[CardPatch, dict]) -> Optional[Card]:
        """
        Merge the explicitly-set fields of a patch into a card.

        Returns:
            The updated card, or None if no card has this ID

        Raises:
            pydantic.ValidationError: If the patch or the merged card is invalid
        """
        if not isinstance(patch, CardPatch):
            patch = CardPatch.model_validate(patch)

        index = self._find_card_index(card_id)
        if index is None:
            return None

        changes = patch.changes()
        merged = {
            **self._cards[index].model_dump(),
            **changes,
            "updated_at": self._clock(),
        }
        card = Card.model_validate(merged)
        self._cards[index] = card

        self._recompute_alerts()
        self._persist()
        self._audit_logger.log_card_updated(card_id=card_id, fields=sorted(changes))
        return card.model_copy(deep=True)

    def delete_card(self, card_id: str) -> bool:
        """Remove a card and every alert attached to it."""
        index = self._find_card_index(card_id)
        if index is None:
            return False

        del self._cards[index]
        remaining = [alert for alert in self._alerts if alert.card_id != card_id]
        removed = len(self._alerts) - len(remaining)
        self._alerts = remaining

        self._persist()
        self._audit_logger.log_card_deleted(card_id=card_id, alerts_removed=removed)
        return True

    def update_card_spend(self, card_id: str, category: str, amount: float) -> bool:
        """
        Set the recorded spend for one category; 0 removes the entry.

        The category name is stripped before matching, so "Dining " and
        "Dining" are the same entry.

        Raises:
            ValueError: If amount is negative or the category is blank
            pydantic.ValidationError: If the resulting card is invalid
        """
        if amount < 0:
            raise ValueError(f"Spend amount cannot be negative: {amount}")
        category = category.strip()
        if not category:
            raise ValueError("Spend category cannot be empty")

        index = self._find_card_index(card_id)
        if index is None:
            return False

        card = self._cards[index]
        categories = [entry.category for entry in card.spend_by_category]
        spend = [entry.model_dump() for entry in card.spend_by_category if entry.category != category]
        if amount > 0:
            entry = {"category": category, "amount": amount}
            if category in categories:
                spend.insert(categories.index(category), entry)
            else:
                spend.append(entry)

        self._cards[index] = Card.model_validate({
            **card.model_dump(),
            "spend_by_category": spend,
            "updated_at": self._clock(),
        })

        self._recompute_alerts()
        self._persist()
        self._audit_logger.log_spend_updated(card_id=card_id, category=category, amount=amount)
        return True

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    def _find_alert_index(self, alert_id: str) -> Optional[int]:
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                return index
        return None

    def get_alerts(self, sort: bool = False) -> list[Alert]:
        """All live alerts; sorted puts unread first, then by due date."""
        alerts = portfolio.sort_alerts(self._alerts) if sort else self._alerts
        return [alert.model_copy() for alert in alerts]

    def get_unread_alerts(self) -> list[Alert]:
        return [alert.model_copy() for alert in self._alerts if not alert.is_read]

    def mark_alert_read(self, alert_id: str) -> bool:
        index = self._find_alert_index(alert_id)
        if index is None:
            return False

        self._alerts[index] = self._alerts[index].model_copy(update={"is_read": True})
        self._persist()
        self._audit_logger.log_alert_read(alert_id=alert_id)
        return True

    def mark_alert_resolved(self, alert_id: str) -> bool:
        """
        Resolve an alert and remove it.

        Resolving a payment_due alert also marks its billing cycle paid,
        which keeps the alert from being raised again for that cycle.
        Alert types that cannot be resolved are left untouched.
        """
        index = self._find_alert_index(alert_id)
        if index is None:
            return False

        alert = self._alerts[index]
        if not alert.is_resolvable:
            return False

        paid_period = None
        if alert.type == AlertType.PAYMENT_DUE:
            paid_period = paid_period_key(alert.card_id, alert.due_date)
            self._paid_periods.add(paid_period)

        del self._alerts[index]
        self._persist()
        self._audit_logger.log_alert_resolved(
            alert_id=alert_id,
            card_id=alert.card_id,
            alert_type=alert.type.value,
            paid_period=paid_period,
        )
        return True

    mark_alert_paid = mark_alert_resolved

    def delete_alert(self, alert_id: str) -> bool:
        index = self._find_alert_index(alert_id)
        if index is None:
            return False

        del self._alerts[index]
        self._persist()
        self._audit_logger.log_alert_deleted(alert_id=alert_id)
        return True

    # -------------------------------------------------------------------------
    # Paid payment periods
    # -------------------------------------------------------------------------

    def get_paid_payment_periods(self) -> set[str]:
        return set(self._paid_periods)

    def is_payment_period_paid(self, card_id: str) -> bool:
        """Whether the card's current billing cycle is marked paid."""
        card = self.get_card(card_id)
        if card is None:
            return False
        status = portfolio.payment_status(card, self._paid_periods, self._clock().date())
        return status.is_paid

    def unmark_payment_paid(self, card_id: str, payment_date: date) -> None:
        """
        Forget that a billing cycle was paid.

        The payment_due alert can come back if the cycle is still
        within its alert window.
        """
        if isinstance(payment_date, datetime):
            payment_date = payment_date.date()
        key = paid_period_key(card_id, payment_date)
        self._paid_periods.discard(key)

        self._recompute_alerts()
        self._persist()
        self._audit_logger.log_payment_unmarked(card_id=card_id, paid_period=key)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def get_total_spend(self) -> float:
        return portfolio.total_spend(self._cards)

    def get_miles_cards_stats(self) -> MilesStats:
        return portfolio.miles_stats(self._cards)

    def get_cashback_cards_stats(self) -> CashbackStats:
        return portfolio.cashback_stats(self._cards)

    # -------------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------------

    def export_data(self) -> str:
        """The whole ledger as a versioned JSON document."""
        document = self._exchange.export(self.snapshot(), now=self._clock())
        self._audit_logger.log_data_exported(
            card_count=len(document.cards),
            alert_count=len(document.alerts),
        )
        return self._exchange.dumps(document)

    def export_filename(self) -> str:
        return self._exchange.export_filename(self._clock())

    def import_data(self, raw: Union[str, bytes]) -> ImportResult:
        """
        Replace all ledger state with an export document.

        This is a destructive overwrite, not a merge. On failure the
        current state is left untouched.
        """
        outcome = self._exchange.parse(raw)
        if not outcome.success:
            self._audit_logger.log_import_rejected(message=outcome.message)
            return ImportResult(success=False, message=outcome.message)

        snapshot = outcome.snapshot
        self._cards = list(snapshot.cards)
        self._alerts = list(snapshot.alerts)
        self._paid_periods = set(snapshot.paid_periods)

        self._recompute_alerts()
        self._persist()

        warnings = outcome.validation.warnings
        self._audit_logger.log_import_completed(
            card_count=len(snapshot.cards),
            alert_count=len(snapshot.alerts),
            warnings=warnings,
        )
        return ImportResult(
            success=True,
            message=f"Successfully imported {len(snapshot.cards)} cards",
            cards_imported=len(snapshot.cards),
            alerts_imported=len(snapshot.alerts),
            warnings=warnings,
        )

    def clear_all_data(self) -> None:
        """Remove every card, alert and paid period, in memory and in storage."""
        self._cards = []
        self._alerts = []
        self._paid_periods = set()
        self._repository.clear()
        self._audit_logger.log_data_cleared()


def create_ledger(
    path: Optional[str] = None,
    in_memory: bool = False,
    clock: Optional[Callable[[], datetime]] = None,
) -> Ledger:
    """
    Factory function to build and initialize a ledger.

    Args:
        path: JSON store location; defaults to the configured path.
        in_memory: Keep state in memory only (nothing written to disk).
        clock: Source of "now"; defaults to datetime.now.

    Returns:
        An initialized Ledger
    """
    settings = get_settings()
    storage_settings = settings.storage
    audit_logger = AuditLogger()

    if in_memory:
        store = InMemoryKeyValueStore()
    else:
        store = JsonFileKeyValueStore(path or storage_settings.path)

    repository = LedgerRepository(store, settings=storage_settings, audit_logger=audit_logger)
    ledger = Ledger(
        repository=repository,
        alert_engine=AlertRuleEngine(settings.alerts),
        exchange=DataExchange(settings.export),
        audit_logger=audit_logger,
        clock=clock,
    )
    return ledger.init()
