"""
Shared fixtures.

All tests run against a fixed clock (Sunday 10 March 2024, 10:00) and an
in-memory store, so nothing touches the real date or the disk unless a
test asks for tmp_path.
"""

from datetime import datetime

import pytest

from card_ledger.alerts import AlertRuleEngine
from card_ledger.audit import AuditLogger
from card_ledger.config import AlertSettings
from card_ledger.ledger import Ledger
from card_ledger.models import Card, CardType
from card_ledger.services.storage import InMemoryKeyValueStore, LedgerRepository


NOW = datetime(2024, 3, 10, 10, 0)


def card_data(**overrides) -> dict:
    """
    Fields for a miles card that raises no alerts on NOW.

    Payment is due on the 25th (15 days out) and the annual fee on
    1 September; there is no credit limit and no fee waiver.
    """
    data = {
        "name": "Travel Card",
        "bank": "DBS",
        "card_type": CardType.MILES,
        "earning_rates": [
            {"category": "Dining", "rate": 2.0, "cap": 100.0},
            {"category": "Travel", "rate": 1.2},
        ],
        "payment_due_date": 25,
        "annual_fee_date": "09-01",
    }
    data.update(overrides)
    return data


def make_card(**overrides) -> Card:
    card_id = overrides.pop("id", "card_test")
    return Card(id=card_id, created_at=NOW, updated_at=NOW, **card_data(**overrides))


class FixedClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def engine():
    return AlertRuleEngine(AlertSettings())


@pytest.fixture
def ledger(store, engine, audit_logger, clock):
    repository = LedgerRepository(store, audit_logger=audit_logger)
    return Ledger(
        repository=repository,
        alert_engine=engine,
        audit_logger=audit_logger,
        clock=clock,
    ).init()
