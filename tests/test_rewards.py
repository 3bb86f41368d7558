"""Tests for the reward calculator."""

import pytest

from card_ledger.models import CardType
from card_ledger.rewards import (
    cap_usage_pct,
    cashback_earned,
    category_rewards,
    effective_rate,
    miles_earned,
    reward_earned,
    total_spend,
)

from conftest import make_card


class TestMilesEarned:
    """Tests for miles calculation."""

    def test_cap_limits_spend_base(self):
        """Dining at 2 mpd with a 100 cap: 150 spent earns 200 miles."""
        card = make_card(spend_by_category=[{"category": "Dining", "amount": 150}])
        assert miles_earned(card) == pytest.approx(200)

    def test_under_cap(self):
        card = make_card(spend_by_category=[{"category": "Dining", "amount": 40}])
        assert miles_earned(card) == pytest.approx(80)

    def test_uncapped_rate(self):
        card = make_card(spend_by_category=[{"category": "Travel", "amount": 1000}])
        assert miles_earned(card) == pytest.approx(1200)

    def test_orphaned_category_earns_nothing(self):
        """Spend in a category without an earning rate counts as spend only."""
        card = make_card(spend_by_category=[
            {"category": "Groceries", "amount": 300},
            {"category": "Travel", "amount": 100},
        ])
        assert miles_earned(card) == pytest.approx(120)
        assert total_spend(card) == pytest.approx(400)

    def test_no_spend(self):
        assert miles_earned(make_card()) == 0.0


class TestCashbackEarned:
    """Tests for cashback calculation."""

    def test_percentage_with_cap(self):
        card = make_card(
            card_type=CardType.CASHBACK,
            earning_rates=[{"category": "Groceries", "rate": 5, "cap": 600}],
            spend_by_category=[{"category": "Groceries", "amount": 800}],
        )
        assert cashback_earned(card) == pytest.approx(30)
        assert reward_earned(card) == pytest.approx(30)

    def test_percentage_uncapped(self):
        card = make_card(
            card_type=CardType.CASHBACK,
            earning_rates=[{"category": "Online", "rate": 1.5}],
            spend_by_category=[{"category": "Online", "amount": 200}],
        )
        assert cashback_earned(card) == pytest.approx(3)


class TestCategoryRewards:
    """Tests for the per-category breakdown."""

    def test_breakdown(self):
        card = make_card(spend_by_category=[
            {"category": "Dining", "amount": 150},
            {"category": "Groceries", "amount": 50},
        ])
        dining, groceries = category_rewards(card)

        assert dining.capped_amount == 100
        assert dining.reward == pytest.approx(200)
        assert dining.cap_usage_pct == pytest.approx(150)
        assert not dining.is_orphaned

        assert groceries.is_orphaned
        assert groceries.reward == 0.0
        assert groceries.amount == 50

    def test_zero_rate_is_not_orphaned(self):
        card = make_card(
            earning_rates=[{"category": "Insurance", "rate": 0.0}],
            spend_by_category=[{"category": "Insurance", "amount": 400}],
        )
        (insurance,) = category_rewards(card)

        assert not insurance.is_orphaned
        assert insurance.rate == 0.0
        assert insurance.capped_amount == 400
        assert insurance.reward == 0.0

    def test_cap_usage_uncapped(self):
        assert cap_usage_pct(500, None) is None
        assert cap_usage_pct(80, 100) == pytest.approx(80)


class TestEffectiveRate:
    def test_zero_spend(self):
        assert effective_rate(0, 0) == 0.0

    def test_rate(self):
        assert effective_rate(300, 200) == pytest.approx(1.5)
