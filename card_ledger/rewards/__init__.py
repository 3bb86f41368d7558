"""Reward calculation package."""

from card_ledger.rewards.calculator import (
    cap_usage_pct,
    capped_amount,
    cashback_earned,
    category_rewards,
    effective_rate,
    find_earning_rate,
    miles_earned,
    reward_earned,
    total_spend,
)

__all__ = [
    "cap_usage_pct",
    "capped_amount",
    "cashback_earned",
    "category_rewards",
    "effective_rate",
    "find_earning_rate",
    "miles_earned",
    "reward_earned",
    "total_spend",
]
