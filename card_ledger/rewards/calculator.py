"""
Reward Calculator

Pure functions over a Card. No side effects; safe on any snapshot.

Cap policy: an earning rate's cap limits the dollar base before the rate
is applied, for miles and cashback cards alike and at every call site.
Spend in a category with no matching earning rate earns nothing.
"""

from typing import Optional

from card_ledger.models import Card, CardType, CategoryReward, EarningRate


def total_spend(card: Card) -> float:
    """Sum of all recorded category spend."""
    return sum(entry.amount for entry in card.spend_by_category)


def find_earning_rate(card: Card, category: str) -> Optional[EarningRate]:
    for rate in card.earning_rates:
        if rate.category == category:
            return rate
    return None


def capped_amount(amount: float, rate: EarningRate) -> float:
    """The part of `amount` that earns `rate`."""
    if rate.cap is None:
        return amount
    return min(amount, rate.cap)


def _category_reward_value(card_type: CardType, base: float, rate: float) -> float:
    if card_type == CardType.CASHBACK:
        return base * rate / 100
    return base * rate


def miles_earned(card: Card) -> float:
    """Miles earned from current spend: capped base * miles-per-dollar."""
    total = 0.0
    for entry in card.spend_by_category:
        rate = find_earning_rate(card, entry.category)
        if rate is None:
            continue
        total += capped_amount(entry.amount, rate) * rate.rate
    return total


def cashback_earned(card: Card) -> float:
    """Cashback earned from current spend: capped base * percentage / 100."""
    total = 0.0
    for entry in card.spend_by_category:
        rate = find_earning_rate(card, entry.category)
        if rate is None:
            continue
        total += capped_amount(entry.amount, rate) * rate.rate / 100
    return total


def reward_earned(card: Card) -> float:
    """Miles for miles cards, cashback for cashback cards."""
    if card.card_type == CardType.CASHBACK:
        return cashback_earned(card)
    return miles_earned(card)


def category_rewards(card: Card) -> list[CategoryReward]:
    """
    Per-category breakdown of the card's current spend.

    Orphaned categories are included with a zero rate and reward.
    """
    breakdown = []
    for entry in card.spend_by_category:
        rate = find_earning_rate(card, entry.category)
        if rate is None:
            breakdown.append(CategoryReward(
                category=entry.category,
                amount=entry.amount,
                capped_amount=0.0,
                is_orphaned=True,
            ))
            continue

        base = capped_amount(entry.amount, rate)
        breakdown.append(CategoryReward(
            category=entry.category,
            amount=entry.amount,
            capped_amount=base,
            rate=rate.rate,
            cap=rate.cap,
            reward=_category_reward_value(card.card_type, base, rate.rate),
            cap_usage_pct=cap_usage_pct(entry.amount, rate.cap),
        ))
    return breakdown


def cap_usage_pct(amount: float, cap: Optional[float]) -> Optional[float]:
    """Spend as a percentage of a cap, or None when uncapped."""
    if not cap:
        return None
    return amount / cap * 100


def effective_rate(total_reward: float, total_spend: float) -> float:
    """Reward per dollar spent (0 when nothing was spent)."""
    if total_spend > 0:
        return total_reward / total_spend
    return 0.0
