"""Numeric helpers for odds and stake sizing."""

from __future__ import annotations

import math


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into [low, high]."""
    return max(low, min(high, value))


def implied_probability(odds: float) -> float:
    """Convert a decimal payout multiplier to its implied probability.

    2.5 -> 0.4. Odds at or below zero have no meaningful probability.
    """
    if odds <= 0:
        return 0.0
    return 1.0 / odds


def recommended_bet_amount(balance: float, odds: float, cap: float = 0.1) -> int:
    """Simplified Kelly-style stake suggestion, in whole currency units.

    f = min(cap, (odds - 1) / (odds * 10))

    Longer odds allow a larger fraction, but never more than ``cap`` of the
    balance. Returns 0 when odds give no payout.
    """
    if odds <= 1 or balance <= 0:
        return 0
    fraction = min(cap, (odds - 1) / (odds * 10))
    return math.floor(balance * fraction)
