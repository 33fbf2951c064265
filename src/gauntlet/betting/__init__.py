"""Betting: ledger, odds model, and settlement."""

from gauntlet.betting.ledger import Bet, BettingStats, Ledger, validate_bet
from gauntlet.betting.odds import OddsModel, compute_all_odds, compute_odds, fitness
from gauntlet.betting.settlement import SettlementEngine, SettlementReport

__all__ = [
    "Bet",
    "BettingStats",
    "Ledger",
    "validate_bet",
    "OddsModel",
    "compute_odds",
    "compute_all_odds",
    "fitness",
    "SettlementEngine",
    "SettlementReport",
]
