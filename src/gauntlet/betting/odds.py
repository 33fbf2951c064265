"""Odds model: stat-driven fitness and payout multipliers.

Each contestant gets a fitness score from a fixed weighting of their stats.
Fitness is normalized across the contestants still alive into a share of
the field, and the payout multiplier is the house-adjusted inverse of that
share::

    odds = clamp(house_margin / share, odds_min, odds_max)

The same fitness score drives elimination weights in the round simulator,
so the favourite on the odds board is also the least likely to be
eliminated.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from gauntlet.config import settings
from gauntlet.constants import FITNESS_WEIGHTS
from gauntlet.errors import InvalidContestant
from gauntlet.game.models import Contestant
from gauntlet.utils.stats import clamp


def fitness(contestant: Contestant) -> float:
    """Weighted stat score. Only the contestant's own stats are used."""
    stats = contestant.stats
    return (
        FITNESS_WEIGHTS["strength"] * stats.strength
        + FITNESS_WEIGHTS["agility"] * stats.agility
        + FITNESS_WEIGHTS["intelligence"] * stats.intelligence
        + FITNESS_WEIGHTS["luck"] * stats.luck
        + FITNESS_WEIGHTS["deception"] * stats.deception
    )


@dataclass(frozen=True)
class OddsModel:
    """Pure odds calculator. Holds configuration only, never game state."""

    house_margin: float = settings.house_margin
    odds_min: float = settings.odds_min
    odds_max: float = settings.odds_max

    def __post_init__(self) -> None:
        if self.odds_min < 1:
            raise ValueError(f"odds_min must be >= 1, got {self.odds_min}")
        if self.odds_max < self.odds_min:
            raise ValueError("odds_max must be >= odds_min")
        if self.house_margin <= 0:
            raise ValueError("house_margin must be positive")

    def share(self, contestant: Contestant, alive: Iterable[Contestant]) -> float:
        """Fitness share of ``contestant`` among the alive field."""
        alive = list(alive)
        if not any(c.id == contestant.id for c in alive):
            raise InvalidContestant(f"{contestant.id} is not among the alive contestants")
        total = sum(fitness(c) for c in alive)
        return fitness(contestant) / total

    def compute_odds(self, contestant: Contestant, alive: Iterable[Contestant]) -> float:
        """Payout multiplier for a bet on ``contestant`` surviving."""
        share = self.share(contestant, alive)
        odds = clamp(self.house_margin / share, self.odds_min, self.odds_max)
        return round(odds, 2)

    def compute_all_odds(self, contestants: Iterable[Contestant]) -> dict[str, float]:
        """Odds board for every alive contestant in ``contestants``."""
        alive = [c for c in contestants if c.is_alive]
        return {c.id: self.compute_odds(c, alive) for c in alive}


default_odds_model = OddsModel()


def compute_odds(contestant: Contestant, alive: Iterable[Contestant]) -> float:
    return default_odds_model.compute_odds(contestant, alive)


def compute_all_odds(contestants: Iterable[Contestant]) -> dict[str, float]:
    return default_odds_model.compute_all_odds(contestants)
