"""Round simulator: seeded, fitness-weighted elimination sampling.

Each alive contestant gets an elimination weight ``1 / fitness``, so the
weakest contestants are the most likely to go. Exactly
``min(elimination_count, alive - 1)`` contestants are drawn without
replacement, which always leaves at least one survivor.

Candidates are sorted into a canonical order (heaviest weight first, ties
by ascending contestant id) before drawing, so the result depends only on
the seed and the set of contestants, not on the order they were passed in.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from gauntlet.betting.odds import fitness
from gauntlet.game.models import Contestant, id_sort_key

SeedLike = int | np.random.Generator | None


@dataclass(frozen=True)
class SimulationResult:
    """Which contestants survive and which are eliminated this round."""

    survivors: tuple[Contestant, ...]
    eliminated: tuple[Contestant, ...]


def elimination_weight(contestant: Contestant) -> float:
    """Inverse fitness: lower fitness means a higher chance of elimination."""
    return 1.0 / fitness(contestant)


def make_rng(seed: SeedLike) -> np.random.Generator:
    """Wrap a seed (or pass through a Generator). ``None`` draws OS entropy."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def simulate_round(
    alive_contestants: Iterable[Contestant],
    elimination_count: int,
    rng_seed: SeedLike = None,
) -> SimulationResult:
    """Pick this round's eliminations.

    Contestants are not mutated; applying the result is the orchestrator's
    job. Both output tuples keep the input order.
    """
    alive = list(alive_contestants)
    for contestant in alive:
        if not contestant.is_alive:
            raise ValueError(f"contestant {contestant.id} is not alive")

    n_eliminate = max(0, min(elimination_count, len(alive) - 1))
    if n_eliminate == 0:
        return SimulationResult(survivors=tuple(alive), eliminated=())

    rng = make_rng(rng_seed)
    candidates = sorted(
        alive, key=lambda c: (-elimination_weight(c), id_sort_key(c.id))
    )
    weights = np.array([elimination_weight(c) for c in candidates])

    remaining = list(range(len(candidates)))
    chosen: set[str] = set()
    for _ in range(n_eliminate):
        cumulative = np.cumsum(weights[remaining])
        target = rng.random() * cumulative[-1]
        pick = int(np.searchsorted(cumulative, target, side="right"))
        pick = min(pick, len(remaining) - 1)  # float edge at the top end
        chosen.add(candidates[remaining.pop(pick)].id)

    return SimulationResult(
        survivors=tuple(c for c in alive if c.id not in chosen),
        eliminated=tuple(c for c in alive if c.id in chosen),
    )
