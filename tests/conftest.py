"""Shared pytest fixtures for Gauntlet tests."""

from __future__ import annotations

import pytest

from gauntlet.betting.ledger import Ledger
from gauntlet.game.models import Contestant, GameState, Round, Stats
from gauntlet.game.simulator import SimulationResult
from gauntlet.session import GameSession


def _make_contestant(
    cid: str,
    strength: int = 5,
    agility: int = 5,
    intelligence: int = 5,
    deception: int = 5,
    luck: int = 5,
) -> Contestant:
    return Contestant(
        id=cid,
        name=f"Player {cid}",
        personality="Cautious",
        trait="Survivor",
        stats=Stats(
            strength=strength,
            agility=agility,
            intelligence=intelligence,
            deception=deception,
            luck=luck,
        ),
    )


def _make_rounds(*counts: int) -> list[Round]:
    return [
        Round(number=i, name=f"Round {i}", kind="test", description="", elimination_count=n)
        for i, n in enumerate(counts, start=1)
    ]


def eliminate_highest_ids(alive, elimination_count, seed=None) -> SimulationResult:
    """Deterministic simulator: drops the highest numeric ids first."""
    n = max(0, min(elimination_count, len(alive) - 1))
    doomed = {c.id for c in sorted(alive, key=lambda c: -int(c.id))[:n]}
    return SimulationResult(
        survivors=tuple(c for c in alive if c.id not in doomed),
        eliminated=tuple(c for c in alive if c.id in doomed),
    )


@pytest.fixture
def make_contestant():
    """Factory for contestants with uniform default stats."""
    return _make_contestant


@pytest.fixture
def make_rounds():
    """Factory for a schedule from per-round elimination counts."""
    return _make_rounds


@pytest.fixture
def scripted_simulator():
    return eliminate_highest_ids


@pytest.fixture
def ledger():
    """A fresh ledger holding 1000."""
    return Ledger(initial_balance=1000.0)


@pytest.fixture
def game():
    """Contestants "1".."3" over five rounds; only round 3 eliminates anyone."""
    return GameState(
        contestants=[_make_contestant("1"), _make_contestant("2"), _make_contestant("3")],
        rounds=_make_rounds(0, 0, 1, 0, 0),
    )


@pytest.fixture
def session(ledger, game):
    """Session over the small game with the scripted simulator."""
    return GameSession(ledger=ledger, game=game, seed=0, simulator=eliminate_highest_ids)
