"""Contest simulation: contestants, rounds, simulator, orchestrator."""

from gauntlet.game.models import Contestant, GameState, Round, RoundOutcome, Stats

__all__ = ["Contestant", "GameState", "Round", "RoundOutcome", "Stats"]
