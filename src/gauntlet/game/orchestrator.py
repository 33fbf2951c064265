"""Game orchestrator: drives rounds, detects completion, names the winner.

State machine over ``current_round`` in ``[0, total_rounds]``. Each
``advance()`` runs one round through the simulator, commits the status
changes to the game state, and only then notifies listeners (narrative,
logging, UI). Listeners see committed outcomes and cannot influence them.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from datetime import datetime, timezone

import numpy as np

from gauntlet.errors import GameAlreadyComplete, InvariantViolation
from gauntlet.game.models import Contestant, GameState, RoundOutcome
from gauntlet.game.simulator import SeedLike, SimulationResult, simulate_round
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)

Simulator = Callable[[list[Contestant], int, SeedLike], SimulationResult]
RoundListener = Callable[[RoundOutcome], None]


class GameOrchestrator:
    """Owns a GameState and advances it one round at a time.

    Parameters
    ----------
    game : GameState
        State to mutate in place.
    simulator : callable, optional
        ``(alive, elimination_count, seed) -> SimulationResult``.
        Defaults to :func:`simulate_round`.
    seed : int, optional
        Seeds the stream of per-round seeds. ``None`` uses OS entropy.
    """

    def __init__(
        self,
        game: GameState,
        simulator: Simulator | None = None,
        seed: int | None = None,
    ):
        self.game = game
        self.simulator = simulator or simulate_round
        self.seed = seed
        self._seed_stream = np.random.default_rng(seed)
        self._listeners: list[RoundListener] = []

    def add_listener(self, listener: RoundListener) -> None:
        """Register a callback invoked with each committed RoundOutcome."""
        self._listeners.append(listener)

    def is_complete(self) -> bool:
        return self.game.is_complete()

    def advance(self) -> RoundOutcome:
        """Play the next round and commit its eliminations."""
        game = self.game
        if game.is_complete():
            raise GameAlreadyComplete(
                f"game finished after round {game.current_round}"
            )

        round_number = game.current_round + 1
        round_ = game.round_at(round_number)
        alive = game.alive()
        round_seed = int(self._seed_stream.integers(0, 2**32))

        result = self.simulator(alive, round_.elimination_count, round_seed)
        alive_ids = {c.id for c in alive}
        eliminated_ids = [c.id for c in result.eliminated]
        if not set(eliminated_ids) <= alive_ids or len(eliminated_ids) >= len(alive):
            raise InvariantViolation(
                f"round {round_number} produced an invalid elimination set {eliminated_ids}"
            )

        # Commit
        for contestant_id in eliminated_ids:
            game.get_contestant(contestant_id).eliminate(round_number)
        game.current_round = round_number

        outcome = RoundOutcome(
            round=round_,
            survivors=tuple(dataclasses.replace(c) for c in game.alive()),
            eliminated=tuple(
                dataclasses.replace(game.get_contestant(cid)) for cid in eliminated_ids
            ),
            seed=round_seed,
            committed_at=datetime.now(timezone.utc),
        )
        game.outcomes.append(outcome)

        log.info(
            "round_committed",
            round=round_number,
            name=round_.name,
            eliminated=eliminated_ids,
            alive=game.alive_count,
            complete=game.is_complete(),
        )

        self._notify(outcome)
        return outcome

    def winner(self) -> Contestant:
        """The sole survivor, or the lowest-id survivor after the final round."""
        return self.game.winner()

    def run_to_completion(self) -> list[RoundOutcome]:
        """Advance until the game is complete; return the new outcomes."""
        outcomes = []
        while not self.is_complete():
            outcomes.append(self.advance())
        return outcomes

    def _notify(self, outcome: RoundOutcome) -> None:
        for listener in self._listeners:
            try:
                listener(outcome)
            except Exception as exc:
                log.error(
                    "round_listener_failed",
                    round=outcome.round_number,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(exc),
                )
