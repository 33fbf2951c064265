"""Game sessions: one ledger plus one game, threaded explicitly.

A ``GameSession`` bundles everything a single contest needs (ledger, game
state, orchestrator, settlement engine and optional collaborators). There
is no module-level game: callers hold their session and pass it around, so
any number of independent sessions can run side by side.

The module-level functions are the library boundary used by the API and
CLI layers.
"""

from __future__ import annotations

import uuid

from gauntlet.betting.ledger import Bet, Ledger
from gauntlet.betting.odds import OddsModel, default_odds_model
from gauntlet.betting.settlement import SettlementEngine, SettlementReport
from gauntlet.chain.recorder import ChainRecorder
from gauntlet.config import settings
from gauntlet.errors import GameAlreadyComplete, GameNotComplete
from gauntlet.game.models import Contestant, GameState, Round, RoundOutcome
from gauntlet.game.orchestrator import GameOrchestrator, Simulator
from gauntlet.game.roster import default_contestants, default_rounds
from gauntlet.narrative.dispatcher import NarrativeDispatcher
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


def initialize_betting_state(initial_balance: float | None = None) -> Ledger:
    """Fresh ledger with the configured starting balance."""
    return Ledger(
        initial_balance=settings.initial_balance if initial_balance is None else initial_balance
    )


def new_game(
    contestants: list[Contestant] | None = None,
    rounds: list[Round] | None = None,
) -> GameState:
    """Fresh game state; defaults to the standard roster and schedule."""
    return GameState(
        contestants=contestants if contestants is not None else default_contestants(),
        rounds=rounds if rounds is not None else default_rounds(),
    )


def place_bet(
    ledger: Ledger,
    game: GameState,
    contestant_id: str,
    amount: float,
    odds: float,
) -> tuple[Ledger, Bet]:
    """Place a bet; the ledger is updated in place and returned with the bet."""
    bet = ledger.place_bet(game, contestant_id, amount, odds)
    return ledger, bet


class GameSession:
    """A single contest with its wagering ledger.

    Parameters
    ----------
    ledger, game : optional
        Pre-built state; defaults come from configuration and the roster.
    seed : int, optional
        Seed for elimination sampling. ``None`` uses OS entropy.
    simulator : callable, optional
        Replacement round simulator (tests, alternative policies).
    narrative : NarrativeDispatcher, optional
        Receives every committed round outcome.
    recorder : ChainRecorder, optional
        Mirrors finalized bets after settlement.
    """

    def __init__(
        self,
        ledger: Ledger | None = None,
        game: GameState | None = None,
        seed: int | None = None,
        simulator: Simulator | None = None,
        odds_model: OddsModel | None = None,
        narrative: NarrativeDispatcher | None = None,
        recorder: ChainRecorder | None = None,
        session_id: str | None = None,
    ):
        self.id = session_id or uuid.uuid4().hex[:12]
        self.ledger = ledger or initialize_betting_state()
        self.game = game or new_game()
        self.orchestrator = GameOrchestrator(self.game, simulator=simulator, seed=seed)
        self.settlement = SettlementEngine()
        self.odds_model = odds_model or default_odds_model
        self.narrative = narrative
        self.recorder = recorder
        self.report: SettlementReport | None = None
        self.chain_receipts: dict[str, str] = {}

        if narrative is not None:
            self.orchestrator.add_listener(narrative.submit)

        log.info(
            "session_created",
            session_id=self.id,
            contestants=len(self.game.contestants),
            rounds=self.game.total_rounds,
            balance=self.ledger.user_balance,
            seed=seed,
        )

    @property
    def lock(self):
        return self.ledger.lock

    def odds(self) -> dict[str, float]:
        """Current odds board for the alive contestants."""
        return self.odds_model.compute_all_odds(self.game.contestants)

    def place_bet(self, contestant_id: str, amount: float, odds: float | None = None) -> Bet:
        """Bet at the given odds, or at the current board price when omitted."""
        with self.lock:
            if odds is None:
                # Off the board means unknown or eliminated; the ledger rejects it.
                odds = self.odds().get(contestant_id, 1.0)
            return self.ledger.place_bet(self.game, contestant_id, amount, odds)

    def refund_bet(self, bet_id: str) -> Bet:
        """Refund a bet before the first round (or after an abort)."""
        return self.ledger.refund_bet(bet_id, self.game)

    @property
    def aborted(self) -> bool:
        return self.ledger.aborted

    def abort(self) -> list[Bet]:
        """Abandon the contest: refund every active bet, never settle.

        No more bets, rounds or settlement are accepted afterwards.
        """
        refunded = self.ledger.abort()
        log.info("session_aborted", session_id=self.id, refunded=len(refunded))
        return refunded

    def advance_round(self) -> RoundOutcome:
        with self.lock:
            if self.ledger.aborted:
                raise GameAlreadyComplete("the game was aborted")
            return self.orchestrator.advance()

    def is_complete(self) -> bool:
        return self.orchestrator.is_complete()

    def winner(self) -> Contestant:
        return self.orchestrator.winner()

    def settle(self) -> SettlementReport:
        """Settle every active bet against the winner, exactly once."""
        with self.lock:
            if self.ledger.aborted:
                raise GameAlreadyComplete("the game was aborted; its bets were refunded")
            if not self.ledger.settled and not self.is_complete():
                raise GameNotComplete(
                    f"cannot settle during round {self.game.current_round} "
                    f"of {self.game.total_rounds}"
                )
            winner = self.winner()
            self.report = self.settlement.settle(self.ledger, winner.id)

        if self.recorder is not None:
            self.chain_receipts = self.recorder.record_settlement(self.ledger)
        return self.report

    def close(self) -> None:
        """Release the HTTP clients held by collaborators."""
        if self.narrative is not None:
            self.narrative.close()
        if self.recorder is not None:
            self.recorder.close()

    def summary(self) -> dict:
        """Plain-data view of the session for API and CLI output."""
        game = self.game
        return {
            "session_id": self.id,
            "current_round": game.current_round,
            "total_rounds": game.total_rounds,
            "alive_count": game.alive_count,
            "is_complete": game.is_complete(),
            "winner_id": self.winner().id if game.is_complete() else None,
            "settled": self.ledger.settled,
            "aborted": self.ledger.aborted,
            "contestants": [c.profile() for c in game.contestants],
        }


def advance_round(
    game: GameState,
    seed: int | None = None,
    simulator: Simulator | None = None,
) -> RoundOutcome:
    """Play the next round of a bare game state.

    The same state and seed always produce the same eliminations.
    """
    return GameOrchestrator(game, simulator=simulator, seed=seed).advance()


def settle_game(ledger: Ledger, game: GameState) -> Ledger:
    """Settle every active bet against the winner of a finished game.

    Raises ``GameNotComplete`` while rounds remain and ``GameAlreadyComplete``
    if the ledger was already settled (or aborted).
    """
    SettlementEngine().settle(ledger, game.winner().id)
    return ledger
