"""Betting ledger: balance, active bets, history, and the refund path.

The ledger is the authoritative record of a session's money. Funds are
conserved: until settlement, ``user_balance + sum(active stakes)`` always
equals the initial balance. Every mutation runs under the ledger's lock
and validates before it touches state, so a rejected call leaves the ledger
exactly as it was.
"""

from __future__ import annotations

import copy
import math
import threading
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

import pandas as pd

from gauntlet.config import settings
from gauntlet.constants import (
    BET_ACTIVE,
    BET_LOST,
    BET_REFUNDED,
    BET_WON,
    MONEY_EPSILON,
)
from gauntlet.errors import (
    BetNotFound,
    GameAlreadyComplete,
    InsufficientFunds,
    InvalidContestant,
    InvalidStake,
    InvariantViolation,
    RefundNotAllowed,
)
from gauntlet.game.models import GameState
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


def _new_bet_id() -> str:
    return f"bet_{uuid.uuid4().hex[:12]}"


@dataclass
class Bet:
    """A stake on one contestant. ``potential_payout`` is frozen at placement."""

    id: str
    contestant_id: str
    amount: float
    odds: float
    potential_payout: float
    placed_at: datetime
    status: str = BET_ACTIVE
    settled_payout: float = 0.0
    resolved_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == BET_ACTIVE

    def to_dict(self) -> dict:
        data = asdict(self)
        data["placed_at"] = self.placed_at.isoformat()
        data["resolved_at"] = self.resolved_at.isoformat() if self.resolved_at else None
        return data


@dataclass
class BettingStats:
    """Aggregate view of a ledger's history."""

    total_bets_placed: int
    total_amount_bet: float
    bets_won: int
    bets_lost: int
    bets_refunded: int
    win_rate: float  # won / (won + lost)
    net_profit: float  # total_winnings - total_losses
    average_bet_size: float


@dataclass
class Ledger:
    """Balance and bets for a single game session.

    Parameters
    ----------
    initial_balance : float
        Starting balance. Defaults to ``settings.initial_balance``.
    """

    initial_balance: float = settings.initial_balance
    user_balance: float = field(init=False)
    active_bets: dict[str, Bet] = field(init=False, default_factory=dict)
    betting_history: list[Bet] = field(init=False, default_factory=list)
    total_winnings: float = field(init=False, default=0.0)
    total_losses: float = field(init=False, default=0.0)
    settled: bool = field(init=False, default=False)
    aborted: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        if self.initial_balance < 0:
            raise ValueError("initial_balance must be non-negative")
        self.user_balance = self.initial_balance
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Critical section shared by every ledger mutation."""
        return self._lock

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place_bet(
        self,
        game: GameState,
        contestant_id: str,
        amount: float,
        odds: float,
    ) -> Bet:
        """Stake ``amount`` on ``contestant_id`` at ``odds``.

        Raises
        ------
        GameAlreadyComplete
            The game is over, or this ledger was settled or aborted.
        InvalidStake
            ``amount <= 0``, ``odds < 1``, or a non-finite stake, odds or payout.
        InvalidContestant
            Unknown or eliminated contestant.
        InsufficientFunds
            ``amount`` exceeds the current balance.
        """
        with self._lock:
            if self.aborted:
                raise GameAlreadyComplete("betting is closed: the game was aborted")
            if self.settled or game.is_complete():
                raise GameAlreadyComplete("betting is closed: the game is complete")
            if not (math.isfinite(amount) and amount > 0):
                raise InvalidStake(f"bet amount must be a positive number, got {amount}")
            if not (math.isfinite(odds) and odds >= 1):
                raise InvalidStake(f"odds must be a finite number of at least 1, got {odds}")
            if not math.isfinite(amount * odds):
                raise InvalidStake(f"payout of {amount} at {odds} is not representable")

            contestant = game.get_contestant(contestant_id)
            if contestant is None:
                raise InvalidContestant(f"unknown contestant {contestant_id!r}")
            if not contestant.is_alive:
                raise InvalidContestant(f"contestant {contestant_id!r} is already eliminated")

            if amount > self.user_balance:
                raise InsufficientFunds(
                    f"insufficient balance: {self.user_balance:.2f} < {amount:.2f}"
                )

            bet = Bet(
                id=_new_bet_id(),
                contestant_id=contestant_id,
                amount=amount,
                odds=odds,
                potential_payout=amount * odds,
                placed_at=datetime.now(timezone.utc),
            )
            self.user_balance -= amount
            self.active_bets[bet.id] = bet
            self.betting_history.append(bet)
            self.check_invariants()

        log.info(
            "bet_placed",
            bet_id=bet.id,
            contestant_id=contestant_id,
            amount=amount,
            odds=odds,
            potential_payout=bet.potential_payout,
            balance=self.user_balance,
        )
        return bet

    # ------------------------------------------------------------------
    # Refund path: before the first round, or after an abort.
    # Never triggered automatically.
    # ------------------------------------------------------------------

    def refund_bet(self, bet_id: str, game: GameState | None = None) -> Bet:
        """Return an active bet's stake and mark it ``refunded``.

        Allowed once the ledger is aborted, or while ``game`` has not played
        its first round. Once rounds are under way, bets only resolve
        through settlement.
        """
        with self._lock:
            if not self.aborted and (game is None or game.current_round > 0):
                raise RefundNotAllowed(
                    "bets can only be refunded before the first round or after an abort"
                )
            bet = self.active_bets.get(bet_id)
            if bet is None:
                raise BetNotFound(f"no active bet with id {bet_id!r}")

            del self.active_bets[bet_id]
            bet.status = BET_REFUNDED
            bet.settled_payout = bet.amount
            bet.resolved_at = datetime.now(timezone.utc)
            self.user_balance += bet.amount
            self.check_invariants()

        log.info("bet_refunded", bet_id=bet_id, amount=bet.amount, balance=self.user_balance)
        return bet

    def refund_all(self, game: GameState | None = None) -> list[Bet]:
        """Refund every active bet (same rules as ``refund_bet``)."""
        with self._lock:
            return [self.refund_bet(bet_id, game) for bet_id in list(self.active_bets)]

    def abort(self) -> list[Bet]:
        """Close the ledger without settling and refund every active bet.

        An aborted ledger takes no more bets and can never be settled.
        """
        with self._lock:
            if self.settled:
                raise GameAlreadyComplete("bets for this game were already settled")
            self.aborted = True
            refunded = self.refund_all()
        log.info("ledger_aborted", refunded=len(refunded), balance=self.user_balance)
        return refunded

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def active_stake(self) -> float:
        return sum(bet.amount for bet in self.active_bets.values())

    def get_bet(self, bet_id: str) -> Bet:
        for bet in self.betting_history:
            if bet.id == bet_id:
                return bet
        raise BetNotFound(f"no bet with id {bet_id!r}")

    def check_invariants(self) -> None:
        """Raise ``InvariantViolation`` if the ledger is inconsistent."""
        if not math.isfinite(self.user_balance):
            raise InvariantViolation(f"non-finite balance {self.user_balance}")
        if self.user_balance < -MONEY_EPSILON:
            raise InvariantViolation(f"negative balance {self.user_balance}")
        for bet_id, bet in self.active_bets.items():
            if bet.status != BET_ACTIVE:
                raise InvariantViolation(f"non-active bet {bet_id} in active_bets")
        if not self.settled:
            held = self.user_balance + self.active_stake
            if abs(held - self.initial_balance) > MONEY_EPSILON:
                raise InvariantViolation(
                    f"funds not conserved: balance + active stakes = {held}, "
                    f"initial = {self.initial_balance}"
                )

    def stats(self) -> BettingStats:
        """Compute aggregate betting statistics."""
        history = self.betting_history
        won = sum(1 for b in history if b.status == BET_WON)
        lost = sum(1 for b in history if b.status == BET_LOST)
        refunded = sum(1 for b in history if b.status == BET_REFUNDED)
        total_amount = sum(b.amount for b in history)

        return BettingStats(
            total_bets_placed=len(history),
            total_amount_bet=total_amount,
            bets_won=won,
            bets_lost=lost,
            bets_refunded=refunded,
            win_rate=won / (won + lost) if (won + lost) else 0.0,
            net_profit=self.total_winnings - self.total_losses,
            average_bet_size=total_amount / len(history) if history else 0.0,
        )

    def snapshot(self) -> dict:
        """Deep plain-data copy of the ledger state."""
        with self._lock:
            return copy.deepcopy({
                "initial_balance": self.initial_balance,
                "user_balance": self.user_balance,
                "active_bets": {k: b.to_dict() for k, b in self.active_bets.items()},
                "betting_history": [b.to_dict() for b in self.betting_history],
                "total_winnings": self.total_winnings,
                "total_losses": self.total_losses,
                "settled": self.settled,
                "aborted": self.aborted,
            })

    def to_dataframe(self) -> pd.DataFrame:
        """Convert betting history to a DataFrame."""
        if not self.betting_history:
            return pd.DataFrame()
        return pd.DataFrame([
            {
                "bet_id": b.id,
                "contestant_id": b.contestant_id,
                "amount": b.amount,
                "odds": b.odds,
                "potential_payout": b.potential_payout,
                "status": b.status,
                "settled_payout": b.settled_payout,
                "placed_at": b.placed_at,
                "resolved_at": b.resolved_at,
            }
            for b in self.betting_history
        ])


def validate_bet(amount: float, balance: float, odds: float) -> list[str]:
    """Advisory checks for a prospective bet (UI hints, not enforced).

    Returns a list of human-readable problems; empty means the bet looks fine.
    """
    errors: list[str] = []
    if amount <= 0:
        errors.append("Bet amount must be positive")
    if amount > balance:
        errors.append("Insufficient balance")
    if odds <= 1:
        errors.append("Odds must be greater than 1")
    if 0 < amount < settings.min_bet:
        errors.append(f"Minimum bet is {settings.min_bet:.2f}")
    if amount > balance * settings.max_bet_fraction:
        errors.append(
            f"Cannot bet more than {settings.max_bet_fraction:.0%} of balance in one bet"
        )
    return errors
