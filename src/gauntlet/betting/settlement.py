"""Settlement: one-time resolution of every active bet against the winner.

Bets on the winner pay their frozen ``potential_payout``; every other
active bet is lost (its stake already left the balance at placement). The
pass runs at most once per ledger; a second attempt is rejected with
``GameAlreadyComplete`` and pays nothing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from gauntlet.constants import BET_LOST, BET_WON, MONEY_EPSILON
from gauntlet.errors import GameAlreadyComplete, InvariantViolation
from gauntlet.betting.ledger import Bet, Ledger
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class SettlementReport:
    """What a settlement pass did."""

    winner_id: str
    won: list[Bet] = field(default_factory=list)
    lost: list[Bet] = field(default_factory=list)
    total_paid: float = 0.0
    total_lost: float = 0.0
    balance_before: float = 0.0
    balance_after: float = 0.0

    @property
    def net_profit(self) -> float:
        return self.total_paid - self.total_lost


class SettlementEngine:
    """Resolves a ledger's active bets exactly once."""

    def settle(self, ledger: Ledger, winner_id: str) -> SettlementReport:
        with ledger.lock:
            if ledger.settled:
                raise GameAlreadyComplete("bets for this game were already settled")
            if ledger.aborted:
                raise GameAlreadyComplete("the game was aborted; its bets were refunded")

            report = SettlementReport(
                winner_id=winner_id, balance_before=ledger.user_balance
            )
            now = datetime.now(timezone.utc)

            # History holds the same Bet objects, so status updates land there too.
            for bet in list(ledger.active_bets.values()):
                if bet.contestant_id == winner_id:
                    bet.status = BET_WON
                    bet.settled_payout = bet.potential_payout
                    ledger.user_balance += bet.potential_payout
                    ledger.total_winnings += bet.potential_payout
                    report.won.append(bet)
                    report.total_paid += bet.potential_payout
                else:
                    bet.status = BET_LOST
                    bet.settled_payout = 0.0
                    ledger.total_losses += bet.amount
                    report.lost.append(bet)
                    report.total_lost += bet.amount
                bet.resolved_at = now

            ledger.active_bets.clear()
            ledger.settled = True
            report.balance_after = ledger.user_balance

            expected = report.balance_before + report.total_paid
            if not math.isfinite(ledger.user_balance) or (
                abs(ledger.user_balance - expected) > MONEY_EPSILON
            ):
                raise InvariantViolation(
                    f"settlement created or destroyed funds: "
                    f"{ledger.user_balance} != {expected}"
                )
            ledger.check_invariants()

        log.info(
            "bets_settled",
            winner_id=winner_id,
            won=len(report.won),
            lost=len(report.lost),
            total_paid=report.total_paid,
            total_lost=report.total_lost,
            balance=report.balance_after,
        )
        return report
