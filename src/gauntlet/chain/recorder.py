"""On-chain mirror of finalized bets.

Posts each settled (or refunded) bet to a recording relay that writes it to
the chain and answers with a transaction hash. The ledger stays the source
of truth; a failed recording is logged and skipped, never retried into the
engine.
"""

from __future__ import annotations

import httpx

from gauntlet.betting.ledger import Bet, Ledger
from gauntlet.config import settings
from gauntlet.constants import BET_TERMINAL_STATUSES
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


class ChainRecorder:
    """Client for the bet-recording relay."""

    def __init__(
        self,
        relay_url: str | None = None,
        game_id: str = "",
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.relay_url = (settings.chain_relay_url if relay_url is None else relay_url).rstrip("/")
        self.game_id = game_id
        self.client = httpx.Client(
            timeout=timeout or settings.chain_timeout, transport=transport
        )

    def record_on_chain(self, bet: Bet) -> str | None:
        """Record one finalized bet. Returns the transaction reference.

        Returns None when no relay is configured.
        """
        if bet.status not in BET_TERMINAL_STATUSES:
            raise ValueError(f"bet {bet.id} is still active; only finalized bets are recorded")
        if not self.relay_url:
            log.warning("chain_relay_not_set", bet_id=bet.id)
            return None

        response = self.client.post(
            f"{self.relay_url}/bets",
            json={"game_id": self.game_id, **bet.to_dict()},
        )
        response.raise_for_status()
        tx_hash = response.json()["tx_hash"]
        log.info("bet_recorded_on_chain", bet_id=bet.id, status=bet.status, tx_hash=tx_hash)
        return tx_hash

    def record_settlement(self, ledger: Ledger) -> dict[str, str]:
        """Record every finalized bet in ``ledger``'s history.

        Returns ``{bet_id: tx_hash}`` for the bets that were recorded.
        """
        recorded: dict[str, str] = {}
        for bet in ledger.betting_history:
            if bet.is_active:
                continue
            try:
                tx_hash = self.record_on_chain(bet)
            except (httpx.HTTPError, KeyError, ValueError) as exc:
                log.error("chain_record_failed", bet_id=bet.id, error=str(exc))
                continue
            if tx_hash:
                recorded[bet.id] = tx_hash
        return recorded

    def close(self) -> None:
        self.client.close()
