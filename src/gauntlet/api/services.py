"""Session registry: shared state for the API layer.

Holds every live ``GameSession`` keyed by id. Designed as a singleton;
call ``get_session_registry()`` to obtain the shared instance.
"""

from __future__ import annotations

import threading

from gauntlet.chain.recorder import ChainRecorder
from gauntlet.config import settings
from gauntlet.narrative.client import NarrativeClient
from gauntlet.narrative.dispatcher import NarrativeDispatcher
from gauntlet.session import GameSession, initialize_betting_state, new_game
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


class SessionNotFound(KeyError):
    """No session with the requested id."""


class SessionRegistry:
    """In-memory registry of game sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create(
        self,
        seed: int | None = None,
        initial_balance: float | None = None,
        narrate: bool = False,
    ) -> GameSession:
        game = new_game()
        narrative = None
        if narrate:
            narrative = NarrativeDispatcher(NarrativeClient(total_rounds=game.total_rounds))
        recorder = ChainRecorder() if settings.chain_enabled else None

        session = GameSession(
            ledger=initialize_betting_state(initial_balance),
            game=game,
            seed=seed,
            narrative=narrative,
            recorder=recorder,
        )
        if recorder is not None:
            recorder.game_id = session.id
        with self._lock:
            self._sessions[session.id] = session
            evicted = self._evict_finished()
        for old in evicted:
            old.close()
            log.info("session_evicted", session_id=old.id)
        return session

    def _evict_finished(self) -> list[GameSession]:
        """Drop the oldest settled or aborted sessions beyond ``max_sessions``.

        Caller holds ``_lock``. Live sessions are never evicted.
        """
        excess = len(self._sessions) - settings.max_sessions
        if excess <= 0:
            return []
        finished = [
            s for s in self._sessions.values()
            if s.ledger.settled or s.ledger.aborted
        ][:excess]
        for session in finished:
            del self._sessions[session.id]
        return finished

    def get(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def discard(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()
        log.info("session_discarded", session_id=session_id)

    def __len__(self) -> int:
        return len(self._sessions)


_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """Get or create the singleton SessionRegistry."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry
