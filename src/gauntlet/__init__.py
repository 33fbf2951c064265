"""Gauntlet: an elimination contest with a wagering ledger.

Quick start::

    from gauntlet import GameSession

    session = GameSession(seed=7)
    session.place_bet("hana", 100)
    while not session.is_complete():
        session.advance_round()
    report = session.settle()
"""

from gauntlet.session import (
    GameSession,
    advance_round,
    initialize_betting_state,
    new_game,
    place_bet,
    settle_game,
)

__all__ = [
    "GameSession",
    "advance_round",
    "initialize_betting_state",
    "new_game",
    "place_bet",
    "settle_game",
]
