"""Bet placement and refund endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from gauntlet.api.schemas import BetResponse, PlaceBetRequest
from gauntlet.api.services import get_session_registry

router = APIRouter()


@router.post("/games/{session_id}/bets", response_model=BetResponse, status_code=201)
def place_bet(session_id: str, request: PlaceBetRequest) -> dict:
    """Stake on a contestant; odds default to the current board price."""
    session = get_session_registry().get(session_id)
    bet = session.place_bet(request.contestant_id, request.amount, request.odds)
    return bet.to_dict()


@router.post("/games/{session_id}/bets/{bet_id}/refund", response_model=BetResponse)
def refund_bet(session_id: str, bet_id: str) -> dict:
    """Refund an active bet before the first round is played."""
    session = get_session_registry().get(session_id)
    return session.refund_bet(bet_id).to_dict()
