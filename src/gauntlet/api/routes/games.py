"""Game session endpoints: lifecycle, odds, ledger, rounds, settlement."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from gauntlet.api.schemas import (
    CreateGameRequest,
    GameResponse,
    LedgerResponse,
    NarrativeResponse,
    RoundOutcomeResponse,
    SettlementResponse,
)
from gauntlet.api.services import get_session_registry

router = APIRouter()


@router.post("/games", response_model=GameResponse, status_code=201)
def create_game(request: CreateGameRequest | None = None) -> dict:
    """Start a new session with a fresh ledger and the default roster."""
    request = request or CreateGameRequest()
    session = get_session_registry().create(
        seed=request.seed,
        initial_balance=request.initial_balance,
        narrate=request.narrate,
    )
    return session.summary()


@router.get("/games/{session_id}", response_model=GameResponse)
def get_game(session_id: str) -> dict:
    return get_session_registry().get(session_id).summary()


@router.delete("/games/{session_id}", response_model=LedgerResponse)
def abort_game(session_id: str) -> dict:
    """Abandon a session: refund every active bet and drop it."""
    registry = get_session_registry()
    session = registry.get(session_id)
    if not session.ledger.settled:
        session.abort()
    registry.discard(session_id)
    return session.ledger.snapshot()


@router.get("/games/{session_id}/odds", response_model=dict[str, float])
def get_odds(session_id: str) -> dict:
    """Current odds board for alive contestants."""
    return get_session_registry().get(session_id).odds()


@router.get("/games/{session_id}/ledger", response_model=LedgerResponse)
def get_ledger(session_id: str) -> dict:
    return get_session_registry().get(session_id).ledger.snapshot()


@router.post("/games/{session_id}/rounds", response_model=RoundOutcomeResponse)
def advance_round(session_id: str) -> dict:
    """Play the next round."""
    session = get_session_registry().get(session_id)
    outcome = session.advance_round()
    return {
        "round_number": outcome.round_number,
        "round_name": outcome.round.name,
        "eliminated": outcome.eliminated_ids,
        "survivors": outcome.survivor_ids,
        "seed": outcome.seed,
        "is_complete": session.is_complete(),
    }


@router.post("/games/{session_id}/settle", response_model=SettlementResponse)
def settle_game(session_id: str) -> dict:
    """Settle all active bets against the winner (once)."""
    report = get_session_registry().get(session_id).settle()
    return {
        "winner_id": report.winner_id,
        "won": [b.to_dict() for b in report.won],
        "lost": [b.to_dict() for b in report.lost],
        "total_paid": report.total_paid,
        "total_lost": report.total_lost,
        "balance_after": report.balance_after,
        "net_profit": report.net_profit,
    }


@router.get("/games/{session_id}/narratives/{round_number}", response_model=NarrativeResponse)
async def get_narrative(session_id: str, round_number: int) -> dict:
    """Narrative for a committed round (generated on first request)."""
    session = get_session_registry().get(session_id)
    if session.narrative is None:
        raise HTTPException(status_code=404, detail="narration is disabled for this game")
    await session.narrative.drain()
    narrative = session.narrative.narratives.get(round_number)
    if narrative is None:
        raise HTTPException(status_code=404, detail=f"no narrative for round {round_number}")
    return {
        "round_number": narrative.round_number,
        "source": narrative.source,
        "lines": narrative.lines,
    }
