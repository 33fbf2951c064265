"""Pydantic request/response models for the Gauntlet API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StatsResponse(BaseModel):
    strength: int
    agility: int
    intelligence: int
    deception: int
    luck: int


class ContestantResponse(BaseModel):
    """A contestant profile with current status."""

    id: str
    name: str
    personality: str
    trait: str
    description: str = ""
    stats: StatsResponse
    status: str
    eliminated_in_round: int | None = None


class CreateGameRequest(BaseModel):
    """Options for a new game session."""

    seed: int | None = None
    initial_balance: float | None = Field(default=None, ge=0)
    narrate: bool = False


class GameResponse(BaseModel):
    """Current state of a game session."""

    session_id: str
    current_round: int
    total_rounds: int
    alive_count: int
    is_complete: bool
    winner_id: str | None = None
    settled: bool
    aborted: bool = False
    contestants: list[ContestantResponse]


class PlaceBetRequest(BaseModel):
    """A stake on one contestant. Omit ``odds`` to take the board price."""

    contestant_id: str
    amount: float = Field(allow_inf_nan=False)
    odds: float | None = Field(default=None, allow_inf_nan=False)


class BetResponse(BaseModel):
    id: str
    contestant_id: str
    amount: float
    odds: float
    potential_payout: float
    placed_at: str
    status: str
    settled_payout: float
    resolved_at: str | None = None


class LedgerResponse(BaseModel):
    """Balance, open bets and history."""

    initial_balance: float
    user_balance: float
    active_bets: dict[str, BetResponse]
    betting_history: list[BetResponse]
    total_winnings: float
    total_losses: float
    settled: bool
    aborted: bool = False


class RoundOutcomeResponse(BaseModel):
    """A committed round."""

    round_number: int
    round_name: str
    eliminated: list[str]
    survivors: list[str]
    seed: int | None = None
    is_complete: bool


class SettlementResponse(BaseModel):
    winner_id: str
    won: list[BetResponse]
    lost: list[BetResponse]
    total_paid: float
    total_lost: float
    balance_after: float
    net_profit: float


class NarrativeResponse(BaseModel):
    round_number: int
    source: str
    lines: list[str]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    sessions: int
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    detail: str
