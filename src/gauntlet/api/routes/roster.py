"""Default roster endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from gauntlet.api.schemas import ContestantResponse
from gauntlet.game.roster import default_contestants

router = APIRouter()


@router.get("/roster", response_model=list[ContestantResponse])
def get_roster() -> list[dict]:
    """Return the standard contestant roster."""
    return [c.profile() for c in default_contestants()]
