"""FastAPI application factory for the Gauntlet API.

Start with::

    uv run gauntlet api serve
    # or directly:
    uvicorn gauntlet.api.app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gauntlet.api.routes.bets import router as bets_router
from gauntlet.api.routes.games import router as games_router
from gauntlet.api.routes.health import router as health_router
from gauntlet.api.routes.roster import router as roster_router
from gauntlet.api.services import SessionNotFound
from gauntlet.errors import (
    BetNotFound,
    GameAlreadyComplete,
    GameNotComplete,
    GauntletError,
    RefundNotAllowed,
)
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)


def _status_for(exc: GauntletError) -> int:
    if isinstance(exc, BetNotFound):
        return 404
    if isinstance(exc, (GameAlreadyComplete, GameNotComplete, RefundNotAllowed)):
        return 409
    return 400


async def gauntlet_error_handler(request: Request, exc: GauntletError) -> JSONResponse:
    log.info("request_rejected", path=request.url.path, error=type(exc).__name__, detail=str(exc))
    return JSONResponse(
        status_code=_status_for(exc),
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


async def session_not_found_handler(request: Request, exc: SessionNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "SessionNotFound", "detail": f"no game session {exc.args[0]!r}"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Gauntlet Contest API",
        version="1.0.0",
        description="Elimination contest simulation with a wagering ledger",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(GauntletError, gauntlet_error_handler)
    application.add_exception_handler(SessionNotFound, session_not_found_handler)

    # Register route groups
    application.include_router(health_router, tags=["Health"])
    application.include_router(roster_router, prefix="/api", tags=["Roster"])
    application.include_router(games_router, prefix="/api", tags=["Games"])
    application.include_router(bets_router, prefix="/api", tags=["Bets"])

    return application


app = create_app()
