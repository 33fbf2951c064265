"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from gauntlet.api.schemas import HealthResponse
from gauntlet.api.services import get_session_registry

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check() -> dict:
    """Return API health status."""
    registry = get_session_registry()
    return {
        "status": "ok",
        "sessions": len(registry),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
