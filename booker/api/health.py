"""
Health check endpoints.

`/health` answers as long as the process is up. `/ready` also checks the
SQL database holding the byte store, the key/value table where the
collection and the API key are persisted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booker.db.database import get_session

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Probe result; `database` is only reported by the readiness probe."""

    status: str
    database: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not touch the byte store."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[Session, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Runs `SELECT 1` against the byte store database. If it fails, no
    record or API key command could persist, so this returns 503.
    """
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")
    return HealthResponse(status="ready", database="connected")
