import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from leavedesk.config import get_settings
from leavedesk.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service and record store status."""

    status: Literal["ok", "degraded"]
    store: Literal["reachable", "unreachable"]
    version: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report whether the record store answers."""
    settings = get_settings()
    reachable = True

    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        logger.exception("Health check: record store unreachable")
        reachable = False

    return HealthResponse(
        status="ok" if reachable else "degraded",
        store="reachable" if reachable else "unreachable",
        version=settings.app_version,
        environment=settings.environment,
    )
