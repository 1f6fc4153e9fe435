"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies import get_database
from core.errors import UpstreamFailure
from database.engine import Database

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness: the process is serving requests."""
    return HealthResponse(status="healthy", version=VERSION)


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(database: Database = Depends(get_database)):
    """Readiness: the datastore answers."""
    try:
        await database.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Readiness check failed: {type(e).__name__}")
        raise UpstreamFailure("Database is not reachable") from e
    return HealthResponse(status="ready", version=VERSION)
