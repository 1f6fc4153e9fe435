"""FastAPI dependencies for dependency injection."""

from typing import AsyncIterator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.errors import Unauthenticated
from core.identity import Identity
from core.storage.factory import ResumeStore
from database.engine import Database

AUTH_ERROR_MESSAGES = {
    "TOKEN_EXPIRED": "Session has expired. Please sign in again.",
    "TOKEN_INVALID": "Invalid session token.",
}


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    """Request-scoped session, closed when the response is done."""
    async with database.sessionmaker() as session:
        yield session


def get_resume_store(request: Request) -> ResumeStore:
    return request.app.state.resume_store


def get_optional_identity(request: Request) -> Optional[Identity]:
    """
    The caller's identity, or None for anonymous requests.

    Resolved once per request by AuthenticationMiddleware.
    """
    return getattr(request.state, "identity", None)


def require_identity(request: Request) -> Identity:
    """Require a valid session; raises UNAUTHENTICATED otherwise."""
    identity = get_optional_identity(request)
    if identity is None:
        auth_error = getattr(request.state, "auth_error", None)
        raise Unauthenticated(AUTH_ERROR_MESSAGES.get(auth_error, "Authentication required"))
    return identity
