"""
FastAPI application factory.

Collaborators (datastore, identity provider, resume store) are built here
and kept on ``app.state``; tests pass their own.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health
from api.routes.v1 import applications, jobs, profile
from api.routes.health import VERSION
from core.config import Settings, get_settings
from core.identity import JWTIdentityProvider
from core.middleware import (
    AuthenticationMiddleware,
    ErrorHandlingMiddleware,
    RequestTimeoutMiddleware,
    StructuredLoggingMiddleware,
    setup_error_handlers,
    setup_logging,
)
from core.storage.factory import ResumeStore, create_resume_store
from database.engine import Database

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    identity_provider: Optional[JWTIdentityProvider] = None,
    resume_store: Optional[ResumeStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(
        settings.database_url,
        echo=settings.database_echo,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    identity_provider = identity_provider or JWTIdentityProvider(
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
    )
    resume_store = resume_store or create_resume_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
        await database.init()

        yield

        logger.info(f"Shutting down {settings.app_name}")
        await database.close()

    app = FastAPI(
        title=settings.app_name,
        description="Job marketplace API: postings, one-click applications and recruiter review",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.identity_provider = identity_provider
    app.state.resume_store = resume_store

    setup_error_handlers(app, debug=settings.debug)

    # add_middleware wraps, so the last one added runs first:
    # CORS -> error handling -> logging -> timeout -> authentication -> routes
    app.add_middleware(AuthenticationMiddleware, identity_provider=identity_provider)
    app.add_middleware(
        RequestTimeoutMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
    )
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        max_body_size=settings.log_max_body_size,
    )
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["health"])

    # API v1 routes
    app.include_router(applications.router, prefix=settings.api_v1_prefix)
    app.include_router(jobs.router, prefix=settings.api_v1_prefix)
    app.include_router(profile.router, prefix=settings.api_v1_prefix)

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)
    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
