"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routes and lifespan events.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from psycopg_pool import ConnectionPool

from craftconnect.adapters.repository.memory import InMemoryAccountRepository
from craftconnect.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from craftconnect.api.dependencies import init_services
from craftconnect.api.v1 import router as v1_router
from craftconnect.config.settings import get_settings
from craftconnect.domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "CraftConnect Onboarding API v1 - Register professionals and customers, log in",
    },
]


async def sweep_expired(app: FastAPI, interval_seconds: float) -> None:
    """Periodically drop expired OTP challenges and stale pending registrations."""
    while True:
        await asyncio.sleep(interval_seconds)
        otps = app.state.otp_store.evict_expired()
        pending = app.state.pending_store.evict_expired()
        if otps or pending:
            logger.info("Evicted %d OTP challenge(s) and %d pending registration(s)", otps, pending)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations (postgres backend)
    - Wires domain services into app.state
    - Runs the expired-state sweeper
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    pool = None
    if settings.repository_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        repository = PostgresAccountRepository(pool)
    else:
        logger.warning("Using in-memory account repository; data is lost on restart")
        repository = InMemoryAccountRepository()

    init_services(app, settings, repository)
    sweeper = asyncio.create_task(sweep_expired(app, settings.sweep_interval_seconds))

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="craftconnect",
    description="CraftConnect Onboarding API - Professional phone verification and session login",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with repository validation.

    Returns 200 OK if application and storage are healthy.
    """
    try:
        request.app.state.repository.ping()
    except RepositoryError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Storage unavailable"
        ) from None
    return {"status": "healthy"}
