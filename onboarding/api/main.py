"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from psycopg_pool import ConnectionPool

from onboarding.adapters.identity.firebase import FirebaseIdentityProvider
from onboarding.adapters.identity.local import LocalIdentityProvider
from onboarding.adapters.otp.memory import InMemoryOtpLedger
from onboarding.adapters.otp.redis import RedisOtpLedger
from onboarding.adapters.repository.postgres import run_migrations
from onboarding.api.errors import register_exception_handlers
from onboarding.api.routes import auth_router, company_router
from onboarding.config.settings import Settings, get_settings
from onboarding.domain.ports import IdentityProvider, OtpLedger

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Registration, login, and email/mobile verification",
    },
    {
        "name": "company",
        "description": "Company profile of the authenticated user",
    },
]


def build_identity_provider(settings: Settings) -> IdentityProvider:
    """Select the identity provider adapter; firebase requires full credentials."""
    if settings.identity_provider == "firebase":
        if not (
            settings.firebase_project_id
            and settings.firebase_private_key
            and settings.firebase_client_email
        ):
            raise RuntimeError("Firebase identity provider selected but credentials are missing")
        return FirebaseIdentityProvider.from_credentials(
            project_id=settings.firebase_project_id,
            client_email=settings.firebase_client_email,
            private_key=settings.firebase_private_key,
        )
    logger.warning("Using local in-process identity provider")
    return LocalIdentityProvider(base_url=settings.public_base_url)


def build_otp_ledger(settings: Settings) -> OtpLedger:
    if settings.otp_store == "redis":
        return RedisOtpLedger.from_url(settings.redis_url)
    logger.warning("Using in-memory OTP ledger; send and verify must reach the same process")
    return InMemoryOtpLedger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool and runs migrations on startup
    - Builds the identity provider and OTP ledger adapters
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application (%s)...", settings.environment)
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=True,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store long-lived adapters in app state for dependency injection
    app.state.pool = pool
    app.state.identity_provider = build_identity_provider(settings)
    app.state.otp_ledger = build_otp_ledger(settings)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title="onboarding",
        description="Company onboarding API - account registration with email and mobile "
        "verification",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(application)
    application.include_router(auth_router)
    application.include_router(company_router)

    @application.get("/health")
    async def health_check(request: Request) -> dict[str, str]:
        """
        Health check endpoint with database validation.

        Returns 200 OK if application and database are healthy.
        Raises exception if database connection fails.
        """
        pool = request.app.state.pool
        with pool.connection() as conn:
            conn.execute("SELECT 1")

        return {"status": "healthy"}

    return application


app = create_app()
