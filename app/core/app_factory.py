from __future__ import annotations

"""Application factory for the FastAPI app.

Builds the long-lived components (storage backend, rate limiter, intake
service) once per application and publishes them on ``app.state``.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryAttemptRateLimiter
from app.adapters.storage.base import AbstractStorage
from app.adapters.storage.factory import create_storage
from app.api.routes import contact_router, github_router, health_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.services.contact_service import ContactIntakeService


def build_rate_limiter(settings: Settings) -> AbstractRateLimiter | None:
    """Return the contact form limiter, or None when throttling is disabled."""

    if not settings.app.contact_rate_limit_enabled:
        return None
    return InMemoryAttemptRateLimiter(
        max_attempts=settings.app.contact_rate_limit_attempts,
        window_seconds=settings.app.contact_rate_limit_window_seconds,
    )


def create_app(
    settings: Settings | None = None,
    *,
    storage: AbstractStorage | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Explicit settings; read from the environment when omitted.
        storage: Pre-built storage backend (tests); chosen from
            ``settings.database`` when omitted.
        rate_limiter: Pre-built limiter (tests); built from ``settings.app``
            when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    settings = settings or get_settings()

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    if storage is None:
        storage = create_storage(settings.database)
    if rate_limiter is None:
        rate_limiter = build_rate_limiter(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        storage.close()

    app = FastAPI(
        title="Roya Systems Website API",
        description=(
            "Backend for the Roya Systems marketing site: contact form intake "
            "with per-IP rate limiting and optional database persistence."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.rate_limiter = rate_limiter
    app.state.contact_service = ContactIntakeService(
        storage=storage,
        rate_limiter=rate_limiter,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(contact_router, prefix="/api")
    app.include_router(github_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
