"""FastAPI application for the AutoDevelop API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from autodevelop_api.api.middleware import (
    SecurityHeadersMiddleware,
    register_exception_handlers,
)
from autodevelop_api.chat import chat_router
from autodevelop_api.config import get_settings
from autodevelop_api.pricing import pricing_router
from autodevelop_api.ratelimit import RedisRateLimitStore, get_rate_limiter
from autodevelop_api.telemetry import instrument_app

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    settings = get_settings()
    logger.info(
        "Chat rate limit: %d requests per %ds (backend=%s)",
        settings.rate_limit_max_requests,
        settings.rate_limit_window_seconds,
        settings.rate_limit_backend,
    )

    yield

    # Shutdown: release the shared store connection
    store = get_rate_limiter().store
    if isinstance(store, RedisRateLimitStore):
        try:
            await store.close()
        except Exception as e:
            logger.error("Failed to close rate limit store: %s", e)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "service": settings.app_name}

    # Ready check endpoint
    @app.get("/ready")
    async def ready_check() -> dict:
        """Readiness check endpoint."""
        return {"status": "ready", "service": settings.app_name}

    # Provides: POST /api/chat
    app.include_router(chat_router)

    # Provides:
    # - GET /api/pricing/tiers - Paid tiers, free tier and promotion flag
    # - GET /api/pricing/tiers/{tier_id} - Single paid tier
    app.include_router(pricing_router)

    register_exception_handlers(app)

    app.add_middleware(SecurityHeadersMiddleware)

    # CORS must be added last so it runs first
    allow_origins = [settings.frontend_url] if settings.frontend_url else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=bool(settings.frontend_url),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    instrument_app(app)

    return app
