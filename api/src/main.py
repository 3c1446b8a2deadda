"""
FastAPI application entry point for the Catalog API.

This module provides the application factory with:
- User registration/login and item endpoints
- Welcome, health and Prometheus metrics endpoints
- Request logging with correlation IDs
- Compression, security headers and request size limits
- Envelope-shaped error responses for every failure
- MongoDB connection management and periodic cache sweeps
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.src.config import Settings, get_settings
from api.src.database import Database
from api.src.dependencies import ServiceContainer, build_container
from api.src.middleware import (
    BodySizeLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from api.src.responses import error_response
from api.src.routers import items, system, users
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)


# ============================================================================
# Cache Maintenance
# ============================================================================

async def sweep_caches(container: ServiceContainer, interval: float) -> None:
    """
    Periodically drop expired cache entries.

    Reads never return expired entries anyway; the sweep only bounds
    memory held by keys nobody asks for again.
    """
    while True:
        await asyncio.sleep(interval)
        for cache in container.caches:
            removed = cache.purge_expired()
            if removed:
                logger.debug("cache_sweep", cache=cache.name, entries_removed=removed)


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Handles:
    - Database connection and index setup
    - Cache sweep task
    - Graceful shutdown and resource cleanup
    """
    container: ServiceContainer = app.state.container
    settings = container.settings

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment
    )

    try:
        await container.database.connect()
    except Exception as e:
        logger.error("application_startup_failed", error=str(e), exc_info=True)
        raise

    sweeper: Optional[asyncio.Task] = None
    if settings.cache_check_period > 0:
        sweeper = asyncio.create_task(sweep_caches(container, settings.cache_check_period))

    logger.info("application_started", app_name=settings.app_name)

    try:
        yield
    finally:
        logger.info("application_shutting_down")

        if sweeper is not None:
            sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await sweeper

        await container.database.disconnect()
        logger.info("application_shutdown_complete")


# ============================================================================
# Exception Handlers
# ============================================================================

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or non-object JSON bodies."""
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "Request body must be a JSON object")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Framework HTTP errors (unknown route, wrong method)."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def general_exception_handler(request: Request, exc: Exception):
    """Anything not handled by a controller."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================================================
# FastAPI Application
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings (loaded from the environment when omitted)
        database: Database handle (built from settings when omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.json_logs,
        app_name=settings.app_name,
        environment=settings.environment
    )

    container = build_container(settings, database or Database(settings))

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="User registration/login and item catalog API backed by MongoDB.",
        lifespan=lifespan,
        debug=settings.debug,
        # Interactive docs stay off in production
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
    )
    app.state.container = container

    # Added last runs first: logging wraps everything else
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    if settings.security_headers_enabled:
        app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_request_body_bytes)
    app.add_middleware(RequestLoggingMiddleware, metrics=container.metrics)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(system.router)
    app.include_router(users.router)
    app.include_router(items.router)

    return app


# ============================================================================
# Application Entry Point
# ============================================================================

if __name__ == "__main__":
    """
    Run the application with Uvicorn.

    ``workers`` > 1 starts that many worker processes, each with its own
    caches and database client.
    """
    settings = get_settings()
    reload = settings.debug and settings.is_development

    logger.info(
        "starting_uvicorn_server",
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        reload=reload
    )

    uvicorn.run(
        "api.src.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=False,
    )
