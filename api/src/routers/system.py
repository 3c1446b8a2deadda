"""
System endpoints: welcome, health and Prometheus metrics.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from api.src.dependencies import ServiceContainer, get_container
from api.src.models.common import ApiResponse
from api.src.responses import error_response, success_response

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["System"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/", summary="Welcome")
async def root(container: ServiceContainer = Depends(get_container)) -> JSONResponse:
    return success_response(
        status.HTTP_200_OK,
        f"Welcome to the {container.settings.app_name}!",
        {"timestamp": _now(), "version": container.settings.app_version}
    )


@router.get("/health", summary="Health Check")
async def health_check(container: ServiceContainer = Depends(get_container)) -> JSONResponse:
    """
    Health check endpoint.

    Reports uptime and database reachability. Returns 503 when the
    database does not answer a ping.
    """
    database_ok = await container.database.ping()

    data = {
        "uptime": round(container.uptime, 3),
        "timestamp": _now(),
        "environment": container.settings.environment,
        "database": "connected" if database_ok else "unavailable",
    }

    if not database_ok:
        logger.warning("health_check_degraded", database="unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ApiResponse(success=False, message="Database unavailable", data=data).to_content()
        )

    return success_response(status.HTTP_200_OK, "Server is healthy", data)


@router.get("/metrics", summary="Prometheus Metrics", response_class=PlainTextResponse)
async def metrics(container: ServiceContainer = Depends(get_container)) -> Response:
    """
    Prometheus metrics endpoint.

    Refreshes cache gauges before rendering the registry.
    """
    if not container.settings.metrics_enabled:
        return error_response(status.HTTP_404_NOT_FOUND, "Not Found")

    for cache in container.caches:
        container.metrics.observe_cache(cache.get_statistics())

    return Response(
        content=container.metrics.render(),
        media_type=container.metrics.content_type
    )
