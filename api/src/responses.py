"""Helpers that wrap payloads and errors in the response envelope."""

from typing import Any, Optional

from fastapi.responses import JSONResponse

from api.src.exceptions import CatalogError
from api.src.models.common import ApiResponse


def success_response(status_code: int, message: str, data: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(success=True, message=message, data=data).to_content()
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(success=False, message=message).to_content()
    )


def catalog_error_response(error: CatalogError) -> JSONResponse:
    """Map a service error to its status code and message."""
    return error_response(error.status_code, error.message)
