"""
Items router for creating, listing and fetching items.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from api.src.dependencies import get_item_service
from api.src.exceptions import CatalogError, NotFoundError
from api.src.models.common import ApiResponse
from api.src.responses import catalog_error_response, error_response, success_response
from api.src.services.item_service import ItemService
from api.src.validation import validate_item

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/items",
    tags=["Items"],
    responses={
        500: {"model": ApiResponse, "description": "Internal server error"}
    }
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Item",
    description="""
    Create an item.

    **Request Body:**
    - name: Item name (required, not empty)
    - price: Price (required, >= 0)
    - description: Optional description

    **Error Responses:**
    - 400: Missing or invalid fields
    """,
    responses={
        201: {"model": ApiResponse, "description": "Item created successfully"},
        400: {"model": ApiResponse, "description": "Missing or invalid fields"}
    }
)
async def create_item(
    payload: Dict[str, Any] = Body(...),
    item_service: ItemService = Depends(get_item_service)
) -> JSONResponse:
    """Create an item."""
    violations = validate_item(payload)
    if violations:
        logger.warning("item_create_rejected", violations=violations)
        return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(violations))

    try:
        item = await item_service.create(
            name=payload["name"],
            price=payload["price"],
            description=payload.get("description")
        )
    except CatalogError as e:
        logger.warning("item_create_failed", error=e.message, status_code=e.status_code)
        return catalog_error_response(e)
    except Exception as e:
        logger.error("item_create_error", error=str(e), exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create item")

    return success_response(status.HTTP_201_CREATED, "Item created successfully", item.to_response())


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="List Items",
    responses={
        200: {"model": ApiResponse, "description": "Items retrieved successfully"}
    }
)
async def list_items(
    item_service: ItemService = Depends(get_item_service)
) -> JSONResponse:
    """List all items."""
    try:
        items = await item_service.get_all()
    except Exception as e:
        logger.error("item_list_error", error=str(e), exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve items")

    return success_response(
        status.HTTP_200_OK,
        "Items retrieved successfully",
        [item.to_response() for item in items]
    )


@router.get(
    "/{item_id}",
    status_code=status.HTTP_200_OK,
    summary="Get Item",
    responses={
        200: {"model": ApiResponse, "description": "Item retrieved successfully"},
        404: {"model": ApiResponse, "description": "Item not found"}
    }
)
async def get_item(
    item_id: str,
    item_service: ItemService = Depends(get_item_service)
) -> JSONResponse:
    """Fetch one item by ID."""
    try:
        item = await item_service.get_by_id(item_id)
    except Exception as e:
        logger.error("item_get_error", error=str(e), item_id=item_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve item")

    if item is None:
        logger.info("item_not_found", item_id=item_id)
        return catalog_error_response(NotFoundError("Item not found"))

    return success_response(status.HTTP_200_OK, "Item retrieved successfully", item.to_response())
