"""
Users router for registration and login.

Controllers validate the request shape, delegate to ``UserService`` and
translate results and service errors into the response envelope.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from api.src.dependencies import get_user_service
from api.src.exceptions import CatalogError
from api.src.models.common import ApiResponse
from api.src.responses import catalog_error_response, error_response, success_response
from api.src.services.user_service import UserService
from api.src.validation import validate_login, validate_registration

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        400: {"model": ApiResponse, "description": "Missing or invalid fields"},
        500: {"model": ApiResponse, "description": "Internal server error"}
    }
)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
    description="""
    Create a user account.

    **Request Body:**
    - firstName, lastName: Names
    - email: Email address, stored lowercase, must be unique
    - password: Password (minimum 8 characters)

    **Success Response (201):**
    Public user object (no password)

    **Error Responses:**
    - 400: Missing fields or validation failure
    - 409: Email already registered
    """,
    responses={
        201: {"model": ApiResponse, "description": "User registered successfully"},
        409: {"model": ApiResponse, "description": "Email already registered"}
    }
)
async def register(
    payload: Dict[str, Any] = Body(...),
    user_service: UserService = Depends(get_user_service)
) -> JSONResponse:
    """
    Register a new user.

    Args:
        payload: Request body
        user_service: User service

    Returns:
        Envelope with the public user
    """
    violations = validate_registration(payload)
    if violations:
        logger.warning("register_rejected", violations=violations)
        return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(violations))

    try:
        user = await user_service.register(
            first_name=payload["firstName"],
            last_name=payload["lastName"],
            email=payload["email"],
            password=payload["password"]
        )
    except CatalogError as e:
        logger.warning("register_failed", error=e.message, status_code=e.status_code)
        return catalog_error_response(e)
    except Exception as e:
        logger.error("register_error", error=str(e), exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "User registration failed")

    return success_response(
        status.HTTP_201_CREATED,
        "User registered successfully",
        user.to_response()
    )


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    summary="User Login",
    description="""
    Authenticate with email and password.

    **Success Response (200):**
    Public user object

    **Error Responses:**
    - 400: Missing email or password
    - 401: Invalid email or password (same message for both)
    """,
    responses={
        200: {"model": ApiResponse, "description": "Login successful"},
        401: {"model": ApiResponse, "description": "Invalid credentials"}
    }
)
async def login(
    payload: Dict[str, Any] = Body(...),
    user_service: UserService = Depends(get_user_service)
) -> JSONResponse:
    """
    Authenticate a user.

    Args:
        payload: Request body
        user_service: User service

    Returns:
        Envelope with the public user
    """
    violations = validate_login(payload)
    if violations:
        logger.warning("login_rejected", violations=violations)
        return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(violations))

    try:
        user = await user_service.authenticate(payload["email"], payload["password"])
    except CatalogError as e:
        logger.warning("login_failed", error=e.message, status_code=e.status_code)
        return catalog_error_response(e)
    except Exception as e:
        logger.error("login_error", error=str(e), exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Login failed")

    return success_response(status.HTTP_200_OK, "Login successful", user.to_response())
