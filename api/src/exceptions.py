"""
Error taxonomy for the catalog API.

Services raise these exceptions; routers catch them at the controller
boundary and translate ``status_code`` and ``message`` into the response
envelope. Anything that is not a ``CatalogError`` is treated as internal.
"""

from typing import Iterable, List, Optional


class CatalogError(Exception):
    """Base class for all errors the API knows how to report."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Input failed validation (400)."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, violations: Iterable[str], message: Optional[str] = None):
        self.violations: List[str] = list(violations)
        if message is None and self.violations:
            message = f"Validation failed: {'; '.join(self.violations)}"
        super().__init__(message)


class AlreadyExistsError(CatalogError):
    """A record with the same unique key already exists (409)."""

    status_code = 409
    default_message = "Resource already exists"


class InvalidCredentialsError(CatalogError):
    """Unknown email or wrong password (401). Same message for both."""

    status_code = 401
    default_message = "Invalid email or password"


class NotFoundError(CatalogError):
    """Requested resource does not exist (404)."""

    status_code = 404
    default_message = "Resource not found"


class InternalError(CatalogError):
    """Unexpected failure (500)."""


class PasswordHashError(InternalError):
    """Password could not be hashed (bad parameters or backend failure)."""

    default_message = "Password hashing failed"


class PasswordVerificationError(InternalError):
    """Stored hash is corrupt or unrecognised, distinct from a mismatch."""

    default_message = "Password verification failed"
