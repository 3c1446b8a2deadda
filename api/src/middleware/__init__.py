"""FastAPI middleware components.

This package contains custom middleware for request logging, metrics,
security headers and request size limits.
"""

from api.src.middleware.request_logging import RequestLoggingMiddleware
from api.src.middleware.security import BodySizeLimitMiddleware, SecurityHeadersMiddleware

__all__ = [
    "BodySizeLimitMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
