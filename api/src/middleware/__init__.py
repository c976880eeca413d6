"""FastAPI middleware components.

This package contains request logging, metrics, security headers and CSRF
verification for the pname service.
"""

from api.src.middleware.csrf import (
    CsrfProtection,
    CsrfValidationError,
    verify_csrf,
)
from api.src.middleware.request_logging import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

__all__ = [
    "CsrfProtection",
    "CsrfValidationError",
    "verify_csrf",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
