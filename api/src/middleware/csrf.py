"""
CSRF token verification.

Unsafe requests must present the configured token either in the configured
header or in the configured form field. Verification is skipped entirely when
CSRF is disabled or no token is configured.
"""

import hmac
import structlog
from typing import Optional

from fastapi import Request, status
from starlette.datastructures import FormData

from api.src.config import Settings

logger = structlog.get_logger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class CsrfValidationError(Exception):
    """Raised when an unsafe request carries no valid CSRF token."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "csrf_invalid"

    def __init__(self, message: str = "Invalid or missing CSRF token"):
        super().__init__(message)
        self.message = message


class CsrfProtection:
    """
    FastAPI dependency enforcing the CSRF token on unsafe methods.

    One instance is stored on ``app.state.csrf`` and invoked through
    :func:`verify_csrf` by the routers that accept unsafe requests.
    """

    def __init__(self, settings: Settings):
        self.enabled = settings.csrf_active
        self.header_name = settings.csrf_header_name
        self.parameter_name = settings.csrf_parameter_name
        self._token = settings.csrf_token or ""

    async def _submitted_token(self, request: Request) -> Optional[str]:
        token = request.headers.get(self.header_name)
        if token:
            return token

        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            form: FormData = await request.form()
            value = form.get(self.parameter_name)
            if isinstance(value, str):
                return value
        return None

    async def __call__(self, request: Request) -> None:
        if not self.enabled or request.method in SAFE_METHODS:
            return

        submitted = await self._submitted_token(request)
        if not submitted or not hmac.compare_digest(submitted, self._token):
            logger.warning(
                "csrf_rejected",
                path=request.url.path,
                method=request.method,
                token_present=bool(submitted),
            )
            raise CsrfValidationError()


async def verify_csrf(request: Request) -> None:
    """Router-level dependency delegating to the application's CsrfProtection."""
    protection: Optional[CsrfProtection] = getattr(request.app.state, "csrf", None)
    if protection is not None:
        await protection(request)
