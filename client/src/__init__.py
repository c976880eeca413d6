"""Async client for the Physical Name Generator.

Resolves the endpoint URI and CSRF credentials from page configuration and
submits conversion requests over the form-encoded wire protocol.
"""

from client.src.config import ClientSettings
from client.src.page_config import PageConfig
from client.src.pname_client import (
    PnameApiError,
    PnameClient,
    PnameClientError,
    PnameTransportError,
)
from client.src.resolver import CsrfToken, Resolver, resolve_csrf, resolve_uri

__version__ = "0.1.0"

__all__ = [
    "ClientSettings",
    "CsrfToken",
    "PageConfig",
    "PnameApiError",
    "PnameClient",
    "PnameClientError",
    "PnameTransportError",
    "Resolver",
    "resolve_csrf",
    "resolve_uri",
]
