"""
Async HTTP client for the name conversion endpoint.

Sends the form-encoded wire request (``type`` and ``ln``) to
``{contextRoot}/pname?tsv`` and returns the plain text reply. Transport
failures are surfaced to the caller without retrying.
"""

import asyncio
from typing import Dict, Optional, Union

import aiohttp
import structlog

from client.src.config import ClientSettings
from client.src.page_config import PageConfig
from client.src.resolver import Resolver
from engine.src.casing import CasingStyle
from engine.src.converter import parse_casing_style
from engine.src.errors import MissingInput

logger = structlog.get_logger(__name__)

CONVERT_PATH = "/pname?tsv"


class PnameClientError(Exception):
    """Base class for client-side failures."""


class PnameApiError(PnameClientError):
    """The service answered with an error status."""

    def __init__(self, status: int, body: str):
        super().__init__(f"pname service returned HTTP {status}: {body}")
        self.status = status
        self.body = body


class PnameTransportError(PnameClientError):
    """The request did not complete (connection failure, timeout)."""


class PnameClient:
    """
    Client for one pname deployment.

    Usage::

        async with PnameClient("http://localhost:8080", PageConfig.from_html(html)) as client:
            text = await client.ln2pn("LOWER_CAMEL", "first_name\\nlast_name")
    """

    def __init__(
        self,
        base_url: str,
        config: Optional[PageConfig] = None,
        timeout_seconds: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.resolver = Resolver(config or PageConfig())
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None
        self._inflight: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "PnameClient":
        return cls(
            base_url=settings.base_url,
            config=PageConfig.from_settings(settings),
            timeout_seconds=settings.timeout_seconds,
        )

    async def __aenter__(self) -> "PnameClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Cancel any pending submission and close the owned session."""
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    def url(self, path: str) -> str:
        return self.base_url + self.resolver.uri(path)

    def _headers(self) -> Dict[str, str]:
        return self.resolver.csrf_headers()

    async def ln2pn(self, style: Union[CasingStyle, str], text: str) -> str:
        """
        Convert a newline-joined batch of logical names.

        Args:
            style: Target casing style
            text: Logical names joined by ``\\n``

        Returns:
            Physical names joined by ``\\n``

        Raises:
            InvalidCasingStyle: If ``style`` is unknown (no request is sent)
            MissingInput: If ``text`` is None (no request is sent)
            PnameApiError: If the service rejects the request
            PnameTransportError: If the request cannot be completed
        """
        casing = parse_casing_style(style)
        if text is None:
            raise MissingInput("ln")

        url = self.url(CONVERT_PATH)
        form = {"type": casing.value, "ln": text}
        session = self._get_session()

        logger.debug("pname_request", url=url, style=casing.value, lines=text.count("\n") + 1)
        try:
            async with session.post(url, data=form, headers=self._headers()) as response:
                body = await response.text()
                if response.status >= 400:
                    logger.warning("pname_request_rejected", url=url, status=response.status)
                    raise PnameApiError(response.status, body)
                return body
        except aiohttp.ClientError as e:
            logger.warning("pname_request_failed", url=url, error=str(e))
            raise PnameTransportError(str(e)) from e
        except asyncio.TimeoutError as e:
            logger.warning("pname_request_timeout", url=url)
            raise PnameTransportError(f"request to {url} timed out") from e

    async def submit(self, style: Union[CasingStyle, str], text: str) -> str:
        """
        Convert with last-click-wins semantics.

        A new submission cancels the one still in flight; the superseded
        caller receives ``asyncio.CancelledError``.
        """
        casing = parse_casing_style(style)

        previous = self._inflight
        if previous is not None and not previous.done():
            logger.debug("pname_request_superseded")
            previous.cancel()

        task = asyncio.ensure_future(self.ln2pn(casing, text))
        self._inflight = task
        try:
            return await task
        finally:
            if self._inflight is task:
                self._inflight = None
