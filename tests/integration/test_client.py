"""
Integration tests for the async pname client.

Tests cover:
- Form submission to {contextRoot}/pname?tsv
- CSRF header handling
- Client-side style validation
- Error and transport failure reporting
- Last-click-wins submission

A local aiohttp server stands in for the conversion service.
"""

import asyncio
from typing import Any, Dict, List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer as LocalServer, unused_port

from client.src.page_config import PageConfig
from client.src.pname_client import (
    PnameApiError,
    PnameClient,
    PnameClientError,
    PnameTransportError,
)
from engine.src.converter import convert_batch
from engine.src.errors import InvalidCasingStyle, MissingInput


pytestmark = pytest.mark.integration


# ============================================================================
# PYTEST FIXTURES
# ============================================================================


class FakeService:
    """Records requests and converts with the real engine."""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.release = asyncio.Event()

    async def handle(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.requests.append(
            {
                "path": request.path,
                "query": request.query_string,
                "headers": dict(request.headers),
                "form": dict(form),
            }
        )
        ln = form.get("ln")
        if ln == "slow":
            await self.release.wait()
        if ln == "reject":
            return web.Response(status=400, text="rejected")
        return web.Response(text=convert_batch(ln, form.get("type")))


@pytest_asyncio.fixture
async def service():
    fake = FakeService()
    app = web.Application()
    app.router.add_post("/pname", fake.handle)
    app.router.add_post("/app/pname", fake.handle)

    server = LocalServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url(""))
    yield fake

    fake.release.set()
    await server.close()


# ============================================================================
# INTEGRATION TESTS
# ============================================================================


class TestLn2pn:
    """Single conversion requests."""

    @pytest.mark.asyncio
    async def test_converts_batch(self, service):
        async with PnameClient(service.base_url) as client:
            result = await client.ln2pn("LOWER_CAMEL", "first_name\nlast_name")

        assert result == "firstName\nlastName"
        sent = service.requests[0]
        assert sent["path"] == "/pname"
        assert sent["query"] == "tsv"
        assert sent["form"] == {"type": "LOWER_CAMEL", "ln": "first_name\nlast_name"}
        assert sent["headers"]["Content-Type"].startswith("application/x-www-form-urlencoded")

    @pytest.mark.asyncio
    async def test_context_root_and_csrf_header(self, service):
        config = PageConfig.from_html(
            '<meta name="context-root" content="/app/">'
            '<meta name="csrf-header" content="X-CSRF-TOKEN">'
            '<meta name="csrf-parameter" content="_csrf">'
            '<meta name="csrf-token" content="tok-123">'
        )
        async with PnameClient(service.base_url, config) as client:
            assert await client.ln2pn("UPPER_CAMEL", "user_name") == "UserName"

        sent = service.requests[0]
        assert sent["path"] == "/app/pname"
        assert sent["headers"]["X-CSRF-TOKEN"] == "tok-123"

    @pytest.mark.asyncio
    async def test_no_csrf_header_without_configuration(self, service):
        async with PnameClient(service.base_url, PageConfig(csrf_token="orphan")) as client:
            await client.ln2pn("UPPER_SNAKE", "a")

        assert "X-CSRF-TOKEN" not in service.requests[0]["headers"]

    @pytest.mark.asyncio
    async def test_empty_text(self, service):
        async with PnameClient(service.base_url) as client:
            assert await client.ln2pn("UPPER_KEBAB", "") == ""

    @pytest.mark.asyncio
    async def test_invalid_style_sends_nothing(self, service):
        async with PnameClient(service.base_url) as client:
            with pytest.raises(InvalidCasingStyle):
                await client.ln2pn("bogus", "user_name")

        assert service.requests == []

    @pytest.mark.asyncio
    async def test_missing_text_sends_nothing(self, service):
        async with PnameClient(service.base_url) as client:
            with pytest.raises(MissingInput):
                await client.ln2pn("UPPER_SNAKE", None)

        assert service.requests == []

    @pytest.mark.asyncio
    async def test_error_status(self, service):
        async with PnameClient(service.base_url) as client:
            with pytest.raises(PnameApiError) as exc_info:
                await client.ln2pn("UPPER_SNAKE", "reject")

        assert exc_info.value.status == 400
        assert exc_info.value.body == "rejected"
        assert isinstance(exc_info.value, PnameClientError)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        async with PnameClient(f"http://127.0.0.1:{unused_port()}") as client:
            with pytest.raises(PnameTransportError):
                await client.ln2pn("UPPER_SNAKE", "user_name")

    @pytest.mark.asyncio
    async def test_timeout(self, service):
        async with PnameClient(service.base_url, timeout_seconds=0.2) as client:
            with pytest.raises(PnameTransportError):
                await client.ln2pn("UPPER_SNAKE", "slow")


class TestSubmit:
    """Last-click-wins submission."""

    @pytest.mark.asyncio
    async def test_new_submission_cancels_previous(self, service):
        async with PnameClient(service.base_url) as client:
            first = asyncio.ensure_future(client.submit("UPPER_SNAKE", "slow"))
            await asyncio.sleep(0.05)

            second = await client.submit("UPPER_SNAKE", "user_name")

            assert second == "USER_NAME"
            with pytest.raises(asyncio.CancelledError):
                await first

    @pytest.mark.asyncio
    async def test_sequential_submissions(self, service):
        async with PnameClient(service.base_url) as client:
            assert await client.submit("LOWER_SNAKE", "UserName") == "user_name"
            assert await client.submit("LOWER_KEBAB", "UserName") == "user-name"

        assert len(service.requests) == 2

    @pytest.mark.asyncio
    async def test_invalid_style_keeps_previous_submission(self, service):
        async with PnameClient(service.base_url) as client:
            first = asyncio.ensure_future(client.submit("UPPER_SNAKE", "user_name"))

            with pytest.raises(InvalidCasingStyle):
                await client.submit("bogus", "x")

            assert await first == "USER_NAME"
