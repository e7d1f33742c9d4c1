"""
Tests for HttpClient in app/providers/http_client.py.

Requests are served by httpx.MockTransport so no network is touched.
"""

import json

import httpx
import pytest

from app.providers.base import ProviderError
from app.providers.http_client import HttpClient


def make_http(handler) -> HttpClient:
    return HttpClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestHttpClientSuccess:
    """Tests for successful requests."""

    @pytest.mark.asyncio
    async def test_get_json(self) -> None:
        """Test that JSON bodies are decoded."""
        http = make_http(lambda request: httpx.Response(200, json={"ok": True}))

        assert await http.get_json("https://example.test/api") == {"ok": True}

    @pytest.mark.asyncio
    async def test_post_json_sends_body(self) -> None:
        """Test that the body is sent as JSON."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        http = make_http(handler)

        assert await http.post_json("https://example.test/api", {"a": 1}) == []
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"a": 1}

    @pytest.mark.asyncio
    async def test_get_text(self) -> None:
        """Test that text bodies are returned as-is."""
        http = make_http(lambda request: httpx.Response(200, text="<html></html>"))

        assert await http.get_text("https://example.test/page") == "<html></html>"


class TestHttpClientErrors:
    """Tests for error mapping to ProviderError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [403, 404])
    async def test_client_error_status(self, status: int) -> None:
        """Test that 4xx responses carry their status and read as client errors."""
        http = make_http(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(ProviderError) as exc_info:
            await http.get_json("https://example.test/api")

        assert exc_info.value.status_code == status
        assert exc_info.value.is_client_error is True
        assert f"HTTP {status}" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_server_error_status(self) -> None:
        """Test that 5xx responses are not client errors."""
        http = make_http(lambda request: httpx.Response(503, text="busy"))

        with pytest.raises(ProviderError) as exc_info:
            await http.get_text("https://example.test/page")

        assert exc_info.value.status_code == 503
        assert exc_info.value.is_client_error is False

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        """Test that transport failures become status-less ProviderErrors."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http = make_http(handler)

        with pytest.raises(ProviderError) as exc_info:
            await http.get_json("https://example.test/api")

        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        """Test that an unparseable body is reported as a parse error."""
        http = make_http(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(ProviderError, match="JSON parse error"):
            await http.get_json("https://example.test/api")


class TestHttpClientLifecycle:
    """Tests for client creation and closing."""

    @pytest.mark.asyncio
    async def test_client_created_lazily_and_closed(self) -> None:
        """Test that the underlying client is built on demand and dropped on close."""
        http = HttpClient(timeout=2.0, user_agent="test-agent")

        client = http.client

        assert client.headers["User-Agent"] == "test-agent"
        assert http.client is client

        await http.close()

        assert http._client is None
