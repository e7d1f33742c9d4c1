"""
Quick18 scraping tests using a captured search matrix fixture.

These tests validate that our selectors work against Quick18's HTML without
needing live access.
"""

from datetime import date
from pathlib import Path

import httpx
import pytest

from app.models.schemas import FailureKind
from app.providers.base import ProviderError
from app.providers.http_client import HttpClient
from app.providers.quick18_provider import (
    Quick18Provider,
    build_search_url,
    parse_price,
    parse_time_code,
)
from app.services.executor import ProviderTask, ResilientExecutor

FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE_URL = "https://rivertowne.quick18.com"


@pytest.fixture
def matrix_html() -> str:
    """Load the search matrix HTML fixture."""
    return (FIXTURES_DIR / "quick18_searchmatrix.html").read_text(encoding="utf-8")


@pytest.fixture
def provider() -> Quick18Provider:
    return Quick18Provider(HttpClient(), BASE_URL + "/")


class TestQuick18Helpers:
    """Tests for URL, time code and price parsing."""

    def test_build_search_url(self) -> None:
        """Test that the date is sent as YYYYMMDD."""
        assert (
            build_search_url(BASE_URL, date(2025, 11, 20))
            == "https://rivertowne.quick18.com/teetimes/searchmatrix?teedate=20251120"
        )

    def test_parse_time_code(self) -> None:
        """Test that a 12-digit code becomes a local timestamp."""
        assert parse_time_code("202511201212") == "2025-11-20 12:12"

    @pytest.mark.parametrize("code", ["20251120121", "2025112012120", "2025112012ab"])
    def test_parse_time_code_rejects_bad_codes(self, code: str) -> None:
        """Test that codes of the wrong shape are rejected."""
        assert parse_time_code(code) is None

    @pytest.mark.parametrize(
        "text,expected",
        [("$59.00", 59.0), ("$1,045.50", 1045.5), ("Call", None), ("", None), ("$.", None)],
    )
    def test_parse_price(self, text: str, expected: float | None) -> None:
        """Test that currency text is reduced to a number."""
        assert parse_price(text) == expected


class TestQuick18Normalize:
    """Tests for parsing the search matrix page."""

    def test_extracts_bookable_slots(self, provider: Quick18Provider, matrix_html: str) -> None:
        """Test that every cell with a select link becomes a tee time."""
        result = provider.normalize(matrix_html, "rivertowne", "Rivertowne Country Club")

        assert [r["timestamp"] for r in result] == [
            "2025-11-20 07:30",
            "2025-11-20 12:12",
            "2025-11-20 13:00",
        ]
        assert [r["price"] for r in result] == [59.0, 1045.5, None]

    def test_booking_url_and_payload(self, provider: Quick18Provider, matrix_html: str) -> None:
        """Test that the select link is kept as an absolute booking URL."""
        first = provider.normalize(matrix_html, "rivertowne", "Rivertowne Country Club")[0]

        assert first["booking_url"] == (
            "https://rivertowne.quick18.com/teetimes/teetime/202511200730?q=1"
        )
        assert first["provider_payload"] == {
            "price_text": "$59.00",
            "link": "/teetimes/teetime/202511200730?q=1",
            "code": "202511200730",
        }
        assert first["course_slug"] == "rivertowne"

    @pytest.mark.parametrize(
        "body",
        [
            "<html><body>Service temporarily unavailable</body></html>",
            '<html><body><form action="/account/login"></form></body></html>',
        ],
    )
    def test_page_without_matrix_raises(self, provider: Quick18Provider, body: str) -> None:
        """Test that a page missing the tee time matrix is an error, not an empty day."""
        with pytest.raises(ProviderError, match="No tee time matrix"):
            provider.normalize(body, "rivertowne", "Rivertowne Country Club")

    @pytest.mark.parametrize("body", ["", "   \n", None])
    def test_empty_body_raises(self, provider: Quick18Provider, body: str | None) -> None:
        """Test that a blank response is an error."""
        with pytest.raises(ProviderError, match="Empty Quick18 page"):
            provider.normalize(body, "rivertowne", "Rivertowne Country Club")

    def test_matrix_without_slots(self, provider: Quick18Provider) -> None:
        """Test that a matrix with no bookable cells is a sold-out day."""
        body = (
            '<html><body><table class="matrixTable"><tbody>'
            '<tr><td class="mtrxTeeTimes">No tee times available</td></tr>'
            "</tbody></table></body></html>"
        )

        assert provider.normalize(body, "rivertowne", "Rivertowne Country Club") == []

    @pytest.mark.asyncio
    async def test_maintenance_page_fails_the_course(self) -> None:
        """Test that a 200 maintenance page surfaces as a course failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html><body>Down for maintenance</body></html>")

        http = HttpClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        provider = Quick18Provider(http, BASE_URL)
        executor = ResilientExecutor(
            timeout_seconds=1, retry_delay_seconds=0, max_retries=0, sink=lambda r: None
        )

        outcome = await executor.execute(
            ProviderTask(
                course_slug="rivertowne",
                provider=provider.provider,
                invocation=lambda: provider.fetch_tee_times(
                    "rivertowne", "Rivertowne Country Club", date(2025, 11, 20)
                ),
            )
        )

        assert outcome.kind is FailureKind.TRANSIENT
        assert "No tee time matrix" in outcome.message

    @pytest.mark.asyncio
    async def test_fetch_tee_times_end_to_end(self, matrix_html: str) -> None:
        """Test fetch plus normalize against a mocked search page."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=matrix_html)

        http = HttpClient(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        provider = Quick18Provider(http, BASE_URL)

        result = await provider.fetch_tee_times(
            "rivertowne", "Rivertowne Country Club", date(2025, 11, 20)
        )

        assert len(result) == 3
        assert seen[0].url.path == "/teetimes/searchmatrix"
        assert seen[0].url.params["teedate"] == "20251120"
