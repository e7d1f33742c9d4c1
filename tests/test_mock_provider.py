"""
Tests for MockProvider in app/providers/mock_provider.py.
"""

from datetime import date

import pytest

from app.models.schemas import validate_tee_times
from app.providers.mock_provider import MockProvider


class TestMockProvider:
    """Tests for the development provider."""

    @pytest.mark.asyncio
    async def test_generates_slots(self) -> None:
        """Test that the mock returns evenly spaced slots for the date."""
        provider = MockProvider(slot_count=3, interval_minutes=10, first_hour=7)

        result = await provider.fetch_tee_times("shadowmoss", "Shadowmoss", date(2025, 11, 20))

        assert [r["timestamp"] for r in result] == [
            "2025-11-20T07:00",
            "2025-11-20T07:10",
            "2025-11-20T07:20",
        ]
        assert all(r["course_slug"] == "shadowmoss" for r in result)

    @pytest.mark.asyncio
    async def test_records_are_valid(self) -> None:
        """Test that every generated record passes canonical validation."""
        provider = MockProvider()

        result = await provider.fetch_tee_times("a", "Course A", date(2025, 11, 20))

        assert len(validate_tee_times(result)) == len(result) == 20

    @pytest.mark.asyncio
    async def test_zero_slots(self) -> None:
        """Test that the mock can simulate a sold-out day."""
        provider = MockProvider(slot_count=0)

        assert await provider.fetch_tee_times("a", "A", date(2025, 11, 20)) == []

    def test_provider_name(self) -> None:
        """Test the provider identifier."""
        assert MockProvider().provider == "mock"
