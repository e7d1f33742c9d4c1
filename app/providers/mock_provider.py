import asyncio
from datetime import date, datetime, timedelta
from typing import Any

from app.providers.base import ProviderAdapter


class MockProvider(ProviderAdapter):
    """Mock provider for development without hitting real booking backends."""

    provider = "mock"

    def __init__(
        self,
        slot_count: int = 20,
        interval_minutes: int = 8,
        first_hour: int = 7,
        price: float = 45.0,
        delay_seconds: float = 0.0,
    ) -> None:
        self._slot_count = slot_count
        self._interval_minutes = interval_minutes
        self._first_hour = first_hour
        self._price = price
        self._delay_seconds = delay_seconds

    async def fetch(self, course_slug: str, target_date: date) -> list[str]:
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        base_time = datetime.combine(target_date, datetime.min.time().replace(hour=self._first_hour))
        return [
            (base_time + timedelta(minutes=i * self._interval_minutes)).isoformat(timespec="minutes")
            for i in range(self._slot_count)
        ]

    def normalize(self, raw: Any, course_slug: str, course_name: str) -> list[dict[str, Any]]:
        return [
            {
                "course_slug": course_slug,
                "course_name": course_name,
                "timestamp": slot,
                "price": self._price,
                "available_spots": 4,
                "min_players": 1,
                "max_players": 4,
                "provider_payload": {"slot": slot},
            }
            for slot in raw
        ]
