from abc import ABC, abstractmethod
from datetime import date
from typing import Any


class ProviderError(Exception):
    """A backend could not be reached, rejected the request, or answered with garbage."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_client_error(self) -> bool:
        """True when the backend rejected the request itself (HTTP 4xx)."""
        return self.status_code is not None and 400 <= self.status_code < 500


class ProviderAdapter(ABC):
    """Abstract base class for tee time booking backends."""

    provider: str = "unknown"

    @abstractmethod
    async def fetch(self, course_slug: str, target_date: date) -> Any:
        """
        Fetch the raw availability payload for one course and date.

        Raises:
            ProviderError: If the backend is unreachable or answers with an error.
        """
        pass

    @abstractmethod
    def normalize(self, raw: Any, course_slug: str, course_name: str) -> list[dict[str, Any]]:
        """
        Reduce a raw payload to canonical tee time mappings.

        No bookable slots is an empty list. An unrecognized payload shape
        raises ProviderError instead of returning partial data.
        """
        pass

    async def fetch_tee_times(
        self, course_slug: str, course_name: str, target_date: date
    ) -> list[dict[str, Any]]:
        raw = await self.fetch(course_slug, target_date)
        return self.normalize(raw, course_slug, course_name)

    async def close(self) -> None:
        pass


def is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def first_present(payload: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first value under keys that is not None."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return default
