"""
Course registry: the single table mapping course slugs to their backends.

Every routing decision (which slugs exist, which adapter serves a slug, what
the course is called) is answered here. The registry is built once at
startup and never mutated afterwards.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from app.config import settings
from app.models.schemas import ALL_COURSES, CourseListing
from app.providers.base import ProviderAdapter
from app.providers.foreup_provider import ForeUpCourseConfig, ForeUpProvider
from app.providers.golfback_provider import GolfBackProvider
from app.providers.http_client import HttpClient
from app.providers.mock_provider import MockProvider
from app.providers.quick18_provider import Quick18Provider
from app.providers.teeitup_provider import TeeItUpProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseEntry:
    slug: str
    name: str
    adapter: ProviderAdapter
    latitude: float | None = None
    longitude: float | None = None

    @property
    def provider(self) -> str:
        return self.adapter.provider


class CourseRegistry:
    def __init__(self, entries: Iterable[CourseEntry]) -> None:
        ordered: dict[str, CourseEntry] = {}
        for entry in entries:
            if entry.slug == ALL_COURSES:
                raise ValueError(f"'{ALL_COURSES}' is reserved and cannot be a course slug")
            if entry.slug in ordered:
                raise ValueError(f"Duplicate course slug: {entry.slug}")
            ordered[entry.slug] = entry
        self._entries = MappingProxyType(ordered)

    def get(self, slug: str) -> CourseEntry | None:
        return self._entries.get(slug)

    def __contains__(self, slug: object) -> bool:
        return slug in self._entries

    def __iter__(self) -> Iterator[CourseEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def slugs(self) -> list[str]:
        return list(self._entries)

    def listing(self) -> list[CourseListing]:
        return [
            CourseListing(
                slug=entry.slug,
                name=entry.name,
                provider=entry.provider,
                latitude=entry.latitude,
                longitude=entry.longitude,
            )
            for entry in self
        ]

    async def close(self) -> None:
        for entry in self:
            await entry.adapter.close()


AdapterFactory = Callable[[HttpClient], ProviderAdapter]

# (slug, display name, adapter factory) in registry order.
DEFAULT_COURSES: tuple[tuple[str, str, AdapterFactory], ...] = (
    (
        "shadowmoss",
        "Shadowmoss Golf Club",
        lambda http: ForeUpProvider(
            http, ForeUpCourseConfig(booking_class=11335, schedule_id=8813, schedule_ids=(8813,))
        ),
    ),
    (
        "rivertowne",
        "Rivertowne Country Club",
        lambda http: Quick18Provider(http, "https://rivertowne.quick18.com"),
    ),
    (
        "dunes_west",
        "Dunes West Golf Club",
        lambda http: Quick18Provider(http, "https://duneswest.quick18.com"),
    ),
    (
        "santee_national",
        "Santee National Golf Club",
        lambda http: TeeItUpProvider(http, facility_id=5578, alias="santee-national-golf-club"),
    ),
    (
        "windsor_parke",
        "Windsor Parke Golf Club",
        lambda http: GolfBackProvider(http, course_id="5a90fb0c-b928-43f0-9486-d5d43c03d25d"),
    ),
    (
        "julington_creek",
        "Julington Creek Golf Club",
        lambda http: GolfBackProvider(http, course_id="e52fc334-4363-4d53-8b13-3b2e60c49087"),
    ),
)


def build_default_registry(http: HttpClient, use_mock: bool | None = None) -> CourseRegistry:
    """Build the production course table, or a mock-backed one for local development."""
    use_mock = settings.use_mock_providers if use_mock is None else use_mock
    if use_mock:
        logger.warning("use_mock_providers is set - every course is served by MockProvider")
        return CourseRegistry(
            CourseEntry(slug=slug, name=name, adapter=MockProvider())
            for slug, name, _ in DEFAULT_COURSES
        )
    return CourseRegistry(
        CourseEntry(slug=slug, name=name, adapter=factory(http))
        for slug, name, factory in DEFAULT_COURSES
    )
