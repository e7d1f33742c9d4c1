import logging
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

ALL_COURSES = "all"


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    TRANSIENT = "transient"
    PERMANENT = "permanent"
    INTERNAL = "internal"


class CamelModel(BaseModel):
    """Base model that serializes with camelCase keys but accepts snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CanonicalTeeTime(CamelModel):
    """One bookable slot, reduced to the same shape whichever backend produced it."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )

    course_slug: str = Field(..., min_length=1)
    course_name: str = Field(..., min_length=1)
    timestamp: str = Field(..., min_length=1, description="Provider time string, sortable")
    price: float | None = Field(default=None, ge=0)
    available_spots: int | None = Field(default=None, ge=0)
    min_players: int | None = Field(default=None, ge=1)
    max_players: int | None = Field(default=None, ge=1)
    booking_url: str | None = None
    provider_payload: Any = Field(default=None, description="Raw provider object, diagnostics only")

    @model_validator(mode="after")
    def _check_player_bounds(self) -> "CanonicalTeeTime":
        if (
            self.min_players is not None
            and self.max_players is not None
            and self.min_players > self.max_players
        ):
            raise ValueError("min_players cannot exceed max_players")
        return self


class CourseDescriptor(CamelModel):
    slug: str
    name: str


class ProviderErrorRecord(CamelModel):
    course: str
    provider: str
    message: str
    kind: FailureKind
    timestamp: datetime


class ResponseMetadata(CamelModel):
    total_courses: int
    successful_courses: int
    failed_courses: int
    cached: bool = False
    errors: list[ProviderErrorRecord] = Field(default_factory=list)


class AggregatedResponse(CamelModel):
    course: CourseDescriptor
    date: str
    tee_times: list[CanonicalTeeTime] = Field(default_factory=list)
    metadata: ResponseMetadata


class CourseListing(CamelModel):
    slug: str
    name: str
    provider: str
    latitude: float | None = None
    longitude: float | None = None


class CoursesResponse(CamelModel):
    courses: list[CourseListing]


def validate_tee_times(records: Iterable[Any]) -> list[CanonicalTeeTime]:
    """
    Reduce provider output to valid CanonicalTeeTime records.

    Accepts mappings (snake_case or camelCase keys) or already-built models,
    which are re-validated like mappings.
    Anything missing course_slug, course_name or timestamp, or otherwise
    violating the field constraints, is dropped.
    """
    valid: list[CanonicalTeeTime] = []
    dropped = 0
    for record in records:
        if isinstance(record, CanonicalTeeTime):
            # model_construct skips validation, so built models are checked again.
            record = dict(record)
        if not isinstance(record, dict):
            dropped += 1
            continue
        try:
            valid.append(CanonicalTeeTime.model_validate(record))
        except ValidationError as e:
            dropped += 1
            logger.debug(f"Dropping invalid tee time record: {e.errors()}")
    if dropped:
        logger.warning(f"Dropped {dropped} invalid tee time record(s)")
    return valid


def is_valid_tee_time(record: Any) -> bool:
    """Predicate form of validate_tee_times for a single record."""
    return len(validate_tee_times([record])) == 1
