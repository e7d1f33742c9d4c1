"""
Tee time orchestration across all registered booking backends.

This module turns a (course selector, date) query into one AggregatedResponse:
1. Validate the query against the course registry
2. Serve from the aggregation cache when a fresh entry exists
3. Otherwise fan out one task per course through the resilient executor
4. Wait for every task to settle, then merge in registry order
5. Store the merged response in the cache

Backend failures never fail the call; they are reported in metadata.errors.
Only an invalid query raises.
"""

import asyncio
import logging
import re
from datetime import UTC, date, datetime
from functools import partial

from app.models.outcomes import TaskOutcome, TaskSuccess
from app.models.schemas import (
    ALL_COURSES,
    AggregatedResponse,
    CanonicalTeeTime,
    CourseDescriptor,
    ProviderErrorRecord,
    ResponseMetadata,
)
from app.services.cache import AggregationCache
from app.services.course_registry import CourseEntry, CourseRegistry
from app.services.executor import ProviderTask, ResilientExecutor

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
ALL_COURSES_NAME = "All courses"


class InvalidQueryError(ValueError):
    """The caller asked for a missing/malformed date or an unknown course."""


def parse_query_date(value: str | None) -> date:
    if not value:
        raise InvalidQueryError("Missing date parameter")
    if not ISO_DATE_PATTERN.fullmatch(value):
        raise InvalidQueryError(f"Invalid date '{value}'. Expected YYYY-MM-DD.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidQueryError(f"Invalid date '{value}'. Expected YYYY-MM-DD.") from None


class TeeTimeOrchestrator:
    def __init__(
        self,
        registry: CourseRegistry,
        executor: ResilientExecutor,
        cache: AggregationCache,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._cache = cache

    @property
    def registry(self) -> CourseRegistry:
        return self._registry

    def resolve_courses(self, selector: str | None) -> list[CourseEntry]:
        """
        Expand a course selector into registry entries.

        Raises:
            InvalidQueryError: If the selector is neither 'all' nor a registered slug.
        """
        if selector == ALL_COURSES:
            return list(self._registry)

        entry = self._registry.get(selector) if selector else None
        if entry is None:
            supported = ", ".join(self._registry.slugs)
            raise InvalidQueryError(
                f"Unsupported course '{selector}'. Supported: {supported}, or '{ALL_COURSES}'."
            )
        return [entry]

    def build_tasks(self, entries: list[CourseEntry], target_date: date) -> list[ProviderTask]:
        return [
            ProviderTask(
                course_slug=entry.slug,
                provider=entry.provider,
                invocation=partial(
                    entry.adapter.fetch_tee_times, entry.slug, entry.name, target_date
                ),
            )
            for entry in entries
        ]

    async def handle(self, selector: str | None, date_str: str | None) -> AggregatedResponse:
        target_date = parse_query_date(date_str)
        entries = self.resolve_courses(selector)
        selector = ALL_COURSES if selector == ALL_COURSES else entries[0].slug
        key = (selector, target_date.isoformat())

        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for {selector} on {key[1]}")
            return cached.model_copy(
                update={"metadata": cached.metadata.model_copy(update={"cached": True})}
            )

        tasks = self.build_tasks(entries, target_date)
        logger.info(f"Fetching tee times for {len(tasks)} course(s) on {key[1]} ({selector})")
        outcomes = await asyncio.gather(*(self._executor.execute(task) for task in tasks))

        response = self.merge(self._describe(selector, entries), key[1], tasks, outcomes)
        self._cache.put(key, response)
        return response

    def merge(
        self,
        course: CourseDescriptor,
        date_iso: str,
        tasks: list[ProviderTask],
        outcomes: list[TaskOutcome],
    ) -> AggregatedResponse:
        """Concatenate successes in task order and collect failures into metadata."""
        tee_times: list[CanonicalTeeTime] = []
        errors: list[ProviderErrorRecord] = []

        for task, outcome in zip(tasks, outcomes, strict=True):
            if isinstance(outcome, TaskSuccess):
                tee_times.extend(outcome.records)
            else:
                errors.append(
                    ProviderErrorRecord(
                        course=task.course_slug,
                        provider=task.provider,
                        message=outcome.message,
                        kind=outcome.kind,
                        timestamp=datetime.now(UTC),
                    )
                )

        total = len(tasks)
        successful = total - len(errors)
        if errors:
            logger.warning(
                f"{len(errors)}/{total} course(s) failed for {course.slug} on {date_iso}: "
                + ", ".join(f"{e.course} ({e.kind.value})" for e in errors)
            )

        return AggregatedResponse(
            course=course,
            date=date_iso,
            tee_times=tee_times,
            metadata=ResponseMetadata(
                total_courses=total,
                successful_courses=successful,
                failed_courses=total - successful,
                cached=False,
                errors=errors,
            ),
        )

    @staticmethod
    def _describe(selector: str, entries: list[CourseEntry]) -> CourseDescriptor:
        if selector == ALL_COURSES:
            return CourseDescriptor(slug=ALL_COURSES, name=ALL_COURSES_NAME)
        return CourseDescriptor(slug=entries[0].slug, name=entries[0].name)
