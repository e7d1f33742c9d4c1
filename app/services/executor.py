"""
Resilient execution of a single provider call.

ResilientExecutor wraps one adapter invocation with a per-attempt deadline,
a bounded retry for transient failures, failure classification and output
validation. It never raises: every call settles into a TaskSuccess or a
TaskFailure, and a structured OutcomeRecord is handed to the observability
sink as a side effect.

Timed-out invocations are abandoned, not cancelled: the underlying coroutine
keeps running in the background until it finishes on its own. Setting
provider_cancel_on_timeout switches to cancelling it instead.
"""

import asyncio
import json
import logging
import time as time_module
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from app.config import settings
from app.models.outcomes import OutcomeRecord, TaskFailure, TaskOutcome, TaskSuccess
from app.models.schemas import FailureKind, validate_tee_times
from app.providers.base import ProviderError

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "timeout"
RETRYABLE_KINDS = frozenset({FailureKind.TRANSIENT, FailureKind.TIMEOUT})

Invocation = Callable[[], Awaitable[Any]]
OutcomeSink = Callable[[OutcomeRecord], None]


@dataclass(frozen=True)
class ProviderTask:
    """One unit of fan-out work: a course, the provider serving it, and the call to make."""

    course_slug: str
    provider: str
    invocation: Invocation


def classify_failure(error: BaseException) -> FailureKind:
    """
    Classify an invocation failure.

    Backend rejections (HTTP 4xx) are permanent; deadline overruns are timeouts;
    everything else is assumed transient.
    """
    if isinstance(error, TimeoutError):
        return FailureKind.TIMEOUT
    if isinstance(error, ProviderError) and error.is_client_error:
        return FailureKind.PERMANENT
    return FailureKind.TRANSIENT


def log_outcome(record: OutcomeRecord) -> None:
    """Default observability sink: one JSON line per executed task."""
    payload: dict[str, Any] = {k: v for k, v in asdict(record).items() if v is not None}
    if record.error_kind is not None:
        payload["error_kind"] = record.error_kind.value
    payload["operation"] = "fetch_tee_times"
    payload["timestamp"] = datetime.now(UTC).isoformat()

    if record.success:
        logger.info(json.dumps(payload))
    else:
        logger.warning(json.dumps(payload))


def _consume_abandoned_result(future: asyncio.Future[Any]) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.debug(f"Abandoned provider call finished with error: {error}")


class ResilientExecutor:
    def __init__(
        self,
        timeout_seconds: float | None = None,
        retry_delay_seconds: float | None = None,
        max_retries: int | None = None,
        cancel_on_timeout: bool | None = None,
        sink: OutcomeSink | None = None,
    ) -> None:
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.provider_timeout_seconds
        )
        self.retry_delay_seconds = (
            retry_delay_seconds
            if retry_delay_seconds is not None
            else settings.provider_retry_delay_seconds
        )
        self.max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self.cancel_on_timeout = (
            cancel_on_timeout
            if cancel_on_timeout is not None
            else settings.provider_cancel_on_timeout
        )
        self._sink = sink or log_outcome

    async def execute(self, task: ProviderTask) -> TaskOutcome:
        started = time_module.monotonic()
        attempts = 0
        try:
            outcome, attempts = await self._run_with_retry(task)
        except Exception as e:
            logger.exception(f"Executor fault while running {task.provider} for {task.course_slug}")
            outcome = TaskFailure(FailureKind.INTERNAL, str(e) or type(e).__name__)

        duration_ms = int((time_module.monotonic() - started) * 1000)
        self._emit(task, outcome, attempts, duration_ms)
        return outcome

    async def _run_with_retry(self, task: ProviderTask) -> tuple[TaskOutcome, int]:
        attempt = 0
        while True:
            attempt += 1
            try:
                raw = await self._run_once(task.invocation)
            except Exception as e:
                kind = classify_failure(e)
                message = TIMEOUT_MESSAGE if kind is FailureKind.TIMEOUT else str(e) or type(e).__name__
                if kind in RETRYABLE_KINDS and attempt <= self.max_retries:
                    logger.warning(
                        f"Attempt {attempt}/{self.max_retries + 1} failed for "
                        f"{task.course_slug} ({task.provider}): {message}. "
                        f"Retrying in {self.retry_delay_seconds:.1f}s..."
                    )
                    await asyncio.sleep(self.retry_delay_seconds)
                    continue
                return TaskFailure(kind, message), attempt

            if not isinstance(raw, list):
                return (
                    TaskFailure(
                        FailureKind.INTERNAL,
                        f"{task.provider} adapter returned {type(raw).__name__}, expected a list",
                    ),
                    attempt,
                )
            return TaskSuccess(validate_tee_times(raw)), attempt

    async def _run_once(self, invocation: Invocation) -> Any:
        future = asyncio.ensure_future(invocation())
        if self.cancel_on_timeout:
            return await asyncio.wait_for(future, self.timeout_seconds)

        try:
            return await asyncio.wait_for(asyncio.shield(future), self.timeout_seconds)
        except TimeoutError:
            future.add_done_callback(_consume_abandoned_result)
            raise

    def _emit(
        self, task: ProviderTask, outcome: TaskOutcome, attempts: int, duration_ms: int
    ) -> None:
        if isinstance(outcome, TaskSuccess):
            record = OutcomeRecord(
                course=task.course_slug,
                provider=task.provider,
                success=True,
                duration_ms=duration_ms,
                attempts=attempts,
                record_count=len(outcome.records),
            )
        else:
            record = OutcomeRecord(
                course=task.course_slug,
                provider=task.provider,
                success=False,
                duration_ms=duration_ms,
                attempts=attempts,
                error_kind=outcome.kind,
                error=outcome.message,
            )
        try:
            self._sink(record)
        except Exception:
            logger.exception("Outcome sink raised; dropping outcome record")
