"""
Result types produced by the resilient executor for one provider call.

A provider attempt settles into exactly one of TaskSuccess or TaskFailure.
Neither carries the course or provider; the caller pairs them with the task
that produced them.
"""

from dataclasses import dataclass, field

from app.models.schemas import CanonicalTeeTime, FailureKind


@dataclass(frozen=True)
class TaskSuccess:
    records: list[CanonicalTeeTime] = field(default_factory=list)


@dataclass(frozen=True)
class TaskFailure:
    kind: FailureKind
    message: str


TaskOutcome = TaskSuccess | TaskFailure


@dataclass(frozen=True)
class OutcomeRecord:
    """Structured summary of one executed task, emitted to the observability sink."""

    course: str
    provider: str
    success: bool
    duration_ms: int
    attempts: int
    record_count: int | None = None
    error_kind: FailureKind | None = None
    error: str | None = None
