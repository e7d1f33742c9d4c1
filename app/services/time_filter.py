"""
Post-hoc time-of-day filtering of aggregated tee times.

Filtering is a pure transform over a list of records. It never touches the
cached response; callers apply it to the list they are about to return.
"""

from collections.abc import Sequence
from datetime import datetime, time

import pytz

from app.config import settings
from app.models.schemas import CanonicalTeeTime


def parse_time_of_day(value: str | None) -> time | None:
    """
    Parse an HH:MM or HH:MM:SS bound. Empty means unbounded.

    Raises:
        ValueError: If the value is not a valid time of day.
    """
    if not value:
        return None
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time '{value}'. Expected HH:MM.")


def local_time_of_day(timestamp: str, tz: pytz.BaseTzInfo) -> time | None:
    """Time of day for a provider timestamp; aware values are converted into tz."""
    try:
        parsed = datetime.fromisoformat(timestamp.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.time()


def filter_by_time_window(
    tee_times: Sequence[CanonicalTeeTime],
    start: time | None = None,
    end: time | None = None,
    timezone: str | None = None,
) -> list[CanonicalTeeTime]:
    if start is None and end is None:
        return list(tee_times)

    tz = pytz.timezone(timezone or settings.timezone)
    kept = []
    for tee_time in tee_times:
        time_of_day = local_time_of_day(tee_time.timestamp, tz)
        if time_of_day is None:
            continue
        if start is not None and time_of_day < start:
            continue
        if end is not None and time_of_day > end:
            continue
        kept.append(tee_time)
    return kept
