#!/usr/bin/env python3
"""
Run one live aggregation and print a per-course summary.

Useful for checking which backends are reachable before a deploy.

Usage:
    python scripts/check_providers.py --date 2025-11-20
    python scripts/check_providers.py --course rivertowne --date 2025-11-20
"""

import argparse
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.models.schemas import ALL_COURSES
from app.providers.http_client import HttpClient
from app.services.cache import AggregationCache
from app.services.course_registry import build_default_registry
from app.services.executor import ResilientExecutor
from app.services.orchestrator import InvalidQueryError, TeeTimeOrchestrator


async def check(course: str, date_str: str) -> int:
    http = HttpClient()
    registry = build_default_registry(http)
    orchestrator = TeeTimeOrchestrator(registry, ResilientExecutor(), AggregationCache())

    try:
        response = await orchestrator.handle(course, date_str)
    except InvalidQueryError as e:
        print(f"Invalid query: {e}")
        return 2
    finally:
        await http.close()

    counts: dict[str, int] = {}
    for tee_time in response.tee_times:
        counts[tee_time.course_slug] = counts.get(tee_time.course_slug, 0) + 1
    failures = {error.course: error for error in response.metadata.errors}

    print("=" * 60)
    print(f"{response.course.name} on {response.date}")
    print("=" * 60)
    for entry in orchestrator.resolve_courses(course):
        if entry.slug in failures:
            error = failures[entry.slug]
            print(f"  FAIL {entry.slug:<18} {entry.provider:<9} [{error.kind.value}] {error.message}")
        else:
            print(f"  OK   {entry.slug:<18} {entry.provider:<9} {counts.get(entry.slug, 0)} tee times")

    meta = response.metadata
    print(f"\n{meta.successful_courses}/{meta.total_courses} courses succeeded")
    return 0 if meta.failed_courses == 0 else 1


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--course", default=ALL_COURSES, help="Course slug or 'all'")
    parser.add_argument(
        "--date",
        default=(date.today() + timedelta(days=1)).isoformat(),
        help="Date in YYYY-MM-DD format (default: tomorrow)",
    )
    args = parser.parse_args()
    sys.exit(asyncio.run(check(args.course, args.date)))


if __name__ == "__main__":
    main()
