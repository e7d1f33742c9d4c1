#!/usr/bin/env python3
"""
Capture raw provider payloads from the live backends for offline tests.

This script:
1. Builds the default course registry
2. Fetches the raw payload for every course for one date
3. Saves each payload under tests/fixtures/ (JSON, or HTML for Quick18)

Usage:
    python scripts/capture_provider_snapshots.py [YYYY-MM-DD]
"""

import asyncio
import json
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.providers.base import ProviderError
from app.providers.http_client import HttpClient
from app.services.course_registry import build_default_registry

FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"


def save_snapshot(name: str, raw: object) -> Path:
    FIXTURES_DIR.mkdir(parents=True, exist_ok=True)
    if isinstance(raw, str):
        path = FIXTURES_DIR / f"{name}.html"
        path.write_text(raw, encoding="utf-8")
    else:
        path = FIXTURES_DIR / f"{name}.json"
        path.write_text(json.dumps(raw, indent=2), encoding="utf-8")
    return path


async def capture_snapshots(target_date: date) -> None:
    http = HttpClient()
    registry = build_default_registry(http, use_mock=False)
    print(f"Capturing payloads for {len(registry)} courses on {target_date}")

    try:
        for entry in registry:
            print(f"\n[{entry.provider}] {entry.slug}")
            try:
                raw = await entry.adapter.fetch(entry.slug, target_date)
            except ProviderError as e:
                print(f"  Failed: {e}")
                continue
            path = save_snapshot(f"{entry.provider}_{entry.slug}", raw)
            print(f"  Saved {path.name}")
    finally:
        await http.close()

    print("\n" + "=" * 60)
    print(f"Fixtures saved to: {FIXTURES_DIR}")
    print("=" * 60)


if __name__ == "__main__":
    target = date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else date.today() + timedelta(days=1)
    asyncio.run(capture_snapshots(target))
