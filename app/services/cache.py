import logging
import threading
import time as time_module
from collections.abc import Callable
from dataclasses import dataclass

from app.config import settings
from app.models.schemas import AggregatedResponse

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    payload: AggregatedResponse
    inserted_at: float


class AggregationCache:
    """
    In-process TTL store for aggregated tee time responses.

    Keys are (course selector, ISO date). Expired entries are evicted lazily
    on read. There is no capacity bound and nothing is shared across
    processes.

    Args:
        ttl_seconds: Age after which an entry reads as absent.
        clock: Monotonic time source in seconds; injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time_module.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache_ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> AggregatedResponse | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.inserted_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Cache entry expired for {key}")
                return None
            return entry.payload

    def put(self, key: CacheKey, payload: AggregatedResponse) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, payload=payload, inserted_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
