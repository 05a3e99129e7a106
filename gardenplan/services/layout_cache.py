"""
Optional layout cache.

Layouts are keyed by a hash of the garden's content (id, area, zones, plants),
so any edit to a garden produces a new key and the old entry is never
served again. Entries also expire after a freshness window
(LAYOUT_CACHE_TTL_SECONDS, 24 hours by default).

Two backends share the get/put interface:
  - InMemoryLayoutCache — process-local dict guarded by a lock, swept of
                          expired entries on every put
  - RedisLayoutCache    — SETEX of the layout JSON
Only successful layouts are cached.
"""
import hashlib
import json
import logging
import threading
import time
from typing import Any, Optional, Protocol

from gardenplan.core.config import settings
from gardenplan.core.errors import OptimizationError
from gardenplan.schemas.garden import Garden, Layout
from gardenplan.services.layout import optimize

logger = logging.getLogger(__name__)


class LayoutCache(Protocol):
    async def get(self, key: str) -> Optional[Layout]: ...

    async def put(self, key: str, layout: Layout, ttl_seconds: int) -> None: ...


def garden_cache_key(garden: Garden) -> str:
    payload = garden.model_dump(mode="json", include={"id", "area", "zones", "plants"})
    # Assignments are output, not input.
    for zone in payload["zones"]:
        zone.pop("assigned_plant_ids", None)
    digest = hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf-8")).hexdigest()
    return f"layout:{digest}"


class InMemoryLayoutCache:
    def __init__(self, clock=time.monotonic) -> None:
        self._entries: dict[str, tuple[float, Layout]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    async def get(self, key: str) -> Optional[Layout]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, layout = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
        # Callers get their own copy; the stored entry stays untouched.
        return layout.model_copy(deep=True)

    async def put(self, key: str, layout: Layout, ttl_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries[key] = (now + ttl_seconds, layout.model_copy(deep=True))

    def _sweep(self, now: float) -> None:
        """Drop expired entries. Old content-hash keys are never read again."""
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("layout cache: swept %d expired entries", len(expired))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisLayoutCache:
    def __init__(self, redis: Any) -> None:
        self._redis = redis

    async def get(self, key: str) -> Optional[Layout]:
        cached = await self._redis.get(key)
        if cached is None:
            return None
        raw_str = cached.decode("utf-8") if isinstance(cached, bytes) else cached
        return Layout.model_validate_json(raw_str)

    async def put(self, key: str, layout: Layout, ttl_seconds: int) -> None:
        await self._redis.setex(key, ttl_seconds, layout.model_dump_json())


async def optimize_cached(
    garden: Garden,
    cache: LayoutCache,
    ttl_seconds: Optional[int] = None,
    min_utilization: Optional[float] = None,
) -> Layout | OptimizationError:
    """
    Return the cached layout for this exact garden content, or optimize
    and cache the result.
    """
    minimum = settings.MIN_SPACE_UTILIZATION if min_utilization is None else min_utilization
    key = f"{garden_cache_key(garden)}:{minimum:g}"

    cached = await cache.get(key)
    if cached is not None:
        logger.debug("layout cache hit: %s", key)
        return cached

    logger.debug("layout cache miss: %s — optimizing garden %s", key, garden.id)
    result = optimize(garden, min_utilization=minimum)
    if isinstance(result, Layout):
        ttl = settings.LAYOUT_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        await cache.put(key, result, ttl)
    return result
