from typing import Annotated, NoReturn

import redis.asyncio as aioredis
from fastapi import Depends, HTTPException, status

from gardenplan.core.config import settings
from gardenplan.core.errors import AlreadyCompleted, GardenPlanError
from gardenplan.services.layout_cache import InMemoryLayoutCache, LayoutCache, RedisLayoutCache

# Module-level cache and Redis client (created once on first use)
_memory_cache = InMemoryLayoutCache()
_redis_client: aioredis.Redis | None = None


def _get_redis() -> aioredis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return _redis_client


async def get_layout_cache() -> LayoutCache:
    if settings.LAYOUT_CACHE_BACKEND == "redis":
        return RedisLayoutCache(_get_redis())
    return _memory_cache


def raise_for_error(error: GardenPlanError) -> NoReturn:
    status_code = (
        status.HTTP_409_CONFLICT
        if isinstance(error, AlreadyCompleted)
        else status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    raise HTTPException(status_code=status_code, detail=error.to_dict())


LayoutCacheDep = Annotated[LayoutCache, Depends(get_layout_cache)]
