from fastapi import APIRouter

from gardenplan.core.deps import LayoutCacheDep, raise_for_error
from gardenplan.core.errors import OptimizationError
from gardenplan.schemas.garden import Garden, Layout
from gardenplan.services.layout_cache import optimize_cached

router = APIRouter(prefix="/layouts", tags=["layouts"])


@router.post("/optimize", response_model=Layout)
async def optimize_layout(garden: Garden, cache: LayoutCacheDep):
    result = await optimize_cached(garden, cache)
    if isinstance(result, OptimizationError):
        raise_for_error(result)
    return result
