import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from gardenplan.core.deps import get_layout_cache
from gardenplan.main import app
from gardenplan.schemas.garden import Garden, Plant, Zone
from gardenplan.services.layout_cache import InMemoryLayoutCache


@pytest.fixture
def make_plant():
    def _make(plant_id: str, plant_type: str, spacing: float = 12, sunlight: str = "FULL_SUN", **kwargs) -> Plant:
        return Plant(id=plant_id, type=plant_type, spacing_inches=spacing, sunlight_needs=sunlight, **kwargs)
    return _make


@pytest.fixture
def make_garden():
    def _make(area: float, zones: list[tuple[str, float, str]], plants: list[Plant], garden_id: str = "g1") -> Garden:
        return Garden(
            id=garden_id,
            area=area,
            zones=[Zone(id=zid, area=zarea, sunlight_condition=sun) for zid, zarea, sun in zones],
            plants=plants,
        )
    return _make


@pytest.fixture
def layout_cache():
    return InMemoryLayoutCache()


@pytest_asyncio.fixture
async def client(layout_cache: InMemoryLayoutCache):
    async def override_get_layout_cache():
        return layout_cache

    app.dependency_overrides[get_layout_cache] = override_get_layout_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
