from datetime import datetime, timezone

from gardenplan.core.errors import NoPlants
from gardenplan.schemas.garden import Layout, UnplacedPlant
from gardenplan.services import layout_cache
from gardenplan.services.layout import optimize
from gardenplan.services.layout_cache import (
    InMemoryLayoutCache,
    RedisLayoutCache,
    garden_cache_key,
    optimize_cached,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl


def _garden(make_garden, make_plant, **overrides):
    plants = overrides.pop("plants", None) or [make_plant("tomato-1", "tomato", spacing=24)]
    return make_garden(100, [("z1", 100, "FULL_SUN")], plants, **overrides)


def _counting_optimize(monkeypatch) -> list:
    calls = []

    def fake(garden, **kwargs):
        calls.append(garden.id)
        return optimize(garden, now=NOW, **kwargs)

    monkeypatch.setattr(layout_cache, "optimize", fake)
    return calls


async def test_memory_cache_entries_expire():
    clock = FakeClock()
    cache = InMemoryLayoutCache(clock=clock)
    layout = Layout(garden_id="g1", zones=[], space_utilization_percent=0, generated_at=NOW)

    await cache.put("k", layout, ttl_seconds=60)
    clock.now += 59
    assert await cache.get("k") == layout
    clock.now += 1
    assert await cache.get("k") is None


async def test_memory_cache_sweeps_expired_entries_on_put():
    clock = FakeClock()
    cache = InMemoryLayoutCache(clock=clock)
    layout = Layout(garden_id="g1", zones=[], space_utilization_percent=0, generated_at=NOW)

    for i in range(50):
        await cache.put(f"k{i}", layout, ttl_seconds=10)
        clock.now += 100

    assert len(cache) == 1


async def test_edited_gardens_do_not_pile_up(make_garden, make_plant, monkeypatch):
    _counting_optimize(monkeypatch)
    clock = FakeClock()
    cache = InMemoryLayoutCache(clock=clock)

    for spacing in range(10, 30):
        garden = _garden(make_garden, make_plant, plants=[make_plant("tomato-1", "tomato", spacing=spacing)])
        await optimize_cached(garden, cache, ttl_seconds=10)
        clock.now += 100

    assert len(cache) == 1


async def test_memory_cache_hands_out_copies():
    cache = InMemoryLayoutCache()
    layout = Layout(garden_id="g1", zones=[], space_utilization_percent=50, generated_at=NOW)
    await cache.put("k", layout, ttl_seconds=60)

    first = await cache.get("k")
    first.space_utilization_percent = 0
    first.unplaced.append(UnplacedPlant(plant_id="p1", reason="incompatible"))
    layout.garden_id = "changed"

    second = await cache.get("k")
    assert second.space_utilization_percent == 50
    assert second.unplaced == []
    assert second.garden_id == "g1"


async def test_same_garden_served_from_cache(make_garden, make_plant, monkeypatch):
    calls = _counting_optimize(monkeypatch)
    cache = InMemoryLayoutCache()
    garden = _garden(make_garden, make_plant)

    first = await optimize_cached(garden, cache)
    second = await optimize_cached(garden.model_copy(deep=True), cache)

    assert calls == ["g1"]
    assert first == second


async def test_changed_garden_is_recomputed(make_garden, make_plant, monkeypatch):
    calls = _counting_optimize(monkeypatch)
    cache = InMemoryLayoutCache()

    await optimize_cached(_garden(make_garden, make_plant), cache)
    await optimize_cached(_garden(make_garden, make_plant, plants=[make_plant("tomato-1", "tomato", spacing=18)]), cache)
    await optimize_cached(_garden(make_garden, make_plant, garden_id="g2"), cache)

    assert calls == ["g1", "g1", "g2"]


async def test_different_minimum_is_recomputed(make_garden, make_plant, monkeypatch):
    calls = _counting_optimize(monkeypatch)
    cache = InMemoryLayoutCache()
    garden = _garden(make_garden, make_plant)

    await optimize_cached(garden, cache)
    await optimize_cached(garden, cache, min_utilization=50)

    assert len(calls) == 2


async def test_errors_are_not_cached(make_garden, monkeypatch):
    calls = _counting_optimize(monkeypatch)
    cache = InMemoryLayoutCache()
    garden = make_garden(100, [("z1", 100, "FULL_SUN")], [])

    assert isinstance(await optimize_cached(garden, cache), NoPlants)
    assert isinstance(await optimize_cached(garden, cache), NoPlants)
    assert len(calls) == 2


def test_cache_key_ignores_prior_assignments(make_garden, make_plant):
    garden = _garden(make_garden, make_plant)
    assigned = garden.model_copy(deep=True)
    assigned.zones[0].assigned_plant_ids = ["tomato-1"]

    assert garden_cache_key(garden) == garden_cache_key(assigned)
    assert garden_cache_key(garden).startswith("layout:")


async def test_redis_cache_stores_layout_json(make_garden, make_plant, monkeypatch):
    _counting_optimize(monkeypatch)
    redis = FakeRedis()
    cache = RedisLayoutCache(redis)
    garden = _garden(make_garden, make_plant)

    first = await optimize_cached(garden, cache, ttl_seconds=120)
    key, = redis.store
    assert redis.ttls[key] == 120

    cached = await cache.get(key)
    assert cached == first
    assert await cache.get("layout:missing") is None
