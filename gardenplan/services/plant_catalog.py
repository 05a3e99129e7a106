"""
Hardcoded catalog of known vegetable types.

Each entry carries the defaults used when a plant is added by type alone
(spacing, sunlight, maturity, care intervals) and the companion /
incompatible relations that seed the compatibility table. Relations are
listed once per pair; the table makes them symmetric.
Unknown types are allowed everywhere — they simply have no catalog entry.
"""
from dataclasses import dataclass, field
from typing import Optional

from gardenplan.schemas.garden import Plant, SunlightCondition, normalize_plant_type


@dataclass(frozen=True)
class CatalogEntry:
    type: str
    spacing_inches: float
    sunlight_needs: SunlightCondition
    days_to_maturity: int
    watering_frequency_days: int
    fertilizing_frequency_days: int
    companions: tuple[str, ...] = field(default=())
    incompatible: tuple[str, ...] = field(default=())


# ── Catalog ───────────────────────────────────────────────────────────────────

_ENTRIES: list[CatalogEntry] = [
    CatalogEntry("tomato", 24, "FULL_SUN", 80, 3, 14,
                 companions=("basil", "carrot", "lettuce", "onion"),
                 incompatible=("potato", "corn", "cabbage")),
    CatalogEntry("lettuce", 12, "PARTIAL_SHADE", 45, 2, 21,
                 companions=("carrot", "radish", "onion")),
    CatalogEntry("carrot", 3, "FULL_SUN", 70, 3, 30,
                 companions=("onion", "pea")),
    CatalogEntry("basil", 12, "FULL_SUN", 60, 2, 28,
                 companions=("pepper",)),
    CatalogEntry("pepper", 18, "FULL_SUN", 75, 3, 14,
                 companions=("onion",)),
    CatalogEntry("onion", 4, "FULL_SUN", 100, 4, 21,
                 companions=("cabbage",),
                 incompatible=("bean", "pea")),
    CatalogEntry("garlic", 6, "FULL_SUN", 240, 5, 30,
                 incompatible=("bean", "pea")),
    CatalogEntry("bean", 6, "FULL_SUN", 55, 3, 28,
                 companions=("corn", "cucumber", "squash")),
    CatalogEntry("pea", 3, "PARTIAL_SHADE", 60, 3, 28,
                 companions=("radish",)),
    CatalogEntry("cucumber", 12, "FULL_SUN", 55, 2, 14,
                 incompatible=("potato",)),
    CatalogEntry("squash", 36, "FULL_SUN", 50, 3, 14,
                 companions=("corn",)),
    CatalogEntry("corn", 12, "FULL_SUN", 85, 3, 14),
    CatalogEntry("potato", 12, "FULL_SUN", 90, 4, 21),
    CatalogEntry("cabbage", 18, "PARTIAL_SHADE", 70, 3, 14),
    CatalogEntry("spinach", 6, "PARTIAL_SHADE", 40, 2, 21,
                 companions=("radish",)),
    CatalogEntry("radish", 2, "PARTIAL_SHADE", 25, 2, 30),
]

CATALOG: dict[str, CatalogEntry] = {e.type: e for e in _ENTRIES}


def get_entry(plant_type: str) -> Optional[CatalogEntry]:
    return CATALOG.get(normalize_plant_type(plant_type))


def plant_from_catalog(plant_id: str, plant_type: str) -> Plant:
    """
    Build a Plant from the catalog defaults for `plant_type`.

    Raises KeyError for types the catalog does not know.
    """
    entry = get_entry(plant_type)
    if entry is None:
        raise KeyError(f"Unknown plant type: {plant_type}")
    return Plant(
        id=plant_id,
        type=entry.type,
        spacing_inches=entry.spacing_inches,
        sunlight_needs=entry.sunlight_needs,
        days_to_maturity=entry.days_to_maturity,
        companion_plant_types=list(entry.companions),
        incompatible_plant_types=list(entry.incompatible),
        watering_frequency_days=entry.watering_frequency_days,
        fertilizing_frequency_days=entry.fertilizing_frequency_days,
    )
