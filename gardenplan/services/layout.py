"""
Garden layout optimizer.

Assigns plants to sunlight zones, drops plants that would share a zone with
an incompatible neighbour, packs the survivors row by row inside each zone
and scores the result by sunlight-weighted space utilization.

Deterministic: the same Garden always yields the same Layout apart from
`generated_at`. Bad input never raises out of `optimize` — the matching
OptimizationError is returned instead.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Optional

from gardenplan.core.config import settings
from gardenplan.core.errors import (
    BelowTarget,
    IncompatiblePlants,
    InsufficientSpace,
    InvalidArea,
    InvalidZones,
    NoPlants,
    OptimizationError,
)
from gardenplan.schemas.garden import (
    Garden,
    Layout,
    Plant,
    PlantPlacement,
    UnplacedPlant,
    Zone,
    ZoneLayout,
)
from gardenplan.services.compatibility import DEFAULT_TABLE, CompatibilityTable

logger = logging.getLogger(__name__)

MIN_GARDEN_AREA = 1.0
MAX_GARDEN_AREA = 1000.0
MIN_ZONE_SIZE = 4.0
ZONE_AREA_TOLERANCE = 0.1
ACCESSIBILITY_BUFFER = 1.2
FULL_SUN_WEIGHT = 1.2
_EPSILON = 1e-9

# Daily sunlight hours provided by a zone / required by a plant
SUNLIGHT_HOURS: dict[str, int] = {"FULL_SUN": 6, "PARTIAL_SHADE": 4, "FULL_SHADE": 2}


# ── Validation ────────────────────────────────────────────────────────────────


def required_area(plants: list[Plant]) -> float:
    """Square feet the plants need including the accessibility buffer."""
    return sum(p.footprint_sq_ft for p in plants) * ACCESSIBILITY_BUFFER


def validate_garden(garden: Garden) -> None:
    """Raise the first OptimizationError that applies to `garden`."""
    if not MIN_GARDEN_AREA <= garden.area <= MAX_GARDEN_AREA:
        raise InvalidArea(garden.area, MIN_GARDEN_AREA, MAX_GARDEN_AREA)

    if not garden.zones:
        raise InvalidZones("Garden must have at least one zone defined")

    for zone in garden.zones:
        if zone.sunlight_condition not in SUNLIGHT_HOURS:
            raise InvalidZones(
                f"Zone {zone.id} has invalid sunlight condition: {zone.sunlight_condition}",
                zone_id=zone.id,
            )
        if zone.area < MIN_ZONE_SIZE:
            raise InvalidZones(
                f"Zone {zone.id} is smaller than the {MIN_ZONE_SIZE:g} sq ft minimum",
                zone_id=zone.id, area=zone.area,
            )

    total_zone_area = sum(z.area for z in garden.zones)
    if abs(total_zone_area - garden.area) > ZONE_AREA_TOLERANCE:
        raise InvalidZones(
            f"Total zone area {total_zone_area:g} sq ft must match garden area {garden.area:g} sq ft",
            total_zone_area=total_zone_area, garden_area=garden.area,
        )

    if not garden.plants:
        raise NoPlants()

    needed = required_area(garden.plants)
    if needed > garden.area + _EPSILON:
        raise InsufficientSpace(needed, garden.area)


# ── Step 1: zone selection ────────────────────────────────────────────────────


def _assign_zones(garden: Garden) -> tuple[dict[str, list[Plant]], list[UnplacedPlant]]:
    """
    Pick one zone per plant.

    The most light-hungry and largest plants go first. Each takes the
    dimmest zone that still satisfies it and has room left, so bright
    zones stay free for plants that need them.
    """
    remaining = {z.id: z.area for z in garden.zones}
    zone_order = {z.id: i for i, z in enumerate(garden.zones)}
    candidates: dict[str, list[Plant]] = {z.id: [] for z in garden.zones}
    unplaced: list[UnplacedPlant] = []

    plants = sorted(
        garden.plants,
        key=lambda p: (-SUNLIGHT_HOURS[p.sunlight_needs], -p.footprint_sq_ft, p.id),
    )
    for plant in plants:
        need = SUNLIGHT_HOURS[plant.sunlight_needs]
        eligible = [z for z in garden.zones if SUNLIGHT_HOURS[z.sunlight_condition] >= need]
        if not eligible:
            logger.debug("optimize: plant %s needs more sun than any zone provides", plant.id)
            unplaced.append(UnplacedPlant(plant_id=plant.id, reason="insufficient_sunlight"))
            continue

        needed = plant.footprint_sq_ft * ACCESSIBILITY_BUFFER
        fitting = [z for z in eligible if remaining[z.id] + _EPSILON >= needed]
        if not fitting:
            logger.debug("optimize: no room left for plant %s", plant.id)
            unplaced.append(UnplacedPlant(plant_id=plant.id, reason="insufficient_space"))
            continue

        zone = min(
            fitting,
            key=lambda z: (SUNLIGHT_HOURS[z.sunlight_condition], -remaining[z.id], zone_order[z.id]),
        )
        candidates[zone.id].append(plant)
        remaining[zone.id] -= needed

    return candidates, unplaced


def _target_area(candidates: list[Plant], garden_area: float) -> float:
    return round(min(required_area(candidates), garden_area), 2)


# ── Step 2: placement & compatibility ─────────────────────────────────────────


def _place_compatible(
    zone: Zone, candidates: list[Plant], table: CompatibilityTable
) -> tuple[list[Plant], list[UnplacedPlant]]:
    def companion_count(plant: Plant) -> int:
        return sum(
            1 for other in candidates
            if other.id != plant.id and table.are_companions(plant.type, other.type)
        )

    ordered = sorted(candidates, key=lambda p: (-companion_count(p), p.id))
    placed: list[Plant] = []
    rejected: list[UnplacedPlant] = []
    for plant in ordered:
        clashes = [p.id for p in placed if table.are_incompatible(p.type, plant.type)]
        if clashes:
            logger.warning(
                "optimize: plant %s rejected from zone %s — incompatible with %s",
                plant.id, zone.id, ", ".join(clashes),
            )
            rejected.append(UnplacedPlant(plant_id=plant.id, reason="incompatible", zone_id=zone.id))
            continue
        placed.append(plant)
    return placed, rejected


def _positions(zone: Zone, placed: list[Plant], table: CompatibilityTable) -> list[PlantPlacement]:
    """Row-major packing inside a square of side sqrt(zone.area), in feet."""
    side = math.sqrt(zone.area)
    placements: list[PlantPlacement] = []
    x = y = row_depth = 0.0
    prev: Optional[Plant] = None

    for plant in placed:
        own_ft = plant.spacing_inches / 12
        spacing = plant.spacing_inches
        if prev is not None:
            spacing = table.effective_spacing(prev, plant)
            x += spacing / 12
            if x + own_ft > side + _EPSILON:
                x = 0.0
                y += row_depth
                row_depth = 0.0
                spacing = plant.spacing_inches
        placements.append(
            PlantPlacement(plant_id=plant.id, x_ft=round(x, 2), y_ft=round(y, 2), spacing_inches=spacing)
        )
        row_depth = max(row_depth, own_ft)
        prev = plant

    return placements


# ── Step 3: utilization ───────────────────────────────────────────────────────


def space_utilization(garden: Garden, placed: dict[str, list[Plant]]) -> float:
    """Percent of the garden in use, counting a zone once it hosts a plant."""
    used = sum(
        zone.area * (FULL_SUN_WEIGHT if zone.sunlight_condition == "FULL_SUN" else 1.0)
        for zone in garden.zones
        if placed.get(zone.id)
    )
    percent = 100 * used / garden.area
    return round(min(max(percent, 0.0), 100.0), 2)


def _check_no_incompatible(zones: list[ZoneLayout], plants: dict[str, Plant], table: CompatibilityTable) -> None:
    for zone in zones:
        members = [plants[pid] for pid in zone.assigned_plant_ids]
        for i, a in enumerate(members):
            for b in members[i + 1:]:
                if table.are_incompatible(a.type, b.type):
                    raise IncompatiblePlants(zone.id, [a.id, b.id])


# ── Service function ──────────────────────────────────────────────────────────


def _optimize(garden: Garden, minimum: float, table: CompatibilityTable, now: datetime) -> Layout:
    validate_garden(garden)
    table = table.merged_with_plants(garden.plants)

    candidates, unplaced = _assign_zones(garden)

    placed: dict[str, list[Plant]] = {}
    zone_layouts: list[ZoneLayout] = []
    for zone in garden.zones:
        zone_placed, rejected = _place_compatible(zone, candidates[zone.id], table)
        placed[zone.id] = zone_placed
        unplaced.extend(rejected)
        zone_layouts.append(ZoneLayout(
            id=zone.id,
            area=zone.area,
            sunlight_condition=zone.sunlight_condition,
            target_area=_target_area(candidates[zone.id], garden.area),
            assigned_plant_ids=[p.id for p in zone_placed],
            placements=_positions(zone, zone_placed, table),
        ))

    _check_no_incompatible(zone_layouts, {p.id: p for p in garden.plants}, table)

    utilization = space_utilization(garden, placed)
    if utilization < minimum:
        raise BelowTarget(utilization, minimum)

    unplaced.sort(key=lambda u: u.plant_id)
    return Layout(
        garden_id=garden.id,
        zones=zone_layouts,
        unplaced=unplaced,
        space_utilization_percent=utilization,
        generated_at=now,
    )


def optimize(
    garden: Garden,
    *,
    min_utilization: Optional[float] = None,
    table: Optional[CompatibilityTable] = None,
    now: Optional[datetime] = None,
) -> Layout | OptimizationError:
    """
    Lay out `garden` and return the Layout, or the OptimizationError that
    prevented it. Validation happens before any work, so a failure never
    carries a partial layout.
    """
    minimum = settings.MIN_SPACE_UTILIZATION if min_utilization is None else min_utilization
    try:
        layout = _optimize(
            garden,
            minimum,
            table or DEFAULT_TABLE,
            now or datetime.now(timezone.utc),
        )
    except OptimizationError as exc:
        logger.info("optimize: garden %s rejected — %s", garden.id, exc.message)
        return exc

    logger.info(
        "optimize: garden %s laid out — %d placed, %d unplaced, %.2f%% utilization",
        garden.id,
        sum(len(z.assigned_plant_ids) for z in layout.zones),
        len(layout.unplaced),
        layout.space_utilization_percent,
    )
    return layout
