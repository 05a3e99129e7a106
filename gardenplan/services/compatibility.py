"""
Companion / incompatibility lookup and companion spacing factors.

Pure lookup, no errors at query time: unknown types are neither companions
nor incompatible and get a spacing factor of 1.0. The table is symmetric by
construction and validated when built.
"""
from collections.abc import Iterable

from gardenplan.schemas.garden import Plant, normalize_plant_type
from gardenplan.services.plant_catalog import CATALOG

COMPANION_SPACING_FACTOR = 0.75  # 25% spacing reduction for companion pairs
MIN_SPACING_FRACTION = 0.75      # never below 75% of the smaller plant's spacing


def _pair(a: str, b: str) -> frozenset[str]:
    return frozenset((normalize_plant_type(a), normalize_plant_type(b)))


class CompatibilityTable:
    def __init__(
        self,
        companions: Iterable[tuple[str, str]] = (),
        incompatible: Iterable[tuple[str, str]] = (),
    ) -> None:
        self._companions = {_pair(a, b) for a, b in companions}
        self._incompatible = {_pair(a, b) for a, b in incompatible}
        self._validate()

    def _validate(self) -> None:
        for pair in self._companions | self._incompatible:
            if len(pair) != 2:
                raise ValueError(f"Plant type cannot be related to itself: {next(iter(pair))}")
        conflicts = self._companions & self._incompatible
        if conflicts:
            names = ", ".join(sorted("/".join(sorted(p)) for p in conflicts))
            raise ValueError(f"Pairs listed as both companion and incompatible: {names}")

    @classmethod
    def default(cls) -> "CompatibilityTable":
        return cls(
            companions=[(e.type, c) for e in CATALOG.values() for c in e.companions],
            incompatible=[(e.type, i) for e in CATALOG.values() for i in e.incompatible],
        )

    def merged_with_plants(self, plants: Iterable[Plant]) -> "CompatibilityTable":
        """
        Return a new table that also holds the relations declared on `plants`.

        Self-relations are ignored and an incompatibility overrides a
        companion declaration for the same pair.
        """
        companions = set(self._companions)
        incompatible = set(self._incompatible)
        for plant in plants:
            companions.update(_pair(plant.type, t) for t in plant.companion_plant_types)
            incompatible.update(_pair(plant.type, t) for t in plant.incompatible_plant_types)
        companions = {p for p in companions if len(p) == 2} - incompatible
        incompatible = {p for p in incompatible if len(p) == 2}
        return CompatibilityTable(
            (tuple(sorted(p)) for p in companions),
            (tuple(sorted(p)) for p in incompatible),
        )

    def are_companions(self, type_a: str, type_b: str) -> bool:
        return _pair(type_a, type_b) in self._companions

    def are_incompatible(self, type_a: str, type_b: str) -> bool:
        return _pair(type_a, type_b) in self._incompatible

    def spacing_factor(self, type_a: str, type_b: str) -> float:
        return COMPANION_SPACING_FACTOR if self.are_companions(type_a, type_b) else 1.0

    def effective_spacing(self, a: Plant, b: Plant) -> float:
        """Spacing in inches between two neighbouring plants, with the 75% floor applied."""
        adjusted = max(a.spacing_inches, b.spacing_inches) * self.spacing_factor(a.type, b.type)
        floor = min(a.spacing_inches, b.spacing_inches) * MIN_SPACING_FRACTION
        return round(max(adjusted, floor), 1)


DEFAULT_TABLE = CompatibilityTable.default()
