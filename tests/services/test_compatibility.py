import pytest

from gardenplan.services.compatibility import DEFAULT_TABLE, CompatibilityTable
from gardenplan.services.plant_catalog import CATALOG, get_entry, plant_from_catalog


def test_relations_are_symmetric():
    assert DEFAULT_TABLE.are_companions("tomato", "basil")
    assert DEFAULT_TABLE.are_companions("basil", "tomato")
    assert DEFAULT_TABLE.are_incompatible("potato", "tomato")
    assert DEFAULT_TABLE.are_incompatible("tomato", "potato")


def test_lookup_ignores_case_and_whitespace():
    assert DEFAULT_TABLE.are_companions(" Tomato", "BASIL ")


def test_unknown_types_are_neutral():
    assert not DEFAULT_TABLE.are_companions("tomato", "dragonfruit")
    assert not DEFAULT_TABLE.are_incompatible("tomato", "dragonfruit")
    assert DEFAULT_TABLE.spacing_factor("tomato", "dragonfruit") == 1.0


def test_spacing_factor():
    assert DEFAULT_TABLE.spacing_factor("tomato", "lettuce") == 0.75
    assert DEFAULT_TABLE.spacing_factor("tomato", "pepper") == 1.0


def test_effective_spacing_companions(make_plant):
    tomato = make_plant("t", "tomato", spacing=24)
    lettuce = make_plant("l", "lettuce", spacing=12)
    assert DEFAULT_TABLE.effective_spacing(lettuce, tomato) == 18.0


def test_effective_spacing_never_below_floor(make_plant):
    table = CompatibilityTable(companions=[("a", "b")])
    a = make_plant("a1", "a", spacing=20)
    b = make_plant("b1", "b", spacing=20)
    # 20 × 0.75 companion factor, floored at 75% of 20
    assert table.effective_spacing(a, b) == 15.0


def test_effective_spacing_neutral_pair(make_plant):
    tomato = make_plant("t", "tomato", spacing=24)
    pepper = make_plant("p", "pepper", spacing=18)
    assert DEFAULT_TABLE.effective_spacing(tomato, pepper) == 24.0


def test_conflicting_relations_rejected():
    with pytest.raises(ValueError, match="both companion and incompatible"):
        CompatibilityTable(companions=[("a", "b")], incompatible=[("b", "a")])


def test_self_relation_rejected():
    with pytest.raises(ValueError, match="itself"):
        CompatibilityTable(companions=[("mint", "Mint")])


def test_plant_declared_incompatibility_overrides_companion(make_plant):
    plants = [
        make_plant("t", "tomato", incompatible_plant_types=["basil", "tomato"]),
        make_plant("m", "mint", companion_plant_types=["sage"]),
    ]

    merged = DEFAULT_TABLE.merged_with_plants(plants)

    assert merged.are_incompatible("tomato", "basil")
    assert not merged.are_companions("tomato", "basil")
    assert merged.are_companions("mint", "sage")
    # the base table is left alone
    assert DEFAULT_TABLE.are_companions("tomato", "basil")


def test_catalog_relations_refer_to_known_types():
    for entry in CATALOG.values():
        for other in entry.companions + entry.incompatible:
            assert other in CATALOG, f"{entry.type} refers to unknown type {other}"


def test_catalog_lookup():
    assert get_entry("Tomato").spacing_inches == 24
    assert get_entry("dragonfruit") is None


def test_plant_from_catalog():
    plant = plant_from_catalog("l1", "lettuce")
    assert (plant.id, plant.type, plant.spacing_inches, plant.sunlight_needs) == ("l1", "lettuce", 12, "PARTIAL_SHADE")
    assert plant.watering_frequency_days == 2


def test_plant_from_catalog_unknown_type():
    with pytest.raises(KeyError):
        plant_from_catalog("x", "dragonfruit")
