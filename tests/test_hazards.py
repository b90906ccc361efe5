"""Tests for the hazard catalog."""

import pytest
from py_wicw.config.hazard_catalog import DEFAULT_HAZARD_CATALOG, HazardProperties, HazardType
from py_wicw.core.alea_prng import AleaPRNG
from py_wicw.core.hazards import HazardCatalog, HazardPlacement


@pytest.fixture
def catalog():
    return HazardCatalog()


class TestDefaultCatalog:
    """Test the built-in hazard table."""

    def test_counts(self, catalog):
        assert len(catalog) == 24
        assert len(catalog.regenerating()) == 8
        assert len(DEFAULT_HAZARD_CATALOG) == 24

    def test_every_type_has_properties(self, catalog):
        for hazard_type in HazardType:
            assert catalog.properties(hazard_type) is not None

    def test_special_tool_hazards(self, catalog):
        assert [h.type for h in catalog.special_tool()] == [HazardType.SCRATCHES]

    def test_frost_properties(self, catalog):
        frost = catalog.properties(HazardType.FROST)
        assert frost.is_regenerating
        assert frost.regen_rate == pytest.approx(0.025)
        assert frost.spread_radius == pytest.approx(2.5)
        assert frost.first_appearance_world == 4

    def test_first_world_hazards(self, catalog):
        types = {h.type for h in catalog.hazards_for_world(1)}
        assert types == {
            HazardType.BIRD_POOP,
            HazardType.DEAD_FLIES,
            HazardType.MUD,
            HazardType.WATER_MARKS,
            HazardType.DUST,
            HazardType.CONDENSATION,
        }

    def test_later_worlds_unlock_more(self, catalog):
        counts = [len(catalog.hazards_for_world(w)) for w in range(1, 11)]
        assert counts == sorted(counts)
        assert counts[-1] == 24


class TestSelection:
    """Test weighted hazard selection."""

    def test_deterministic(self, catalog):
        a = catalog.select(3, 12, AleaPRNG(5381))
        b = catalog.select(3, 12, AleaPRNG(5381))
        assert a == b
        assert len(a) == 12

    def test_only_unlocked_hazards(self, catalog):
        allowed = {h.type for h in catalog.hazards_for_world(2)}
        selected = catalog.select(2, 200, AleaPRNG("world2"))
        assert set(selected) <= allowed

    def test_zero_count(self, catalog):
        assert catalog.select(1, 0, AleaPRNG(1)) == []

    def test_no_weighted_hazards(self):
        empty = HazardCatalog([
            HazardProperties(type=HazardType.DUST, display_name="Dust", spawn_weight=0.0),
        ])
        assert empty.select(1, 5, AleaPRNG(1)) == []

    def test_zero_weight_never_chosen(self):
        catalog = HazardCatalog([
            HazardProperties(type=HazardType.DUST, display_name="Dust", spawn_weight=0.0),
            HazardProperties(type=HazardType.MUD, display_name="Mud", spawn_weight=1.0),
        ])
        assert set(catalog.select(1, 50, AleaPRNG(9))) == {HazardType.MUD}

    def test_weights_shape_distribution(self):
        catalog = HazardCatalog([
            HazardProperties(type=HazardType.DUST, display_name="Dust", spawn_weight=9.0),
            HazardProperties(type=HazardType.MUD, display_name="Mud", spawn_weight=1.0),
        ])
        selected = catalog.select(1, 1000, AleaPRNG("weights"))
        assert selected.count(HazardType.DUST) > 800


class TestDifficulty:
    """Test hazard difficulty scoring."""

    def test_regenerating_bonus(self, catalog):
        assert catalog.level_difficulty([HazardType.FROST]) == pytest.approx(1.8)
        assert catalog.level_difficulty([HazardType.DUST, HazardType.FROST]) == pytest.approx(2.3)

    def test_empty(self, catalog):
        assert catalog.level_difficulty([]) == 0.0

    def test_unknown_types_ignored(self):
        catalog = HazardCatalog([
            HazardProperties(type=HazardType.MUD, display_name="Mud", clean_difficulty=1.2),
        ])
        assert catalog.level_difficulty([HazardType.MUD, HazardType.RUST]) == pytest.approx(1.2)


class TestHazardPlacement:
    def test_to_dict(self):
        placement = HazardPlacement(
            type=HazardType.GUM,
            position=(1.5, 2.5),
            size=0.75,
            clean_difficulty=1.6,
            regen_rate=0.0,
        )
        assert placement.to_dict() == {
            "type": "gum",
            "position": [1.5, 2.5],
            "size": 0.75,
            "clean_difficulty": 1.6,
            "regen_rate": 0.0,
        }
