"""Tests for composition classification."""

from decimal import Decimal

import pytest

from materia.analysis import (
    hydrocarbon_proportions,
    is_carbon,
    is_hydrocarbon,
    is_metal_ore,
    is_water,
    surface_gravity,
    water_proportion,
)
from materia.core.constants import GRAVITATIONAL_CONSTANT
from materia.geometry.shapes import Sphere
from materia.materials.composite import Composite
from materia.materials.material import Material
from materia.substances.mixture import Mixture
from materia.substances.registry import get_substance


class TestMetalOre:
    """Test is_metal_ore."""

    @pytest.mark.parametrize("key", ["hematite", "magnetite"])
    def test_iron_oxides(self, key):
        assert is_metal_ore(get_substance(key))

    @pytest.mark.parametrize("key", ["sodium_chloride", "silicon_dioxide", "water", "carbon_steel", "calcium_oxide"])
    def test_not_ores(self, key):
        assert not is_metal_ore(get_substance(key))

    def test_pure_metal_counts(self, iron):
        assert is_metal_ore(iron)

    def test_ore_share_in_material(self, hematite, silica):
        assert is_metal_ore(Material([(hematite, "0.6"), (silica, "0.4")]))
        assert not is_metal_ore(Material([(hematite, "0.4"), (silica, "0.6")]))

    def test_threshold_is_inclusive(self, hematite, silica):
        assert is_metal_ore(Mixture([(hematite, "0.5"), (silica, "0.5")]))

    def test_composite(self, rock, pond):
        assert not is_metal_ore(Composite([rock, pond]))
        assert is_metal_ore(Composite([rock, rock.get_clone()]))


class TestWater:
    """Test is_water and water_proportion."""

    def test_leaf(self, water, salt):
        assert is_water(water)
        assert not is_water(salt)

    def test_seawater(self):
        seawater = get_substance("seawater")
        assert water_proportion(seawater) == Decimal("0.965")
        assert is_water(seawater)

    def test_nested(self, pond, iron):
        muddy = pond.add(iron, "0.1")
        assert water_proportion(muddy) == Decimal("0.9")
        assert not is_water(muddy)
        assert is_water(pond)

    def test_protein(self, protein):
        assert water_proportion(protein) == 0
        assert not is_water(protein)


class TestCarbon:
    """Test is_carbon."""

    def test_allotropes(self, carbon):
        assert is_carbon(carbon)
        assert is_carbon(get_substance("diamond"))
        assert is_carbon(Mixture([carbon, get_substance("diamond")]))

    def test_not_carbon(self, methane, protein, iron):
        assert not is_carbon(methane)
        assert not is_carbon(protein)
        assert not is_carbon(Mixture([(iron, 1)]))
        assert not is_carbon(Mixture.EMPTY)


class TestHydrocarbon:
    """Test is_hydrocarbon and hydrocarbon_proportions."""

    @pytest.mark.parametrize("key", ["methane", "ethane", "benzene"])
    def test_pure_hydrocarbons(self, key):
        assert is_hydrocarbon(get_substance(key))

    def test_mixed_deposit(self, carbon, methane, water, silica):
        deposit = Mixture([(carbon, "0.5"), (methane, "0.32"), (water, "0.1"), (silica, "0.08")])
        assert hydrocarbon_proportions(deposit) == (Decimal("0.5"), Decimal("0.32"), Decimal("0.1"))
        assert is_hydrocarbon(deposit)

    def test_too_little(self, methane, silica):
        assert not is_hydrocarbon(Mixture([(methane, "0.2"), (silica, "0.8")]))

    def test_minerals_dominate(self, methane, silica):
        assert not is_hydrocarbon(Mixture([(methane, "0.3"), (silica, "0.7")]))

    def test_not_hydrocarbons(self, carbon, water, protein):
        assert not is_hydrocarbon(carbon)
        assert not is_hydrocarbon(water)
        assert not is_hydrocarbon(protein)

    def test_material(self, methane):
        assert is_hydrocarbon(Material(methane, mass=1.0))


class TestSurfaceGravity:
    """Test surface_gravity."""

    def test_sphere(self, iron):
        body = Material(iron, Sphere(radius=2.0), mass=1.0e6)
        assert surface_gravity(body) == pytest.approx(GRAVITATIONAL_CONSTANT * 1.0e6 / 4.0)

    def test_point(self, iron):
        assert surface_gravity(Material(iron, mass=1.0)) == 0.0
