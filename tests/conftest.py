"""Pytest configuration and shared fixtures for materia tests."""

import pytest

from materia.config.model_config import PACKAGED_CATALOG
from materia.geometry.shapes import Sphere
from materia.materials.material import Material
from materia.substances.registry import SubstanceRegistry, get_substance, reset_global_registry
from materia.substances.substance import Substance


@pytest.fixture(autouse=True)
def fresh_global_registry():
    """Rebuild the global registry for every test so registrations don't leak."""
    reset_global_registry()
    yield
    reset_global_registry()


@pytest.fixture
def registry():
    """Private registry loaded from the packaged catalog."""
    return SubstanceRegistry(PACKAGED_CATALOG)


@pytest.fixture
def empty_registry():
    """Registry with nothing registered."""
    return SubstanceRegistry()


# Catalog substances


@pytest.fixture
def water():
    return get_substance("water")


@pytest.fixture
def iron():
    return get_substance("iron")


@pytest.fixture
def hematite():
    return get_substance("hematite")


@pytest.fixture
def silica():
    return get_substance("silicon_dioxide")


@pytest.fixture
def salt():
    return get_substance("sodium_chloride")


@pytest.fixture
def methane():
    return get_substance("methane")


@pytest.fixture
def carbon():
    return get_substance("amorphous_carbon")


@pytest.fixture
def protein():
    return get_substance("protein")


# User-defined substances


@pytest.fixture
def ice_like():
    """Melting point 273 K, no vapor pressure data."""
    return Substance(name="Test Ice", melting_point=273.0, density_solid=900.0, density_liquid=1000.0)


@pytest.fixture
def antoine_liquid():
    """Water-like Antoine coefficients without a validity range."""
    return Substance(name="Antoine Liquid", antoine_a=8.07, antoine_b=1730.0, antoine_c=233.0)


# Materials


@pytest.fixture
def unit_sphere():
    return Sphere(radius=1.0)


@pytest.fixture
def rock(hematite, silica):
    """60% hematite, 40% silica, 10 kg."""
    return Material([(hematite, "0.6"), (silica, "0.4")], Sphere(radius=0.1), mass=10.0)


@pytest.fixture
def pond(water):
    """Liquid water at 300 K, 10 kg."""
    return Material(water, Sphere(radius=0.5), mass=10.0, temperature=300.0)
