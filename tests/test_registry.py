"""Tests for the substance registry and key-based references."""

from decimal import Decimal

import pytest

from materia.substances.reference import SubstanceReference, as_reference, as_substance
from materia.substances.registry import (
    SubstanceRegistry,
    get_global_registry,
    get_substance,
    list_substances,
    register_substance,
    reset_global_registry,
)
from materia.substances.substance import NONE, Substance


class TestCatalog:
    """Test the packaged catalog."""

    def test_loads_catalog(self, registry):
        for key in ("water", "iron", "hematite", "silicon_dioxide", "seawater", "carbon_steel", "protein"):
            assert key in registry
        assert len(registry) >= 25

    def test_catalog_is_valid(self, registry):
        assert registry.validate_all() == []

    def test_solution_parts_are_bound(self, registry):
        steel = registry.get_substance("carbon_steel")
        parts = {ref.key: (ref.target, p) for ref, p in steel.constituents.items()}
        assert parts["iron"] == (registry.get_substance("iron"), Decimal("0.9975"))
        assert parts["iron"][0] is registry.get_substance("iron")


class TestLookup:
    """Test get_substance and find_substance."""

    def test_unknown_key(self, registry):
        with pytest.raises(KeyError, match="not found"):
            registry.get_substance("unobtainium")

    def test_find_by_name_and_common_name(self, registry):
        silica = registry.get_substance("silicon_dioxide")
        assert registry.find_substance("silicon_dioxide") is silica
        assert registry.find_substance("Silicon Dioxide") is silica
        assert registry.find_substance("quartz") is silica
        assert registry.find_substance("  SILICA ") is silica
        assert registry.find_substance("unobtainium") is None

    def test_contains_accepts_substances(self, registry, water):
        assert water in registry
        assert water.reference in registry
        assert NONE not in registry


class TestRegistration:
    """Test register_substance."""

    def test_register(self, empty_registry):
        custom = Substance(name="Custom", density_solid=1.0)
        empty_registry.register_substance(custom)
        assert empty_registry.get_substance("custom") is custom
        assert empty_registry.list_substances() == ["custom"]

    def test_overwrite_warns(self, empty_registry):
        empty_registry.register_substance(Substance(name="Custom"))
        with pytest.warns(UserWarning, match="Overwriting"):
            empty_registry.register_substance(Substance(name="Custom"))

    def test_blank_key(self, empty_registry):
        with pytest.raises(ValueError, match="blank key"):
            empty_registry.register_substance(NONE)


class TestYamlCatalog:
    """Test loading and saving catalogs."""

    def test_save_and_load(self, registry, tmp_path):
        path = tmp_path / "catalog.yaml"
        registry.save_to_yaml(path)

        restored = SubstanceRegistry(path)
        assert restored.list_substances() == registry.list_substances()
        assert restored.validate_all() == []
        assert restored.get_substance("seawater").proportion_of("water") == Decimal("0.965")
        assert restored.get_substance("water").to_dict() == registry.get_substance("water").to_dict()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SubstanceRegistry(tmp_path / "missing.yaml")

    def test_missing_substances_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("materials: []\n", encoding="utf-8")
        with pytest.raises(ValueError, match="substances"):
            SubstanceRegistry(path)

    def test_malformed_entry_is_skipped(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text(
            "substances:\n"
            "  - name: Good\n"
            "    density_solid: 1000\n"
            "  - name: Bad\n"
            "    density_solid: -5\n"
            "  - name: Orphan Solution\n"
            "    type: solution\n"
            "    parts:\n"
            "      - [nothing, '1']\n",
            encoding="utf-8",
        )
        with pytest.warns(UserWarning, match="Failed to load"):
            loaded = SubstanceRegistry(path)
        assert loaded.list_substances() == ["good"]

    def test_validate_all_reports_problems(self, empty_registry, water):
        empty_registry.register_substance(Substance(name="Inverted", antoine_min_temperature=400.0, antoine_max_temperature=300.0))
        empty_registry.register_substance(Substance(name="Weightless", density_solid=0.0))
        errors = empty_registry.validate_all()
        assert any("Antoine range inverted" in e for e in errors)
        assert any("density_solid" in e for e in errors)


class TestGlobalRegistry:
    """Test the global registry and convenience functions."""

    def test_lazy_catalog(self):
        assert "water" in list_substances()
        assert get_substance("water").name == "Water"

    def test_register_and_reset(self):
        register_substance(Substance(name="Ephemeral"))
        assert "ephemeral" in get_global_registry()
        reset_global_registry()
        assert "ephemeral" not in get_global_registry()

    def test_same_instance(self):
        assert get_global_registry() is get_global_registry()


class TestReferences:
    """Test SubstanceReference resolution."""

    def test_unbound_resolves_through_global(self, water):
        ref = SubstanceReference("water")
        assert ref.target is None
        assert ref.substance is water
        assert ref.name == "Water"

    def test_resolve_through_given_registry(self, empty_registry):
        custom = Substance(name="Local Only")
        empty_registry.register_substance(custom)
        assert SubstanceReference("local_only").resolve(empty_registry) is custom

    def test_blank_key_is_none(self):
        assert SubstanceReference("").resolve() is NONE

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            SubstanceReference("unobtainium").resolve()

    def test_equality_and_hash(self, water):
        bound = water.reference
        unbound = SubstanceReference("water")
        assert bound == unbound
        assert len({bound, unbound, water}) == 1
        assert str(unbound) == "water"

    def test_coercion(self, water):
        assert as_reference("water") == water
        assert as_reference(water.reference) is not None
        assert as_substance("water") is water
        assert as_substance(water) is water
        with pytest.raises(TypeError):
            as_reference(3.5)
