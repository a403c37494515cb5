"""Tests for record encoding and self-contained documents."""

from decimal import Decimal

import pytest
import yaml

from materia.materials.composite import Composite
from materia.materials.material import Material
from materia.serialization import (
    decode,
    dump_yaml,
    encode,
    from_document,
    load_yaml,
    referenced_substances,
    to_document,
)
from materia.substances.mixture import Mixture
from materia.substances.registry import get_substance
from materia.substances.substance import Solution


class TestEncode:
    """Test tagged records."""

    def test_material_record(self, water, salt):
        record = encode(Material([(water, "0.1"), (salt, "0.9")], mass=1.0))
        assert record["$type"] == "material"
        assert record["constituents"] == [["water", "0.1"], ["sodium_chloride", "0.9"]]
        assert record["mass"] == 1.0

    def test_explicit_nulls(self, water):
        record = encode(Material(water, mass=1.0))
        assert "density" in record and record["density"] is None
        assert "temperature" in record and record["temperature"] is None

    def test_composite_record(self, rock, pond):
        record = encode(Composite([rock, pond]))
        assert record["$type"] == "composite"
        assert [layer["$type"] for layer in record["layers"]] == ["material", "material"]
        assert record["shape"] is None

    def test_rejects_other_objects(self):
        with pytest.raises(TypeError):
            encode(object())


class TestDecode:
    """Test decode against registries."""

    def test_global_registry(self, rock):
        assert decode(encode(rock)) == rock

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown record type"):
            decode({"$type": "planet"})
        with pytest.raises(ValueError, match="Unknown record type"):
            decode({})

    def test_unregistered_key(self, empty_registry):
        with pytest.raises(KeyError):
            decode({"$type": "material", "constituents": [["unobtainium", "1"]]}, empty_registry)


class TestDocuments:
    """Test to_document / from_document."""

    def test_referenced_substances_order(self):
        steel = Material(get_substance("carbon_steel"), mass=1.0)
        assert [s.key for s in referenced_substances(steel)] == ["iron", "amorphous_carbon", "carbon_steel"]

    def test_material_round_trip(self, rock):
        restored = from_document(to_document(rock))
        assert restored == rock
        assert restored.proportion_of("hematite") == Decimal("0.6")

    def test_exact_proportions(self, water, salt):
        material = Material([(water, "0.1"), (salt, "0.9")], mass=1.0)
        restored = from_document(to_document(material))
        assert dict(restored.constituents) == {water.reference: Decimal("0.1"), salt.reference: Decimal("0.9")}

    def test_composite_round_trip(self, rock, pond):
        composite = Composite([rock, pond], temperature=290.0)
        restored = from_document(to_document(composite))
        assert isinstance(restored, Composite)
        assert restored.to_dict() == composite.to_dict()
        assert restored.mass == pytest.approx(composite.mass)

    def test_mixture_round_trip(self, water, salt):
        brine = Mixture([(water, 1), (salt, 1)])
        restored = from_document(to_document(brine))
        assert restored == brine
        assert restored.key == brine.key
        assert restored.proportion_of(salt) == Decimal("0.5")

    def test_solution_round_trip(self):
        seawater = get_substance("seawater")
        restored = from_document(to_document(seawater))
        assert isinstance(restored, Solution)
        assert restored.proportion_of("water") == Decimal("0.965")
        assert restored.density(300.0, 101.325) == 1025

    def test_existing_keys_are_kept(self, registry, rock):
        document = to_document(rock)
        for entry in document["substances"]:
            entry["name"] = "Impostor"
        from_document(document, registry)
        assert registry.get_substance("hematite").name == "Hematite"

    def test_missing_root(self):
        with pytest.raises(ValueError, match="root"):
            from_document({"substances": []})


class TestYamlDocuments:
    """Test dump_yaml / load_yaml."""

    def test_round_trip(self, rock, tmp_path):
        path = tmp_path / "rock.yaml"
        dump_yaml(rock, path)
        assert load_yaml(path) == rock

    def test_readable_layout(self, rock, tmp_path):
        path = tmp_path / "nested" / "rock.yaml"
        dump_yaml(rock, path)
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
        assert list(document) == ["substances", "root"]
        assert document["root"]["constituents"] == [["hematite", "0.6"], ["silicon_dioxide", "0.4"]]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "missing.yaml")
