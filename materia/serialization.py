"""Encoding of substances and materials to plain data.

Records are dictionaries tagged with a ``"$type"`` discriminator
(``substance``, ``solution``, ``mixture``, ``material``, ``composite``).
Substance references are written as keys and proportions as decimal
strings, so proportions round-trip exactly. Unset optional fields are
written as explicit nulls.

A *document* bundles the encoded root with the definitions of every
substance it references, so it can be loaded without a catalog:

    substances:
      - {$type: substance, key: water, name: Water, ...}
    root:
      $type: material
      constituents: [[water, "1"]]
      ...

Example:
    >>> from materia.serialization import dump_yaml, load_yaml
    >>> dump_yaml(material, "rock.yaml")
    >>> restored = load_yaml("rock.yaml")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from materia.geometry.shapes import Shape
from materia.materials.base import BaseMaterial
from materia.materials.composite import Composite
from materia.materials.material import Material
from materia.substances.base import SubstanceBase
from materia.substances.mixture import Mixture
from materia.substances.reference import SubstanceReference
from materia.substances.registry import SubstanceRegistry
from materia.substances.substance import Solution, Substance

logger = logging.getLogger(__name__)

SUBSTANCE_TYPES = ("substance", "solution", "mixture")


def encode(obj: SubstanceBase | BaseMaterial) -> dict[str, Any]:
    """Encode a substance or material as a tagged record.

    Raises:
        TypeError: For any other object
    """
    if isinstance(obj, (SubstanceBase, Material, Composite)):
        return obj.to_dict()
    raise TypeError(f"Cannot encode {type(obj).__name__}")


def _bind(entries, registry: SubstanceRegistry | None) -> list:
    if not entries:
        return []
    if registry is None:
        return [(SubstanceReference(key), proportion) for key, proportion in entries]
    return [(registry.reference(key), proportion) for key, proportion in entries]


def decode(data: dict[str, Any], registry: SubstanceRegistry | None = None):
    """Decode a record produced by ``encode``.

    Args:
        data: Tagged record
        registry: Registry resolving referenced keys (global one when None)

    Raises:
        ValueError: If the '$type' discriminator is missing or unknown
        KeyError: If a referenced key is not registered
    """
    data = dict(data)
    type_name = data.pop("$type", None)

    if type_name == "substance":
        return Substance.from_dict(data)
    if type_name == "solution":
        data["parts"] = _bind(data.get("parts"), registry)
        return Solution.from_dict(data)
    if type_name == "mixture":
        data["constituents"] = _bind(data.get("constituents"), registry)
        return Mixture.from_dict(data)
    if type_name == "material":
        data["constituents"] = _bind(data.get("constituents"), registry)
        return Material.from_dict(data)
    if type_name == "composite":
        shape = data.get("shape")
        return Composite(
            [decode(layer, registry) for layer in data.get("layers") or []],
            shape=Shape.from_dict(shape) if shape is not None else None,
            mass=data.get("mass"),
            density=data.get("density"),
            temperature=data.get("temperature"),
        )

    raise ValueError(
        f"Unknown record type '{type_name}'. "
        f"Available: {', '.join([*SUBSTANCE_TYPES, 'material', 'composite'])}"
    )


def referenced_substances(obj: SubstanceBase | BaseMaterial) -> list[SubstanceBase]:
    """Every substance reachable from ``obj``, parts before the aggregates using them."""
    ordered: dict[str, SubstanceBase] = {}

    def visit(substance: SubstanceBase) -> None:
        if not substance.key or substance.key in ordered:
            return
        if not substance.is_leaf:
            for ref in substance.constituents:
                if ref.key != substance.key:
                    visit(ref.substance)
        ordered[substance.key] = substance

    if isinstance(obj, SubstanceBase):
        visit(obj)
    elif isinstance(obj, Composite):
        for layer in obj.layers:
            for substance in referenced_substances(layer):
                visit(substance)
    else:
        for ref in obj.constituents:
            visit(ref.substance)

    return list(ordered.values())


def to_document(obj: SubstanceBase | BaseMaterial) -> dict[str, Any]:
    """Self-contained document: referenced substance definitions plus the encoded root."""
    return {
        "substances": [substance.to_dict() for substance in referenced_substances(obj)],
        "root": encode(obj),
    }


def from_document(document: dict[str, Any], registry: SubstanceRegistry | None = None):
    """Decode a document produced by ``to_document``.

    Bundled substances are registered into ``registry`` (a fresh registry
    when None) before the root is decoded; keys already present there are
    kept as registered.

    Raises:
        ValueError: If the document has no 'root' record
    """
    if not isinstance(document, dict) or "root" not in document:
        raise ValueError("Document must contain a 'root' record")

    if registry is None:
        registry = SubstanceRegistry()

    for entry in document.get("substances") or []:
        if entry.get("key") in registry:
            continue
        registry.register_substance(registry.build_substance(entry))

    logger.debug("Loaded %d substances from document", len(registry))
    return decode(document["root"], registry)


def dump_yaml(obj: SubstanceBase | BaseMaterial, yaml_path: str | Path) -> None:
    """Write ``to_document(obj)`` to a YAML file."""
    path = Path(yaml_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(to_document(obj), f, default_flow_style=False, sort_keys=False)


def load_yaml(yaml_path: str | Path, registry: SubstanceRegistry | None = None):
    """Read a document written by ``dump_yaml``.

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    path = Path(yaml_path)
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {yaml_path}")

    with open(path, encoding="utf-8") as f:
        return from_document(yaml.safe_load(f), registry)
