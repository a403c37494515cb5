"""Composition Model for Substances and Materials

Describes matter whose makeup may be unknown, partially known or precisely
known, and derives physically consistent properties (density, phase, vapor
pressure) from that description at any temperature and pressure.

Key Principles:
- Substances are immutable catalog entries identified by key
- Compositions map substance references to exact Decimal proportions
  that always sum to 1
- Materials add extrinsic state (shape, mass, temperature); composites
  stack materials in layers
- Homogenization flattens any composition tree into leaf proportions

Version: 1.0
"""

__version__ = "1.0"

# Core data structures
from materia.core.enums import PhaseType
from materia.geometry.shapes import Cuboid, Shape, SinglePoint, Sphere

# Substances
from materia.substances import (
    NONE,
    Mixture,
    Solution,
    Substance,
    SubstanceBase,
    SubstanceReference,
    SubstanceRegistry,
    get_global_registry,
    get_substance,
    list_substances,
    register_substance,
    reset_global_registry,
)

# Materials
from materia.materials import BaseMaterial, Composite, Material

# Classification and persistence
from materia.analysis import (
    hydrocarbon_proportions,
    is_carbon,
    is_hydrocarbon,
    is_metal_ore,
    is_water,
    surface_gravity,
    water_proportion,
)
from materia.serialization import decode, dump_yaml, encode, from_document, load_yaml, to_document

__all__ = [
    # Version
    "__version__",
    # Core
    "PhaseType",
    "Shape",
    "SinglePoint",
    "Sphere",
    "Cuboid",
    # Substances
    "SubstanceBase",
    "Substance",
    "Solution",
    "Mixture",
    "NONE",
    "SubstanceReference",
    "SubstanceRegistry",
    "get_global_registry",
    "reset_global_registry",
    "get_substance",
    "list_substances",
    "register_substance",
    # Materials
    "BaseMaterial",
    "Material",
    "Composite",
    # Analysis
    "water_proportion",
    "is_water",
    "is_carbon",
    "hydrocarbon_proportions",
    "is_hydrocarbon",
    "is_metal_ore",
    "surface_gravity",
    # Serialization
    "encode",
    "decode",
    "to_document",
    "from_document",
    "dump_yaml",
    "load_yaml",
]
