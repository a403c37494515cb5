"""Substances: leaves, solutions, mixtures and the shared registry.

Module structure:
    base: SubstanceBase and the mapping helpers shared by every kind
    reference: SubstanceReference (key-based indirection)
    substance: Substance (leaf), Solution (homogeneous aggregate), NONE
    mixture: Mixture
    registry: SubstanceRegistry and global convenience functions

Example usage:
    >>> from materia.substances import get_substance
    >>> water = get_substance("water")
    >>> water.phase(300, 101.325)
    <PhaseType.LIQUID: 2>
    >>> brine = water.combine(get_substance("sodium_chloride"), 0.035)
"""

from materia.substances.base import SubstanceBase
from materia.substances.reference import SubstanceReference, as_reference, as_substance
from materia.substances.substance import NONE, Solution, Substance
from materia.substances.mixture import Mixture
from materia.substances.registry import (
    SubstanceRegistry,
    get_global_registry,
    get_substance,
    list_substances,
    register_substance,
    reset_global_registry,
)

__all__ = [
    # Substance kinds
    "SubstanceBase",
    "Substance",
    "Solution",
    "Mixture",
    "NONE",
    # References
    "SubstanceReference",
    "as_reference",
    "as_substance",
    # Registry
    "SubstanceRegistry",
    "get_global_registry",
    "reset_global_registry",
    # Convenience functions
    "get_substance",
    "list_substances",
    "register_substance",
]
