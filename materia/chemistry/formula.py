"""Formula parsing and element lookups.

Thin wrappers over ``pymatgen.core`` so the rest of the package only deals
with formula strings and ``Element`` objects.
"""

from __future__ import annotations

from functools import lru_cache

from pymatgen.core import Composition, Element


@lru_cache(maxsize=512)
def parse_formula(formula: str) -> Composition:
    """Parse a chemical formula.

    Args:
        formula: Formula text, e.g. 'H2O' or 'Fe2O3'

    Returns:
        pymatgen Composition

    Raises:
        ValueError: If the formula is empty or cannot be parsed
    """
    if not formula or not formula.strip():
        raise ValueError("Formula must not be empty")
    try:
        return Composition(formula)
    except Exception as e:
        raise ValueError(f"Invalid chemical formula '{formula}': {e}") from e


def formula_elements(formula: str) -> tuple[Element, ...]:
    """Distinct elements of a formula, in formula order."""
    return tuple(parse_formula(formula).elements)


def formula_molar_mass(formula: str) -> float:
    """Molar mass of a formula [g/mol]."""
    return float(parse_formula(formula).weight)


def is_metal_element(element: Element) -> bool:
    return bool(element.is_metal)


def element_group(element: Element) -> int:
    """IUPAC group number (1-18)."""
    return int(element.group)
