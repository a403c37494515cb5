"""Chemical formula handling backed by pymatgen."""

from materia.chemistry.formula import (
    element_group,
    formula_elements,
    formula_molar_mass,
    is_metal_element,
    parse_formula,
)

__all__ = [
    "element_group",
    "formula_elements",
    "formula_molar_mass",
    "is_metal_element",
    "parse_formula",
]
