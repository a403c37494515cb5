"""Classification of compositions.

Every function takes a node: any substance kind (Substance, Solution,
Mixture) or material (Material, Composite). Leaves are classified from their
chemical formula; aggregates are walked through their constituents, with
nested proportions multiplied along the way.

Leaf rules:
    carbon       the formula holds exactly one element, carbon
    water        the leaf is the canonical water substance
    hydrocarbon  the formula holds exactly two elements, hydrogen and carbon
    ore          every element is H/O/S/As or a metal outside groups 1-2,
                 and at least one such metal is present

Aggregate rules:
    carbon       every constituent is carbon
    water        water proportion >= 0.95
    hydrocarbon  hydrocarbon >= 0.25 and
                 hydrocarbon >= 0.75 - (carbon + water)
    ore          homogeneous aggregates pool the elements of all their
                 chemical constituents; mixtures and materials need an
                 ore-qualifying proportion >= 0.5

A leaf without a formula is neither carbon, water, hydrocarbon nor ore.

Import Policy:
    from materia.analysis import is_metal_ore, is_water

DO NOT use: from materia.analysis import *
"""

from __future__ import annotations

from decimal import Decimal

from materia.chemistry.formula import element_group, is_metal_element
from materia.core.constants import (
    CARBON_Z,
    GRAVITATIONAL_CONSTANT,
    HYDROCARBON_BALANCE,
    HYDROCARBON_MINIMUM,
    HYDROGEN_Z,
    ORE_EXCLUDED_GROUPS,
    ORE_NEUTRAL_Z,
    ORE_THRESHOLD,
    WATER_KEY,
    WATER_THRESHOLD,
)
from materia.core.proportions import ONE, ZERO


def _is_leaf(node) -> bool:
    return getattr(node, "is_leaf", False)


def _atomic_numbers(node) -> list[int]:
    formula = getattr(node, "formula", None)
    return [element.Z for element in node.elements] if formula else []


def water_proportion(node) -> Decimal:
    """Proportion of the canonical water substance, counted through nested aggregates."""
    if _is_leaf(node):
        return ONE if node.key == WATER_KEY else ZERO

    result = ZERO
    for ref, value in node.constituents.items():
        child = ref.substance
        if child is node:
            continue
        if _is_leaf(child):
            if child.key == WATER_KEY:
                result += value
        else:
            result += water_proportion(child) * value
    return result


def is_water(node) -> bool:
    """Pure water, or an aggregate that is at least 95% water."""
    if _is_leaf(node):
        return node.key == WATER_KEY
    return water_proportion(node) >= WATER_THRESHOLD


def is_carbon(node) -> bool:
    """Made only of the element carbon (amorphous carbon, diamond...)."""
    if _is_leaf(node):
        return _atomic_numbers(node) == [CARBON_Z]
    children = [ref.substance for ref in node.constituents]
    return bool(children) and all(is_carbon(child) for child in children if child is not node)


def _is_pure_hydrocarbon(node) -> bool:
    numbers = _atomic_numbers(node)
    return len(numbers) == 2 and set(numbers) == {CARBON_Z, HYDROGEN_Z}


def hydrocarbon_proportions(node) -> tuple[Decimal, Decimal, Decimal]:
    """Proportions of pure carbon, pure hydrocarbons and water.

    Only hydrocarbons whose formula holds nothing but hydrogen and carbon
    count; an impure hydrocarbon counts only if it is modelled as an
    aggregate with pure hydrocarbon parts.

    Returns:
        (carbon, hydrocarbon, water)
    """
    if _is_leaf(node):
        if is_carbon(node):
            return ONE, ZERO, ZERO
        if is_water(node):
            return ZERO, ZERO, ONE
        if _is_pure_hydrocarbon(node):
            return ZERO, ONE, ZERO
        return ZERO, ZERO, ZERO

    carbon = hydrocarbon = water = ZERO
    for ref, value in node.constituents.items():
        child = ref.substance
        if child is node:
            continue
        c, h, w = hydrocarbon_proportions(child)
        carbon += c * value
        hydrocarbon += h * value
        water += w * value
    return carbon, hydrocarbon, water


def is_hydrocarbon(node) -> bool:
    """At least 25% hydrocarbons, and at least 75% of what is neither carbon nor water.

    Example:
        50% carbon, 32% hydrocarbons, 10% water and 8% minerals qualifies:
        0.32 >= 0.25 and 0.32 >= 0.75 - (0.5 + 0.1).
    """
    carbon, hydrocarbon, water = hydrocarbon_proportions(node)
    return hydrocarbon >= HYDROCARBON_MINIMUM and hydrocarbon >= HYDROCARBON_BALANCE - (carbon + water)


def is_metal_ore(node) -> bool:
    """Whether a node is likely a metal oxide, sulfide or arsenide ore."""
    if not getattr(node, "is_homogeneous", False):
        share = sum(
            (value for ref, value in node.constituents.items() if is_metal_ore(ref.substance)),
            ZERO,
        )
        return share >= ORE_THRESHOLD

    has_metal = False
    for leaf in node.chemical_constituents():
        for element in leaf.elements:
            if element.Z in ORE_NEUTRAL_Z:
                continue
            if not is_metal_element(element) or element_group(element) in ORE_EXCLUDED_GROUPS:
                return False
            has_metal = True
    return has_metal


def homogenize(node) -> dict:
    """Flat leaf composition of any node (see ``SubstanceBase.homogenize``)."""
    return node.homogenize()


def surface_gravity(material) -> float:
    """Surface gravity [m/s²] of a material, G·M / r² over its containing radius.

    Returns:
        0.0 for a zero radius
    """
    radius = material.shape.containing_radius
    if radius <= 0:
        return 0.0
    return GRAVITATIONAL_CONSTANT * material.mass / radius**2
