"""Exact proportion arithmetic.

Proportions are ``decimal.Decimal`` values in [0, 1]. Floats are converted
through their shortest string form so that ``0.1`` becomes exactly
``Decimal("0.1")``; physical quantities (mass, density, temperature) stay
floats elsewhere in the package.

Import Policy:
    from materia.core.proportions import normalize, to_proportion

DO NOT use: from materia.core.proportions import *
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import TypeVar, Union

K = TypeVar("K", bound=Hashable)

Number = Union[Decimal, int, float, str]

ZERO = Decimal(0)
ONE = Decimal(1)


def to_proportion(value: Number) -> Decimal:
    """Convert a number to a Decimal proportion.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Decimal value (not clamped)

    Raises:
        TypeError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Cannot use a boolean as a proportion: {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation as e:
            raise TypeError(f"Not a numeric proportion: {value!r}") from e
    raise TypeError(f"Cannot convert {type(value).__name__} to a proportion")


def clamp(value: Number) -> Decimal:
    """Clamp a proportion to [0, 1]."""
    p = to_proportion(value)
    if p < ZERO:
        return ZERO
    if p > ONE:
        return ONE
    return p


def total(mapping: Mapping[K, Decimal]) -> Decimal:
    """Sum of all proportions in a mapping."""
    return sum(mapping.values(), ZERO)


def normalize(entries: Mapping[K, Number] | Iterable[tuple[K, Number]]) -> dict[K, Decimal]:
    """Group duplicate keys and rescale proportions to sum to 1.

    Keys keep their first-seen order. Non-positive entries are dropped.

    Args:
        entries: Mapping or iterable of (key, proportion) pairs

    Returns:
        Normalized dictionary; empty if nothing positive remains
    """
    items = entries.items() if isinstance(entries, Mapping) else entries

    grouped: dict[K, Decimal] = {}
    for key, value in items:
        grouped[key] = grouped.get(key, ZERO) + to_proportion(value)

    grouped = {key: value for key, value in grouped.items() if value > ZERO}
    if not grouped:
        return {}

    grand_total = total(grouped)
    if grand_total == ONE:
        return grouped
    return {key: value / grand_total for key, value in grouped.items()}


def scale(mapping: Mapping[K, Decimal], factor: Number) -> dict[K, Decimal]:
    """Multiply every proportion by a factor."""
    f = to_proportion(factor)
    return {key: value * f for key, value in mapping.items()}


def merge(*mappings: Mapping[K, Decimal]) -> dict[K, Decimal]:
    """Sum proportions per key across several mappings, keeping first-seen order."""
    merged: dict[K, Decimal] = {}
    for mapping in mappings:
        for key, value in mapping.items():
            merged[key] = merged.get(key, ZERO) + value
    return merged


def is_normalized(mapping: Mapping[K, Decimal], tolerance: float | None = None) -> bool:
    """Check that proportions sum to 1 within tolerance.

    An empty mapping counts as normalized (it describes nothing).

    Args:
        mapping: Proportion mapping
        tolerance: Allowed deviation from 1 (defaults to the configured
            proportion tolerance)

    Returns:
        True if the mapping is empty or sums to 1 within tolerance
    """
    if not mapping:
        return True
    if tolerance is None:
        from materia.config.defaults import DEFAULT_TOLERANCE

        tolerance = DEFAULT_TOLERANCE
    return abs(total(mapping) - ONE) <= to_proportion(tolerance)
