"""Materials: a composition with mass, shape and temperature.

Materials are immutable. Every edit (``add``, ``remove``, ``combine``,
``get_clone``...) returns a new Material; the input is never modified.

Density and mass are reconciled at construction:
    - density given: used as is
    - mass given: density = mass / volume (0 for a zero-volume shape)
    - neither: density is the proportion-weighted density of the
      constituents at the material temperature (or ambient) and the ambient
      pressure
    - mass missing: mass = density × volume

Example:
    >>> from materia import Material, Sphere, get_substance
    >>> rock = Material(get_substance("hematite"), Sphere(radius=0.5))
    >>> wet = rock.add(get_substance("water"), 0.1)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from materia.config.defaults import DEFAULT_PRESSURE, DEFAULT_PROPORTION
from materia.core.proportions import ONE, ZERO, merge, normalize, scale, to_proportion
from materia.geometry.shapes import Shape, SinglePoint
from materia.materials.base import BaseMaterial
from materia.substances.base import SubstanceBase, coerce_entries
from materia.substances.reference import SubstanceReference, as_reference

logger = logging.getLogger(__name__)


class Material(BaseMaterial):
    """A composition with extrinsic physical state.

    Args:
        constituents: Substance, reference, key, mapping of those to
            proportions, or iterable of (substance, proportion) pairs
        shape: Volume-bearing shape (defaults to a point at the origin)
        mass: Mass [kg]
        density: Density [kg/m³]
        temperature: Temperature [K]; None means ambient

    Raises:
        ValueError: If mass, density or temperature is negative
    """

    def __init__(
        self,
        constituents: Any = None,
        shape: Shape | None = None,
        mass: float | None = None,
        density: float | None = None,
        temperature: float | None = None,
    ):
        for label, value in (("mass", mass), ("density", density), ("temperature", temperature)):
            if value is not None and value < 0:
                raise ValueError(f"Material {label} must be non-negative, got {value}")

        self._constituents = MappingProxyType(normalize(coerce_entries(constituents)))
        self._shape = shape if shape is not None else SinglePoint.ORIGIN
        self._temperature = None if temperature is None else float(temperature)

        # Caller-supplied values survive composition edits
        self._given_mass = mass
        self._given_density = density

        volume = self._shape.volume
        if density is None:
            if mass is not None:
                density = mass / volume if volume > 0 else 0.0
            else:
                density = self._constituent_density()
        if mass is None:
            mass = density * volume

        self._mass = float(mass)
        self._density = float(density)

    def _constituent_density(self) -> float:
        temperature = self.effective_temperature
        return sum(
            ref.substance.density(temperature, DEFAULT_PRESSURE) * float(p)
            for ref, p in self._constituents.items()
        )

    def _rebuild(self, constituents, **changes) -> Material:
        state = {
            "shape": self._shape,
            "mass": self._given_mass,
            "density": self._given_density,
            "temperature": self._temperature,
        }
        state.update(changes)
        return Material(constituents, **state)

    @property
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        return self._constituents

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def density(self) -> float:
        return self._density

    @property
    def temperature(self) -> float | None:
        return self._temperature

    @property
    def shape(self) -> Shape:
        return self._shape

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return (
            dict(self._constituents) == dict(other._constituents)
            and self._mass == other._mass
            and self._density == other._density
            and self._temperature == other._temperature
            and self._shape == other._shape
        )

    def __hash__(self) -> int:
        return hash(
            (
                frozenset(self._constituents.items()),
                self._mass,
                self._density,
                self._temperature,
                self._shape,
            )
        )

    def __repr__(self) -> str:
        names = ", ".join(f"{ref.key}={p}" for ref, p in self._constituents.items())
        return f"Material({names}; mass={self._mass:g}, density={self._density:g})"

    # Composition edits

    def add(self, substance, proportion=DEFAULT_PROPORTION) -> Material:
        """Add (or re-weight) one constituent.

        Args:
            substance: Substance, reference or key
            proportion: Target proportion of the constituent

        Returns:
            self when proportion <= 0; a material made only of the
            constituent when proportion >= 1 or the material is empty;
            otherwise the others are rescaled so the constituent ends at
            ``proportion``
        """
        p = to_proportion(proportion)
        if p <= ZERO:
            return self

        ref = as_reference(substance)
        if p >= ONE or not self._constituents:
            return self._rebuild({ref: ONE})

        current = dict(self._constituents)
        if ref in current:
            ratio = ONE - (p - current[ref])
        else:
            ratio = ONE - p
        entries = scale(current, ratio)
        entries[ref] = p
        return self._rebuild(normalize(entries))

    def add_constituents(self, constituents) -> Material:
        """Add several constituents at once.

        Existing constituents are scaled by ``1 - sum(added)``; each added
        one is set to its own proportion.
        """
        incoming = _group_pairs(coerce_entries(constituents))
        added = sum(incoming.values(), ZERO)
        if added <= ZERO:
            return self
        if added >= ONE or not self._constituents:
            return self._rebuild(normalize(incoming))

        entries = scale(self._constituents, ONE - added)
        entries.update(incoming)
        return self._rebuild(normalize(entries))

    def combine(self, other, proportion=DEFAULT_PROPORTION) -> BaseMaterial:
        """Fold another material's (or substance's) constituents into this one.

        Mass, density, shape and temperature are kept from self.

        Returns:
            ``other`` when proportion >= 1, self when proportion <= 0
        """
        p = to_proportion(proportion)
        if p >= ONE:
            return other
        if p <= ZERO:
            return self
        if isinstance(other, BaseMaterial):
            incoming = other.constituents
        else:
            incoming = as_reference(other).substance.constituents
        merged = merge(scale(self._constituents, ONE - p), scale(incoming, p))
        return self._rebuild(normalize(merged))

    def remove(self, constituent) -> Material:
        """Material without ``constituent`` (or without leaves matching a predicate).

        Aggregate constituents lose the constituent as well and are
        reweighted by what is left of them. Returns EMPTY when nothing
        remains, self when the constituent is absent.
        """
        if callable(constituent) and not isinstance(constituent, (SubstanceBase, SubstanceReference)):
            return self.remove_where(constituent)

        ref = as_reference(constituent)
        if self.proportion_of(ref) <= ZERO:
            return self

        remaining = []
        for key, value in self._constituents.items():
            if key == ref:
                continue
            child = key.substance
            if child.is_leaf:
                remaining.append((key, value))
                continue
            share = child.proportion_of(ref)
            result = child.remove(ref)
            if not result.is_empty:
                remaining.append((result.reference, value * (ONE - share)))

        entries = normalize(remaining)
        if not entries:
            return Material.EMPTY
        logger.debug("Removed %s from material", ref.key)
        return self._rebuild(entries)

    def remove_where(self, predicate: Callable[[Any], bool]) -> Material:
        """Drop every direct constituent whose substance matches ``predicate``."""
        entries = normalize(
            (ref, value)
            for ref, value in self._constituents.items()
            if not predicate(ref.substance)
        )
        if not entries:
            return Material.EMPTY
        if len(entries) == len(self._constituents):
            return self
        return self._rebuild(entries)

    # Extrinsic state

    def get_clone(self, mass_fraction=1) -> Material:
        """Copy holding ``mass_fraction`` of the mass; the shape volume scales along.

        Returns:
            EMPTY when mass_fraction <= 0
        """
        f = float(mass_fraction)
        if f <= 0:
            return Material.EMPTY
        return Material(
            self._constituents,
            self._shape.scaled_by_volume(f),
            self._mass * f,
            self._density,
            self._temperature,
        )

    def scaled_to_mass(self, mass: float) -> Material:
        if mass < 0:
            raise ValueError(f"Material mass must be non-negative, got {mass}")
        if self._mass > 0 and mass > 0:
            return self.get_clone(mass / self._mass)
        return Material(self._constituents, self._shape, mass, self._density, self._temperature)

    def homogenized(self) -> Material:
        """Same material with every aggregate flattened into its leaves."""
        return Material(self.homogenize(), self._shape, self._mass, self._density, self._temperature)

    def with_shape(self, shape: Shape) -> Material:
        return self._rebuild(self._constituents, shape=shape)

    def with_position(self, position) -> Material:
        return self._rebuild(self._constituents, shape=self._shape.with_position(position))

    def with_rotation(self, rotation) -> Material:
        return self._rebuild(self._constituents, shape=self._shape.with_rotation(rotation))

    def with_temperature(self, temperature: float | None) -> Material:
        return self._rebuild(self._constituents, temperature=temperature)

    def to_dict(self) -> dict[str, Any]:
        """Record with references as keys and proportions as decimal strings.

        Mass and density are written only as given at construction (None
        when derived), so derived values are recomputed on load.
        """
        return {
            "$type": "material",
            "constituents": [[ref.key, str(p)] for ref, p in self._constituents.items()],
            "shape": self._shape.to_dict(),
            "mass": self._given_mass,
            "density": self._given_density,
            "temperature": self._temperature,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Material:
        shape = data.get("shape")
        return cls(
            constituents=data.get("constituents"),
            shape=Shape.from_dict(shape) if shape is not None else None,
            mass=data.get("mass"),
            density=data.get("density"),
            temperature=data.get("temperature"),
        )


def _group_pairs(entries) -> dict[SubstanceReference, Decimal]:
    """Group (reference, proportion) pairs by key without rescaling."""
    grouped: dict[SubstanceReference, Decimal] = {}
    for ref, value in entries:
        if value > ZERO:
            grouped[ref] = grouped.get(ref, ZERO) + value
    return grouped


Material.EMPTY = Material()
