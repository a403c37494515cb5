"""Proportional mixtures of substances.

A Mixture keeps its constituents individually trackable (unlike a Solution,
which has intrinsic constants of its own). Intrinsic properties are derived
from the constituents on demand.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from decimal import Decimal
from functools import reduce
from operator import or_
from types import MappingProxyType
from typing import Any

from materia.core.enums import PhaseType
from materia.core.proportions import ZERO, normalize
from materia.substances.base import SubstanceBase, coerce_entries, resolve_conditions, weighted_sum
from materia.substances.reference import SubstanceReference, as_reference
from materia.substances.substance import NONE, Solution, constituent_label

logger = logging.getLogger(__name__)


class Mixture(SubstanceBase):
    """Weighted, normalized set of substance references.

    Args:
        constituents: Mapping of substance to proportion, iterable of
            (substance, proportion) pairs, or iterable of substances (equal
            shares). Duplicates are summed and the result normalized.
        name: Display name (defaults to 'Name:P%; ...')
        key: Identity key (a random UUID when omitted)
        density_liquid, density_solid, density_special: Optional stored
            densities [kg/m³] used when that phase dominates
    """

    is_homogeneous = False

    def __init__(
        self,
        constituents: Any = None,
        name: str | None = None,
        key: str | None = None,
        density_liquid: float | None = None,
        density_solid: float | None = None,
        density_special: float | None = None,
    ):
        self._constituents = MappingProxyType(normalize(coerce_entries(constituents)))
        self.key = key or uuid.uuid4().hex
        self.name = name or constituent_label(self._constituents) or "Empty"
        self.density_liquid = density_liquid
        self.density_solid = density_solid
        self.density_special = density_special

    def __repr__(self) -> str:
        return f"Mixture(key={self.key!r}, name={self.name!r})"

    @property
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        return self._constituents

    def _members(self) -> list[SubstanceBase]:
        return [ref.substance for ref in self._constituents]

    def _fraction(self, flag: str) -> float:
        members = self._members()
        if not members:
            return 0.0
        return sum(1.0 for s in members if getattr(s, flag, False)) / len(members)

    # Derived intrinsic properties

    @property
    def greenhouse_potential(self) -> float:
        return weighted_sum(self._constituents.items(), lambda s: s.greenhouse_potential) or 0.0

    @property
    def hardness(self) -> float:
        return sum(
            ref.substance.hardness * float(p)
            for ref, p in self._constituents.items()
            if ref.substance.hardness > 0
        )

    @property
    def is_conductive(self) -> bool:
        return bool(self._constituents) and self._fraction("is_conductive") >= 0.5

    @property
    def is_flammable(self) -> bool:
        return bool(self._constituents) and self._fraction("is_flammable") >= 0.5

    @property
    def is_metal(self) -> bool:
        return bool(self._constituents) and self._fraction("is_metal") >= 0.5

    @property
    def is_gemstone(self) -> bool:
        return bool(self._constituents) and all(s.is_gemstone for s in self._members())

    @property
    def is_radioactive(self) -> bool:
        return any(s.is_radioactive for s in self._members())

    @property
    def molar_mass(self) -> float:
        return weighted_sum(self._constituents.items(), lambda s: s.molar_mass) or 0.0

    @property
    def youngs_modulus(self) -> float | None:
        return weighted_sum(self._constituents.items(), lambda s: s.youngs_modulus)

    # Physical state

    def phase(self, temperature: float | None = None, pressure: float | None = None) -> PhaseType:
        """Union of the constituents' phases."""
        return reduce(
            or_,
            (s.phase(temperature, pressure) for s in self._members()),
            PhaseType.NONE,
        )

    def density(self, temperature: float | None = None, pressure: float | None = None) -> float:
        """Density [kg/m³].

        A stored solid (or liquid) density is used when the solid (liquid)
        share is at least as large as every other phase bucket; the special
        density when the exotic share exceeds all standard ones. Otherwise
        the proportion-weighted density of the constituents.
        """
        temperature, pressure = resolve_conditions(temperature, pressure)
        if self.density_solid is not None or self.density_liquid is not None or self.density_special is not None:
            buckets = self.separate_by_phase(
                temperature, pressure, PhaseType.SOLID, PhaseType.LIQUID, PhaseType.GAS
            )
            solid, liquid, gas, other = (share for _, share in buckets)
            if self.density_solid is not None and solid >= max(liquid, gas, other):
                return self.density_solid
            if self.density_liquid is not None and liquid >= max(solid, gas, other):
                return self.density_liquid
            if self.density_special is not None and other > max(solid, liquid, gas):
                return self.density_special
        return sum(
            ref.substance.density(temperature, pressure) * float(p)
            for ref, p in self._constituents.items()
        )

    # Editing

    def remove(self, constituent) -> SubstanceBase:
        """Mixture without ``constituent``, renormalized.

        Aggregate constituents have the constituent removed from them in
        turn. Returns NONE when nothing remains and self when the
        constituent is absent.
        """
        ref = as_reference(constituent)
        if ref == self:
            return NONE
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
            result = child.remove(ref)
            if not result.is_empty:
                remaining.append((result.reference, value))

        if not normalize(remaining):
            return NONE
        logger.debug("Removed %s from mixture %s", ref.key, self.key)
        return Mixture(
            remaining,
            density_liquid=self.density_liquid,
            density_solid=self.density_solid,
            density_special=self.density_special,
        )

    def with_name(self, name: str) -> Mixture:
        return Mixture(
            self._constituents,
            name=name,
            key=self.key,
            density_liquid=self.density_liquid,
            density_solid=self.density_solid,
            density_special=self.density_special,
        )

    def homogenized(self) -> Solution:
        """Solution with the same constituents and stored densities."""
        return Solution(
            name=self.name,
            parts=self._constituents,
            density_liquid=self.density_liquid,
            density_solid=self.density_solid,
            density_special=self.density_special,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "$type": "mixture",
            "key": self.key,
            "name": self.name,
            "constituents": [[ref.key, str(p)] for ref, p in self._constituents.items()],
            "density_liquid": self.density_liquid,
            "density_solid": self.density_solid,
            "density_special": self.density_special,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Mixture:
        return cls(
            constituents=data.get("constituents"),
            name=data.get("name"),
            key=data.get("key"),
            density_liquid=data.get("density_liquid"),
            density_solid=data.get("density_solid"),
            density_special=data.get("density_special"),
        )


Mixture.EMPTY = Mixture(name="Empty", key="empty_mixture")
