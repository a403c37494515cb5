"""Homogeneous substances.

``Substance`` is a leaf: matter with fixed intrinsic constants, optionally a
chemical formula. ``Solution`` is a homogeneous aggregate (an alloy, a brine)
with its own constants and a normalized set of parts.

Phase rules (``Substance.phase``):
    1. A fixed phase is returned unconditionally.
    2. Below the melting point the substance is solid.
    3. If a vapor pressure is known and the pressure is below it, gas.
    4. Without a melting point, solid.
    5. Otherwise liquid.

Vapor pressure uses the Antoine equation
    P = 10^(A - B / (C + T)) × 100   [kPa]
with +inf above and -inf below the coefficients' validity range.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any, ClassVar

from materia.chemistry.formula import formula_elements, formula_molar_mass, is_metal_element
from materia.core.constants import ANTOINE_PRESSURE_FACTOR, GAS_CONSTANT
from materia.core.enums import PhaseType
from materia.core.proportions import ONE, ZERO, normalize
from materia.substances.base import (
    SubstanceBase,
    coerce_entries,
    flatten,
    resolve_conditions,
    weighted_sum,
)
from materia.substances.reference import SubstanceReference, as_reference

logger = logging.getLogger(__name__)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def make_key(name: str) -> str:
    """Derive a catalog key from a display name ('Silicon Dioxide' -> 'silicon_dioxide')."""
    return _SLUG_PATTERN.sub("_", name.lower()).strip("_")


def constituent_label(constituents: Mapping[SubstanceReference, Decimal]) -> str:
    """Default aggregate name, e.g. 'Iron:99.750%; Amorphous Carbon:0.250%'."""
    return "; ".join(f"{ref.name}:{value:.3%}" for ref, value in constituents.items())


@dataclass(frozen=True, eq=False)
class Substance(SubstanceBase):
    """Physically homogeneous matter with fixed intrinsic properties.

    Required Attributes:
        name: Display name (must not be blank)

    Identity:
        key: Stable key; derived from the name when omitted. Equality and
            hashing use the key only.

    Optional Attributes:
        common_names: Alternate names
        formula: Chemical formula (e.g. 'H2O'); enables element-based
            classification and a derived molar mass
        antoine_a, antoine_b, antoine_c: Antoine coefficients (bar, K).
            All three or none: a partial set is discarded.
        antoine_max_temperature, antoine_min_temperature: Validity range [K]
        density_liquid, density_solid, density_special: Densities [kg/m³]
            for the liquid, solid and exotic phases
        fixed_phase: Phase reported regardless of conditions
        greenhouse_potential: Relative to CO2
        hardness: Vickers hardness [MPa]
        is_conductive: Electrical conductor (defaults to is_metal)
        is_flammable, is_gemstone, is_radioactive: Flags
        is_metal: Defaults to "formula made only of metals"
        melting_point: Melting point [K]
        molar_mass: [g/mol]; defaults to the formula weight, else 0
        youngs_modulus: [GPa]
    """

    is_leaf: ClassVar[bool] = True

    name: str
    key: str | None = None
    common_names: tuple[str, ...] = ()
    formula: str | None = None
    antoine_a: float | None = None
    antoine_b: float | None = None
    antoine_c: float | None = None
    antoine_max_temperature: float | None = None
    antoine_min_temperature: float | None = None
    density_liquid: float | None = None
    density_solid: float | None = None
    density_special: float | None = None
    fixed_phase: PhaseType | None = None
    greenhouse_potential: float = 0.0
    hardness: float = 0.0
    is_conductive: bool | None = None
    is_flammable: bool = False
    is_gemstone: bool = False
    is_metal: bool | None = None
    is_radioactive: bool = False
    melting_point: float | None = None
    molar_mass: float | None = None
    youngs_modulus: float | None = None

    def __post_init__(self):
        """Validate and fill derived defaults."""
        if self.name is None or not str(self.name).strip():
            raise ValueError("Substance name must not be blank")

        self._set("common_names", tuple(self.common_names))
        if self.key is None:
            self._set("key", make_key(self.name))

        if self.fixed_phase is not None:
            self._set("fixed_phase", PhaseType.parse(self.fixed_phase))

        # Antoine coefficients are all-or-nothing
        if None in (self.antoine_a, self.antoine_b, self.antoine_c):
            self._set("antoine_a", None)
            self._set("antoine_b", None)
            self._set("antoine_c", None)

        for name in ("density_liquid", "density_solid", "density_special", "melting_point", "molar_mass"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"Substance '{self.name}': {name} must be non-negative, got {value}")
        if self.hardness < 0:
            raise ValueError(f"Substance '{self.name}': hardness must be non-negative, got {self.hardness}")

        if self.formula is not None:
            elements = formula_elements(self.formula)
            if self.molar_mass is None:
                self._set("molar_mass", formula_molar_mass(self.formula))
            if self.is_metal is None:
                self._set("is_metal", all(is_metal_element(e) for e in elements))

        if self.molar_mass is None:
            self._set("molar_mass", 0.0)
        if self.is_metal is None:
            self._set("is_metal", False)
        if self.is_conductive is None:
            self._set("is_conductive", self.is_metal)

    def _set(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)

    @property
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        if not self.key:
            return MappingProxyType({})
        return MappingProxyType({self.reference: ONE})

    @property
    def is_chemical(self) -> bool:
        """True if the substance has a chemical formula."""
        return self.formula is not None

    @property
    def elements(self) -> tuple:
        """pymatgen Elements of the formula (empty without one)."""
        return formula_elements(self.formula) if self.formula else ()

    @property
    def has_antoine(self) -> bool:
        return self.antoine_a is not None

    def vapor_pressure(self, temperature: float) -> float | None:
        """Vapor pressure [kPa] from the Antoine equation.

        Args:
            temperature: Temperature [K]

        Returns:
            +inf above the coefficients' maximum temperature, -inf below
            their minimum, the Antoine value when coefficients exist, else
            None
        """
        if self.antoine_max_temperature is not None and temperature > self.antoine_max_temperature:
            return float("inf")
        if self.antoine_min_temperature is not None and temperature < self.antoine_min_temperature:
            return float("-inf")
        if not self.has_antoine:
            return None
        exponent = self.antoine_a - self.antoine_b / (self.antoine_c + temperature)
        return 10.0**exponent * ANTOINE_PRESSURE_FACTOR

    def phase(self, temperature: float | None = None, pressure: float | None = None) -> PhaseType:
        """Phase at a temperature [K] and pressure [kPa] (see module docstring)."""
        if self.fixed_phase is not None:
            return self.fixed_phase
        if not self.key:
            return PhaseType.NONE

        temperature, pressure = resolve_conditions(temperature, pressure)

        if self.melting_point is not None and temperature < self.melting_point:
            return PhaseType.SOLID

        vapor_pressure = self.vapor_pressure(temperature)
        if vapor_pressure is not None and pressure < vapor_pressure:
            return PhaseType.GAS

        if self.melting_point is None:
            return PhaseType.SOLID
        return PhaseType.LIQUID

    def _stored_density(self, phase: PhaseType) -> float | None:
        if phase == PhaseType.SOLID and self.density_solid is not None:
            return self.density_solid
        if phase == PhaseType.LIQUID and self.density_liquid is not None:
            return self.density_liquid
        if self.density_special is not None and not phase.is_standard:
            return self.density_special
        return None

    def density(self, temperature: float | None = None, pressure: float | None = None) -> float:
        """Density [kg/m³] at a temperature [K] and pressure [kPa].

        The stored density for the current phase is preferred; otherwise the
        ideal gas law P·M / (R·T) is applied.

        Raises:
            ValueError: If the ideal gas law is needed at a non-positive temperature
        """
        temperature, pressure = resolve_conditions(temperature, pressure)
        stored = self._stored_density(self.phase(temperature, pressure))
        if stored is not None:
            return stored
        return ideal_gas_density(pressure, self.molar_mass, temperature)

    def remove(self, constituent) -> SubstanceBase:
        """NONE if ``constituent`` is this substance, otherwise self."""
        return NONE if as_reference(constituent) == self else self

    def with_name(self, name: str) -> Substance:
        return replace(self, name=name)

    def to_dict(self) -> dict[str, Any]:
        """Record with every field; unset optional values are None."""
        data: dict[str, Any] = {"$type": "substance"}
        for f in fields(self):
            data[f.name] = getattr(self, f.name)
        data["common_names"] = list(self.common_names)
        data["fixed_phase"] = self.fixed_phase.label if self.fixed_phase is not None else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Substance:
        data = {k: v for k, v in data.items() if k not in ("$type", "type")}
        if data.get("common_names") is not None:
            data["common_names"] = tuple(data["common_names"])
        return cls(**data)


def ideal_gas_density(pressure: float, molar_mass: float, temperature: float) -> float:
    """Ideal gas density [kg/m³] from pressure [kPa], molar mass [g/mol] and temperature [K]."""
    if temperature <= 0:
        raise ValueError(f"Temperature must be positive for the ideal gas law: T={temperature}")
    return pressure * molar_mass / (GAS_CONSTANT * temperature)


NONE = Substance(name="None", key="")


@dataclass(frozen=True, eq=False)
class Solution(Substance):
    """Homogeneous aggregate with its own intrinsic constants.

    ``parts`` maps constituent references to proportions (normalized). Any
    intrinsic value left unset is derived from the parts: molar mass,
    greenhouse potential and Young's modulus are proportion-weighted;
    hardness is weighted over parts harder than 0; conductive, flammable and
    metal are true when at least half of the parts (by proportion) are;
    radioactive if any part is.

    Without a stored density for the current phase, density is the
    proportion-weighted density of the parts.
    """

    is_leaf: ClassVar[bool] = False

    name: str = ""
    greenhouse_potential: float | None = None
    hardness: float | None = None
    is_flammable: bool | None = None
    is_radioactive: bool | None = None
    parts: Mapping[SubstanceReference, Decimal] = field(default_factory=dict)

    def __post_init__(self):
        parts = normalize(coerce_entries(self.parts))
        if not parts:
            raise ValueError("Solution requires at least one part")
        self._set("parts", MappingProxyType(parts))

        if not self.name:
            self._set("name", constituent_label(parts))
            if self.key is None:
                self._set("key", uuid.uuid4().hex)

        entries = list(parts.items())
        members = [(ref.substance, float(p)) for ref, p in entries]

        if self.molar_mass is None:
            self._set("molar_mass", weighted_sum(entries, lambda s: getattr(s, "molar_mass", None)) or 0.0)
        if self.greenhouse_potential is None:
            self._set("greenhouse_potential", weighted_sum(entries, lambda s: getattr(s, "greenhouse_potential", 0.0)) or 0.0)
        if self.youngs_modulus is None:
            self._set("youngs_modulus", weighted_sum(entries, lambda s: getattr(s, "youngs_modulus", None)))
        if self.hardness is None:
            self._set(
                "hardness",
                sum(s.hardness * p for s, p in members if getattr(s, "hardness", 0) > 0),
            )
        if self.is_metal is None:
            self._set("is_metal", _share(members, "is_metal") >= 0.5)
        if self.is_conductive is None:
            self._set("is_conductive", _share(members, "is_metal") >= 0.5)
        if self.is_flammable is None:
            self._set("is_flammable", _share(members, "is_flammable") >= 0.5)
        if self.is_radioactive is None:
            self._set("is_radioactive", any(getattr(s, "is_radioactive", False) for s, _ in members))

        super().__post_init__()

    @property
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        return self.parts

    def density(self, temperature: float | None = None, pressure: float | None = None) -> float:
        """Stored density for the current phase, else the weighted part density."""
        temperature, pressure = resolve_conditions(temperature, pressure)
        stored = self._stored_density(self.phase(temperature, pressure))
        if stored is not None:
            return stored
        return sum(
            ref.substance.density(temperature, pressure) * float(p)
            for ref, p in self.parts.items()
        )

    def remove(self, constituent) -> SubstanceBase:
        """Solution without ``constituent`` (renormalized), or NONE if nothing remains.

        Intrinsic constants are carried over; the result gets a generated
        name and key.
        """
        ref = as_reference(constituent)
        if ref == self:
            return NONE
        if self.proportion_of(ref) <= ZERO:
            return self

        remaining = []
        for key, value in self.parts.items():
            if key == ref:
                continue
            child = key.substance
            if child.is_leaf:
                remaining.append((key, value))
                continue
            result = child.remove(ref)
            if not result.is_empty:
                remaining.append((result.reference, value))

        parts = normalize(remaining)
        if not parts:
            return NONE
        logger.debug("Removed %s from solution %s", ref.key, self.key)
        return replace(self, parts=parts, name="", key=None)

    def homogenize(self) -> dict[SubstanceReference, Decimal]:
        return flatten(self.parts, owner=self)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["$type"] = "solution"
        data["parts"] = [[ref.key, str(p)] for ref, p in self.parts.items()]
        return data


def _share(members: list[tuple[SubstanceBase, float]], flag: str) -> float:
    return sum(p for s, p in members if getattr(s, flag, False))
