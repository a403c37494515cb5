"""Common interface of Material and Composite."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from decimal import Decimal

from materia.config.defaults import DEFAULT_PRESSURE, DEFAULT_PROPORTION, DEFAULT_TEMPERATURE
from materia.core.enums import PhaseType
from materia.core.proportions import ONE, ZERO, to_proportion
from materia.geometry.shapes import Shape
from materia.substances.base import PhaseBucket, flatten, proportion_in, separate_by_phase
from materia.substances.reference import SubstanceReference, as_reference


class BaseMaterial(ABC):
    """A composition with extrinsic physical state.

    Subclasses expose the composition as ``constituents`` (a normalized
    mapping of substance references to Decimal proportions) together with
    mass [kg], density [kg/m³], temperature [K] (None means ambient) and a
    shape. Temperatures and pressures used for phase queries default to the
    material's own temperature and the ambient pressure.
    """

    @property
    @abstractmethod
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        pass

    @property
    @abstractmethod
    def mass(self) -> float:
        pass

    @property
    @abstractmethod
    def density(self) -> float:
        pass

    @property
    @abstractmethod
    def temperature(self) -> float | None:
        pass

    @property
    @abstractmethod
    def shape(self) -> Shape:
        pass

    @abstractmethod
    def get_clone(self, mass_fraction=1) -> BaseMaterial:
        """Deep copy holding ``mass_fraction`` of the mass (EMPTY if <= 0)."""

    @abstractmethod
    def homogenized(self) -> BaseMaterial:
        pass

    @abstractmethod
    def add(self, substance, proportion=DEFAULT_PROPORTION) -> BaseMaterial:
        pass

    @abstractmethod
    def remove(self, constituent) -> BaseMaterial:
        pass

    @abstractmethod
    def scaled_to_mass(self, mass: float) -> BaseMaterial:
        """Copy holding exactly ``mass`` kg, shape volume scaled to match."""

    @property
    def position(self) -> tuple[float, float, float]:
        return self.shape.position

    @property
    def rotation(self) -> tuple[float, float, float, float]:
        return self.shape.rotation

    @property
    def volume(self) -> float:
        return self.shape.volume

    @property
    def effective_temperature(self) -> float:
        """Own temperature, or the ambient default."""
        return DEFAULT_TEMPERATURE if self.temperature is None else self.temperature

    @property
    def is_empty(self) -> bool:
        return not self.constituents and self.mass == 0

    def proportion_of(self, constituent) -> Decimal:
        """Proportion of a substance (or of leaves matching a predicate)."""
        from materia.substances.base import SubstanceBase

        if callable(constituent) and not isinstance(constituent, (SubstanceBase, SubstanceReference)):
            return sum(
                (p for ref, p in self.homogenize().items() if constituent(ref.substance)),
                ZERO,
            )
        return proportion_in(self.constituents, as_reference(constituent))

    def contains(self, constituent, phase: PhaseType = PhaseType.ANY) -> bool:
        """Whether a substance is present, optionally in a given phase at the material's temperature."""
        ref = as_reference(constituent)
        if self.proportion_of(ref) <= ZERO:
            return False
        if phase == PhaseType.ANY:
            return True
        return bool(ref.substance.phase(self.effective_temperature, DEFAULT_PRESSURE) & phase)

    def separate_by_phase(
        self,
        temperature: float | None = None,
        pressure: float | None = None,
        *phases: PhaseType,
    ) -> list[PhaseBucket]:
        """Group constituents by phase (one bucket per phase, then unmatched)."""
        if temperature is None:
            temperature = self.effective_temperature
        return separate_by_phase(self.constituents, temperature, pressure, *phases)

    def homogenize(self) -> dict[SubstanceReference, Decimal]:
        """Flat leaf composition; proportions multiply along each path."""
        return flatten(self.constituents)

    def overall_value(self, selector: Callable[[object], float | None]) -> float:
        """Proportion-weighted average of a substance property over the leaves.

        Leaves for which ``selector`` returns None are skipped.

        Example:
            >>> material.overall_value(lambda s: s.hardness)
        """
        total = 0.0
        weight = 0.0
        for ref, p in self.homogenize().items():
            value = selector(ref.substance)
            if value is None:
                continue
            total += value * float(p)
            weight += float(p)
        return total / weight if weight > 0 else 0.0

    def split(self, *proportions) -> BaseMaterial:
        """Divide into a composite of independent clones.

        Args:
            *proportions: Mass fractions. None gives two halves; a single
                value p gives [p, 1 - p]; several values are normalized.

        Returns:
            A Composite with one clone per fraction, or self when a single
            fraction is <= 0 or >= 1
        """
        from materia.materials.composite import Composite

        shares = [to_proportion(p) for p in proportions]
        if len(shares) == 1 and (shares[0] <= ZERO or shares[0] >= ONE):
            return self
        if not shares:
            shares = [Decimal("0.5"), Decimal("0.5")]
        elif len(shares) == 1:
            shares = [shares[0], ONE - shares[0]]
        else:
            grand_total = sum(shares, ZERO)
            if grand_total != ONE:
                shares = [s / grand_total for s in shares]

        return Composite([self.get_clone(share) for share in shares], shape=self.shape)

    def get_core(self) -> BaseMaterial:
        """First layer of a composite; the material itself otherwise."""
        return self

    def get_surface(self) -> BaseMaterial:
        """Last layer of a composite; the material itself otherwise."""
        return self
