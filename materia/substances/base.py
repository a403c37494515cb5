"""Shared behaviour of every substance kind.

A substance exposes ``constituents``: a read-only mapping from
``SubstanceReference`` to a Decimal proportion. Leaves map to themselves at
proportion 1; aggregates (solutions, mixtures) map to their parts. Everything
in this module is expressed over that mapping, so the same code serves
leaves and aggregates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar

from materia.config.defaults import DEFAULT_PRESSURE, DEFAULT_PROPORTION, DEFAULT_TEMPERATURE
from materia.core.enums import PhaseType
from materia.core.proportions import ONE, ZERO, merge, normalize, scale, to_proportion

if TYPE_CHECKING:
    from materia.substances.reference import SubstanceReference

PhaseBucket = tuple[list["SubstanceReference"], Decimal]


class SubstanceBase(ABC):
    """Base class for Substance, Solution and Mixture.

    Subclasses provide ``key``, ``name`` and ``constituents``. Equality and
    hashing use the key only, and a substance compares equal to any
    reference carrying its key.
    """

    #: True for substances whose constituents are only themselves
    is_leaf: ClassVar[bool] = False

    #: True for substances with uniform intrinsic properties (not mixtures)
    is_homogeneous: ClassVar[bool] = True

    key: str
    name: str

    @property
    @abstractmethod
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        """Read-only proportion mapping; empty for the empty substance."""

    @abstractmethod
    def phase(self, temperature: float | None = None, pressure: float | None = None) -> PhaseType:
        """Phase at the given temperature [K] and pressure [kPa]."""

    @abstractmethod
    def density(self, temperature: float | None = None, pressure: float | None = None) -> float:
        """Density [kg/m³] at the given temperature [K] and pressure [kPa]."""

    @abstractmethod
    def remove(self, constituent) -> SubstanceBase:
        """Remove a constituent, returning a new substance."""

    @abstractmethod
    def with_name(self, name: str) -> SubstanceBase:
        """Copy with another display name (same key)."""

    def __eq__(self, other: object) -> bool:
        from materia.substances.reference import SubstanceReference

        if isinstance(other, (SubstanceBase, SubstanceReference)):
            return self.key == other.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.name

    @property
    def reference(self) -> SubstanceReference:
        """Reference bound to this substance."""
        from materia.substances.reference import SubstanceReference

        return SubstanceReference.to(self)

    @property
    def is_empty(self) -> bool:
        return not self.constituents

    def combine(self, other, proportion=DEFAULT_PROPORTION) -> SubstanceBase:
        """Blend another substance into this one.

        The other side's constituents are folded in (not nested): existing
        proportions are scaled by ``1 - proportion`` and the other's by
        ``proportion``.

        Args:
            other: Substance, reference or catalog key
            proportion: Share of ``other`` in the result

        Returns:
            ``other`` when proportion >= 1, ``self`` when proportion <= 0,
            otherwise a new substance (a Mixture unless a single constituent
            remains)
        """
        from materia.substances.reference import as_substance

        p = to_proportion(proportion)
        incoming = as_substance(other)
        if p >= ONE:
            return incoming
        if p <= ZERO:
            return self
        merged = merge(scale(self.constituents, ONE - p), scale(incoming.constituents, p))
        return from_constituents(normalize(merged))

    def add_constituent(self, constituent, proportion=DEFAULT_PROPORTION) -> SubstanceBase:
        """Add (or re-weight) a single constituent, kept as one entry.

        If the constituent is already present the others are scaled by
        ``1 - (proportion - current)`` and it is set to ``proportion``;
        otherwise the others are scaled by ``1 - proportion``. The result is
        renormalized.
        """
        from materia.substances.reference import as_substance

        p = to_proportion(proportion)
        incoming = as_substance(constituent)
        if p <= ZERO:
            return self
        if p >= ONE:
            return incoming

        ref = incoming.reference
        current = dict(self.constituents)
        if ref in current:
            if len(current) == 1:
                return self
            ratio = ONE - (p - current[ref])
            entries = {key: (p if key == ref else value * ratio) for key, value in current.items()}
        else:
            entries = scale(current, ONE - p)
            entries[ref] = p
        return from_constituents(normalize(entries))

    def proportion_of(self, constituent) -> Decimal:
        """Proportion of a constituent, including occurrences nested in aggregates.

        Args:
            constituent: Substance, reference, key, or a predicate over
                homogenized leaf substances

        Returns:
            Proportion in [0, 1]
        """
        from materia.substances.reference import SubstanceReference, as_reference

        if callable(constituent) and not isinstance(constituent, (SubstanceBase, SubstanceReference)):
            return sum(
                (value for ref, value in self.homogenize().items() if constituent(ref.substance)),
                ZERO,
            )
        return proportion_in(self.constituents, as_reference(constituent), owner=self)

    def contains(
        self,
        constituent,
        temperature: float | None = None,
        pressure: float | None = None,
        phase: PhaseType = PhaseType.ANY,
    ) -> bool:
        """Whether a constituent is present (optionally in a given phase)."""
        from materia.substances.reference import as_reference

        ref = as_reference(constituent)
        if self.proportion_of(ref) <= ZERO:
            return False
        if phase == PhaseType.ANY:
            return True
        return bool(ref.substance.phase(temperature, pressure) & phase)

    def separate_by_phase(
        self,
        temperature: float | None = None,
        pressure: float | None = None,
        *phases: PhaseType,
    ) -> list[PhaseBucket]:
        """Group constituents by phase.

        See ``separate_by_phase`` at module level.
        """
        return separate_by_phase(self.constituents, temperature, pressure, *phases)

    def homogenize(self) -> dict[SubstanceReference, Decimal]:
        """Flatten to leaf substances; proportions multiply along each path."""
        return flatten(self.constituents, owner=self)

    def chemical_constituents(self) -> list:
        """Distinct leaf substances with a chemical formula, in first-seen order."""
        return [
            ref.substance
            for ref in self.homogenize()
            if getattr(ref.substance, "formula", None)
        ]


def from_constituents(mapping: Mapping[SubstanceReference, Decimal]) -> SubstanceBase:
    """Substance for a normalized mapping: the sole entry itself, or a Mixture."""
    from materia.substances.mixture import Mixture
    from materia.substances.substance import NONE

    if not mapping:
        return NONE
    if len(mapping) == 1:
        return next(iter(mapping)).substance
    return Mixture(mapping)


def proportion_in(
    mapping: Mapping[SubstanceReference, Decimal],
    ref: SubstanceReference,
    owner: object = None,
) -> Decimal:
    """Proportion of ``ref`` in ``mapping``, recursing into aggregate entries."""
    result = ZERO
    for key, value in mapping.items():
        if key == ref:
            result += value
            continue
        child = key.substance
        if not child.is_leaf and child is not owner:
            result += value * child.proportion_of(ref)
    return result


def flatten(
    mapping: Mapping[SubstanceReference, Decimal],
    owner: object = None,
) -> dict[SubstanceReference, Decimal]:
    """Replace aggregate entries of a mapping by their own flattened constituents.

    Args:
        mapping: Proportion mapping
        owner: Substance owning the mapping (stops self-recursion)

    Returns:
        Mapping whose keys are all leaf substances
    """
    flat: dict[SubstanceReference, Decimal] = {}
    for ref, value in mapping.items():
        child = ref.substance
        if child.is_leaf or child is owner:
            flat[ref] = flat.get(ref, ZERO) + value
            continue
        for leaf, share in child.homogenize().items():
            flat[leaf] = flat.get(leaf, ZERO) + value * share
    return flat


def separate_by_phase(
    mapping: Mapping[SubstanceReference, Decimal],
    temperature: float | None,
    pressure: float | None,
    *phases: PhaseType,
) -> list[PhaseBucket]:
    """Group the entries of a mapping by the phase of each referenced substance.

    One bucket is produced per requested phase, in order, followed by an
    unmatched bucket holding entries that matched none of them. A constituent
    whose phase intersects several requested phases appears in each of those
    buckets, so bucket proportions may sum to more than 1.

    Returns:
        List of (references, summed proportion) tuples
    """
    tagged = [
        (ref, value, ref.substance.phase(temperature, pressure))
        for ref, value in mapping.items()
    ]

    buckets: list[PhaseBucket] = []
    matched = set()
    for phase in phases:
        hits = [(ref, value) for ref, value, actual in tagged if actual & phase]
        matched.update(ref for ref, _ in hits)
        buckets.append(([ref for ref, _ in hits], sum((v for _, v in hits), ZERO)))

    rest = [(ref, value) for ref, value, _ in tagged if ref not in matched]
    buckets.append(([ref for ref, _ in rest], sum((v for _, v in rest), ZERO)))
    return buckets


def coerce_entries(constituents: Any) -> list[tuple[SubstanceReference, Decimal]]:
    """Turn the accepted constituent spellings into (reference, proportion) pairs.

    Accepts None, a single substance/reference/key, a mapping of those to
    proportions, or an iterable whose items are either (substance, proportion)
    pairs or bare substances (which share equally).
    """
    from materia.substances.reference import SubstanceReference, as_reference

    if constituents is None:
        return []
    if isinstance(constituents, (SubstanceBase, SubstanceReference, str)):
        return [(as_reference(constituents), ONE)]
    if isinstance(constituents, Mapping):
        return [(as_reference(key), to_proportion(value)) for key, value in constituents.items()]
    if isinstance(constituents, Iterable):
        entries = []
        for item in constituents:
            if isinstance(item, (tuple, list)) and len(item) == 2:
                entries.append((as_reference(item[0]), to_proportion(item[1])))
            else:
                entries.append((as_reference(item), ONE))
        return entries
    raise TypeError(f"Cannot interpret {type(constituents).__name__} as constituents")


def resolve_conditions(temperature: float | None, pressure: float | None) -> tuple[float, float]:
    """Fill missing temperature/pressure with the ambient defaults."""
    return (
        DEFAULT_TEMPERATURE if temperature is None else temperature,
        DEFAULT_PRESSURE if pressure is None else pressure,
    )


def weighted_sum(
    entries: Iterable[tuple[SubstanceReference, Decimal]],
    selector: Callable[[SubstanceBase], float | None],
) -> float | None:
    """Proportion-weighted sum of a numeric property over entries that report it."""
    values = [(selector(ref.substance), value) for ref, value in entries]
    present = [(v, p) for v, p in values if v is not None]
    if not present:
        return None
    return sum(v * float(p) for v, p in present)
