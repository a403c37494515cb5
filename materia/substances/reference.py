"""Key-based references to substances.

Compositions never embed substances directly: they hold references that
carry the substance key and, optionally, the substance itself. An unbound
reference is resolved through a ``SubstanceRegistry`` (the global one by
default).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from materia.substances.base import SubstanceBase
    from materia.substances.registry import SubstanceRegistry


@dataclass(frozen=True, eq=False)
class SubstanceReference:
    """Reference to a substance by key.

    Attributes:
        key: Stable identity key of the referenced substance
        target: Substance the reference is bound to, if any
    """

    key: str
    target: SubstanceBase | None = field(default=None, repr=False)

    @classmethod
    def to(cls, substance: SubstanceBase) -> SubstanceReference:
        """Reference bound to ``substance``."""
        return cls(substance.key, substance)

    def resolve(self, registry: SubstanceRegistry | None = None) -> SubstanceBase:
        """Return the referenced substance.

        Args:
            registry: Registry used for unbound references (global by default)

        Raises:
            KeyError: If the key is not registered
        """
        if self.target is not None:
            return self.target
        if not self.key:
            from materia.substances.substance import NONE

            return NONE
        if registry is None:
            from materia.substances.registry import get_global_registry

            registry = get_global_registry()
        return registry.get_substance(self.key)

    @property
    def substance(self) -> SubstanceBase:
        return self.resolve()

    @property
    def name(self) -> str:
        return self.resolve().name

    def __eq__(self, other: object) -> bool:
        from materia.substances.base import SubstanceBase

        if isinstance(other, (SubstanceReference, SubstanceBase)):
            return self.key == other.key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key


def as_reference(value) -> SubstanceReference:
    """Coerce a substance, reference or key string to a reference.

    Raises:
        TypeError: For any other value
    """
    from materia.substances.base import SubstanceBase

    if isinstance(value, SubstanceReference):
        return value
    if isinstance(value, SubstanceBase):
        return value.reference
    if isinstance(value, str):
        return SubstanceReference(value)
    raise TypeError(f"Cannot reference {type(value).__name__} as a substance")


def as_substance(value) -> SubstanceBase:
    """Coerce a substance, reference or key string to a substance."""
    from materia.substances.base import SubstanceBase

    if isinstance(value, SubstanceBase):
        return value
    return as_reference(value).resolve()
