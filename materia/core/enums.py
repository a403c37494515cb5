"""
Phase Enumeration

Import Policy:
    from materia.core.enums import PhaseType

DO NOT use: from materia.core.enums import *
"""

from enum import Flag


class PhaseType(Flag):
    """Physical phase of a substance.

    Members combine as flags, so a phase query such as
    ``phase & PhaseType.SOLID`` matches any state that includes a solid
    component (e.g. ``SOLID | GLASS``).

    Options:
        NONE: No phase (the empty substance)
        SOLID, LIQUID, GAS: The standard phases derived from melting point
            and vapor pressure
        PLASMA, GLASS, LIQUID_CRYSTAL, BOSE_EINSTEIN_CONDENSATE,
        ELECTRON_DEGENERATE_MATTER, NEUTRON_DEGENERATE_MATTER: Exotic phases,
            only reachable through a substance's fixed phase
        ANY: Every phase
    """
    NONE = 0
    SOLID = 1
    LIQUID = 2
    GAS = 4
    PLASMA = 8
    GLASS = 16
    LIQUID_CRYSTAL = 32
    BOSE_EINSTEIN_CONDENSATE = 64
    ELECTRON_DEGENERATE_MATTER = 128
    NEUTRON_DEGENERATE_MATTER = 256
    ANY = 511

    @property
    def is_standard(self) -> bool:
        """True for exactly one of solid, liquid or gas."""
        return self in (PhaseType.SOLID, PhaseType.LIQUID, PhaseType.GAS)

    @property
    def label(self) -> str:
        """Readable name, joining combined flags with '|' (e.g. 'SOLID|GLASS')."""
        if self is PhaseType.ANY:
            return "ANY"
        if self is PhaseType.NONE:
            return "NONE"
        names = [
            member.name
            for member in _SINGLE_PHASES
            if member.value & self.value
        ]
        return "|".join(names)

    @classmethod
    def parse(cls, value) -> "PhaseType":
        """Build a phase from a PhaseType, an int, or a label such as 'solid|glass'."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            result = cls.NONE
            for part in value.split("|"):
                name = part.strip().upper()
                try:
                    result |= cls[name]
                except KeyError as e:
                    raise ValueError(f"Unknown phase '{part.strip()}'") from e
            return result
        raise TypeError(f"Cannot interpret {value!r} as a phase")


_SINGLE_PHASES = tuple(
    member for member in PhaseType.__members__.values()
    if member.value and member.value & (member.value - 1) == 0
)
