"""Core building blocks: physical constants, phase flags and proportion arithmetic.

Import Policy:
    from materia.core.enums import PhaseType
    from materia.core.proportions import normalize, to_proportion

DO NOT use: from materia.core import *
"""

from materia.core.enums import PhaseType
from materia.core.proportions import (
    clamp,
    is_normalized,
    merge,
    normalize,
    scale,
    to_proportion,
    total,
)

__all__ = [
    "PhaseType",
    "clamp",
    "is_normalized",
    "merge",
    "normalize",
    "scale",
    "to_proportion",
    "total",
]
