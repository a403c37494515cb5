"""Materials: compositions with mass, shape and temperature.

Module structure:
    base: BaseMaterial (shared queries, split, core/surface access)
    material: Material (immutable) and Material.EMPTY
    composite: Composite (ordered layers, in-place layer editing)
"""

from materia.materials.base import BaseMaterial
from materia.materials.material import Material
from materia.materials.composite import Composite

__all__ = [
    "BaseMaterial",
    "Material",
    "Composite",
]
