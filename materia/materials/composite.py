"""Layered composites of materials.

A Composite is an ordered stack of layers (core first, surface last). Its
constituents, mass, density and temperature are derived from the layers
unless overridden:

    constituents  each layer's constituents scaled by layer mass / total mass
    mass          sum of layer masses
    density       sum of layer masses / sum of layer volumes
    temperature   mass-weighted average over layers that report one

Composites are the only mutable objects in the package. ``add_layer``,
``append_layers``, ``copy_layer``, ``remove_layer``, ``remove_layers`` and
``replace_layer`` edit the layer list in place. Removal never leaves a
composite with fewer than two layers: the result collapses to the single
remaining layer, or to ``Material.EMPTY``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Any

from materia.config.defaults import DEFAULT_PROPORTION
from materia.core.proportions import ONE, ZERO, merge, normalize, scale, to_proportion
from materia.geometry.shapes import Shape, SinglePoint, Sphere
from materia.materials.base import BaseMaterial
from materia.materials.material import Material
from materia.substances.reference import SubstanceReference

logger = logging.getLogger(__name__)


class Composite(BaseMaterial):
    """Ordered, non-empty stack of material layers.

    Args:
        layers: Materials (or composites), core first
        shape: Overall shape; defaults to a sphere holding the summed layer
            volume, centred on the first layer
        mass: Mass override [kg]
        density: Density override [kg/m³]
        temperature: Temperature override [K]

    Raises:
        ValueError: If no layers are given
    """

    __hash__ = None

    def __init__(
        self,
        layers: Iterable[BaseMaterial],
        shape: Shape | None = None,
        mass: float | None = None,
        density: float | None = None,
        temperature: float | None = None,
    ):
        self._layers: list[BaseMaterial] = list(layers)
        if not self._layers:
            raise ValueError("Composite requires at least one layer")
        for label, value in (("mass", mass), ("density", density), ("temperature", temperature)):
            if value is not None and value < 0:
                raise ValueError(f"Composite {label} must be non-negative, got {value}")

        self._shape = shape
        self._mass = mass
        self._density = density
        self._temperature = temperature

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self):
        return iter(self._layers)

    def __repr__(self) -> str:
        return f"Composite(layers={len(self._layers)}, mass={self.mass:g})"

    @property
    def layers(self) -> tuple[BaseMaterial, ...]:
        return tuple(self._layers)

    def _layer_mass(self) -> float:
        return sum(layer.mass for layer in self._layers)

    # Derived state

    @property
    def constituents(self) -> Mapping[SubstanceReference, Decimal]:
        layer_mass = self._layer_mass()
        if layer_mass > 0:
            weights = [to_proportion(layer.mass / layer_mass) for layer in self._layers]
        else:
            weights = [ONE / len(self._layers)] * len(self._layers)
        scaled = [scale(layer.constituents, w) for layer, w in zip(self._layers, weights)]
        return normalize(merge(*scaled))

    @property
    def mass(self) -> float:
        if self._mass is not None:
            return self._mass
        return self._layer_mass()

    @property
    def density(self) -> float:
        if self._density is not None:
            return self._density
        volume = sum(layer.volume for layer in self._layers)
        return self._layer_mass() / volume if volume > 0 else 0.0

    @property
    def temperature(self) -> float | None:
        if self._temperature is not None:
            return self._temperature
        reporting = [layer for layer in self._layers if layer.temperature is not None]
        if not reporting:
            return None
        weight = sum(layer.mass for layer in reporting)
        if weight <= 0:
            return sum(layer.temperature for layer in reporting) / len(reporting)
        return sum(layer.temperature * layer.mass for layer in reporting) / weight

    @property
    def shape(self) -> Shape:
        if self._shape is not None:
            return self._shape
        volume = sum(layer.volume for layer in self._layers)
        position = self._layers[0].position
        if volume <= 0:
            return SinglePoint(position=position)
        return Sphere.from_volume(volume, position=position)

    def get_core(self) -> BaseMaterial:
        return self._layers[0]

    def get_surface(self) -> BaseMaterial:
        return self._layers[-1]

    # In-place layer editing

    def add_layer(self, material: BaseMaterial, proportion=DEFAULT_PROPORTION, index: int = -1) -> BaseMaterial:
        """Insert a layer holding ``proportion`` of the total mass.

        Existing layers are mass-scaled by ``1 - proportion``.

        Args:
            material: Layer to insert (rescaled to its share of the mass)
            proportion: Mass fraction of the new layer
            index: Insert position; negative appends

        Returns:
            self, or ``material`` when proportion >= 1

        Raises:
            IndexError: If index is greater than the layer count
        """
        if index > len(self._layers):
            raise IndexError(f"Layer index {index} out of range for {len(self._layers)} layers")
        p = to_proportion(proportion)
        if p >= ONE:
            return material
        if p <= ZERO:
            return self

        total_mass = self._layer_mass()
        self._layers = [layer.get_clone(ONE - p) for layer in self._layers]
        layer = material.scaled_to_mass(total_mass * float(p))
        if index < 0:
            self._layers.append(layer)
        else:
            self._layers.insert(index, layer)
        logger.debug("Added layer at %s (proportion %s), %d layers", index, p, len(self._layers))
        return self

    def append_layers(self, *materials: BaseMaterial) -> Composite:
        """Append layers unscaled; the composite mass grows by theirs."""
        self._layers.extend(materials)
        self._mass = None
        return self

    def copy_layer(self, index: int, proportion=DEFAULT_PROPORTION) -> BaseMaterial:
        """Duplicate layer ``index`` above itself at ``proportion`` of the total mass.

        Raises:
            IndexError: If index is out of range
        """
        self._check_index(index)
        return self.add_layer(self._layers[index].get_clone(), proportion, index + 1)

    def remove_layer(self, material: BaseMaterial) -> BaseMaterial:
        """Remove ``material`` from the layers.

        The layer object itself is matched first; only when it is not a
        layer are layers equal to it removed.
        """
        if any(layer is material for layer in self._layers):
            return self.remove_layers(lambda layer: layer is material)
        return self.remove_layers(lambda layer: layer == material)

    def remove_layers(self, predicate: Callable[[BaseMaterial], bool]) -> BaseMaterial:
        """Remove every layer matching ``predicate``.

        Returns:
            self while two or more layers remain; the remaining layer when
            one is left; Material.EMPTY when none are
        """
        remaining = [layer for layer in self._layers if not predicate(layer)]
        if len(remaining) == len(self._layers):
            return self
        if not remaining:
            logger.debug("Composite collapsed to empty material")
            return Material.EMPTY
        if len(remaining) == 1:
            logger.debug("Composite collapsed to its last layer")
            return remaining[0]

        self._layers = remaining
        self._mass = None
        return self

    def replace_layer(self, index: int, material: BaseMaterial, proportion=DEFAULT_PROPORTION) -> BaseMaterial:
        """Swap layer ``index`` for ``material`` at ``proportion`` of the total mass.

        The other layers are mass-scaled by ``1 - (proportion - old share)``.

        Returns:
            self, or ``material`` when proportion >= 1

        Raises:
            IndexError: If index is out of range
        """
        self._check_index(index)
        p = to_proportion(proportion)
        if p >= ONE:
            return material
        if p <= ZERO:
            return self

        total_mass = self._layer_mass()
        old = to_proportion(self._layers[index].mass / total_mass) if total_mass > 0 else ZERO
        ratio = ONE - (p - old)

        others = [layer.get_clone(ratio) for i, layer in enumerate(self._layers) if i != index]
        others.insert(index, material.scaled_to_mass(total_mass * float(p)))
        self._layers = others
        logger.debug("Replaced layer %d (proportion %s)", index, p)
        return self

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._layers):
            raise IndexError(f"Layer index {index} out of range for {len(self._layers)} layers")

    # Functional operations

    def _with_layers(self, layers: list[BaseMaterial], fraction: float = 1.0) -> Composite:
        return Composite(
            layers,
            shape=self._shape.scaled_by_volume(fraction) if self._shape is not None else None,
            mass=self._mass * fraction if self._mass is not None else None,
            density=self._density,
            temperature=self._temperature,
        )

    def get_clone(self, mass_fraction=1) -> BaseMaterial:
        """Deep copy of every layer at ``mass_fraction`` of its mass (EMPTY if <= 0)."""
        f = float(mass_fraction)
        if f <= 0:
            return Material.EMPTY
        return self._with_layers([layer.get_clone(f) for layer in self._layers], f)

    def scaled_to_mass(self, mass: float) -> BaseMaterial:
        if mass < 0:
            raise ValueError(f"Composite mass must be non-negative, got {mass}")
        if self.mass > 0 and mass > 0:
            return self.get_clone(mass / self.mass)
        clone = self._with_layers([layer.get_clone() for layer in self._layers])
        clone._mass = mass
        return clone

    def homogenized(self) -> Material:
        """Single material with the derived constituents (flattened) and state."""
        return Material(self.homogenize(), self.shape, self.mass, self.density, self.temperature)

    def add(self, substance, proportion=DEFAULT_PROPORTION) -> Composite:
        """New composite with ``substance`` added to every layer."""
        return self._with_layers([layer.add(substance, proportion) for layer in self._layers])

    def remove(self, constituent) -> BaseMaterial:
        """New composite with ``constituent`` removed from every layer.

        Layers left empty are dropped, collapsing like ``remove_layers``.
        """
        layers = [layer.remove(constituent) for layer in self._layers]
        layers = [layer for layer in layers if not layer.is_empty]
        if not layers:
            return Material.EMPTY
        if len(layers) == 1:
            return layers[0]
        return self._with_layers(layers)

    def to_dict(self) -> dict[str, Any]:
        """Record with nested layer records; overrides are None when unset."""
        return {
            "$type": "composite",
            "layers": [layer.to_dict() for layer in self._layers],
            "shape": self._shape.to_dict() if self._shape is not None else None,
            "mass": self._mass,
            "density": self._density,
            "temperature": self._temperature,
        }
