"""Volume-bearing shapes with a pose.

Shapes are immutable. Position is an (x, y, z) tuple in metres and rotation a
unit quaternion (x, y, z, w) in scipy's scalar-last convention. Every
transforming method returns a new shape.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

import numpy as np
from scipy.spatial.transform import Rotation

Vector3 = tuple[float, float, float]
Quaternion = tuple[float, float, float, float]

ORIGIN: Vector3 = (0.0, 0.0, 0.0)
IDENTITY: Quaternion = (0.0, 0.0, 0.0, 1.0)


def _as_vector(value) -> Vector3:
    arr = np.asarray(value, dtype=float).reshape(3)
    return (float(arr[0]), float(arr[1]), float(arr[2]))


def _as_quaternion(value) -> Quaternion:
    q = Rotation.from_quat(np.asarray(value, dtype=float).reshape(4)).as_quat()
    return (float(q[0]), float(q[1]), float(q[2]), float(q[3]))


@dataclass(frozen=True)
class Shape(ABC):
    """Base class for shapes.

    Attributes:
        position: Centre of the shape [m]
        rotation: Orientation as a unit quaternion (x, y, z, w)
    """

    position: Vector3 = ORIGIN
    rotation: Quaternion = IDENTITY

    type_name: ClassVar[str] = ""
    _registry: ClassVar[dict[str, type[Shape]]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.type_name:
            Shape._registry[cls.type_name] = cls

    def __post_init__(self):
        object.__setattr__(self, "position", _as_vector(self.position))
        object.__setattr__(self, "rotation", _as_quaternion(self.rotation))

    @property
    @abstractmethod
    def volume(self) -> float:
        """Volume [m³]."""

    @property
    @abstractmethod
    def containing_radius(self) -> float:
        """Radius of the smallest sphere about the centre that holds the shape [m]."""

    @abstractmethod
    def scaled_by_volume(self, factor: float) -> Shape:
        """Same shape and pose with its volume multiplied by ``factor``."""

    @abstractmethod
    def _dimensions(self) -> dict[str, float]:
        pass

    @property
    def position_vector(self) -> np.ndarray:
        return np.array(self.position)

    @property
    def rotation_matrix(self) -> np.ndarray:
        return Rotation.from_quat(self.rotation).as_matrix()

    def with_position(self, position) -> Shape:
        return replace(self, position=_as_vector(position))

    def with_rotation(self, rotation) -> Shape:
        return replace(self, rotation=_as_quaternion(rotation))

    def to_dict(self) -> dict[str, Any]:
        return {
            "$type": self.type_name,
            **self._dimensions(),
            "position": list(self.position),
            "rotation": list(self.rotation),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Shape:
        """Rebuild a shape from ``to_dict`` output.

        Raises:
            ValueError: If the '$type' discriminator is unknown
        """
        data = dict(data)
        type_name = data.pop("$type", None)
        cls = Shape._registry.get(type_name)
        if cls is None:
            raise ValueError(
                f"Unknown shape type '{type_name}'. "
                f"Available: {', '.join(sorted(Shape._registry))}"
            )
        data["position"] = tuple(data.get("position", ORIGIN))
        data["rotation"] = tuple(data.get("rotation", IDENTITY))
        return cls(**data)


@dataclass(frozen=True)
class SinglePoint(Shape):
    """A dimensionless point."""

    type_name: ClassVar[str] = "point"

    ORIGIN: ClassVar[SinglePoint]

    @property
    def volume(self) -> float:
        return 0.0

    @property
    def containing_radius(self) -> float:
        return 0.0

    def scaled_by_volume(self, factor: float) -> SinglePoint:
        return self

    def _dimensions(self) -> dict[str, float]:
        return {}


SinglePoint.ORIGIN = SinglePoint()


@dataclass(frozen=True)
class Sphere(Shape):
    """A sphere.

    Attributes:
        radius: Radius [m]
    """

    radius: float = field(default=1.0, kw_only=True)

    type_name: ClassVar[str] = "sphere"

    def __post_init__(self):
        super().__post_init__()
        if self.radius < 0:
            raise ValueError(f"Radius must be non-negative: radius={self.radius}")

    @classmethod
    def from_volume(cls, volume: float, position=ORIGIN, rotation=IDENTITY) -> Sphere:
        if volume < 0:
            raise ValueError(f"Volume must be non-negative: volume={volume}")
        radius = (3.0 * volume / (4.0 * math.pi)) ** (1.0 / 3.0)
        return cls(position=position, rotation=rotation, radius=radius)

    @property
    def volume(self) -> float:
        return 4.0 / 3.0 * math.pi * self.radius**3

    @property
    def containing_radius(self) -> float:
        return self.radius

    def scaled_by_volume(self, factor: float) -> Sphere:
        return replace(self, radius=self.radius * max(factor, 0.0) ** (1.0 / 3.0))

    def _dimensions(self) -> dict[str, float]:
        return {"radius": self.radius}


@dataclass(frozen=True)
class Cuboid(Shape):
    """A rectangular box.

    Attributes:
        axis_x, axis_y, axis_z: Full edge lengths [m]
    """

    axis_x: float = field(default=1.0, kw_only=True)
    axis_y: float = field(default=1.0, kw_only=True)
    axis_z: float = field(default=1.0, kw_only=True)

    type_name: ClassVar[str] = "cuboid"

    def __post_init__(self):
        super().__post_init__()
        if min(self.axis_x, self.axis_y, self.axis_z) < 0:
            raise ValueError(
                f"Cuboid axes must be non-negative: "
                f"({self.axis_x}, {self.axis_y}, {self.axis_z})"
            )

    @property
    def volume(self) -> float:
        return self.axis_x * self.axis_y * self.axis_z

    @property
    def containing_radius(self) -> float:
        return 0.5 * math.sqrt(self.axis_x**2 + self.axis_y**2 + self.axis_z**2)

    def scaled_by_volume(self, factor: float) -> Cuboid:
        k = max(factor, 0.0) ** (1.0 / 3.0)
        return replace(
            self,
            axis_x=self.axis_x * k,
            axis_y=self.axis_y * k,
            axis_z=self.axis_z * k,
        )

    def _dimensions(self) -> dict[str, float]:
        return {"axis_x": self.axis_x, "axis_y": self.axis_y, "axis_z": self.axis_z}
