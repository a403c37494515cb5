"""Shapes carrying volume and pose for materials."""

from materia.geometry.shapes import Cuboid, Shape, SinglePoint, Sphere

__all__ = ["Cuboid", "Shape", "SinglePoint", "Sphere"]
