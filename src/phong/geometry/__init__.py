"""Shape variants, the composite aggregate and the intersection record."""

from .geometries import Geometries
from .intersection import (
    Geometry,
    Intersectable,
    Intersection,
    PackedShape,
    ShapeKind,
    Surface,
    find_intersection_points,
    with_surface,
)
from .plane import Plane
from .sphere import Sphere
from .triangle import Triangle
from .tube import Cylinder, Tube

__all__ = [
    "Cylinder",
    "Geometries",
    "Geometry",
    "Intersectable",
    "Intersection",
    "PackedShape",
    "Plane",
    "ShapeKind",
    "Sphere",
    "Surface",
    "Triangle",
    "Tube",
    "find_intersection_points",
    "with_surface",
]
