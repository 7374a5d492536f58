"""Shared shape plumbing: surfaces, intersection records and device packing.

Every shape variant (Plane, Sphere, Triangle, Tube, Cylinder) is an
independent frozen dataclass. They share no base class; instead each embeds
a ``Surface`` value and satisfies the ``Geometry`` protocol below. A
``Geometries`` composite satisfies only ``Intersectable``.

The intersection query returns either a non-empty list of ``Intersection``
records or ``None``. ``None`` is the "no hits" sentinel and is never replaced
with an empty list.

For the device renderer each shape flattens itself into a ``PackedShape``
record, which ``scene.device`` writes into Taichi fields.

Example:
    >>> from src.phong.geometry.sphere import Sphere
    >>> from src.phong.geometry.intersection import with_surface
    >>> from src.phong.core.primitives import Color
    >>> from src.phong.materials.phong import Material
    >>> ball = with_surface(
    ...     Sphere((0, 0, -3), 1.0),
    ...     emission=Color(40, 0, 0),
    ...     material=Material(kd=0.5, ks=0.5, shininess=20),
    ... )
"""

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol, runtime_checkable

import taichi as ti

from src.phong.core.primitives import BLACK, Color, Point, Vector
from src.phong.core.ray import Ray, vec3
from src.phong.materials.phong import Material


@dataclass(frozen=True)
class Surface:
    """Appearance shared by every shape variant.

    Attributes:
        emission: Light emitted by the surface itself.
        material: Phong reflection coefficients.
    """

    emission: Color = field(default_factory=lambda: BLACK)
    material: Material = field(default_factory=Material)


def with_surface(shape, emission: Color | None = None, material: Material | None = None):
    """Return a copy of ``shape`` with a new emission and/or material.

    Fields that are not given keep the shape's current value.
    """
    surface = Surface(
        emission=shape.surface.emission if emission is None else emission,
        material=shape.surface.material if material is None else material,
    )
    return dataclasses.replace(shape, surface=surface)


@dataclass(frozen=True, eq=False)
class Intersection:
    """A hit of a ray on a shape.

    The material and emission are copied from the shape when the record is
    created, so later shading always sees the appearance the shape had at
    intersection time. Shading scratch values (normal, light direction and
    so on) are not stored here; see ``core.tracer.ShadingContext``.

    Attributes:
        geometry: The shape that was hit.
        point: The hit point.
        material: Snapshot of the shape's material.
        emission: Snapshot of the shape's emission.
    """

    geometry: "Geometry"
    point: Point
    material: Material = field(init=False)
    emission: Color = field(init=False)

    def __post_init__(self) -> None:
        surface = self.geometry.surface
        object.__setattr__(self, "material", surface.material)
        object.__setattr__(self, "emission", surface.emission)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return self.geometry is other.geometry and self.point == other.point

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Intersection(geometry={type(self.geometry).__name__}, point={self.point!r})"


@runtime_checkable
class Intersectable(Protocol):
    """Anything a ray can be intersected with."""

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        ...


@runtime_checkable
class Geometry(Intersectable, Protocol):
    """A single shape with a surface, a normal field and a device form."""

    surface: Surface

    def normal_at(self, point: Point) -> Vector:
        ...

    def pack(self) -> "PackedShape":
        ...


def find_intersection_points(intersectable: Intersectable, ray: Ray) -> list[Point] | None:
    """Intersect and keep only the hit points.

    Returns:
        The hit points in the order the intersectable reported them, or None.
    """
    intersections = intersectable.intersect(ray)
    if intersections is None:
        return None
    return [intersection.point for intersection in intersections]


# =============================================================================
# Device Packing
# =============================================================================


class ShapeKind(IntEnum):
    """Shape discriminator stored in the device shape table."""

    PLANE = 0
    SPHERE = 1
    TRIANGLE = 2
    TUBE = 3
    CYLINDER = 4


Triple = tuple[float, float, float]
_ZERO: Triple = (0.0, 0.0, 0.0)


@dataclass
class PackedShape:
    """A shape flattened into the columns of the device shape table.

    Attributes:
        kind: Which variant this row holds.
        p0: Plane point, sphere center, first triangle vertex or axis origin.
        p1: Second triangle vertex.
        p2: Third triangle vertex.
        direction: Plane/triangle normal or tube/cylinder axis direction.
        radius: Sphere/tube/cylinder radius.
        height: Cylinder height.
        emission: Surface emission.
        ka: Ambient coefficient.
        kd: Diffuse coefficient.
        ks: Specular coefficient.
        shininess: Specular exponent.
    """

    kind: ShapeKind
    p0: Triple = _ZERO
    p1: Triple = _ZERO
    p2: Triple = _ZERO
    direction: Triple = _ZERO
    radius: float = 0.0
    height: float = 0.0
    emission: Triple = _ZERO
    ka: Triple = _ZERO
    kd: Triple = _ZERO
    ks: Triple = _ZERO
    shininess: int = 0


def surface_columns(surface: Surface) -> dict:
    """Keyword arguments for the appearance columns of a PackedShape."""
    material = surface.material
    return {
        "emission": surface.emission.to_tuple(),
        "ka": material.ka.to_tuple(),
        "kd": material.kd.to_tuple(),
        "ks": material.ks.to_tuple(),
        "shininess": material.shininess,
    }


@ti.dataclass
class HitRecord:
    """Result of a device ray-shape test.

    Attributes:
        hit: 1 if the ray hit the shape, 0 otherwise.
        t: Ray parameter of the nearest forward hit. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3

