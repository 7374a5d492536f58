"""Infinite plane primitive.

A plane is a reference point q0 and a unit normal n. A ray o + t*v meets it
where

    t = n . (q0 - o) / (n . v)

Only t > 0 counts as a hit. A ray parallel to the plane never hits it, even
when it lies inside the plane, and neither does a ray that starts exactly at
q0 (the vector q0 - o would be the zero vector).

Example:
    >>> from src.phong.geometry.plane import Plane
    >>> from src.phong.core.ray import Ray
    >>> plane = Plane((1, 1, 1), (0, 0, 2))
    >>> [i.point for i in plane.intersect(Ray((2, 2, 0), (0, 0, 1)))]
    [Point(2.0, 2.0, 1.0)]
"""

from dataclasses import dataclass, field

import taichi as ti

from src.phong.core.errors import ZeroVectorError
from src.phong.core.primitives import Point, PointLike, Vector, align_zero, as_point, as_vector, is_zero
from src.phong.core.ray import (
    DeviceRay,
    Ray,
    align_zero_scalar,
    dot3,
    is_zero_scalar,
    is_zero_vector,
    ray_at,
    vec3,
)
from src.phong.geometry.intersection import (
    HitRecord,
    Intersection,
    PackedShape,
    ShapeKind,
    Surface,
    surface_columns,
)


def plane_distance(point: Point, normal: Vector, ray: Ray) -> float | None:
    """Ray parameter at which a ray crosses a plane.

    Args:
        point: Any point on the plane.
        normal: The plane normal (unit length).
        ray: The ray to test.

    Returns:
        The parameter t > 0 of the crossing, or None when the ray is
        parallel to the plane, starts at ``point`` or crosses behind its
        origin.
    """
    nv = normal.dot(ray.direction)
    if is_zero(nv):
        return None
    try:
        to_plane = point.subtract(ray.origin)
    except ZeroVectorError:
        return None
    t = align_zero(normal.dot(to_plane) / nv)
    if t <= 0:
        return None
    return t


@dataclass(frozen=True, eq=False)
class Plane:
    """An infinite plane.

    Attributes:
        point: Reference point q0 on the plane.
        normal: Unit normal. Normalised on construction.
        surface: Emission and material.

    Raises:
        ZeroVectorError: If the normal is the zero vector.
    """

    point: PointLike
    normal: PointLike
    surface: Surface = field(default_factory=Surface)

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", as_point(self.point))
        object.__setattr__(self, "normal", as_vector(self.normal).normalize())

    @classmethod
    def from_points(
        cls, p1: PointLike, p2: PointLike, p3: PointLike, surface: Surface | None = None
    ) -> "Plane":
        """Build the plane through three points.

        The normal is (p2 - p1) x (p3 - p1), so its orientation follows the
        order of the points.

        Raises:
            ZeroVectorError: If two points coincide or all three are collinear.
        """
        p1 = as_point(p1)
        normal = as_point(p2).subtract(p1).cross(as_point(p3).subtract(p1)).normalize()
        return cls(p1, normal, surface if surface is not None else Surface())

    def normal_at(self, point: Point) -> Vector:
        return self.normal

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        t = plane_distance(self.point, self.normal, ray)
        if t is None:
            return None
        return [Intersection(self, ray.point_at(t))]

    def pack(self) -> PackedShape:
        return PackedShape(
            kind=ShapeKind.PLANE,
            p0=self.point.to_tuple(),
            direction=self.normal.to_tuple(),
            **surface_columns(self.surface),
        )


@ti.func
def hit_plane(ray: DeviceRay, q0: vec3, normal: vec3) -> HitRecord:
    """Device twin of ``Plane.intersect``.

    Args:
        ray: The ray to test.
        q0: Reference point of the plane.
        normal: Unit normal of the plane.

    Returns:
        A HitRecord for the forward crossing, if any.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    nv = dot3(normal, ray.direction)
    to_plane = q0 - ray.origin
    if not is_zero_scalar(nv) and not is_zero_vector(to_plane):
        t = align_zero_scalar(dot3(normal, to_plane) / nv)
        if t > 0.0:
            did_hit = 1
            hit_t = t
            hit_point = ray_at(ray, t)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point)
