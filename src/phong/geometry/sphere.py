"""Sphere primitive with the projection (geometric) intersection method.

The center c is projected onto the ray o + t*v:

    u  = c - o
    tm = v . u                    (parameter of the projection)
    d  = sqrt(|u|^2 - tm^2)       (distance from c to the ray's line)

If d >= radius the line misses (a tangent line counts as a miss). Otherwise
the half chord th = sqrt(r^2 - d^2) gives the candidates tm - th and tm + th,
of which only the positive ones are kept, nearer first. A ray starting at the
center has the single hit at t = radius.

Example:
    >>> from src.phong.geometry.sphere import Sphere
    >>> from src.phong.core.ray import Ray
    >>> sphere = Sphere((1, 0, 0), 1.0)
    >>> [i.point for i in sphere.intersect(Ray((1, -2, 0), (0, 1, 0)))]
    [Point(1.0, -1.0, 0.0), Point(1.0, 1.0, 0.0)]
"""

import math
from dataclasses import dataclass, field

import taichi as ti

from src.phong.core.primitives import Point, PointLike, Vector, align_zero, as_point
from src.phong.core.ray import (
    DeviceRay,
    Ray,
    align_zero_scalar,
    dot3,
    is_zero_vector,
    normalize_vector,
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


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive float).
        surface: Emission and material.

    Raises:
        ValueError: If the radius is not positive.
    """

    center: PointLike
    radius: float
    surface: Surface = field(default_factory=Surface)

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", as_point(self.center))
        if self.radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "radius", float(self.radius))

    def normal_at(self, point: Point) -> Vector:
        return point.subtract(self.center).normalize()

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        if ray.origin == self.center:
            return [Intersection(self, ray.point_at(self.radius))]

        u = self.center.subtract(ray.origin)
        tm = align_zero(ray.direction.dot(u))
        # Clamp round-off below zero before the square root
        d = align_zero(math.sqrt(max(0.0, u.length_squared() - tm * tm)))
        if d >= self.radius:
            return None

        th = align_zero(math.sqrt(self.radius * self.radius - d * d))
        t1 = align_zero(tm - th)
        t2 = align_zero(tm + th)

        distances = [t for t in (t1, t2) if t > 0]
        if not distances:
            return None
        return [Intersection(self, ray.point_at(t)) for t in distances]

    def pack(self) -> PackedShape:
        return PackedShape(
            kind=ShapeKind.SPHERE,
            p0=self.center.to_tuple(),
            radius=self.radius,
            **surface_columns(self.surface),
        )


@ti.func
def hit_sphere(ray: DeviceRay, center: vec3, radius: ti.f64) -> HitRecord:
    """Device twin of ``Sphere.intersect``, keeping the nearest forward hit.

    Args:
        ray: The ray to test.
        center: The center of the sphere.
        radius: The radius of the sphere.

    Returns:
        A HitRecord for the nearest hit with t > 0, if any.
    """
    did_hit = 0
    hit_t = 0.0

    u = center - ray.origin
    if is_zero_vector(u):
        did_hit = 1
        hit_t = radius
    else:
        tm = align_zero_scalar(dot3(ray.direction, u))
        d = align_zero_scalar(ti.sqrt(ti.max(0.0, dot3(u, u) - tm * tm)))
        if d < radius:
            th = align_zero_scalar(ti.sqrt(radius * radius - d * d))
            t1 = align_zero_scalar(tm - th)
            t2 = align_zero_scalar(tm + th)
            if t1 > 0.0:
                did_hit = 1
                hit_t = t1
            elif t2 > 0.0:
                did_hit = 1
                hit_t = t2

    hit_point = vec3(0.0, 0.0, 0.0)
    if did_hit == 1:
        hit_point = ray_at(ray, hit_t)
    return HitRecord(hit=did_hit, t=hit_t, point=hit_point)


@ti.func
def sphere_normal(point: vec3, center: vec3) -> vec3:
    return normalize_vector(point - center)
