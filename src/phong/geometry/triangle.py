"""Triangle primitive.

A ray first has to cross the triangle's supporting plane. The crossing is
then inside the triangle when the ray direction lies on the same side of all
three "edge planes" spanned by the ray origin and consecutive vertices:

    vi = pi - o
    ni = normalize(vi x v(i+1))
    inside  <=>  v . n1, v . n2, v . n3 all non-zero with the same sign

A zero dot product means the ray passes through an edge or a vertex, which is
not a hit (the triangle is open).

Example:
    >>> from src.phong.geometry.triangle import Triangle
    >>> from src.phong.core.ray import Ray
    >>> tri = Triangle((1, 0, 1), (0, 1, 1), (-1, 0, 1))
    >>> [i.point for i in tri.intersect(Ray((0, 0.3, 0), (0, 0, 1)))]
    [Point(0.0, 0.3, 1.0)]
"""

from dataclasses import dataclass, field

import taichi as ti

from src.phong.core.errors import ZeroVectorError
from src.phong.core.primitives import Point, PointLike, Vector, as_point, is_zero
from src.phong.core.ray import DeviceRay, Ray, cross3, dot3, is_zero_scalar, is_zero_vector, normalize_vector, vec3
from src.phong.geometry.intersection import (
    HitRecord,
    Intersection,
    PackedShape,
    ShapeKind,
    Surface,
    surface_columns,
)
from src.phong.geometry.plane import Plane, hit_plane, plane_distance


@dataclass(frozen=True, eq=False)
class Triangle:
    """A triangle given by three ordered vertices.

    The normal is (p2 - p1) x (p3 - p1) normalised; its orientation follows
    the vertex order.

    Attributes:
        p1: First vertex.
        p2: Second vertex.
        p3: Third vertex.
        surface: Emission and material.
        plane: The supporting plane, derived from the vertices.

    Raises:
        ZeroVectorError: If two vertices coincide or all three are collinear.
    """

    p1: PointLike
    p2: PointLike
    p3: PointLike
    surface: Surface = field(default_factory=Surface)
    plane: Plane = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "p1", as_point(self.p1))
        object.__setattr__(self, "p2", as_point(self.p2))
        object.__setattr__(self, "p3", as_point(self.p3))
        object.__setattr__(self, "plane", Plane.from_points(self.p1, self.p2, self.p3))

    @property
    def vertices(self) -> tuple[Point, Point, Point]:
        return (self.p1, self.p2, self.p3)

    def normal_at(self, point: Point) -> Vector:
        return self.plane.normal

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        t = plane_distance(self.plane.point, self.plane.normal, ray)
        if t is None:
            return None

        try:
            v1 = self.p1.subtract(ray.origin)
            v2 = self.p2.subtract(ray.origin)
            v3 = self.p3.subtract(ray.origin)
        except ZeroVectorError:
            # Ray starts at a vertex
            return None

        try:
            n1 = v1.cross(v2).normalize()
            n2 = v2.cross(v3).normalize()
            n3 = v3.cross(v1).normalize()
        except ZeroVectorError:
            # Ray origin is on the line through an edge
            return None

        v = ray.direction
        vn1 = v.dot(n1)
        vn2 = v.dot(n2)
        vn3 = v.dot(n3)
        if is_zero(vn1) or is_zero(vn2) or is_zero(vn3):
            return None

        if (vn1 > 0 and vn2 > 0 and vn3 > 0) or (vn1 < 0 and vn2 < 0 and vn3 < 0):
            return [Intersection(self, ray.point_at(t))]
        return None

    def pack(self) -> PackedShape:
        return PackedShape(
            kind=ShapeKind.TRIANGLE,
            p0=self.p1.to_tuple(),
            p1=self.p2.to_tuple(),
            p2=self.p3.to_tuple(),
            direction=self.plane.normal.to_tuple(),
            **surface_columns(self.surface),
        )


@ti.func
def hit_triangle(ray: DeviceRay, p1: vec3, p2: vec3, p3: vec3, normal: vec3) -> HitRecord:
    """Device twin of ``Triangle.intersect``.

    Args:
        ray: The ray to test.
        p1: First vertex, also the reference point of the supporting plane.
        p2: Second vertex.
        p3: Third vertex.
        normal: Unit normal of the supporting plane.

    Returns:
        The supporting-plane HitRecord when the crossing is strictly inside
        the triangle, otherwise a miss.
    """
    rec = hit_plane(ray, p1, normal)
    inside = 0
    if rec.hit == 1:
        v1 = p1 - ray.origin
        v2 = p2 - ray.origin
        v3 = p3 - ray.origin
        if not (is_zero_vector(v1) or is_zero_vector(v2) or is_zero_vector(v3)):
            c1 = cross3(v1, v2)
            c2 = cross3(v2, v3)
            c3 = cross3(v3, v1)
            if not (is_zero_vector(c1) or is_zero_vector(c2) or is_zero_vector(c3)):
                vn1 = dot3(ray.direction, normalize_vector(c1))
                vn2 = dot3(ray.direction, normalize_vector(c2))
                vn3 = dot3(ray.direction, normalize_vector(c3))
                if not (is_zero_scalar(vn1) or is_zero_scalar(vn2) or is_zero_scalar(vn3)):
                    if (vn1 > 0.0 and vn2 > 0.0 and vn3 > 0.0) or (
                        vn1 < 0.0 and vn2 < 0.0 and vn3 < 0.0
                    ):
                        inside = 1
    return HitRecord(hit=inside, t=rec.t, point=rec.point)
