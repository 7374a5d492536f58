"""Tube (infinite cylinder) and Cylinder (finite, capped) primitives.

Both are defined by an axis ray (origin p0, unit direction d) and a radius;
the Cylinder adds a height measured along d from p0. The two variants share
the radial-normal and quadratic helpers in this module but no base class.

Intersection with the lateral surface solves |w_perp(t)|^2 = r^2, where
w_perp is the component of (o + t*v - p0) perpendicular to the axis:

    v_perp  = v - (v . d) d
    dp_perp = (o - p0) - ((o - p0) . d) d
    a = v_perp . v_perp
    b = 2 v_perp . dp_perp
    c = dp_perp . dp_perp - r^2

A ray parallel to the axis (a == 0) or tangent to the surface (discriminant
== 0) has no hit. The Cylinder keeps lateral hits strictly between the caps
and adds hits strictly inside the two cap disks.

Example:
    >>> from src.phong.geometry.tube import Cylinder
    >>> from src.phong.core.primitives import Point
    >>> from src.phong.core.ray import Ray
    >>> can = Cylinder(Ray((0, 0, 0), (0, 0, 1)), 1.0, 2.0)
    >>> can.normal_at(Point(0.5, 0, 2))
    Vector(0.0, 0.0, 1.0)
"""

import math
from dataclasses import dataclass, field

import taichi as ti

from src.phong.core.primitives import Point, Vector, align_zero, is_zero
from src.phong.core.ray import (
    DeviceRay,
    Ray,
    align_zero_scalar,
    dot3,
    is_zero_scalar,
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
from src.phong.geometry.plane import hit_plane, plane_distance


def radial_normal(point: Point, axis: Ray) -> Vector:
    """Unit vector from the point's projection on the axis to the point.

    Raises:
        ZeroVectorError: If the point lies on the axis.
    """
    to_point = point.subtract(axis.origin)
    p = to_point.dot(axis.direction)
    if is_zero(p):
        return to_point.normalize()
    projection = axis.origin.add(axis.direction.scale(p))
    return point.subtract(projection).normalize()


def tube_roots(ray: Ray, axis: Ray, radius: float) -> tuple[float, float] | None:
    """Both ray parameters where the ray's line meets the infinite tube.

    Returns:
        (t1, t2) with t1 < t2 before any sign filtering, or None when the
        ray is parallel to the axis or misses/touches the tube.
    """
    d = axis.direction.xyz
    v = ray.direction.xyz
    dp = ray.origin.xyz.subtract(axis.origin.xyz)

    v_perp = v.subtract(d.scale(v.dot(d)))
    dp_perp = dp.subtract(d.scale(dp.dot(d)))

    a = v_perp.dot(v_perp)
    if is_zero(a):
        return None
    b = 2.0 * v_perp.dot(dp_perp)
    c = dp_perp.dot(dp_perp) - radius * radius

    discriminant = align_zero(b * b - 4.0 * a * c)
    if discriminant <= 0:
        return None
    root = math.sqrt(discriminant)
    t1 = align_zero((-b - root) / (2.0 * a))
    t2 = align_zero((-b + root) / (2.0 * a))
    return t1, t2


def _axial_offset(point: Point, axis: Ray) -> float:
    """Signed distance of the point's projection from the axis origin."""
    return point.xyz.subtract(axis.origin.xyz).dot(axis.direction.xyz)


@dataclass(frozen=True, eq=False)
class Tube:
    """An infinite circular tube around an axis ray.

    Attributes:
        axis: The axis ray.
        radius: Tube radius (positive).
        surface: Emission and material.

    Raises:
        ValueError: If the radius is not positive.
    """

    axis: Ray
    radius: float
    surface: Surface = field(default_factory=Surface)

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"Tube radius must be positive, got {self.radius}")
        object.__setattr__(self, "radius", float(self.radius))

    def normal_at(self, point: Point) -> Vector:
        return radial_normal(point, self.axis)

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        roots = tube_roots(ray, self.axis, self.radius)
        if roots is None:
            return None
        distances = [t for t in roots if t > 0]
        if not distances:
            return None
        return [Intersection(self, ray.point_at(t)) for t in distances]

    def pack(self) -> PackedShape:
        return PackedShape(
            kind=ShapeKind.TUBE,
            p0=self.axis.origin.to_tuple(),
            direction=self.axis.direction.to_tuple(),
            radius=self.radius,
            **surface_columns(self.surface),
        )


@dataclass(frozen=True, eq=False)
class Cylinder:
    """A finite tube closed by two flat caps.

    The bottom cap is centred on the axis origin, the top cap at
    ``axis.origin + height * axis.direction``.

    Attributes:
        axis: The axis ray.
        radius: Cylinder radius (positive).
        height: Distance between the caps (positive).
        surface: Emission and material.

    Raises:
        ValueError: If the radius or the height is not positive.
    """

    axis: Ray
    radius: float
    height: float
    surface: Surface = field(default_factory=Surface)

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"Cylinder radius must be positive, got {self.radius}")
        if self.height <= 0:
            raise ValueError(f"Cylinder height must be positive, got {self.height}")
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "height", float(self.height))

    @property
    def top_center(self) -> Point:
        return self.axis.point_at(self.height)

    def normal_at(self, point: Point) -> Vector:
        p = _axial_offset(point, self.axis)
        if is_zero(p) or p < 0:
            return -self.axis.direction
        if is_zero(p - self.height) or p > self.height:
            return self.axis.direction
        return radial_normal(point, self.axis)

    def intersect(self, ray: Ray) -> list[Intersection] | None:
        distances = []

        roots = tube_roots(ray, self.axis, self.radius)
        if roots is not None:
            for t in roots:
                if t <= 0:
                    continue
                p = _axial_offset(ray.point_at(t), self.axis)
                if p > 0 and not is_zero(p) and p < self.height and not is_zero(p - self.height):
                    distances.append(t)

        r2 = self.radius * self.radius
        for center in (self.axis.origin, self.top_center):
            t = plane_distance(center, self.axis.direction, ray)
            if t is None:
                continue
            if align_zero(r2 - ray.point_at(t).distance_squared(center)) > 0:
                distances.append(t)

        if not distances:
            return None
        return [Intersection(self, ray.point_at(t)) for t in sorted(distances)]

    def pack(self) -> PackedShape:
        return PackedShape(
            kind=ShapeKind.CYLINDER,
            p0=self.axis.origin.to_tuple(),
            direction=self.axis.direction.to_tuple(),
            radius=self.radius,
            height=self.height,
            **surface_columns(self.surface),
        )


# =============================================================================
# Device Functions
# =============================================================================


@ti.func
def _tube_roots_device(ray: DeviceRay, p0: vec3, axis_dir: vec3, radius: ti.f64):
    """Device twin of ``tube_roots``.

    Returns:
        A tuple (valid, t1, t2); t1 and t2 are meaningful only if valid == 1.
    """
    valid = 0
    t1 = 0.0
    t2 = 0.0

    v = ray.direction
    dp = ray.origin - p0
    v_perp = v - axis_dir * dot3(v, axis_dir)
    dp_perp = dp - axis_dir * dot3(dp, axis_dir)

    a = dot3(v_perp, v_perp)
    if not is_zero_scalar(a):
        b = 2.0 * dot3(v_perp, dp_perp)
        c = dot3(dp_perp, dp_perp) - radius * radius
        discriminant = align_zero_scalar(b * b - 4.0 * a * c)
        if discriminant > 0.0:
            root = ti.sqrt(discriminant)
            valid = 1
            t1 = align_zero_scalar((-b - root) / (2.0 * a))
            t2 = align_zero_scalar((-b + root) / (2.0 * a))
    return valid, t1, t2


@ti.func
def hit_tube(ray: DeviceRay, p0: vec3, axis_dir: vec3, radius: ti.f64) -> HitRecord:
    """Nearest forward hit of a ray on an infinite tube."""
    valid, t1, t2 = _tube_roots_device(ray, p0, axis_dir, radius)
    did_hit = 0
    hit_t = 0.0
    if valid == 1:
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
def _inside_open_interval(p: ti.f64, height: ti.f64) -> ti.i32:
    return p > 0.0 and not is_zero_scalar(p) and p < height and not is_zero_scalar(p - height)


@ti.func
def hit_cylinder(
    ray: DeviceRay, p0: vec3, axis_dir: vec3, radius: ti.f64, height: ti.f64
) -> HitRecord:
    """Nearest forward hit of a ray on a capped cylinder.

    Args:
        ray: The ray to test.
        p0: Axis origin, the center of the bottom cap.
        axis_dir: Unit axis direction.
        radius: Cylinder radius.
        height: Distance between the caps.

    Returns:
        A HitRecord for the smallest valid t among the lateral and cap hits.
    """
    did_hit = 0
    hit_t = 0.0

    valid, t1, t2 = _tube_roots_device(ray, p0, axis_dir, radius)
    if valid == 1:
        if t1 > 0.0 and _inside_open_interval(dot3(ray_at(ray, t1) - p0, axis_dir), height):
            did_hit = 1
            hit_t = t1
        if t2 > 0.0 and _inside_open_interval(dot3(ray_at(ray, t2) - p0, axis_dir), height):
            if did_hit == 0 or t2 < hit_t:
                did_hit = 1
                hit_t = t2

    r2 = radius * radius
    for cap in ti.static(range(2)):
        center = p0 + axis_dir * (height * cap)
        rec = hit_plane(ray, center, axis_dir)
        if rec.hit == 1:
            offset = rec.point - center
            if align_zero_scalar(r2 - dot3(offset, offset)) > 0.0:
                if did_hit == 0 or rec.t < hit_t:
                    did_hit = 1
                    hit_t = rec.t

    hit_point = vec3(0.0, 0.0, 0.0)
    if did_hit == 1:
        hit_point = ray_at(ray, hit_t)
    return HitRecord(hit=did_hit, t=hit_t, point=hit_point)


@ti.func
def tube_normal(point: vec3, p0: vec3, axis_dir: vec3) -> vec3:
    """Device twin of ``radial_normal``."""
    to_point = point - p0
    p = dot3(to_point, axis_dir)
    result = vec3(0.0, 0.0, 0.0)
    if is_zero_scalar(p):
        result = normalize_vector(to_point)
    else:
        result = normalize_vector(point - (p0 + axis_dir * p))
    return result


@ti.func
def cylinder_normal(point: vec3, p0: vec3, axis_dir: vec3, height: ti.f64) -> vec3:
    p = dot3(point - p0, axis_dir)
    result = vec3(0.0, 0.0, 0.0)
    if is_zero_scalar(p) or p < 0.0:
        result = -axis_dir
    elif is_zero_scalar(p - height) or p > height:
        result = axis_dir
    else:
        result = tube_normal(point, p0, axis_dir)
    return result
