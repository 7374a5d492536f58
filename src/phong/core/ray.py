"""Ray value type, closest-hit selection and device-side vector helpers.

The host ``Ray`` is the reference representation used by the shape
intersection algorithms. The device section mirrors it for Taichi kernels:
``DeviceRay`` carries the same origin/unit-direction pair, and the small
``@ti.func`` helpers reproduce the host arithmetic order so both backends
agree to within float64 round-off.

Example:
    >>> from src.phong.core.ray import Ray
    >>> ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, 2.0))
    >>> ray.direction
    Vector(0.0, 0.0, 1.0)
    >>> ray.point_at(3.0)
    Point(0.0, 0.0, 3.0)
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

import taichi as ti

from src.phong.core.primitives import (
    EPSILON,
    Point,
    PointLike,
    Vector,
    as_point,
    as_vector,
    is_zero,
)

if TYPE_CHECKING:
    from src.phong.geometry.intersection import Intersection


class Ray:
    """A half-line with an origin and a unit direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of the ray. Normalised on construction.

    Raises:
        ZeroVectorError: If the supplied direction is the zero vector.
    """

    __slots__ = ("origin", "direction")

    def __init__(self, origin: PointLike, direction: PointLike) -> None:
        object.__setattr__(self, "origin", as_point(origin))
        object.__setattr__(self, "direction", as_vector(direction).normalize())

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Ray is immutable")

    def point_at(self, t: float) -> Point:
        """Compute origin + t * direction.

        A parameter that is zero within EPSILON returns the origin itself, so
        no zero-length displacement vector is ever constructed.
        """
        if is_zero(t):
            return self.origin
        return self.origin.add(self.direction.scale(t))

    def find_closest_point(self, points: Sequence[Point] | None) -> Point | None:
        """Return the point nearest the origin, first one wins on ties.

        Returns:
            The closest point, or None when ``points`` is None or empty.
        """
        closest = None
        best = 0.0
        for point in points or ():
            d2 = self.origin.distance_squared(point)
            if closest is None or d2 < best:
                closest = point
                best = d2
        return closest

    def find_closest_intersection(
        self, intersections: "Sequence[Intersection] | None"
    ) -> "Intersection | None":
        """Return the intersection whose point is nearest the origin.

        Uses the same stable first-minimum scan as ``find_closest_point``.
        """
        closest = None
        best = 0.0
        for intersection in intersections or ():
            d2 = self.origin.distance_squared(intersection.point)
            if closest is None or d2 < best:
                closest = intersection
                best = d2
        return closest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return self.origin == other.origin and self.direction == other.direction

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin!r}, direction={self.direction!r})"


# =============================================================================
# Device Mirror
# =============================================================================

# Every device computation runs in float64 to match the host reference
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class DeviceRay:
    """Device-side ray.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The unit direction of the ray (vec3).
    """

    origin: vec3
    direction: vec3


@ti.func
def is_zero_scalar(x: ti.f64) -> ti.i32:
    """Device twin of ``is_zero``."""
    return ti.abs(x) < EPSILON


@ti.func
def is_zero_vector(v: vec3) -> ti.i32:
    """Check whether all components of a vector are zero within EPSILON."""
    return is_zero_scalar(v.x) and is_zero_scalar(v.y) and is_zero_scalar(v.z)


@ti.func
def align_zero_scalar(x: ti.f64) -> ti.f64:
    result = x
    if is_zero_scalar(x):
        result = 0.0
    return result


@ti.func
def dot3(a: vec3, b: vec3) -> ti.f64:
    """Dot product evaluated left to right like ``Double3.dot``."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross3(a: vec3, b: vec3) -> vec3:
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def normalize_vector(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The caller guarantees ``v`` is not the zero vector; on the host the same
    situation raises ``ZeroVectorError`` instead.
    """
    return v / ti.sqrt(dot3(v, v))


@ti.func
def ray_at(ray: DeviceRay, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value.

    Returns:
        The ray origin when t is zero within EPSILON, otherwise
        ray.origin + ray.direction * t.
    """
    result = ray.origin
    if not is_zero_scalar(t):
        result = ray.origin + ray.direction * t
    return result

