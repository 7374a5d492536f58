"""Host-side geometric primitives: triples, points, vectors and colors.

These are the value types every host algorithm is written against. They are
immutable, use float64 arithmetic in a fixed evaluation order (so the Taichi
device path can reproduce the same results) and treat values within
``EPSILON`` of zero as zero.

The zero vector is not a valid ``Vector``: constructing one, or any operation
whose result would be one (subtracting equal points, scaling by zero, the
cross product of parallel vectors, normalizing), raises ``ZeroVectorError``.

Example:
    >>> from src.phong.core.primitives import Point, Vector
    >>> p = Point(1.0, 2.0, 3.0)
    >>> v = Point(4.0, 6.0, 3.0).subtract(p)
    >>> v.length()
    5.0
    >>> p.add(v.normalize())
    Point(1.6, 2.8, 3.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from typing import Union

from src.phong.core.errors import ZeroVectorError

# Tolerance used by every zero test in the host and device code paths
EPSILON = 1e-10


def is_zero(value: float) -> bool:
    """Check whether a scalar is zero within ``EPSILON``."""
    return abs(value) < EPSILON


def align_zero(value: float) -> float:
    """Snap a scalar to exactly 0.0 when it is within ``EPSILON`` of zero."""
    return 0.0 if is_zero(value) else value


class Double3:
    """An immutable triple of floats with component-wise arithmetic.

    Attributes:
        d1: First component.
        d2: Second component.
        d3: Third component.
    """

    __slots__ = ("d1", "d2", "d3")

    def __init__(self, d1: float, d2: float, d3: float) -> None:
        object.__setattr__(self, "d1", float(d1))
        object.__setattr__(self, "d2", float(d2))
        object.__setattr__(self, "d3", float(d3))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def add(self, other: Double3) -> Double3:
        return Double3(self.d1 + other.d1, self.d2 + other.d2, self.d3 + other.d3)

    def subtract(self, other: Double3) -> Double3:
        return Double3(self.d1 - other.d1, self.d2 - other.d2, self.d3 - other.d3)

    def scale(self, k: float) -> Double3:
        return Double3(self.d1 * k, self.d2 * k, self.d3 * k)

    def reduce(self, k: float) -> Double3:
        return Double3(self.d1 / k, self.d2 / k, self.d3 / k)

    def product(self, other: Double3) -> Double3:
        """Component-wise product."""
        return Double3(self.d1 * other.d1, self.d2 * other.d2, self.d3 * other.d3)

    def dot(self, other: Double3) -> float:
        return self.d1 * other.d1 + self.d2 * other.d2 + self.d3 * other.d3

    def is_zero(self) -> bool:
        """Check whether all three components are zero within ``EPSILON``."""
        return is_zero(self.d1) and is_zero(self.d2) and is_zero(self.d3)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.d1, self.d2, self.d3)

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_tuple())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Double3):
            return NotImplemented
        return self.subtract(other).is_zero()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"({self.d1}, {self.d2}, {self.d3})"


Double3.ZERO = Double3(0.0, 0.0, 0.0)  # type: ignore[attr-defined]
Double3.ONE = Double3(1.0, 1.0, 1.0)  # type: ignore[attr-defined]

# Anything accepted where a triple of coefficients is expected
Double3Like = Union[Double3, float, int, Sequence[float]]


def as_double3(value: Double3Like) -> Double3:
    """Coerce a scalar, a 3-sequence or a Double3 to a Double3.

    A scalar is broadcast to all three components.

    Raises:
        ValueError: If a sequence does not have exactly three items.
    """
    if isinstance(value, Double3):
        return value
    if isinstance(value, (int, float)):
        return Double3(value, value, value)
    items = tuple(value)
    if len(items) != 3:
        raise ValueError(f"Expected 3 components, got {len(items)}")
    return Double3(*items)


class Point:
    """A location in 3-D space.

    Attributes:
        xyz: The coordinates as a Double3.
    """

    __slots__ = ("xyz",)

    def __init__(self, x: float, y: float, z: float) -> None:
        object.__setattr__(self, "xyz", Double3(x, y, z))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_double3(cls, xyz: Double3):
        return cls(xyz.d1, xyz.d2, xyz.d3)

    @property
    def x(self) -> float:
        return self.xyz.d1

    @property
    def y(self) -> float:
        return self.xyz.d2

    @property
    def z(self) -> float:
        return self.xyz.d3

    def add(self, vector: Vector):
        """Translate by a vector. The result has the type of ``self``."""
        return type(self).from_double3(self.xyz.add(vector.xyz))

    def subtract(self, other: Point) -> Vector:
        """Return the vector from ``other`` to ``self``.

        Raises:
            ZeroVectorError: If the two points coincide.
        """
        return Vector.from_double3(self.xyz.subtract(other.xyz))

    def distance_squared(self, other: Point) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: Point) -> float:
        return math.sqrt(self.distance_squared(other))

    def to_tuple(self) -> tuple[float, float, float]:
        return self.xyz.to_tuple()

    def __iter__(self) -> Iterator[float]:
        return iter(self.xyz)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.xyz == other.xyz

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x}, {self.y}, {self.z})"


ORIGIN = Point(0.0, 0.0, 0.0)


class Vector(Point):
    """A non-zero direction/displacement in 3-D space."""

    __slots__ = ()

    def __init__(self, x: float, y: float, z: float) -> None:
        super().__init__(x, y, z)
        if self.xyz.is_zero():
            raise ZeroVectorError("Vector cannot be the zero vector")

    def scale(self, k: float) -> Vector:
        return Vector.from_double3(self.xyz.scale(k))

    def dot(self, other: Vector) -> float:
        return self.xyz.dot(other.xyz)

    def cross(self, other: Vector) -> Vector:
        """Cross product ``self x other``.

        Raises:
            ZeroVectorError: If the vectors are parallel.
        """
        a = self.xyz
        b = other.xyz
        return Vector(
            a.d2 * b.d3 - a.d3 * b.d2,
            a.d3 * b.d1 - a.d1 * b.d3,
            a.d1 * b.d2 - a.d2 * b.d1,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vector:
        return Vector.from_double3(self.xyz.reduce(self.length()))

    def __neg__(self) -> Vector:
        return self.scale(-1.0)


PointLike = Union[Point, Sequence[float]]


def as_point(value: PointLike) -> Point:
    if isinstance(value, Point) and not isinstance(value, Vector):
        return value
    return Point(*tuple(value))


def as_vector(value: PointLike) -> Vector:
    """Coerce a 3-sequence to a Vector.

    Raises:
        ZeroVectorError: If the value is the zero vector.
    """
    if isinstance(value, Vector):
        return value
    return Vector(*tuple(value))


class Color:
    """An RGB light intensity on the 0..255 scale.

    Values are not clamped; intensities can exceed 255 while lighting is
    accumulated and are clamped only when written to an 8-bit image.

    Attributes:
        rgb: The red, green and blue intensities as a Double3.
    """

    __slots__ = ("rgb",)

    def __init__(self, r: float, g: float, b: float) -> None:
        object.__setattr__(self, "rgb", Double3(r, g, b))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Color is immutable")

    @classmethod
    def from_double3(cls, rgb: Double3) -> Color:
        return cls(rgb.d1, rgb.d2, rgb.d3)

    @property
    def r(self) -> float:
        return self.rgb.d1

    @property
    def g(self) -> float:
        return self.rgb.d2

    @property
    def b(self) -> float:
        return self.rgb.d3

    def add(self, *colors: Color) -> Color:
        rgb = self.rgb
        for color in colors:
            rgb = rgb.add(color.rgb)
        return Color.from_double3(rgb)

    def scale(self, k: float | Double3) -> Color:
        """Scale by a scalar or component-wise by a Double3."""
        if isinstance(k, Double3):
            return Color.from_double3(self.rgb.product(k))
        return Color.from_double3(self.rgb.scale(k))

    def reduce(self, k: float) -> Color:
        return Color.from_double3(self.rgb.reduce(k))

    def to_tuple(self) -> tuple[float, float, float]:
        return self.rgb.to_tuple()

    def __iter__(self) -> Iterator[float]:
        return iter(self.rgb)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return self.rgb == other.rgb

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Color({self.r}, {self.g}, {self.b})"


BLACK = Color(0.0, 0.0, 0.0)

ColorLike = Union[Color, Sequence[float]]


def as_color(value: ColorLike) -> Color:
    if isinstance(value, Color):
        return value
    return Color(*tuple(value))
