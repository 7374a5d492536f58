"""Unit tests for the host primitives.

Tests cover:
- Epsilon-aware zero tests
- Point and Vector arithmetic, including the zero-vector failures
- Color arithmetic and coercion helpers
"""

import pytest

from src.phong.core.errors import ZeroVectorError
from src.phong.core.primitives import (
    BLACK,
    EPSILON,
    Color,
    Double3,
    Point,
    Vector,
    align_zero,
    as_color,
    as_double3,
    as_point,
    as_vector,
    is_zero,
)


class TestZeroTests:
    """Tests for is_zero and align_zero."""

    def test_is_zero_within_epsilon(self):
        assert is_zero(0.0)
        assert is_zero(EPSILON / 2)
        assert is_zero(-EPSILON / 2)
        assert not is_zero(EPSILON * 2)

    def test_align_zero_snaps_small_values(self):
        assert align_zero(1e-12) == 0.0
        assert align_zero(-1e-12) == 0.0
        assert align_zero(0.5) == 0.5


class TestDouble3:
    """Tests for Double3 arithmetic."""

    def test_component_wise_operations(self):
        a = Double3(1, 2, 3)
        b = Double3(2, 3, 4)
        assert a.add(b) == Double3(3, 5, 7)
        assert b.subtract(a) == Double3(1, 1, 1)
        assert a.product(b) == Double3(2, 6, 12)
        assert a.scale(2) == Double3(2, 4, 6)
        assert a.reduce(2) == Double3(0.5, 1, 1.5)
        assert a.dot(b) == 20

    def test_is_immutable(self):
        a = Double3(1, 2, 3)
        with pytest.raises(AttributeError):
            a.d1 = 5.0

    def test_as_double3_broadcasts_scalars(self):
        assert as_double3(0.5) == Double3(0.5, 0.5, 0.5)
        assert as_double3([1, 2, 3]) == Double3(1, 2, 3)

    def test_as_double3_rejects_wrong_length(self):
        with pytest.raises(ValueError):
            as_double3([1, 2])


class TestPoint:
    """Tests for Point operations."""

    def test_add_vector(self):
        assert Point(1, 2, 3).add(Vector(2, 3, 4)) == Point(3, 5, 7)
        assert Point(5, 7, 9).add(Vector(-2, -3, -4)) == Point(3, 4, 5)

    def test_subtract_points(self):
        result = Point(3, 5, 7).subtract(Point(1, 2, 3))
        assert isinstance(result, Vector)
        assert result == Vector(2, 3, 4)

    def test_subtract_same_point_raises(self):
        p = Point(1, 2, 3)
        with pytest.raises(ZeroVectorError):
            p.subtract(p)

    def test_distance(self):
        p1 = Point(1, 2, 3)
        p2 = Point(4, 6, 3)
        assert p1.distance_squared(p2) == pytest.approx(25)
        assert p1.distance(p2) == pytest.approx(5)
        assert p1.distance(p1) == 0

    def test_equality_is_epsilon_tolerant(self):
        assert Point(1, 2, 3) == Point(1 + EPSILON / 10, 2, 3)
        assert Point(1, 2, 3) != Point(1.001, 2, 3)

    def test_repr(self):
        assert repr(Point(1, 2, 3)) == "Point(1.0, 2.0, 3.0)"


class TestVector:
    """Tests for Vector operations."""

    def test_zero_vector_rejected(self):
        with pytest.raises(ZeroVectorError):
            Vector(0, 0, 0)
        with pytest.raises(ZeroVectorError):
            as_vector((0, 0, 0))

    def test_add_opposite_vector_raises(self):
        with pytest.raises(ZeroVectorError):
            Vector(1, 2, 3).add(Vector(-1, -2, -3))

    def test_scale(self):
        v = Vector(1, 2, 3)
        assert v.scale(2) == Vector(2, 4, 6)
        assert v.scale(-1) == Vector(-1, -2, -3)
        assert -v == Vector(-1, -2, -3)
        with pytest.raises(ZeroVectorError):
            v.scale(0)

    def test_dot(self):
        v1 = Vector(1, 2, 3)
        assert v1.dot(Vector(2, 3, 4)) == pytest.approx(20)
        assert v1.dot(Vector(0, 3, -2)) == pytest.approx(0)

    def test_cross(self):
        v1 = Vector(1, 2, 3)
        v2 = Vector(0, 3, -2)
        vr = v1.cross(v2)
        assert vr.length() == pytest.approx(v1.length() * v2.length())
        assert vr.dot(v1) == pytest.approx(0)
        assert vr.dot(v2) == pytest.approx(0)

    def test_cross_parallel_raises(self):
        with pytest.raises(ZeroVectorError):
            Vector(1, 2, 3).cross(Vector(-2, -4, -6))

    def test_length(self):
        v = Vector(1, 2, 2)
        assert v.length_squared() == pytest.approx(9)
        assert v.length() == pytest.approx(3)

    def test_normalize(self):
        v = Vector(1, 2, 3)
        u = v.normalize()
        assert u.length() == pytest.approx(1)
        assert v.dot(u) > 0
        with pytest.raises(ZeroVectorError):
            v.cross(u)

    def test_as_point_strips_vector_type(self):
        p = as_point(Vector(1, 0, 0))
        assert type(p) is Point


class TestColor:
    """Tests for Color arithmetic."""

    def test_add_many(self):
        c = Color(1, 2, 3).add(Color(1, 1, 1), Color(0, 0, 1))
        assert c == Color(2, 3, 5)

    def test_scale_by_scalar_and_triple(self):
        c = Color(10, 20, 30)
        assert c.scale(0.5) == Color(5, 10, 15)
        assert c.scale(Double3(1, 0, 2)) == Color(10, 0, 60)

    def test_reduce(self):
        assert Color(10, 20, 30).reduce(10) == Color(1, 2, 3)

    def test_black_is_zero(self):
        assert BLACK.to_tuple() == (0.0, 0.0, 0.0)

    def test_as_color(self):
        assert as_color((1, 2, 3)) == Color(1, 2, 3)
        c = Color(4, 5, 6)
        assert as_color(c) is c

    def test_colors_are_not_hashable(self):
        with pytest.raises(TypeError):
            hash(Color(1, 2, 3))

    def test_components(self):
        c = Color(1, 2, 3)
        assert (c.r, c.g, c.b) == (1.0, 2.0, 3.0)
