"""Unit tests for triangle intersection.

Tests cover:
- Normal orthogonal to the edges
- Hits strictly inside the triangle
- Misses against an edge, a vertex and the continuation of an edge
- Device hit_triangle agreeing with the host
"""

import pytest

from src.phong.core.errors import ZeroVectorError
from src.phong.core.primitives import Point, Vector
from src.phong.core.ray import Ray
from src.phong.geometry.intersection import ShapeKind
from src.phong.geometry.triangle import Triangle

TRIANGLE = Triangle(Point(1, 0, 1), Point(0, 1, 1), Point(-1, 0, 1))

# (origin, direction, expected hit point or None)
TRIANGLE_CASES = [
    # Inside the triangle
    ((0, 0.3, 0), (0, 0, 1), (0, 0.3, 1)),
    # Outside against an edge and against a vertex
    ((2, 0, 0), (0, 0, 1), None),
    ((2, 2, 0), (0, 0, 1), None),
    # On an edge, in a vertex and on an edge's continuation
    ((0.5, 0.5, 0), (0, 0, 1), None),
    ((1, 0, 0), (0, 0, 1), None),
    ((2, -1, 0), (0, 0, 1), None),
    # Parallel to the triangle
    ((1, 1, 2), (1, 0, 0), None),
    # Starts in the triangle's plane but outside it
    ((3, 3, 1), (1, 0, 0), None),
]


class TestTriangleBasics:
    """Tests for Triangle construction and normals."""

    def test_normal(self):
        triangle = Triangle((1, 0, 0), (0, 1, 0), (0, 0, 1))
        normal = triangle.normal_at(Point(0, 0, 0))
        assert normal.length() == pytest.approx(1)
        assert normal.dot(Vector(-1, 1, 0)) == pytest.approx(0)
        assert normal.dot(Vector(-1, 0, 1)) == pytest.approx(0)

    def test_collinear_vertices_rejected(self):
        with pytest.raises(ZeroVectorError):
            Triangle((0, 0, 0), (1, 1, 1), (2, 2, 2))

    def test_vertices(self):
        assert TRIANGLE.vertices == (Point(1, 0, 1), Point(0, 1, 1), Point(-1, 0, 1))

    def test_pack(self):
        packed = TRIANGLE.pack()
        assert packed.kind == ShapeKind.TRIANGLE
        assert packed.p0 == (1.0, 0.0, 1.0)
        assert packed.p1 == (0.0, 1.0, 1.0)
        assert packed.p2 == (-1.0, 0.0, 1.0)
        assert packed.direction == TRIANGLE.plane.normal.to_tuple()


class TestTriangleIntersection:
    """Tests for ray-triangle intersection."""

    @pytest.mark.parametrize("origin,direction,expected", TRIANGLE_CASES)
    def test_intersect(self, origin, direction, expected):
        result = TRIANGLE.intersect(Ray(origin, direction))
        if expected is None:
            assert result is None
        else:
            assert len(result) == 1
            assert result[0].point == Point(*expected)
            assert result[0].geometry is TRIANGLE

    def test_hit_from_either_side(self):
        result = TRIANGLE.intersect(Ray((0, 0.3, 2), (0, 0, -1)))
        assert result[0].point == Point(0, 0.3, 1)


class TestDeviceTriangle:
    """Tests for hit_triangle."""

    @pytest.mark.parametrize("origin,direction,expected", TRIANGLE_CASES)
    def test_matches_host(self, run_kernel_ray, origin, direction, expected):
        import taichi as ti

        from src.phong.core.ray import vec3
        from src.phong.geometry.triangle import hit_triangle

        nx, ny, nz = TRIANGLE.plane.normal.to_tuple()

        @ti.func
        def hit(ray):
            return hit_triangle(
                ray,
                vec3(1.0, 0.0, 1.0),
                vec3(0.0, 1.0, 1.0),
                vec3(-1.0, 0.0, 1.0),
                vec3(nx, ny, nz),
            )

        did_hit, _, point = run_kernel_ray(hit)(origin, direction)
        if expected is None:
            assert did_hit == 0
        else:
            assert did_hit == 1
            assert point == pytest.approx(expected, abs=1e-9)
