"""Unit tests for the Geometries composite."""

import pytest

from src.phong.core.primitives import Point
from src.phong.core.ray import Ray
from src.phong.geometry.geometries import Geometries
from src.phong.geometry.intersection import find_intersection_points
from src.phong.geometry.plane import Plane
from src.phong.geometry.sphere import Sphere
from src.phong.geometry.triangle import Triangle
from src.phong.geometry.tube import Cylinder, Tube


@pytest.fixture
def mixed_geometries():
    return Geometries(
        Sphere((2, 0, 0), 1),
        Triangle((1, 0, 1), (0, 1, 1), (-1, 0, 1)),
        Plane((1, 1, 2), (0, 0, 1)),
    )


class TestGeometriesMembership:
    """Tests for adding members."""

    def test_empty_collection_returns_none(self):
        assert Geometries().intersect(Ray((0, 0, 0), (0, 0, 1))) is None

    def test_none_members_ignored(self):
        shapes = Geometries(None, Sphere((0, 0, 0), 1), None)
        assert len(shapes) == 1

    def test_duplicate_member_ignored(self):
        sphere = Sphere((0, 0, 0), 1)
        shapes = Geometries(sphere)
        shapes.add(sphere)
        assert len(shapes) == 1
        assert list(shapes) == [sphere]

    def test_equal_but_distinct_members_kept(self):
        shapes = Geometries(Sphere((0, 0, 0), 1), Sphere((0, 0, 0), 1))
        assert len(shapes) == 2

    def test_add_keeps_insertion_order(self):
        first = Sphere((0, 0, 0), 1)
        second = Plane((0, 0, -5), (0, 0, 1))
        shapes = Geometries(first)
        shapes.add(second)
        assert list(shapes) == [first, second]

    def test_leaves_flatten_nested_collections(self, mixed_geometries):
        extra = Sphere((10, 0, 0), 1)
        outer = Geometries(Geometries(mixed_geometries), extra)
        assert len(outer) == 2
        assert list(outer.leaves()) == [*mixed_geometries, extra]

    def test_leaves_follow_hit_order(self, mixed_geometries):
        outer = Geometries(Sphere((2, 0, -5), 0.5), mixed_geometries)
        hits = outer.intersect(Ray((2, 0, -10), (0, 0, 1)))
        leaves = list(outer.leaves())
        order = [leaves.index(i.geometry) for i in hits]
        assert order == sorted(order)

    def test_nested_collection(self, mixed_geometries):
        outer = Geometries(mixed_geometries, Sphere((10, 0, 0), 1))
        result = outer.intersect(Ray((2, 0, -2), (0, 0, 1)))
        assert len(result) == 3


class TestGeometriesIntersection:
    """Tests for concatenating member intersections."""

    @pytest.mark.parametrize(
        "origin,direction,expected",
        [
            ((5, 5, 5), (1, 0, 0), 0),
            ((3, 3, 1), (0, 0, 1), 1),
            ((2, 0, -2), (0, 0, 1), 3),
            ((0, 0.3, 0), (0, 0, 1), 2),
        ],
        ids=["none", "one-shape", "some-shapes", "sphere-missed"],
    )
    def test_intersection_counts(self, mixed_geometries, origin, direction, expected):
        result = mixed_geometries.intersect(Ray(origin, direction))
        if expected == 0:
            assert result is None
        else:
            assert len(result) == expected

    def test_all_shapes_hit(self):
        shapes = Geometries(
            Sphere((1, 1, 0), 1),
            Triangle((-1, -1, 1), (3, -1, 1), (1, 3, 1)),
            Plane((0, 0, 2), (0, 0, 1)),
        )
        result = shapes.intersect(Ray((1, 1, -2), (0, 0, 1)))
        assert len(result) == 4

    def test_results_follow_member_order(self, mixed_geometries):
        result = mixed_geometries.intersect(Ray((2, 0, -2), (0, 0, 1)))
        members = list(mixed_geometries)
        assert [i.geometry for i in result] == [members[0], members[0], members[2]]

    def test_none_ray(self, mixed_geometries):
        assert mixed_geometries.intersect(None) is None

    def test_find_intersection_points(self, mixed_geometries):
        """Test the points-only view of the same query."""
        points = find_intersection_points(mixed_geometries, Ray((2, 0, -2), (0, 0, 1)))
        assert points == [Point(2, 0, -1), Point(2, 0, 1), Point(2, 0, 2)]
        assert find_intersection_points(mixed_geometries, Ray((5, 5, 5), (1, 0, 0))) is None


NORMAL_SHAPES = [
    Plane((0, 0, -5), (0, 1, 1)),
    Sphere((0, 0, -3), 1),
    Triangle((-1, -1, -2), (1, -1, -2), (0, 1, -2)),
    Tube(Ray((0, 0, -4), (0, 1, 0)), 1),
    Cylinder(Ray((0, -1, -4), (0, 1, 0)), 1, 2),
]

NORMAL_RAYS = [
    Ray((0, 0, 0), (0, 0, -1)),
    Ray((0, 0, 0), (0.1, 0.2, -1)),
    Ray((0, 0, 0), (-0.2, 0.1, -1)),
    Ray((0, 0, 0), (0.3, -0.3, -1)),
    Ray((0.2, -3, -4), (0, 1, 0)),
    Ray((3, 0.5, -4.2), (-1, 0, 0)),
]


class TestNormalsAtHits:
    """Every reported hit point has a unit surface normal."""

    @pytest.mark.parametrize(
        "shape", NORMAL_SHAPES, ids=["plane", "sphere", "triangle", "tube", "cylinder"]
    )
    def test_normal_is_unit_length(self, shape):
        points = []
        for ray in NORMAL_RAYS:
            points.extend(find_intersection_points(shape, ray) or [])
        assert points
        for point in points:
            assert shape.normal_at(point).length() == pytest.approx(1.0)
