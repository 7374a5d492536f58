"""Composite of intersectables queried as one.

Example:
    >>> from src.phong.geometry.geometries import Geometries
    >>> from src.phong.geometry.plane import Plane
    >>> from src.phong.geometry.sphere import Sphere
    >>> from src.phong.core.ray import Ray
    >>> shapes = Geometries(Sphere((0, 0, -3), 1.0), Plane((0, 0, -5), (0, 0, 1)))
    >>> len(shapes.intersect(Ray((0, 0, 0), (0, 0, -1))))
    3
"""

from __future__ import annotations

from collections.abc import Iterator

from src.phong.core.ray import Ray
from src.phong.geometry.intersection import Intersectable, Intersection


class Geometries:
    """An ordered collection of intersectables.

    Members keep their insertion order. ``None`` entries and objects that are
    already members are ignored when added.
    """

    def __init__(self, *geometries: Intersectable | None) -> None:
        self._geometries: list[Intersectable] = []
        self.add(*geometries)

    def add(self, *geometries: Intersectable | None) -> None:
        for geometry in geometries:
            if geometry is None:
                continue
            if any(member is geometry for member in self._geometries):
                continue
            self._geometries.append(geometry)

    def intersect(self, ray: Ray | None) -> list[Intersection] | None:
        """Concatenate the members' intersections in member order.

        Returns:
            All intersections, or None when no member reports any (including
            when the collection is empty).
        """
        if ray is None:
            return None
        result = None
        for geometry in self._geometries:
            intersections = geometry.intersect(ray)
            if intersections is None:
                continue
            if result is None:
                result = []
            result.extend(intersections)
        return result

    def leaves(self) -> Iterator[Intersectable]:
        """Yield the member shapes, expanding nested collections in place.

        The order matches the order in which ``intersect`` reports hits.
        """
        for geometry in self._geometries:
            if isinstance(geometry, Geometries):
                yield from geometry.leaves()
            else:
                yield geometry

    def __len__(self) -> int:
        return len(self._geometries)

    def __iter__(self) -> Iterator[Intersectable]:
        return iter(self._geometries)

    def __repr__(self) -> str:
        return f"Geometries({len(self._geometries)} members)"
