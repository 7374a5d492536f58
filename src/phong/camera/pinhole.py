"""Pinhole camera: maps pixel indices to world-space rays.

The camera sits at ``location`` and looks along the unit vector ``forward``.
``up`` and ``right`` complete an orthonormal basis. A view plane of size
``width`` x ``height`` lies at ``distance`` along ``forward`` and is divided
into ``nx`` columns and ``ny`` rows of pixels.

The ray through pixel (column j, row i) passes through

    pc  = location + forward * distance
    xJ  =  (j - (nx - 1) / 2) * width / nx
    yI  = -(i - (ny - 1) / 2) * height / ny
    pij = pc + right * xJ + up * yI

Rows grow downwards while ``up`` points upwards, hence the sign of yI. An
offset that is zero within EPSILON is skipped instead of adding a zero-length
vector.

Cameras are built from a ``CameraConfig`` by ``build_camera``, which
validates the configuration and returns an immutable ``Camera``.

Example:
    >>> from src.phong.camera.pinhole import CameraConfig, build_camera
    >>> camera = build_camera(CameraConfig(
    ...     location=(0, 0, 0), forward=(0, 0, -1), up=(0, 1, 0),
    ...     width=3, height=3, distance=1, resolution=(3, 3),
    ... ))
    >>> camera.construct_ray(3, 3, 1, 1).direction
    Vector(0.0, 0.0, -1.0)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from src.phong.core.errors import MissingRenderingDataError
from src.phong.core.primitives import Point, Vector, as_point, as_vector, is_zero
from src.phong.core.ray import Ray

# Up direction assumed when a camera is aimed at a target without one
DEFAULT_UP = (0.0, 1.0, 0.0)

_OWNER = "Camera"


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class CameraConfig:
    """Everything needed to build a camera.

    Orientation is given either by ``forward`` and ``up`` (which must be
    orthogonal) or by a ``target`` point to look at, with ``up`` optional.

    Attributes:
        location: Camera position.
        forward: Viewing direction.
        up: Up direction.
        target: Point to look at, instead of ``forward``.
        width: View plane width.
        height: View plane height.
        distance: Distance from the camera to the view plane.
        resolution: Pixel grid as (columns, rows).
    """

    location: tuple[float, float, float] | None = None
    forward: tuple[float, float, float] | None = None
    up: tuple[float, float, float] | None = None
    target: tuple[float, float, float] | None = None
    width: float = 0.0
    height: float = 0.0
    distance: float = 0.0
    resolution: tuple[int, int] = (1, 1)


@dataclass(frozen=True, eq=False)
class Camera:
    """An immutable pinhole camera.

    Attributes:
        location: Camera position.
        forward: Unit viewing direction.
        up: Unit up direction, orthogonal to ``forward``.
        right: Unit right direction, ``forward x up``.
        width: View plane width.
        height: View plane height.
        distance: Distance from the camera to the view plane.
        nx: Number of pixel columns.
        ny: Number of pixel rows.
    """

    location: Point
    forward: Vector
    up: Vector
    right: Vector
    width: float
    height: float
    distance: float
    nx: int
    ny: int

    @property
    def view_plane_center(self) -> Point:
        return self.location.add(self.forward.scale(self.distance))

    def construct_ray(self, nx: int, ny: int, j: int, i: int) -> Ray:
        """Build the ray through the center of pixel (j, i).

        Args:
            nx: Number of columns the view plane is divided into.
            ny: Number of rows the view plane is divided into.
            j: Pixel column.
            i: Pixel row.

        Returns:
            A ray from the camera location through the pixel center.
        """
        pc = self.view_plane_center

        ry = self.height / ny
        rx = self.width / nx

        yi = -(i - (ny - 1) / 2.0) * ry
        xj = (j - (nx - 1) / 2.0) * rx

        pij = pc
        if not is_zero(xj):
            pij = pij.add(self.right.scale(xj))
        if not is_zero(yi):
            pij = pij.add(self.up.scale(yi))

        return Ray(self.location, pij.subtract(self.location))

    def rays(self) -> Iterator[tuple[int, int, Ray]]:
        """Yield (j, i, ray) for every pixel, row by row."""
        for i in range(self.ny):
            for j in range(self.nx):
                yield j, i, self.construct_ray(self.nx, self.ny, j, i)


# =============================================================================
# Camera Construction
# =============================================================================


def _view_plane_value(value: float, name: str) -> float:
    if value is None or is_zero(value):
        raise MissingRenderingDataError(_OWNER, name)
    if value < 0:
        raise ValueError(f"Camera {name} must be positive, got {value}")
    return float(value)


def build_camera(config: CameraConfig) -> Camera:
    """Validate a camera configuration and build the camera.

    Args:
        config: The camera configuration.

    Returns:
        The camera.

    Raises:
        MissingRenderingDataError: If the location, the orientation or a
            view plane dimension is missing.
        ValueError: If ``forward`` and ``up`` are not orthogonal, both
            ``forward`` and ``target`` are given, or a view plane dimension
            or the resolution is not positive.
        ZeroVectorError: If a direction is the zero vector, the target is
            the camera location, or the target direction is parallel to up.
    """
    if config.location is None:
        raise MissingRenderingDataError(_OWNER, "location")
    location = as_point(config.location)

    if config.target is not None:
        if config.forward is not None:
            raise ValueError("Camera takes either a forward direction or a target, not both")
        forward = as_point(config.target).subtract(location).normalize()
        up_hint = as_vector(config.up if config.up is not None else DEFAULT_UP)
        right = forward.cross(up_hint).normalize()
        up = right.cross(forward).normalize()
    else:
        if config.forward is None:
            raise MissingRenderingDataError(_OWNER, "forward")
        if config.up is None:
            raise MissingRenderingDataError(_OWNER, "up")
        forward = as_vector(config.forward)
        up = as_vector(config.up)
        if not is_zero(forward.dot(up)):
            raise ValueError("Camera forward and up directions must be orthogonal")
        forward = forward.normalize()
        up = up.normalize()
        right = forward.cross(up).normalize()

    width = _view_plane_value(config.width, "width")
    height = _view_plane_value(config.height, "height")
    distance = _view_plane_value(config.distance, "distance")

    nx, ny = config.resolution
    if nx <= 0 or ny <= 0:
        raise ValueError(f"Camera resolution must be positive, got {config.resolution}")

    return Camera(
        location=location,
        forward=forward,
        up=up,
        right=right,
        width=width,
        height=height,
        distance=distance,
        nx=int(nx),
        ny=int(ny),
    )
