"""Device copy of the camera for the Taichi render kernel.

The camera basis and view plane are stored in 0-D Taichi fields and
``get_ray`` rebuilds, inside a kernel, exactly the ray that
``Camera.construct_ray`` builds on the host.

This module declares Taichi fields at import time; import it only after
``ti.init`` (see ``src.phong.config.init_runtime``).

Example:
    >>> import taichi as ti
    >>> from src.phong.config import init_runtime
    >>> init_runtime()
    >>> from src.phong.camera.device import setup_camera, get_ray
    >>> setup_camera(camera)
    >>> @ti.kernel
    ... def first_ray() -> ti.f64:
    ...     return get_ray(3, 3, 0, 0).direction.z
"""

import taichi as ti

from src.phong.camera.pinhole import Camera
from src.phong.core.ray import DeviceRay, is_zero_scalar, normalize_vector

# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_location = ti.Vector.field(3, dtype=ti.f64, shape=())
_forward = ti.Vector.field(3, dtype=ti.f64, shape=())
_up = ti.Vector.field(3, dtype=ti.f64, shape=())
_right = ti.Vector.field(3, dtype=ti.f64, shape=())

# View plane width, height and distance
_view_plane = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_camera(camera: Camera) -> None:
    """Copy a camera into the device fields.

    Must be called from Python before any kernel that uses ``get_ray``.
    """
    _location[None] = camera.location.to_tuple()
    _forward[None] = camera.forward.to_tuple()
    _up[None] = camera.up.to_tuple()
    _right[None] = camera.right.to_tuple()
    _view_plane[None] = (camera.width, camera.height, camera.distance)


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Read back the device camera state, for debugging and tests."""

    def _read(field) -> tuple[float, ...]:
        value = field[None]
        return tuple(float(value[k]) for k in range(3))

    return {
        "location": _read(_location),
        "forward": _read(_forward),
        "up": _read(_up),
        "right": _read(_right),
        "view_plane": _read(_view_plane),
    }


@ti.func
def get_ray(nx: ti.i32, ny: ti.i32, j: ti.i32, i: ti.i32) -> DeviceRay:
    """Generate the ray through the center of pixel (j, i).

    Args:
        nx: Number of pixel columns.
        ny: Number of pixel rows.
        j: Pixel column (0 = left).
        i: Pixel row (0 = top).

    Returns:
        A DeviceRay from the camera location through the pixel center.
    """
    location = _location[None]
    width = _view_plane[None][0]
    height = _view_plane[None][1]
    distance = _view_plane[None][2]

    pc = location + _forward[None] * distance

    ry = height / ti.cast(ny, ti.f64)
    rx = width / ti.cast(nx, ti.f64)

    yi = -(ti.cast(i, ti.f64) - ti.cast(ny - 1, ti.f64) / 2.0) * ry
    xj = (ti.cast(j, ti.f64) - ti.cast(nx - 1, ti.f64) / 2.0) * rx

    pij = pc
    if not is_zero_scalar(xj):
        pij = pij + _right[None] * xj
    if not is_zero_scalar(yi):
        pij = pij + _up[None] * yi

    return DeviceRay(origin=location, direction=normalize_vector(pij - location))

