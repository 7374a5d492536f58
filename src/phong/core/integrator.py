"""Phong shading kernel: one primary ray per pixel, local illumination only.

For every pixel the kernel builds the camera ray, finds the closest shape
in the device scene and shades the hit exactly as ``SimpleRayTracer`` does
on the host:

    color = emission + ambient * ka
          + sum over lights of  I_L(p) * (kd * |n . l| + ks * max(0, r . v) ** n)

A ray that misses every shape gets the background color. A ray that grazes
the surface (n . v == 0) gets black, and a light that grazes it (n . l == 0)
contributes nothing.

Pixels are independent: each task reads the scene and writes only its own
pixel, so ``ti.ndrange`` can run them in any order.

This module declares Taichi fields at import time; import it only after
``ti.init`` (see ``src.phong.config.init_runtime``).

Example:
    >>> from src.phong.config import init_runtime
    >>> init_runtime()
    >>> from src.phong.camera.device import setup_camera
    >>> from src.phong.core.integrator import (
    ...     get_image_numpy, render_image, setup_render_target
    ... )
    >>> from src.phong.scene.manager import SceneManager
    >>> SceneManager().load(scene)
    >>> setup_camera(camera)
    >>> setup_render_target(camera.nx, camera.ny)
    >>> render_image()
    >>> image = get_image_numpy()  # (ny, nx, 3) float64
"""

import numpy as np
import taichi as ti

from src.phong.camera.device import get_ray
from src.phong.core.ray import DeviceRay, dot3, is_zero_scalar, vec3
from src.phong.lighting.lights import light_direction, light_intensity, light_reaches
from src.phong.materials.phong import diffuse_term_device, specular_term_device
from src.phong.scene.device import (
    ambient_intensity,
    background_color,
    get_light,
    intersect_scene,
    num_lights,
    shape_emissions,
    shape_ka,
    shape_kd,
    shape_ks,
    shape_normal,
    shape_shininess,
)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed by (column, row), row 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade_hit(ray: DeviceRay, shape_id: ti.i32, point: vec3) -> vec3:
    """Phong color of a hit, mirroring ``SimpleRayTracer.calc_color``.

    Args:
        ray: The primary ray.
        shape_id: Index of the shape that was hit.
        point: The hit point.

    Returns:
        The shaded color, black for grazing incidence.
    """
    color = vec3(0.0, 0.0, 0.0)
    normal = shape_normal(shape_id, point)
    n_dot_ray = dot3(normal, ray.direction)

    if not is_zero_scalar(n_dot_ray):
        kd = shape_kd[shape_id]
        ks = shape_ks[shape_id]
        shininess = shape_shininess[shape_id]

        color = shape_emissions[shape_id]
        color = color + ambient_intensity[None] * shape_ka[shape_id]

        for k in range(num_lights[None]):
            light = get_light(k)
            if light_reaches(light, point):
                direction = light_direction(light, point)
                n_dot_light = dot3(normal, direction)
                if not is_zero_scalar(n_dot_light):
                    intensity = light_intensity(light, point)
                    diffuse = diffuse_term_device(kd, n_dot_light)

                    l = direction * -1.0
                    n_dot_l = -n_dot_light
                    r = l - normal * (2.0 * n_dot_l)
                    v = ray.direction * -1.0
                    specular = specular_term_device(ks, shininess, dot3(r, v))

                    color = color + intensity * (diffuse + specular)

    return color


@ti.func
def trace_pixel(nx: ti.i32, ny: ti.i32, j: ti.i32, i: ti.i32) -> vec3:
    """Color seen through pixel (j, i): background on a miss."""
    ray = get_ray(nx, ny, j, i)
    rec = intersect_scene(ray)
    color = background_color[None]
    if rec.hit == 1:
        color = shade_hit(ray, rec.shape_id, rec.point)
    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render(nx: ti.i32, ny: ti.i32):
    """Shade every pixel of the active image.

    Args:
        nx: Image width in pixels.
        ny: Image height in pixels.
    """
    for j, i in ti.ndrange(nx, ny):
        _color_buffer[j, i] = trace_pixel(nx, ny, j, i)


@ti.kernel
def _render_single_pixel(nx: ti.i32, ny: ti.i32, j: ti.i32, i: ti.i32) -> vec3:
    return trace_pixel(nx, ny, j, i)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_image() -> None:
    """Render the active image into the color buffer.

    The camera and scene must already be on the device (``setup_camera``
    and ``SceneManager.load``).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render(width, height)


def render_pixel(j: int, i: int) -> tuple[float, float, float]:
    """Render a single pixel of the active image.

    Used for testing and debugging individual pixels; ``render_image``
    processes all pixels in parallel.

    Args:
        j: Pixel column (0 = left).
        i: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(width, height, j, i)

    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> np.ndarray:
    """Get the rendered image as a NumPy array.

    Values are not clamped; they are on the same scale as the scene's
    colors.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float64, row 0 at
        the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2)), dtype=np.float64)
