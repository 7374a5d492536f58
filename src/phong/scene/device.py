"""Device scene store and scene-level ray intersection.

Shapes and lights are kept in Taichi fields using a Structure-of-Arrays
layout: one field per column of ``PackedShape`` / ``PackedLight``, indexed by
insertion order. ``intersect_scene`` tests every shape and keeps the hit
nearest the ray origin; on equal distances the shape added first wins, which
matches the host composite followed by ``Ray.find_closest_intersection``.

This module declares Taichi fields at import time; import it only after
``ti.init`` (see ``src.phong.config.init_runtime``).

Example:
    >>> from src.phong.geometry.sphere import Sphere
    >>> from src.phong.scene.device import add_shape, clear_scene, intersect_scene
    >>> clear_scene()
    >>> add_shape(Sphere((0, 0, -3), 1.0).pack())
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from src.phong.core.ray import DeviceRay, dot3, vec3
from src.phong.geometry.intersection import HitRecord, PackedShape, ShapeKind
from src.phong.geometry.plane import hit_plane
from src.phong.geometry.sphere import hit_sphere, sphere_normal
from src.phong.geometry.triangle import hit_triangle
from src.phong.geometry.tube import cylinder_normal, hit_cylinder, hit_tube, tube_normal
from src.phong.lighting.lights import DeviceLight, PackedLight


@ti.dataclass
class SceneHitRecord:
    """Closest hit of a ray on the device scene.

    Attributes:
        hit: 1 if any shape was hit, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
        shape_id: Index of the shape that was hit, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    shape_id: ti.i32


# Maximum number of shapes and lights supported in the scene
MAX_SHAPES = 1024
MAX_LIGHTS = 64

# Shape storage: Structure of Arrays layout
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_p0 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_p1 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_p2 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_directions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_radii = ti.field(dtype=ti.f64, shape=MAX_SHAPES)
shape_heights = ti.field(dtype=ti.f64, shape=MAX_SHAPES)
shape_emissions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_ka = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_kd = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_ks = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SHAPES)
shape_shininess = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())

# Light storage: Structure of Arrays layout
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_intensities = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_directions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_attenuation = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_narrow_beams = ti.field(dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Scene-wide terms
background_color = ti.Vector.field(3, dtype=ti.f64, shape=())
ambient_intensity = ti.Vector.field(3, dtype=ti.f64, shape=())


def clear_scene() -> None:
    """Remove all shapes and lights and reset the scene-wide terms to black.

    The field data is not cleared but will be overwritten when new shapes
    and lights are added.
    """
    num_shapes[None] = 0
    num_lights[None] = 0
    background_color[None] = (0.0, 0.0, 0.0)
    ambient_intensity[None] = (0.0, 0.0, 0.0)


def add_shape(packed: PackedShape) -> int:
    """Append a packed shape to the scene.

    Args:
        packed: The shape columns, as returned by a shape's ``pack()``.

    Returns:
        The index of the added shape.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
    """
    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
    shape_kinds[idx] = int(packed.kind)
    shape_p0[idx] = packed.p0
    shape_p1[idx] = packed.p1
    shape_p2[idx] = packed.p2
    shape_directions[idx] = packed.direction
    shape_radii[idx] = packed.radius
    shape_heights[idx] = packed.height
    shape_emissions[idx] = packed.emission
    shape_ka[idx] = packed.ka
    shape_kd[idx] = packed.kd
    shape_ks[idx] = packed.ks
    shape_shininess[idx] = packed.shininess
    num_shapes[None] = idx + 1
    return idx


def add_light(packed: PackedLight) -> int:
    """Append a packed light to the scene.

    Args:
        packed: The light columns, as returned by a light's ``pack()``.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_kinds[idx] = int(packed.kind)
    light_intensities[idx] = packed.intensity
    light_positions[idx] = packed.position
    light_directions[idx] = packed.direction
    light_attenuation[idx] = (packed.kc, packed.kl, packed.kq)
    light_narrow_beams[idx] = packed.narrow_beam
    num_lights[None] = idx + 1
    return idx


def set_background(color: tuple[float, float, float]) -> None:
    background_color[None] = color


def set_ambient(intensity: tuple[float, float, float]) -> None:
    ambient_intensity[None] = intensity


def get_shape_count() -> int:
    """Get the number of shapes in the scene."""
    return int(num_shapes[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Device Queries
# =============================================================================


@ti.func
def hit_shape(idx: ti.i32, ray: DeviceRay) -> HitRecord:
    """Intersect a ray with the shape stored at ``idx``."""
    kind = shape_kinds[idx]
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    if kind == int(ShapeKind.PLANE):
        rec = hit_plane(ray, shape_p0[idx], shape_directions[idx])
        did_hit = rec.hit
        hit_t = rec.t
        hit_point = rec.point
    elif kind == int(ShapeKind.SPHERE):
        rec = hit_sphere(ray, shape_p0[idx], shape_radii[idx])
        did_hit = rec.hit
        hit_t = rec.t
        hit_point = rec.point
    elif kind == int(ShapeKind.TRIANGLE):
        rec = hit_triangle(ray, shape_p0[idx], shape_p1[idx], shape_p2[idx], shape_directions[idx])
        did_hit = rec.hit
        hit_t = rec.t
        hit_point = rec.point
    elif kind == int(ShapeKind.TUBE):
        rec = hit_tube(ray, shape_p0[idx], shape_directions[idx], shape_radii[idx])
        did_hit = rec.hit
        hit_t = rec.t
        hit_point = rec.point
    elif kind == int(ShapeKind.CYLINDER):
        rec = hit_cylinder(
            ray, shape_p0[idx], shape_directions[idx], shape_radii[idx], shape_heights[idx]
        )
        did_hit = rec.hit
        hit_t = rec.t
        hit_point = rec.point

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point)


@ti.func
def shape_normal(idx: ti.i32, point: vec3) -> vec3:
    """Surface normal of the shape stored at ``idx`` at a point on it."""
    kind = shape_kinds[idx]
    normal = shape_directions[idx]
    if kind == int(ShapeKind.SPHERE):
        normal = sphere_normal(point, shape_p0[idx])
    elif kind == int(ShapeKind.TUBE):
        normal = tube_normal(point, shape_p0[idx], shape_directions[idx])
    elif kind == int(ShapeKind.CYLINDER):
        normal = cylinder_normal(point, shape_p0[idx], shape_directions[idx], shape_heights[idx])
    return normal


@ti.func
def intersect_scene(ray: DeviceRay) -> SceneHitRecord:
    """Test a ray against all shapes and keep the hit nearest its origin.

    Args:
        ray: The ray to test.

    Returns:
        A SceneHitRecord for the closest hit, or a miss record.
    """
    did_hit = 0
    best_t = 0.0
    best_d2 = 0.0
    best_point = vec3(0.0, 0.0, 0.0)
    best_id = -1

    for idx in range(num_shapes[None]):
        rec = hit_shape(idx, ray)
        if rec.hit == 1:
            offset = rec.point - ray.origin
            d2 = dot3(offset, offset)
            if did_hit == 0 or d2 < best_d2:
                did_hit = 1
                best_t = rec.t
                best_d2 = d2
                best_point = rec.point
                best_id = idx

    return SceneHitRecord(hit=did_hit, t=best_t, point=best_point, shape_id=best_id)


@ti.func
def get_light(idx: ti.i32) -> DeviceLight:
    attenuation = light_attenuation[idx]
    return DeviceLight(
        kind=light_kinds[idx],
        intensity=light_intensities[idx],
        position=light_positions[idx],
        direction=light_directions[idx],
        kc=attenuation[0],
        kl=attenuation[1],
        kq=attenuation[2],
        narrow_beam=light_narrow_beams[idx],
    )
