"""Reference ray tracer: closest hit plus local Phong illumination.

This is the host implementation that defines the exact shading result for a
ray. The Taichi kernel in ``core.integrator`` reproduces it per pixel.

For a closest hit with normal n, incoming direction v and material
(ka, kd, ks, shininess), the color is

    emission + ambient * ka + sum over lights of I_light(p) * (diffuse + specular)

with, for light direction L (from the light towards the point) and l = -L:

    diffuse  = kd * |n . L|
    r        = l - 2 (n . l) n
    specular = ks * (r . -v) ** shininess     if r . -v > 0, else 0

A hit whose normal is perpendicular to the ray is black. A light whose
direction is perpendicular to the normal, or a point or spot light placed on
the hit point itself, contributes nothing.

The per-hit values (normal, n . v, per-light direction and n . L) live in
``ShadingContext`` and ``LightContext`` objects created for each call, so one
tracer can shade any number of rays concurrently.

Example:
    >>> from src.phong.core.tracer import SimpleRayTracer
    >>> from src.phong.core.ray import Ray
    >>> tracer = SimpleRayTracer(scene)
    >>> color = tracer.trace_ray(Ray((0, 0, 0), (0, 0, -1)))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.phong.core.errors import ZeroVectorError
from src.phong.core.primitives import BLACK, Color, Double3, Vector, is_zero
from src.phong.core.ray import Ray
from src.phong.geometry.intersection import Intersection
from src.phong.lighting.lights import LightSource
from src.phong.materials.phong import diffuse_term, specular_term

if TYPE_CHECKING:
    from src.phong.scene.scene import Scene


@dataclass(frozen=True)
class ShadingContext:
    """Values shared by all lights while shading one intersection.

    Attributes:
        intersection: The hit being shaded.
        ray_direction: Unit direction of the incoming ray.
        normal: Surface normal at the hit point.
        n_dot_ray: normal . ray_direction (never zero).
    """

    intersection: Intersection
    ray_direction: Vector
    normal: Vector
    n_dot_ray: float


@dataclass(frozen=True)
class LightContext:
    """Values of one light at the intersection being shaded.

    Attributes:
        light: The light source.
        direction: Unit direction from the light towards the hit point.
        n_dot_light: normal . direction (never zero).
    """

    light: LightSource
    direction: Vector
    n_dot_light: float


class SimpleRayTracer:
    """Traces single rays through a scene with local illumination only.

    The scene is read, never modified.

    Attributes:
        scene: The scene to trace.
    """

    def __init__(self, scene: Scene) -> None:
        self.scene = scene

    def trace_ray(self, ray: Ray) -> Color:
        """Compute the color seen along a ray.

        Args:
            ray: The ray to trace.

        Returns:
            The scene background when nothing is hit, otherwise the shaded
            color of the closest hit.
        """
        intersections = self.scene.geometries.intersect(ray)
        if intersections is None:
            return self.scene.background
        closest = ray.find_closest_intersection(intersections)
        return self.calc_color(closest, ray)

    def calc_color(self, intersection: Intersection, ray: Ray) -> Color:
        context = self.preprocess(intersection, ray.direction)
        if context is None:
            return BLACK
        return self.calc_local_effects(context)

    @staticmethod
    def preprocess(intersection: Intersection, ray_direction: Vector) -> ShadingContext | None:
        """Build the shading context, or None for grazing incidence."""
        normal = intersection.geometry.normal_at(intersection.point)
        n_dot_ray = normal.dot(ray_direction)
        if is_zero(n_dot_ray):
            return None
        return ShadingContext(intersection, ray_direction, normal, n_dot_ray)

    @staticmethod
    def light_context(context: ShadingContext, light: LightSource) -> LightContext | None:
        """Build the per-light context.

        Returns None when the light grazes the surface or sits on the hit
        point.
        """
        try:
            direction = light.direction_at(context.intersection.point)
        except ZeroVectorError:
            return None
        n_dot_light = context.normal.dot(direction)
        if is_zero(context.n_dot_ray) or is_zero(n_dot_light):
            return None
        return LightContext(light, direction, n_dot_light)

    def calc_local_effects(self, context: ShadingContext) -> Color:
        intersection = context.intersection
        material = intersection.material

        color = intersection.emission
        color = color.add(self.scene.ambient_light.intensity.scale(material.ka))

        for light in self.scene.lights:
            light_context = self.light_context(context, light)
            if light_context is None:
                continue
            intensity = light.intensity_at(intersection.point)
            diffuse = diffuse_term(material.kd, light_context.n_dot_light)
            specular = self.calc_specular(context, light_context)
            color = color.add(intensity.scale(diffuse.add(specular)))

        return color

    @staticmethod
    def calc_specular(context: ShadingContext, light_context: LightContext) -> Double3:
        l = light_context.direction.scale(-1)
        n_dot_l = -light_context.n_dot_light
        r = l.subtract(context.normal.scale(2 * n_dot_l))
        v = context.ray_direction.scale(-1)
        material = context.intersection.material
        return specular_term(material.ks, material.shininess, r.dot(v))
