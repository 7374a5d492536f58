"""Core building blocks of the ray caster.

Components:
    primitives: Points, vectors, colors and the epsilon zero test
    errors: Exception taxonomy
    ray: Ray value type, closest-hit selection and device vector helpers
    tracer: Reference (host) Phong shading of a single ray
    integrator: Taichi per-pixel render kernel (import after ti.init)
    renderer: Drives a camera, a scene and a backend into an image

The integrator declares Taichi fields at import time, so it is not imported
here.
"""

from .errors import GeometryError, MissingRenderingDataError, ZeroVectorError
from .primitives import (
    BLACK,
    EPSILON,
    ORIGIN,
    Color,
    Double3,
    Point,
    Vector,
    align_zero,
    is_zero,
)
from .ray import Ray

__all__ = [
    "BLACK",
    "EPSILON",
    "ORIGIN",
    "Color",
    "Double3",
    "GeometryError",
    "MissingRenderingDataError",
    "Point",
    "Ray",
    "Vector",
    "ZeroVectorError",
    "align_zero",
    "is_zero",
]
