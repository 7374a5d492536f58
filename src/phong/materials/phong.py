"""Phong material coefficients and the diffuse/specular reflection terms.

A Material carries the three per-channel Phong coefficients and the
shininess exponent:

    ka: ambient attenuation (multiplies the scene's ambient light)
    kd: diffuse reflectance
    ks: specular reflectance
    shininess: integer exponent narrowing the specular lobe

The default material passes ambient light through unchanged (ka = 1) and
reflects nothing else.

The reflection terms are computed as:

    diffuse  = kd * |n . l|
    specular = ks * (r . v) ** shininess    if r . v > 0, else 0

The absolute value in the diffuse term lets a surface facing away from a
light still be lit by it.

Example:
    >>> from src.phong.materials.phong import Material, diffuse_term
    >>> mat = Material(kd=0.5, ks=(0.2, 0.2, 0.4), shininess=30)
    >>> diffuse_term(mat.kd, -0.5)
    (0.25, 0.25, 0.25)
"""

from dataclasses import dataclass, field

import taichi as ti

from src.phong.core.primitives import Double3, Double3Like, as_double3
from src.phong.core.ray import vec3


@dataclass(frozen=True)
class Material:
    """Phong reflection coefficients of a surface.

    Attributes:
        ka: Ambient coefficient per channel. A scalar is broadcast.
        kd: Diffuse coefficient per channel. A scalar is broadcast.
        ks: Specular coefficient per channel. A scalar is broadcast.
        shininess: Specular exponent, a non-negative integer.

    Raises:
        ValueError: If shininess is negative or not an integer.
    """

    ka: Double3Like = field(default_factory=lambda: Double3.ONE)
    kd: Double3Like = field(default_factory=lambda: Double3.ZERO)
    ks: Double3Like = field(default_factory=lambda: Double3.ZERO)
    shininess: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "ka", as_double3(self.ka))
        object.__setattr__(self, "kd", as_double3(self.kd))
        object.__setattr__(self, "ks", as_double3(self.ks))
        if isinstance(self.shininess, bool) or not isinstance(self.shininess, int):
            raise ValueError(f"Shininess must be an integer, got {self.shininess!r}")
        if self.shininess < 0:
            raise ValueError(f"Shininess must be non-negative, got {self.shininess}")

    def to_dict(self) -> dict:
        return {
            "ka": list(self.ka),
            "kd": list(self.kd),
            "ks": list(self.ks),
            "shininess": self.shininess,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Material":
        return cls(
            ka=data.get("ka", 1.0),
            kd=data.get("kd", 0.0),
            ks=data.get("ks", 0.0),
            shininess=int(data.get("shininess", 0)),
        )


def diffuse_term(kd: Double3, n_dot_l: float) -> Double3:
    """Diffuse reflection: kd scaled by the absolute cosine |n . l|."""
    return kd.scale(abs(n_dot_l))


def specular_term(ks: Double3, shininess: int, r_dot_v: float) -> Double3:
    """Specular reflection for a given reflection/view cosine.

    Args:
        ks: Specular coefficient.
        shininess: Specular exponent.
        r_dot_v: Dot product of the reflected light direction with the
            direction towards the viewer.

    Returns:
        ks * r_dot_v ** shininess, or zero when r_dot_v <= 0.
    """
    if r_dot_v <= 0:
        return Double3.ZERO
    return ks.scale(r_dot_v**shininess)


# =============================================================================
# Device Functions
# =============================================================================


@ti.func
def diffuse_term_device(kd: vec3, n_dot_l: ti.f64) -> vec3:
    return kd * ti.abs(n_dot_l)


@ti.func
def specular_term_device(ks: vec3, shininess: ti.i32, r_dot_v: ti.f64) -> vec3:
    """Device twin of ``specular_term``.

    Args:
        ks: Specular coefficient.
        shininess: Specular exponent.
        r_dot_v: Reflection/view cosine.

    Returns:
        The specular coefficient vector, zero when r_dot_v <= 0.
    """
    result = vec3(0.0, 0.0, 0.0)
    if r_dot_v > 0.0:
        result = ks * ti.pow(r_dot_v, ti.cast(shininess, ti.f64))
    return result
