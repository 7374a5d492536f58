"""Light sources: ambient, directional, point and spot.

Every light other than the ambient one answers two questions about a point
being shaded:

    direction_at(p): unit vector from the light towards p
    intensity_at(p): light color arriving at p

Point and spot lights fall off with distance d through

    intensity / (kc + kl * d + kq * d^2)

and a spot light is further narrowed by its beam direction D:

    max(0, D . l) ** narrow_beam        (l = direction_at(p))

Example:
    >>> from src.phong.lighting.lights import Attenuation, SpotLight
    >>> from src.phong.core.primitives import Color, Point
    >>> spot = SpotLight(
    ...     Color(400, 240, 0), (-50, -50, 25), (1, 1, -0.5),
    ...     attenuation=Attenuation(kl=0.001, kq=0.0001),
    ... )
    >>> spot.direction_at(Point(-50, -50, 0))
    Vector(0.0, 0.0, -1.0)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol, Union, runtime_checkable

import taichi as ti

from src.phong.core.primitives import (
    BLACK,
    Color,
    ColorLike,
    Point,
    PointLike,
    Vector,
    as_color,
    as_point,
    as_vector,
)
from src.phong.core.ray import dot3, is_zero_vector, normalize_vector, vec3


@dataclass(frozen=True)
class Attenuation:
    """Distance falloff coefficients of a point or spot light.

    Attributes:
        kc: Constant coefficient.
        kl: Linear coefficient.
        kq: Quadratic coefficient.

    Raises:
        ValueError: If a coefficient is negative or all of them are zero.
    """

    kc: float = 1.0
    kl: float = 0.0
    kq: float = 0.0

    def __post_init__(self) -> None:
        if self.kc < 0 or self.kl < 0 or self.kq < 0:
            raise ValueError(f"Attenuation coefficients must be non-negative: {self}")
        if self.kc == 0 and self.kl == 0 and self.kq == 0:
            raise ValueError("At least one attenuation coefficient must be positive")

    def factor(self, distance: float) -> float:
        return self.kc + self.kl * distance + self.kq * distance * distance


@dataclass(frozen=True)
class AmbientLight:
    """Uniform light reaching every point from every direction."""

    intensity: ColorLike

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", as_color(self.intensity))

    def intensity_at(self, point: Point) -> Color:
        return self.intensity


NO_AMBIENT_LIGHT = AmbientLight(BLACK)


class LightKind(IntEnum):
    """Light discriminator stored in the device light table."""

    DIRECTIONAL = 0
    POINT = 1
    SPOT = 2


Triple = tuple[float, float, float]


@dataclass
class PackedLight:
    """A light source flattened into the columns of the device light table."""

    kind: LightKind
    intensity: Triple
    position: Triple = (0.0, 0.0, 0.0)
    direction: Triple = (0.0, 0.0, 0.0)
    kc: float = 1.0
    kl: float = 0.0
    kq: float = 0.0
    narrow_beam: float = 1.0


@runtime_checkable
class LightSource(Protocol):
    """A light that illuminates points from a direction."""

    def intensity_at(self, point: Point) -> Color:
        ...

    def direction_at(self, point: Point) -> Vector:
        ...

    def pack(self) -> PackedLight:
        ...


@dataclass(frozen=True)
class DirectionalLight:
    """A light infinitely far away, such as the sun.

    Attributes:
        intensity: Constant intensity.
        direction: Unit direction stored as given (normalised).
    """

    intensity: ColorLike
    direction: PointLike

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", as_color(self.intensity))
        object.__setattr__(self, "direction", as_vector(self.direction).normalize())

    def intensity_at(self, point: Point) -> Color:
        return self.intensity

    def direction_at(self, point: Point) -> Vector:
        """Return the stored direction negated.

        Diffuse shading uses |n . l|, so only the specular lobe sees the
        sign.
        """
        return self.direction.scale(-1)

    def pack(self) -> PackedLight:
        return PackedLight(
            kind=LightKind.DIRECTIONAL,
            intensity=self.intensity.to_tuple(),
            direction=self.direction.to_tuple(),
        )


@dataclass(frozen=True)
class PointLight:
    """An omnidirectional light at a position, attenuated with distance."""

    intensity: ColorLike
    position: PointLike
    attenuation: Attenuation = field(default_factory=Attenuation)

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", as_color(self.intensity))
        object.__setattr__(self, "position", as_point(self.position))

    def intensity_at(self, point: Point) -> Color:
        distance = self.position.distance(point)
        return self.intensity.scale(1.0 / self.attenuation.factor(distance))

    def direction_at(self, point: Point) -> Vector:
        """Unit vector from the light to ``point``.

        Raises:
            ZeroVectorError: If ``point`` is the light position.
        """
        return point.subtract(self.position).normalize()

    def pack(self) -> PackedLight:
        return PackedLight(
            kind=LightKind.POINT,
            intensity=self.intensity.to_tuple(),
            position=self.position.to_tuple(),
            kc=self.attenuation.kc,
            kl=self.attenuation.kl,
            kq=self.attenuation.kq,
        )


@dataclass(frozen=True)
class SpotLight:
    """A point light that shines along a beam direction.

    Attributes:
        intensity: Intensity before attenuation.
        position: Light position.
        direction: Unit beam direction (normalised).
        attenuation: Distance falloff.
        narrow_beam: Exponent applied to the beam cosine; larger values
            make the beam narrower. 1 is a plain cosine falloff.

    Raises:
        ValueError: If narrow_beam is not positive.
    """

    intensity: ColorLike
    position: PointLike
    direction: PointLike
    attenuation: Attenuation = field(default_factory=Attenuation)
    narrow_beam: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", as_color(self.intensity))
        object.__setattr__(self, "position", as_point(self.position))
        object.__setattr__(self, "direction", as_vector(self.direction).normalize())
        if self.narrow_beam <= 0:
            raise ValueError(f"narrow_beam must be positive, got {self.narrow_beam}")
        object.__setattr__(self, "narrow_beam", float(self.narrow_beam))

    def intensity_at(self, point: Point) -> Color:
        distance = self.position.distance(point)
        base = self.intensity.scale(1.0 / self.attenuation.factor(distance))
        beam = max(0.0, self.direction.dot(self.direction_at(point)))
        return base.scale(beam**self.narrow_beam)

    def direction_at(self, point: Point) -> Vector:
        return point.subtract(self.position).normalize()

    def pack(self) -> PackedLight:
        return PackedLight(
            kind=LightKind.SPOT,
            intensity=self.intensity.to_tuple(),
            position=self.position.to_tuple(),
            direction=self.direction.to_tuple(),
            kc=self.attenuation.kc,
            kl=self.attenuation.kl,
            kq=self.attenuation.kq,
            narrow_beam=self.narrow_beam,
        )


Light = Union[DirectionalLight, PointLight, SpotLight]


# =============================================================================
# Device Functions
# =============================================================================


@ti.dataclass
class DeviceLight:
    """Device-side light record.

    Attributes:
        kind: A LightKind value.
        intensity: Light intensity (0..255 scale).
        position: Light position (point and spot lights).
        direction: Stored unit direction (directional and spot lights).
        kc: Constant attenuation.
        kl: Linear attenuation.
        kq: Quadratic attenuation.
        narrow_beam: Spot beam exponent.
    """

    kind: ti.i32
    intensity: vec3
    position: vec3
    direction: vec3
    kc: ti.f64
    kl: ti.f64
    kq: ti.f64
    narrow_beam: ti.f64


@ti.func
def light_reaches(light: DeviceLight, point: vec3) -> ti.i32:
    """0 when a point or spot light sits on ``point``, which it cannot light."""
    result = 1
    if light.kind != int(LightKind.DIRECTIONAL) and is_zero_vector(point - light.position):
        result = 0
    return result


@ti.func
def light_direction(light: DeviceLight, point: vec3) -> vec3:
    """Device twin of ``direction_at``."""
    result = vec3(0.0, 0.0, 0.0)
    if light.kind == int(LightKind.DIRECTIONAL):
        result = light.direction * -1.0
    else:
        result = normalize_vector(point - light.position)
    return result


@ti.func
def light_intensity(light: DeviceLight, point: vec3) -> vec3:
    """Device twin of ``intensity_at``.

    Args:
        light: The light record.
        point: The point being shaded.

    Returns:
        The light intensity arriving at ``point``.
    """
    result = light.intensity
    if light.kind != int(LightKind.DIRECTIONAL):
        offset = light.position - point
        distance = ti.sqrt(dot3(offset, offset))
        factor = light.kc + light.kl * distance + light.kq * distance * distance
        result = light.intensity * (1.0 / factor)
        if light.kind == int(LightKind.SPOT):
            l = normalize_vector(point - light.position)
            beam = ti.max(0.0, dot3(light.direction, l))
            result = result * ti.pow(beam, light.narrow_beam)
    return result
