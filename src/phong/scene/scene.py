"""Scene container: background, ambient light, shapes and lights."""

from __future__ import annotations

from dataclasses import dataclass, field

from src.phong.core.primitives import BLACK, ColorLike, as_color
from src.phong.geometry.geometries import Geometries
from src.phong.lighting.lights import NO_AMBIENT_LIGHT, AmbientLight, Light


@dataclass(frozen=True, eq=False)
class Scene:
    """Everything a ray can hit or be lit by.

    The scene is read-only while it is being rendered; ``geometries`` is the
    only mutable member and should be fully populated before rendering.

    Attributes:
        name: Scene name, used in logs and output file names.
        background: Color of rays that hit nothing.
        ambient_light: Uniform light added to every hit.
        geometries: The shapes, queried as one composite.
        lights: Light sources in shading order.
    """

    name: str = "scene"
    background: ColorLike = field(default_factory=lambda: BLACK)
    ambient_light: AmbientLight = NO_AMBIENT_LIGHT
    geometries: Geometries = field(default_factory=Geometries)
    lights: tuple[Light, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "background", as_color(self.background))
        object.__setattr__(self, "lights", tuple(self.lights))

    @property
    def shape_count(self) -> int:
        """Number of individual shapes, counting inside nested collections."""
        return sum(1 for _ in self.geometries.leaves())

    @property
    def light_count(self) -> int:
        return len(self.lights)

    def __repr__(self) -> str:
        return (
            f"Scene(name={self.name!r}, shapes={self.shape_count}, "
            f"lights={self.light_count}, background={self.background!r})"
        )

