"""Scene serialization to and from plain, JSON-compatible dictionaries.

A scene configuration lists its shapes and lights as dictionaries tagged by
a ``type`` key:

    shapes: plane, sphere, triangle, tube, cylinder
    lights: directional, point, spot

Every shape dictionary may also carry an ``emission`` color and a
``material`` dictionary (see ``Material.to_dict``).

Example:
    >>> from src.phong.scene.config import SceneConfig, scene_from_config
    >>> config = SceneConfig.from_dict({
    ...     "name": "one sphere",
    ...     "shapes": [{"type": "sphere", "center": [0, 0, -3], "radius": 1}],
    ...     "lights": [{"type": "directional", "intensity": [1, 1, 1],
    ...                 "direction": [0, 0, -1]}],
    ... })
    >>> scene_from_config(config).shape_count
    1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.phong.core.primitives import BLACK, as_color
from src.phong.core.ray import Ray
from src.phong.geometry.geometries import Geometries
from src.phong.geometry.intersection import Geometry, Surface
from src.phong.geometry.plane import Plane
from src.phong.geometry.sphere import Sphere
from src.phong.geometry.triangle import Triangle
from src.phong.geometry.tube import Cylinder, Tube
from src.phong.lighting.lights import (
    AmbientLight,
    Attenuation,
    DirectionalLight,
    Light,
    PointLight,
    SpotLight,
)
from src.phong.materials.phong import Material
from src.phong.scene.scene import Scene


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        name: Scene name.
        background: Background color as [r, g, b].
        ambient: Ambient light intensity as [r, g, b].
        shapes: List of shape configurations.
        lights: List of light configurations.
    """

    name: str = "scene"
    background: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    ambient: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    shapes: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "background": list(self.background),
            "ambient": list(self.ambient),
            "shapes": list(self.shapes),
            "lights": list(self.lights),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneConfig:
        return cls(
            name=data.get("name", "scene"),
            background=list(data.get("background", [0.0, 0.0, 0.0])),
            ambient=list(data.get("ambient", [0.0, 0.0, 0.0])),
            shapes=list(data.get("shapes", [])),
            lights=list(data.get("lights", [])),
        )


# =============================================================================
# Export
# =============================================================================


def _surface_config(surface: Surface) -> dict[str, Any]:
    return {
        "emission": list(surface.emission.to_tuple()),
        "material": surface.material.to_dict(),
    }


def _attenuation_config(attenuation: Attenuation) -> list[float]:
    return [attenuation.kc, attenuation.kl, attenuation.kq]


def shape_to_config(shape: Geometry) -> dict[str, Any]:
    """Describe one shape as a dictionary.

    Raises:
        ValueError: If the shape type cannot be serialized.
    """
    if isinstance(shape, Plane):
        config = {
            "type": "plane",
            "point": list(shape.point.to_tuple()),
            "normal": list(shape.normal.to_tuple()),
        }
    elif isinstance(shape, Sphere):
        config = {
            "type": "sphere",
            "center": list(shape.center.to_tuple()),
            "radius": shape.radius,
        }
    elif isinstance(shape, Triangle):
        config = {
            "type": "triangle",
            "vertices": [list(p.to_tuple()) for p in shape.vertices],
        }
    elif isinstance(shape, Cylinder):
        config = {
            "type": "cylinder",
            "origin": list(shape.axis.origin.to_tuple()),
            "direction": list(shape.axis.direction.to_tuple()),
            "radius": shape.radius,
            "height": shape.height,
        }
    elif isinstance(shape, Tube):
        config = {
            "type": "tube",
            "origin": list(shape.axis.origin.to_tuple()),
            "direction": list(shape.axis.direction.to_tuple()),
            "radius": shape.radius,
        }
    else:
        raise ValueError(f"Cannot serialize shape of type {type(shape).__name__}")
    config.update(_surface_config(shape.surface))
    return config


def light_to_config(light: Light) -> dict[str, Any]:
    """Describe one light as a dictionary.

    Raises:
        ValueError: If the light type cannot be serialized.
    """
    if isinstance(light, DirectionalLight):
        return {
            "type": "directional",
            "intensity": list(light.intensity.to_tuple()),
            "direction": list(light.direction.to_tuple()),
        }
    if isinstance(light, SpotLight):
        return {
            "type": "spot",
            "intensity": list(light.intensity.to_tuple()),
            "position": list(light.position.to_tuple()),
            "direction": list(light.direction.to_tuple()),
            "attenuation": _attenuation_config(light.attenuation),
            "narrow_beam": light.narrow_beam,
        }
    if isinstance(light, PointLight):
        return {
            "type": "point",
            "intensity": list(light.intensity.to_tuple()),
            "position": list(light.position.to_tuple()),
            "attenuation": _attenuation_config(light.attenuation),
        }
    raise ValueError(f"Cannot serialize light of type {type(light).__name__}")


def scene_to_config(scene: Scene) -> SceneConfig:
    """Export a scene to a configuration object, flattening nested collections."""
    return SceneConfig(
        name=scene.name,
        background=list(scene.background.to_tuple()),
        ambient=list(scene.ambient_light.intensity.to_tuple()),
        shapes=[shape_to_config(shape) for shape in scene.geometries.leaves()],
        lights=[light_to_config(light) for light in scene.lights],
    )


# =============================================================================
# Import
# =============================================================================


def _surface_from_config(config: dict[str, Any]) -> Surface:
    return Surface(
        emission=as_color(config.get("emission", BLACK.to_tuple())),
        material=Material.from_dict(config.get("material", {})),
    )


def _attenuation_from_config(config: dict[str, Any]) -> Attenuation:
    kc, kl, kq = config.get("attenuation", [1.0, 0.0, 0.0])
    return Attenuation(kc, kl, kq)


def shape_from_config(config: dict[str, Any]) -> Geometry:
    """Build one shape from its dictionary.

    Raises:
        ValueError: If the shape type is unknown.
        KeyError: If a required key is missing.
    """
    shape_type = config.get("type", "").lower()
    surface = _surface_from_config(config)

    if shape_type == "plane":
        return Plane(config["point"], config["normal"], surface)
    if shape_type == "sphere":
        return Sphere(config["center"], config["radius"], surface)
    if shape_type == "triangle":
        p1, p2, p3 = config["vertices"]
        return Triangle(p1, p2, p3, surface)
    if shape_type in ("tube", "cylinder"):
        axis = Ray(config["origin"], config["direction"])
        if shape_type == "tube":
            return Tube(axis, config["radius"], surface)
        return Cylinder(axis, config["radius"], config["height"], surface)
    raise ValueError(f"Unknown shape type: {shape_type}")


def light_from_config(config: dict[str, Any]) -> Light:
    """Build one light from its dictionary.

    Raises:
        ValueError: If the light type is unknown.
        KeyError: If a required key is missing.
    """
    light_type = config.get("type", "").lower()
    if light_type == "directional":
        return DirectionalLight(config["intensity"], config["direction"])
    if light_type == "point":
        return PointLight(
            config["intensity"],
            config["position"],
            attenuation=_attenuation_from_config(config),
        )
    if light_type == "spot":
        return SpotLight(
            config["intensity"],
            config["position"],
            config["direction"],
            attenuation=_attenuation_from_config(config),
            narrow_beam=config.get("narrow_beam", 1.0),
        )
    raise ValueError(f"Unknown light type: {light_type}")


def scene_from_config(config: SceneConfig) -> Scene:
    """Build a scene from a configuration object.

    Args:
        config: The scene configuration to load.

    Returns:
        A new Scene.

    Raises:
        ValueError: If the configuration contains an unknown shape or light
            type, or invalid values.
    """
    return Scene(
        name=config.name,
        background=config.background,
        ambient_light=AmbientLight(config.ambient),
        geometries=Geometries(*(shape_from_config(shape) for shape in config.shapes)),
        lights=tuple(light_from_config(light) for light in config.lights),
    )
