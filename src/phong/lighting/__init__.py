"""Light sources used by the Phong shading pipeline."""

from .lights import (
    NO_AMBIENT_LIGHT,
    AmbientLight,
    Attenuation,
    DirectionalLight,
    Light,
    LightKind,
    LightSource,
    PackedLight,
    PointLight,
    SpotLight,
)

__all__ = [
    "NO_AMBIENT_LIGHT",
    "AmbientLight",
    "Attenuation",
    "DirectionalLight",
    "Light",
    "LightKind",
    "LightSource",
    "PackedLight",
    "PointLight",
    "SpotLight",
]
