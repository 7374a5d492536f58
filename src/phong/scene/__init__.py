"""Scene container, serialization and ready-made scenes.

``device`` and ``manager`` declare or use Taichi fields and are not imported
here; import them after ``init_runtime``.
"""

from .config import SceneConfig, scene_from_config, scene_to_config
from .presets import create_demo_scene
from .scene import Scene

__all__ = [
    "Scene",
    "SceneConfig",
    "create_demo_scene",
    "scene_from_config",
    "scene_to_config",
]
