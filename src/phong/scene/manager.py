"""Scene manager: uploads a host Scene into the device scene store.

The SceneManager keeps the host Scene it last loaded next to the device
copy, so that both renderer backends can be driven from the same object.

This module imports ``scene.device``, which declares Taichi fields; import
it only after ``ti.init`` (see ``src.phong.config.init_runtime``).

Example:
    >>> from src.phong.config import init_runtime
    >>> init_runtime()
    >>> from src.phong.scene.manager import SceneManager
    >>> from src.phong.scene.presets import create_demo_scene
    >>> scene, _ = create_demo_scene()
    >>> manager = SceneManager()
    >>> manager.load(scene)
    >>> manager.get_shape_count()
    6
"""

import logging
from typing import Any

from src.phong.scene.config import SceneConfig, scene_from_config, scene_to_config
from src.phong.scene.device import (
    MAX_LIGHTS,
    MAX_SHAPES,
    add_light,
    add_shape,
    clear_scene,
    get_light_count,
    get_shape_count,
    set_ambient,
    set_background,
)
from src.phong.scene.scene import Scene

logger = logging.getLogger(__name__)


class SceneManager:
    """Keeps the device scene store in sync with a host Scene.

    Attributes:
        scene: The host scene that was last loaded, or None.
    """

    def __init__(self) -> None:
        """Initialize an empty device scene."""
        self.scene: Scene | None = None
        clear_scene()

    def clear(self) -> None:
        """Remove all shapes and lights from the device scene."""
        clear_scene()
        self.scene = None

    def load(self, scene: Scene) -> None:
        """Replace the device scene with the given host scene.

        Shapes and lights are uploaded in the scene's order, with nested
        collections flattened, so device shape ids match the order of
        ``scene.geometries.leaves()``.

        Args:
            scene: The scene to upload.

        Raises:
            RuntimeError: If the scene has more shapes or lights than the
                device store can hold. The device scene is left cleared.
        """
        self.clear()
        if scene.shape_count > MAX_SHAPES:
            raise RuntimeError(
                f"Scene {scene.name!r} has {scene.shape_count} shapes; at most {MAX_SHAPES} are supported"
            )
        if scene.light_count > MAX_LIGHTS:
            raise RuntimeError(
                f"Scene {scene.name!r} has {scene.light_count} lights; at most {MAX_LIGHTS} are supported"
            )

        set_background(scene.background.to_tuple())
        set_ambient(scene.ambient_light.intensity.to_tuple())
        for shape in scene.geometries.leaves():
            shape_id = add_shape(shape.pack())
            logger.debug("Uploaded shape %d: %s", shape_id, type(shape).__name__)
        for light in scene.lights:
            light_id = add_light(light.pack())
            logger.debug("Uploaded light %d: %s", light_id, type(light).__name__)

        self.scene = scene
        logger.info(
            "Loaded scene %r (%d shapes, %d lights)",
            scene.name,
            self.get_shape_count(),
            self.get_light_count(),
        )

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_shape_count(self) -> int:
        """Get the number of shapes in the device scene."""
        return get_shape_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the device scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the loaded scene to a configuration object.

        Raises:
            RuntimeError: If no scene has been loaded.
        """
        if self.scene is None:
            raise RuntimeError("No scene loaded")
        return scene_to_config(self.scene)

    def from_config(self, config: SceneConfig) -> None:
        """Build a scene from a configuration object and load it.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.load(scene_from_config(config))

    def to_dict(self) -> dict[str, Any]:
        return self.to_config().to_dict()

    def from_dict(self, data: dict[str, Any]) -> None:
        self.from_config(SceneConfig.from_dict(data))

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_shapes() -> int:
        """Get the maximum number of shapes supported."""
        return MAX_SHAPES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
