"""Unit tests for the SceneManager.

Tests cover:
- Loading a host scene into the device store
- Replacing and clearing the loaded scene
- Capacity limits
- Scene serialization (to_config, from_config, to_dict, from_dict)
"""

import pytest

from src.phong.core.primitives import Color
from src.phong.geometry.geometries import Geometries
from src.phong.geometry.sphere import Sphere
from src.phong.lighting.lights import AmbientLight, DirectionalLight
from src.phong.scene.presets import create_demo_scene
from src.phong.scene.scene import Scene


@pytest.fixture
def fresh_manager():
    """Create a fresh SceneManager for each test."""
    from src.phong.scene.manager import SceneManager

    manager = SceneManager()
    yield manager
    manager.clear()


@pytest.fixture
def demo_scene():
    scene, _ = create_demo_scene()
    return scene


class TestSceneLoading:
    """Tests for uploading scenes."""

    def test_empty_manager(self, fresh_manager):
        """Test that a new manager holds nothing."""
        assert fresh_manager.scene is None
        assert fresh_manager.get_shape_count() == 0
        assert fresh_manager.get_light_count() == 0

    def test_load_demo_scene(self, fresh_manager, demo_scene):
        """Test that every shape and light is uploaded."""
        fresh_manager.load(demo_scene)
        assert fresh_manager.scene is demo_scene
        assert fresh_manager.get_shape_count() == demo_scene.shape_count
        assert fresh_manager.get_light_count() == demo_scene.light_count

    def test_load_flattens_nested_collections(self, fresh_manager):
        """Test that shapes inside nested collections are each uploaded."""
        inner = Geometries(Sphere((0, 0, -3), 1), Sphere((0, 0, -6), 1))
        scene = Scene(geometries=Geometries(inner, Geometries(Geometries(Sphere((0, 0, -9), 1)))))
        fresh_manager.load(scene)
        assert fresh_manager.get_shape_count() == 3
        assert len(fresh_manager.to_config().shapes) == 3

    def test_load_sets_background_and_ambient(self, fresh_manager):
        """Test that the scene-wide colors reach the device."""
        from src.phong.scene.device import ambient_intensity, background_color

        scene = Scene(background=Color(1, 2, 3), ambient_light=AmbientLight((4, 5, 6)))
        fresh_manager.load(scene)
        bg = background_color[None]
        ambient = ambient_intensity[None]
        assert (bg[0], bg[1], bg[2]) == (1.0, 2.0, 3.0)
        assert (ambient[0], ambient[1], ambient[2]) == (4.0, 5.0, 6.0)

    def test_load_replaces_previous_scene(self, fresh_manager, demo_scene):
        """Test that loading twice does not accumulate shapes."""
        fresh_manager.load(demo_scene)
        small = Scene(name="small", geometries=Geometries(Sphere((0, 0, -3), 1)))
        fresh_manager.load(small)
        assert fresh_manager.scene is small
        assert fresh_manager.get_shape_count() == 1
        assert fresh_manager.get_light_count() == 0

    def test_clear(self, fresh_manager, demo_scene):
        """Test that clear empties the device scene."""
        fresh_manager.load(demo_scene)
        fresh_manager.clear()
        assert fresh_manager.scene is None
        assert fresh_manager.get_shape_count() == 0
        assert fresh_manager.get_light_count() == 0

    def test_load_logs_summary(self, fresh_manager, demo_scene, caplog):
        """Test that loading logs the scene summary."""
        with caplog.at_level("INFO", logger="src.phong.scene.manager"):
            fresh_manager.load(demo_scene)
        assert "Loaded scene 'demo'" in caplog.text


class TestSceneCapacity:
    """Tests for the device store limits."""

    def test_max_counts(self, fresh_manager):
        """Test the reported capacity."""
        from src.phong.scene.device import MAX_LIGHTS, MAX_SHAPES

        assert fresh_manager.get_max_shapes() == MAX_SHAPES
        assert fresh_manager.get_max_lights() == MAX_LIGHTS

    def test_too_many_lights(self, fresh_manager, demo_scene):
        """Test that an oversized scene is rejected and leaves the store empty."""
        from src.phong.scene.device import MAX_LIGHTS

        fresh_manager.load(demo_scene)
        lights = [DirectionalLight((1, 1, 1), (0, 0, -1)) for _ in range(MAX_LIGHTS + 1)]
        with pytest.raises(RuntimeError, match="lights"):
            fresh_manager.load(Scene(lights=lights))
        assert fresh_manager.scene is None
        assert fresh_manager.get_shape_count() == 0

    def test_device_add_light_limit(self):
        """Test that the device store itself refuses extra lights."""
        from src.phong.scene.device import MAX_LIGHTS, add_light

        packed = DirectionalLight((1, 1, 1), (0, 0, -1)).pack()
        for _ in range(MAX_LIGHTS):
            add_light(packed)
        with pytest.raises(RuntimeError):
            add_light(packed)


class TestSceneSerialization:
    """Tests for configuration export and import."""

    def test_to_config_requires_scene(self, fresh_manager):
        """Test that exporting before loading raises RuntimeError."""
        with pytest.raises(RuntimeError):
            fresh_manager.to_config()

    def test_to_config(self, fresh_manager, demo_scene):
        """Test exporting the loaded scene."""
        fresh_manager.load(demo_scene)
        config = fresh_manager.to_config()
        assert config.name == "demo"
        assert len(config.shapes) == demo_scene.shape_count
        assert len(config.lights) == demo_scene.light_count

    def test_dict_round_trip(self, fresh_manager, demo_scene):
        """Test that to_dict output loads back into the same counts."""
        fresh_manager.load(demo_scene)
        data = fresh_manager.to_dict()
        fresh_manager.clear()

        fresh_manager.from_dict(data)
        assert fresh_manager.scene.name == "demo"
        assert fresh_manager.get_shape_count() == demo_scene.shape_count
        assert fresh_manager.get_light_count() == demo_scene.light_count

    def test_from_config_invalid(self, fresh_manager):
        """Test that an invalid configuration raises ValueError."""
        from src.phong.scene.config import SceneConfig

        with pytest.raises(ValueError):
            fresh_manager.from_config(SceneConfig(shapes=[{"type": "cone"}]))
