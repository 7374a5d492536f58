"""Ready-made scenes.

Colors and light intensities are on the 0..255 scale written to images.

The demo scene is a small still life looking down the -z axis:
- A blue sphere with a sharp highlight in the middle
- Two triangles forming a grey floor tile below it
- A dark back wall (plane)
- A green pillar (infinite tube) on the left
- An orange capped cylinder lying on the floor on the right
- One directional, one point and one spot light

Example:
    >>> from src.phong.scene.presets import create_demo_scene
    >>> from src.phong.camera.pinhole import build_camera
    >>> scene, camera_config = create_demo_scene()
    >>> camera = build_camera(camera_config)
"""

from src.phong.camera.pinhole import CameraConfig
from src.phong.core.primitives import Color
from src.phong.core.ray import Ray
from src.phong.geometry.geometries import Geometries
from src.phong.geometry.intersection import Surface
from src.phong.geometry.plane import Plane
from src.phong.geometry.sphere import Sphere
from src.phong.geometry.triangle import Triangle
from src.phong.geometry.tube import Cylinder, Tube
from src.phong.lighting.lights import (
    AmbientLight,
    Attenuation,
    DirectionalLight,
    PointLight,
    SpotLight,
)
from src.phong.materials.phong import Material
from src.phong.scene.scene import Scene

# Materials shared by the demo shapes
SHINY = Material(ka=0.2, kd=0.5, ks=0.5, shininess=100)
MATTE = Material(ka=0.2, kd=0.8, ks=0.1, shininess=10)


def create_demo_scene(
    resolution: tuple[int, int] = (500, 500),
) -> tuple[Scene, CameraConfig]:
    """Create the demo scene and a camera that frames it.

    Args:
        resolution: Pixel grid of the camera as (columns, rows).

    Returns:
        Tuple of (Scene, CameraConfig).
    """
    geometries = Geometries(
        Sphere(
            (0, 0, -100),
            50,
            Surface(emission=Color(0, 0, 80), material=SHINY),
        ),
        Triangle(
            (-150, -50, -20),
            (150, -50, -20),
            (150, -50, -250),
            Surface(emission=Color(40, 40, 40), material=MATTE),
        ),
        Triangle(
            (-150, -50, -20),
            (150, -50, -250),
            (-150, -50, -250),
            Surface(emission=Color(40, 40, 40), material=MATTE),
        ),
        Plane(
            (0, 0, -300),
            (0, 0, 1),
            Surface(emission=Color(10, 10, 20), material=MATTE),
        ),
        Tube(
            Ray((-110, 0, -180), (0, 1, 0)),
            12,
            Surface(emission=Color(0, 60, 0), material=SHINY),
        ),
        Cylinder(
            Ray((70, -30, -60), (1, 0, -1)),
            20,
            60,
            Surface(emission=Color(90, 40, 0), material=MATTE),
        ),
    )

    lights = (
        DirectionalLight(Color(60, 60, 60), (1, -1, -1)),
        PointLight(
            Color(500, 300, 300),
            (-100, 100, 50),
            attenuation=Attenuation(kc=1, kl=0.0005, kq=0.00005),
        ),
        SpotLight(
            Color(800, 800, 500),
            (100, 100, 100),
            (-1, -1, -2),
            attenuation=Attenuation(kc=1, kl=0.0001, kq=0.00002),
            narrow_beam=4,
        ),
    )

    scene = Scene(
        name="demo",
        background=Color(0, 0, 0),
        ambient_light=AmbientLight(Color(30, 30, 30)),
        geometries=geometries,
        lights=lights,
    )

    camera_config = CameraConfig(
        location=(0, 0, 1000),
        forward=(0, 0, -1),
        up=(0, 1, 0),
        width=200,
        height=200,
        distance=800,
        resolution=resolution,
    )
    return scene, camera_config
