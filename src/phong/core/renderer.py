"""Renderer: drives a camera over a scene and fills an image.

Two backends produce the same image:

    "reference"  Python loop over ``Camera.rays()`` shaded by
                 ``SimpleRayTracer``; slow, used as ground truth.
    "taichi"     The ``core.integrator`` kernel, one parallel task per
                 pixel. Requires ``init_runtime`` to have been called.

Example:
    >>> from src.phong.camera.pinhole import build_camera
    >>> from src.phong.core.renderer import Renderer
    >>> from src.phong.scene.presets import create_demo_scene
    >>> scene, camera_config = create_demo_scene(resolution=(100, 100))
    >>> renderer = Renderer(build_camera(camera_config), scene, backend="reference")
    >>> renderer.render().write_to_image("images/demo.png")
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from src.phong.camera.pinhole import Camera
from src.phong.core.primitives import Color, ColorLike, as_color
from src.phong.core.tracer import SimpleRayTracer
from src.phong.preview.export import ImageWriter
from src.phong.scene.scene import Scene

logger = logging.getLogger(__name__)

BACKENDS = ("taichi", "reference")


class Renderer:
    """Renders a scene through a camera into an ImageWriter.

    Methods that change the image return the renderer, so calls can be
    chained.

    Attributes:
        camera: The camera; its resolution is the image size.
        scene: The scene to render.
        backend: "taichi" or "reference".
        image: The pixel sink.
    """

    def __init__(self, camera: Camera, scene: Scene, backend: str = "taichi") -> None:
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend {backend!r}; expected one of {BACKENDS}")
        self.camera = camera
        self.scene = scene
        self.backend = backend
        self.image = ImageWriter(camera.nx, camera.ny)

    def render(self) -> Renderer:
        """Shade every pixel and store the result in ``image``."""
        start = time.perf_counter()
        if self.backend == "taichi":
            self._render_taichi()
        else:
            self._render_reference()
        elapsed = time.perf_counter() - start
        logger.info(
            "Rendered %r at %dx%d with the %s backend in %.2fs",
            self.scene.name,
            self.camera.nx,
            self.camera.ny,
            self.backend,
            elapsed,
        )
        return self

    def _render_reference(self) -> None:
        tracer = SimpleRayTracer(self.scene)
        for j, i, ray in self.camera.rays():
            self.image.write_pixel(j, i, tracer.trace_ray(ray))

    def _render_taichi(self) -> None:
        # Device modules declare Taichi fields and need an initialised runtime
        from src.phong.camera.device import setup_camera
        from src.phong.core.integrator import get_image_numpy, render_image, setup_render_target
        from src.phong.scene.manager import SceneManager

        SceneManager().load(self.scene)
        setup_camera(self.camera)
        setup_render_target(self.camera.nx, self.camera.ny)
        render_image()
        self.image.write_array(get_image_numpy())

    def print_grid(self, interval: int, color: ColorLike) -> Renderer:
        """Draw grid lines every ``interval`` pixels, starting at row and column 0.

        Raises:
            ValueError: If the interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f"Grid interval must be positive, got {interval}")
        color = as_color(color)
        for j in range(0, self.camera.nx, interval):
            for i in range(self.camera.ny):
                self.image.write_pixel(j, i, color)
        for i in range(0, self.camera.ny, interval):
            for j in range(self.camera.nx):
                self.image.write_pixel(j, i, color)
        return self

    def write_to_image(self, filepath: str | Path) -> Path:
        """Save the image as a PNG and return its path."""
        return self.image.write_to_image(filepath)

    def pixel(self, j: int, i: int) -> Color:
        """Color of pixel (column j, row i) of the current image."""
        return self.image.read_pixel(j, i)
