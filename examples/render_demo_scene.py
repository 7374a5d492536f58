#!/usr/bin/env python3
"""Render the demo scene with Phong shading.

Usage:
    python -m examples.render_demo_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 500)
    --height HEIGHT     Image height in pixels (default: 500)
    --output OUTPUT     Output file path (default: demo_scene.png)
    --backend BACKEND   "taichi" or "reference" (default: taichi)
    --arch ARCH         Taichi backend (default: $PHONG_ARCH or cpu)
    --grid INTERVAL     Draw a white grid every INTERVAL pixels
    --compare           Also render with the reference backend and report RMSE
    --show              Open a Matplotlib preview window
    --quiet             Only log warnings and errors

Example:
    python -m examples.render_demo_scene --width 200 --height 200 --backend reference
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from src.phong.camera.pinhole import build_camera
from src.phong.config import RuntimeConfig, configure_logging, init_runtime
from src.phong.core.renderer import BACKENDS, Renderer
from src.phong.preview.export import compute_rmse
from src.phong.scene.presets import create_demo_scene

logger = logging.getLogger("src.phong.examples.render_demo_scene")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene with Phong shading.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=500,
        help="Image width in pixels (default: 500)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=500,
        help="Image height in pixels (default: 500)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="demo_scene.png",
        help="Output file path (default: demo_scene.png)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="taichi",
        help="Renderer backend (default: taichi)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu", "cuda", "vulkan", "metal"),
        default=None,
        help="Taichi backend (default: $PHONG_ARCH or cpu)",
    )
    parser.add_argument(
        "--grid",
        type=int,
        default=0,
        help="Draw a white grid every GRID pixels (default: no grid)",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Also render with the reference backend and report the RMSE",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Open a Matplotlib preview window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args()


def render_demo_scene(
    width: int = 500,
    height: int = 500,
    output_path: str = "demo_scene.png",
    backend: str = "taichi",
    grid: int = 0,
    compare: bool = False,
    show: bool = False,
) -> Path:
    """Render the demo scene and save it to a file.

    The Taichi runtime must already be initialised when ``backend`` is
    "taichi" or ``compare`` is set.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path (PNG).
        backend: Renderer backend.
        grid: Grid interval in pixels, 0 for no grid.
        compare: Render with the reference backend too and log the RMSE.
        show: Open a preview window after rendering.

    Returns:
        Path to the saved image file.
    """
    scene, camera_config = create_demo_scene(resolution=(width, height))
    camera = build_camera(camera_config)

    renderer = Renderer(camera, scene, backend=backend).render()
    image = renderer.image.to_numpy()

    if compare:
        other = "reference" if backend == "taichi" else "taichi"
        other_image = Renderer(camera, scene, backend=other).render().image.to_numpy()
        logger.info("RMSE %s vs %s: %.6f", backend, other, compute_rmse(image, other_image))

    if grid > 0:
        renderer.print_grid(grid, (255, 255, 255))

    output_file = renderer.write_to_image(output_path)

    if show:
        from src.phong.preview.display import show_preview

        show_preview(renderer.image.to_numpy(), title=f"{scene.name} ({backend})")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    config = RuntimeConfig.from_env()
    if args.arch is not None:
        config = replace(config, arch=args.arch)
    if args.quiet:
        config = replace(config, log_level="WARNING")
    configure_logging(config.log_level)

    try:
        if args.backend == "taichi" or args.compare:
            init_runtime(config)
        output_file = render_demo_scene(
            width=args.width,
            height=args.height,
            output_path=args.output,
            backend=args.backend,
            grid=args.grid,
            compare=args.compare,
            show=args.show,
        )
        logger.info("Saved to: %s", output_file.absolute())
        return 0
    except Exception as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
