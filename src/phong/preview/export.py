"""Pixel sink and PNG export for rendered images.

Colors are on the 0..255 scale; values outside it are clamped when the
image is converted to 8 bits. No tone mapping or gamma is applied, a
color of (255, 0, 0) is written as pure red.

The pixel grid is addressed as (column j, row i) with row 0 at the top,
the same convention ``Camera.construct_ray`` uses.

Example:
    >>> from src.phong.core.primitives import Color
    >>> from src.phong.preview.export import ImageWriter
    >>> writer = ImageWriter(800, 500)
    >>> writer.write_pixel(0, 0, Color(255, 255, 0))
    >>> writer.write_to_image("images/grid_test.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.phong.core.primitives import Color

logger = logging.getLogger(__name__)


class ImageWriter:
    """A float64 RGB pixel buffer that can be saved as a PNG.

    Attributes:
        nx: Number of pixel columns.
        ny: Number of pixel rows.
    """

    def __init__(self, nx: int, ny: int) -> None:
        if nx <= 0 or ny <= 0:
            raise ValueError(f"Image size must be positive, got {nx}x{ny}")
        self.nx = nx
        self.ny = ny
        self._pixels = np.zeros((ny, nx, 3), dtype=np.float64)

    def write_pixel(self, j: int, i: int, color: Color) -> None:
        """Set pixel (column j, row i).

        Raises:
            IndexError: If the pixel is outside the image.
        """
        if not (0 <= j < self.nx and 0 <= i < self.ny):
            raise IndexError(f"Pixel ({j}, {i}) is outside the {self.nx}x{self.ny} image")
        self._pixels[i, j] = color.to_tuple()

    def read_pixel(self, j: int, i: int) -> Color:
        return Color(*self._pixels[i, j])

    def write_array(self, image: npt.NDArray[np.floating]) -> None:
        """Replace the whole buffer with an (ny, nx, 3) array."""
        if image.shape != self._pixels.shape:
            raise ValueError(f"Image shapes must match: {image.shape} vs {self._pixels.shape}")
        self._pixels[...] = image

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Copy of the buffer, shape (ny, nx, 3)."""
        return self._pixels.copy()

    def write_to_image(self, filepath: str | Path) -> Path:
        """Save the buffer as an 8-bit PNG.

        Parent directories are created as needed.

        Returns:
            The path that was written.
        """
        path = save_png_from_array(self._pixels, filepath)
        logger.info("Wrote %dx%d image to %s", self.nx, self.ny, path)
        return path


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a 0..255 float image to uint8, clamping out-of-range values.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(np.nan_to_num(image, nan=0.0), 0.0, 255.0)
    return np.rint(clamped).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.floating], filepath: str | Path) -> Path:
    """Save a 0..255 float image array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).

    Returns:
        The path that was written.
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(path)
    return path


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
