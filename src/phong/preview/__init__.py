"""Preview module for output and visualization.

Components:
    export: pixel sink and PNG export (Pillow)
    display: Matplotlib-based preview and side-by-side comparison

Example:
    >>> from src.phong.preview import ImageWriter, show_preview
    >>> writer = ImageWriter(500, 500)
    >>> show_preview(writer.to_numpy())
"""

from src.phong.preview.display import show_comparison, show_preview, to_display
from src.phong.preview.export import (
    ImageWriter,
    compute_rmse,
    image_to_uint8,
    save_png_from_array,
)

__all__ = [
    # Pixel sink
    "ImageWriter",
    # Display functions
    "show_preview",
    "show_comparison",
    "to_display",
    # Export functions
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
