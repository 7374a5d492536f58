"""Matplotlib-based preview of rendered images.

Rendered colors are on the 0..255 scale; they are clamped and divided by
255 for display.

Example:
    >>> from src.phong.preview.display import show_comparison
    >>> rmse = show_comparison(reference_image, taichi_image, labels=("reference", "taichi"))
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def to_display(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Map a 0..255 image to the [0, 1] range Matplotlib expects.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        Clamped float32 image in [0, 1].
    """
    result = np.clip(np.nan_to_num(image, nan=0.0), 0.0, 255.0) / 255.0
    return result.astype(np.float32)


def show_preview(
    image: npt.NDArray[np.floating],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Image array of shape (H, W, 3) on the 0..255 scale.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(to_display(image))
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Plot two renders next to a heatmap of where they disagree.

    Args:
        image_a: First image array (H, W, 3) on the 0..255 scale.
        image_b: Second image array (H, W, 3) on the 0..255 scale.
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images in display space.

    Raises:
        ValueError: If image shapes don't match.
    """
    import matplotlib.pyplot as plt

    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    display_a = to_display(image_a)
    display_b = to_display(image_b)

    diff = display_a.astype(np.float64) - display_b.astype(np.float64)
    rmse = float(np.sqrt(np.mean(diff**2)))

    # Largest channel error per pixel, amplified
    error_map = np.clip(np.abs(diff).max(axis=2) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)
    for ax, shown, label in zip(axes[:2], (display_a, display_b), labels):
        ax.imshow(shown)
        ax.set_title(label)
        ax.axis("off")

    heatmap = axes[2].imshow(error_map, cmap="magma", vmin=0.0, vmax=1.0)
    axes[2].set_title(f"Max channel error x{diff_scale:g} (RMSE {rmse:.6f})")
    axes[2].axis("off")
    fig.colorbar(heatmap, ax=axes[2], fraction=0.046)

    plt.tight_layout()
    plt.show(block=block)

    return rmse
