"""Matplotlib-based preview of a rendered frame.

Example:
    >>> from whitted.preview.display import show_preview
    >>> show_preview(renderer.render(), title="Spheres")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def show_preview(
    framebuffer: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] | None = None,
    block: bool = True,
) -> None:
    """Display a finished frame as a Matplotlib figure.

    Args:
        framebuffer: uint8 array of shape (height, width, 3).
        title: Custom title (default shows the resolution).
        figsize: Figure size in inches; defaults to the image aspect ratio
            at 8 inches wide.
        block: Whether to block execution until figure is closed.

    Raises:
        ValueError: If the array does not have shape (height, width, 3).
    """
    import matplotlib.pyplot as plt

    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(
            f"Framebuffer must have shape (height, width, 3), got {framebuffer.shape}"
        )

    height, width = framebuffer.shape[:2]
    if figsize is None:
        figsize = (8.0, 8.0 * height / width)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(framebuffer)
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {width}x{height}")

    plt.tight_layout()
    plt.show(block=block)
