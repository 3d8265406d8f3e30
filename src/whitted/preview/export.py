"""Image sink: persist a finished framebuffer as a PNG.

The sink only ever receives complete frames. Failures while writing are
reported as ImageWriteError, an OSError subclass, so callers can tell a
disk or path problem (worth retrying elsewhere) from a bad framebuffer
(a programming error, reported as ValueError).

Example:
    >>> from whitted.preview.export import save_png_from_array
    >>> save_png_from_array(framebuffer, "out.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from loguru import logger
from PIL import Image as PILImage


class ImageWriteError(OSError):
    """Raised when a framebuffer cannot be persisted."""


def _check_framebuffer(framebuffer: npt.NDArray[np.uint8]) -> None:
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 3:
        raise ValueError(
            f"Framebuffer must have shape (height, width, 3), got {framebuffer.shape}"
        )
    if framebuffer.dtype != np.uint8:
        raise ValueError(f"Framebuffer must have dtype uint8, got {framebuffer.dtype}")


def framebuffer_to_image(framebuffer: npt.NDArray[np.uint8]) -> PILImage.Image:
    """Convert a framebuffer to a Pillow RGB image.

    Args:
        framebuffer: uint8 array of shape (height, width, 3).

    Raises:
        ValueError: If the array has the wrong shape or dtype.
    """
    _check_framebuffer(framebuffer)
    return PILImage.fromarray(np.ascontiguousarray(framebuffer), mode="RGB")


def save_png_from_array(
    framebuffer: npt.NDArray[np.uint8],
    filepath: str | Path,
) -> Path:
    """Save a framebuffer as a PNG file.

    Parent directories are created as needed.

    Args:
        framebuffer: uint8 array of shape (height, width, 3), row 0 at the top.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        ValueError: If the array has the wrong shape or dtype.
        ImageWriteError: If the file could not be written.
    """
    pil_image = framebuffer_to_image(framebuffer)
    path = Path(filepath)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        pil_image.save(path, format="PNG")
    except OSError as e:
        raise ImageWriteError(f"Could not write image to {path}: {e}") from e

    logger.info("Saved {}x{} image to {}", framebuffer.shape[1], framebuffer.shape[0], path)
    return path
