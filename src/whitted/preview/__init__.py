"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export (the image sink)

Example:
    >>> from whitted.preview import save_png_from_array, show_preview
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> framebuffer = Renderer().render()
    >>> show_preview(framebuffer)
    >>> save_png_from_array(framebuffer, "output.png")
"""

from whitted.preview.display import show_preview
from whitted.preview.export import (
    ImageWriteError,
    framebuffer_to_image,
    save_png_from_array,
)

__all__ = [
    "show_preview",
    "ImageWriteError",
    "framebuffer_to_image",
    "save_png_from_array",
]
