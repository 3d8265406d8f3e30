"""Frame driver: render a whole frame, then hand it to the image sink.

The Renderer wraps the integrator's render target so callers deal with one
object. Rendering is all-or-nothing: render() computes every pixel before
returning, and save() only accepts a completed frame.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> from whitted.core.renderer import Renderer
    >>> from whitted.scene.presets import create_full_scene
    >>>
    >>> scene = create_full_scene()
    >>> renderer = Renderer(PinholeCamera(1024, 768))
    >>> framebuffer = renderer.render()
    >>> renderer.save("out.png")
"""

import time
from pathlib import Path

import numpy as np
import numpy.typing as npt
from loguru import logger

from whitted.camera.pinhole import PinholeCamera, setup_camera
from whitted.core.integrator import (
    get_framebuffer_numpy,
    render_frame,
    setup_render_target,
)
from whitted.preview.export import save_png_from_array


class Renderer:
    """Renders the current scene through a pinhole camera.

    Attributes:
        camera: The camera configuration.
    """

    def __init__(self, camera: PinholeCamera | None = None) -> None:
        """Initialize the renderer.

        Args:
            camera: Camera configuration. Defaults to 1024x768 with a 90
                degree field of view.

        Raises:
            ValueError: If the camera configuration is invalid or the image
                exceeds the maximum supported size.
        """
        self.camera = camera if camera is not None else PinholeCamera()
        setup_camera(self.camera)
        setup_render_target(self.camera.width, self.camera.height)
        self._framebuffer: npt.NDArray[np.uint8] | None = None

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.height

    @property
    def framebuffer(self) -> npt.NDArray[np.uint8] | None:
        """The last completed frame, or None before the first render."""
        return self._framebuffer

    def render(self) -> npt.NDArray[np.uint8]:
        """Render one complete frame.

        Returns:
            uint8 array of shape (height, width, 3), row 0 at the top.
        """
        # Camera fields are global, another renderer may have changed them
        setup_camera(self.camera)

        logger.info(
            "Rendering {}x{} frame (vfov={} deg)", self.width, self.height, self.camera.vfov
        )
        start_time = time.perf_counter()
        render_frame()
        self._framebuffer = get_framebuffer_numpy()
        logger.info("Frame rendered in {:.2f}s", time.perf_counter() - start_time)

        return self._framebuffer

    def save(self, filepath: str | Path) -> Path:
        """Persist the last completed frame as a PNG.

        Args:
            filepath: Output file path.

        Returns:
            The path written.

        Raises:
            RuntimeError: If no frame has been rendered yet.
            ImageWriteError: If the image could not be written.
        """
        if self._framebuffer is None:
            raise RuntimeError("No frame rendered yet. Call render() first.")
        return save_png_from_array(self._framebuffer, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"vfov={self.camera.vfov}, rendered={self._framebuffer is not None})"
        )
