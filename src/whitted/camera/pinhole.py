"""Pinhole camera fixed at the world origin looking down -z.

Scenes are authored directly in camera space, so the camera has no
position or orientation of its own: every primary ray starts at the
origin and passes through a virtual image plane at z = -1.

For pixel (i, j) of a W x H image with vertical field of view fov:

    x = (2 (i + 0.5) / W - 1) * tan(fov / 2) * W / H
    y = -(2 (j + 0.5) / H - 1) * tan(fov / 2)
    direction = normalize(x, y, -1)

Pixel (0, 0) is the top-left corner.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(width=1024, height=768, vfov=90.0))
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        vfov: Vertical field of view in degrees.
    """

    width: int = 1024
    height: int = 768
    vfov: float = 90.0

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_tan_half_fov = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Must be called before rendering.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the image size is not positive or the field of view
            is outside (0, 180) degrees.
    """
    if camera.width <= 0 or camera.height <= 0:
        raise ValueError(f"Image dimensions ({camera.width}x{camera.height}) must be positive")
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Field of view = {camera.vfov} must be in (0, 180) degrees")

    _tan_half_fov[None] = math.tan(math.radians(camera.vfov) / 2.0)
    _aspect_ratio[None] = camera.aspect_ratio
    _image_width[None] = camera.width
    _image_height[None] = camera.height


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def primary_ray_direction(i: ti.i32, j: ti.i32) -> vec3:
    """Unit direction of the primary ray through the center of pixel (i, j).

    Args:
        i: Pixel column (0 = left).
        j: Pixel row (0 = top).
    """
    width = ti.cast(_image_width[None], ti.f32)
    height = ti.cast(_image_height[None], ti.f32)
    tan_half = _tan_half_fov[None]

    x = (2.0 * (ti.cast(i, ti.f32) + 0.5) / width - 1.0) * tan_half * _aspect_ratio[None]
    y = -(2.0 * (ti.cast(j, ti.f32) + 0.5) / height - 1.0) * tan_half
    return tm.normalize(vec3(x, y, -1.0))


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Primary ray for pixel (i, j), starting at the world origin."""
    return make_ray(vec3(0.0, 0.0, 0.0), primary_ray_direction(i, j))


@ti.kernel
def _primary_direction_kernel(i: ti.i32, j: ti.i32) -> vec3:
    return primary_ray_direction(i, j)


# =============================================================================
# Utility Functions
# =============================================================================


def get_primary_direction(i: int, j: int) -> tuple[float, float, float]:
    """Python-callable primary ray direction, for debugging and tests."""
    d = _primary_direction_kernel(i, j)
    return (float(d[0]), float(d[1]), float(d[2]))


def get_camera_info() -> dict[str, float]:
    """Get current camera state for debugging."""
    return {
        "width": int(_image_width[None]),
        "height": int(_image_height[None]),
        "tan_half_fov": float(_tan_half_fov[None]),
        "aspect_ratio": float(_aspect_ratio[None]),
    }
