"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera at the origin looking down -z

Pixel (0, 0) is the top-left corner of the image. Every primary ray
passes through the center of its pixel; there is no anti-aliasing.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_primary_direction,
    get_ray,
    primary_ray_direction,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_ray",
    "primary_ray_direction",
    "get_primary_direction",
    "get_camera_info",
]
