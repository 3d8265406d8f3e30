"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection
    checkerboard: Bounded horizontal plane with a checker pattern

All intersection routines are implemented as Taichi functions (@ti.func).
"""

from .checkerboard import (
    CheckerboardPlane,
    checkerboard_colour,
    checkerboard_normal,
    disable_checkerboard,
    hit_checkerboard,
    is_checkerboard_enabled,
    setup_checkerboard,
)
from .sphere import Sphere, make_sphere, ray_intersect_sphere, sphere_normal

__all__ = [
    "Sphere",
    "make_sphere",
    "ray_intersect_sphere",
    "sphere_normal",
    "CheckerboardPlane",
    "setup_checkerboard",
    "disable_checkerboard",
    "is_checkerboard_enabled",
    "hit_checkerboard",
    "checkerboard_colour",
    "checkerboard_normal",
]
