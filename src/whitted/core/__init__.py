"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities (reflect, refract)
    integrator: Whitted-style shader and the render target
    renderer: Frame driver that renders and saves whole frames

The shader follows a ray through reflections and refractions up to
MAX_DEPTH bounces, adding Phong diffuse and specular terms from every
visible point light at each surface hit.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    dot,
    make_ray,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    refract,
    vec3,
    vec4,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.integrator or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "vec4",
    "normalize",
    "dot",
    "reflect",
    "refract",
    "offset_origin",
]
