"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the fundamental Ray dataclass and the vector helpers
used by the intersector and the shader. All operations are Taichi functions
so they can be called from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Intersection and
            shading routines expect it to be unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length."""
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes ``I - 2 (I . N) N``. The normal should be unit length; the
    result then satisfies ``reflect(I, N) . N == -(I . N)``.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, refractive_index: ti.f32) -> vec3:
    """Refract an incident vector through a dielectric surface.

    Vector form of Snell's law between vacuum (index 1) and a material of the
    given index. The normal may point either way: when the incident ray
    leaves the material (``I . N > 0``) the indices are swapped and the
    normal is flipped.

    Total internal reflection does not produce a physical ray; the fixed
    direction ``(1, 0, 0)`` is returned instead.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        refractive_index: Index of refraction of the material.

    Returns:
        The refracted direction (not normalized), or ``(1, 0, 0)`` under
        total internal reflection.
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    eta_i = 1.0
    eta_t = refractive_index
    n = normal
    if cos_i < 0.0:
        # Ray is inside the object: swap the media and flip the normal
        cos_i = -cos_i
        eta_i = refractive_index
        eta_t = 1.0
        n = -normal

    eta = eta_i / eta_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)

    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3, epsilon: ti.f32) -> vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Pushes the point along the normal onto the side the ray travels toward:
    outward when ``direction . normal >= 0``, inward otherwise.

    Args:
        point: The surface point.
        normal: The surface normal at the point.
        direction: Direction of the secondary ray.
        epsilon: Offset distance.

    Returns:
        The offset origin.
    """
    offset = normal * epsilon
    result = point + offset
    if tm.dot(direction, normal) < 0.0:
        result = point - offset
    return result
