"""Sphere primitive with geometric ray-sphere intersection.

The intersection is solved geometrically rather than through the quadratic
formula: the vector from the ray origin to the sphere center is projected
onto the ray, and the squared distance between the center and the ray line
decides whether the ray hits at all. Only then is the half chord computed,
so the square root never sees a negative argument.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, ray_intersect_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -10), radius=2.0)
    >>> # Use ray_intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def ray_intersect_sphere(origin: vec3, direction: vec3, sphere: Sphere):
    """Find the distance along a ray to a sphere.

    The direction must be unit length. The near intersection is preferred;
    when it lies behind the origin (origin inside the sphere) the far one is
    used, and when both lie behind the origin there is no hit.

    Args:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        A tuple (hit, distance). ``hit`` is 1 on intersection and 0
        otherwise; ``distance`` is only meaningful when ``hit`` is 1.
    """
    delta = sphere.center - origin
    projection = tm.dot(delta, direction)

    # Squared distance from the center to the ray line
    orth_sq = tm.dot(delta, delta) - projection * projection
    radius_sq = sphere.radius * sphere.radius

    hit = 0
    distance = 0.0

    if orth_sq <= radius_sq:
        half_chord = ti.sqrt(radius_sq - orth_sq)
        near = projection - half_chord
        far = projection + half_chord

        if near >= 0.0:
            hit = 1
            distance = near
        elif far >= 0.0:
            hit = 1
            distance = far

    return hit, distance


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
