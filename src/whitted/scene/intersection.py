"""Scene-level nearest-hit queries.

This module stores the scene's spheres in Taichi fields and answers
"what does this ray hit first" across all spheres and the checkerboard
floor. Each sphere carries its own copy of its material, so a hit record
contains everything the shader needs.

Hits at or beyond HORIZON are treated as misses (background).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import IVORY
    >>> from whitted.scene.intersection import add_sphere, clear_scene, intersect_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -16.0), 2.0, IVORY)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.geometry.checkerboard import (
    checkerboard_colour,
    checkerboard_normal,
    hit_checkerboard,
)
from whitted.geometry.sphere import Sphere, ray_intersect_sphere, sphere_normal
from whitted.materials.phong import Material, PhongMaterial, default_material

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4

# Distance treated as infinity: anything this far away is background
HORIZON = 1000.0

# Initial value of the running minimum distance
_FAR_AWAY = 1e30


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected anything (1 if hit, 0 if miss).
        t: Distance along the ray to the hit. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
        normal: Outward unit surface normal at the hit point. For spheres
            it points away from the center even when the ray starts inside.
        material: The material of the hit surface.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout, material copied per sphere
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_diffuse_colours = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_SPHERES)
sphere_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres from the scene.

    Resets the sphere count to zero. The actual field data is not cleared
    but will be overwritten when new spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    material: PhongMaterial,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material: The sphere's material, copied into the scene.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If the radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive.")
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_diffuse_colours[idx] = vec3(*material.diffuse_colour)
    sphere_albedos[idx] = vec4(*material.albedo)
    sphere_specular_exponents[idx] = material.specular_exponent
    sphere_refractive_indices[idx] = material.refractive_index
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def get_sphere(idx: ti.i32) -> Sphere:
    """Geometry of the sphere at an index."""
    return Sphere(center=sphere_centers[idx], radius=sphere_radii[idx])


@ti.func
def get_sphere_material(idx: ti.i32) -> Material:
    """Material of the sphere at an index."""
    return Material(
        diffuse_colour=sphere_diffuse_colours[idx],
        albedo=sphere_albedos[idx],
        specular_exponent=sphere_specular_exponents[idx],
        refractive_index=sphere_refractive_indices[idx],
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=default_material(),
    )


@ti.func
def intersect_scene(origin: vec3, direction: vec3) -> SceneHitRecord:
    """Find the nearest surface a ray hits.

    Scans every sphere keeping the true minimum distance; a later sphere
    only replaces the current best when it is strictly closer, so ties go
    to the sphere added first. The checkerboard is then tested and wins if
    it is strictly closer than the best sphere. Its material is the default
    material with the procedural board colour.

    Args:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record if nothing is
        hit closer than HORIZON.
    """
    best_t = _FAR_AWAY
    best_idx = -1

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        hit, t = ray_intersect_sphere(origin, direction, get_sphere(i))
        if hit == 1 and t < best_t:
            best_t = t
            best_idx = i

    result = _make_miss_record()

    if best_idx >= 0:
        point = origin + direction * best_t
        result = SceneHitRecord(
            hit=1,
            t=best_t,
            point=point,
            normal=sphere_normal(get_sphere(best_idx), point),
            material=get_sphere_material(best_idx),
        )

    board_hit, board_t, board_point = hit_checkerboard(origin, direction, best_t)
    if board_hit == 1:
        best_t = board_t
        material = default_material()
        material.diffuse_colour = checkerboard_colour(board_point)
        result = SceneHitRecord(
            hit=1,
            t=board_t,
            point=board_point,
            normal=checkerboard_normal(),
            material=material,
        )

    if best_t >= HORIZON:
        result = _make_miss_record()

    return result


@ti.func
def is_occluded(origin: vec3, direction: vec3, max_distance: ti.f32) -> ti.i32:
    """Shadow query: does anything lie strictly closer than max_distance?

    Args:
        origin: The (offset) shadow ray origin.
        direction: Unit direction toward the light.
        max_distance: Distance to the light.

    Returns:
        1 if the light is blocked, 0 otherwise.
    """
    rec = intersect_scene(origin, direction)
    occluded = 0
    if rec.hit == 1 and rec.t < max_distance:
        occluded = 1
    return occluded
