"""Whitted-style recursive ray caster and frame kernel.

This module implements the shader: for every ray it finds the nearest
surface, lights it with Phong diffuse/specular terms and hard shadows, and
adds mirror-reflected and refracted light traced recursively:

    colour = diffuse_colour * diffuse * albedo[0]
           + white * specular * albedo[1]
           + cast_ray(reflected) * albedo[2]
           + cast_ray(refracted) * albedo[3]

Taichi functions cannot call themselves, so the recursion is evaluated with
an explicit depth-first work stack. Because the colour is a linear
combination of the children's colours, each stack entry carries the
product of albedo weights along its path and adds its own local shading
scaled by that weight. Rays deeper than MAX_DEPTH, and rays that hit
nothing, contribute the background colour.

Key features:
    - Bounded recursion (MAX_DEPTH), independent of scene geometry
    - Shadow rays against spheres and the checkerboard
    - Ray origin offset along the normal to avoid shadow acne
    - One u8 RGB framebuffer, written once per pixel per frame

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> from whitted.core.integrator import render_frame, setup_render_target
    >>> from whitted.scene.presets import create_full_scene
    >>>
    >>> scene = create_full_scene()
    >>> setup_camera(PinholeCamera(1024, 768))
    >>> setup_render_target(1024, 768)
    >>> render_frame()
"""

import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import primary_ray_direction
from whitted.core.ray import normalize, offset_origin, reflect, refract
from whitted.scene.intersection import SceneHitRecord, intersect_scene, is_occluded
from whitted.scene.lights import light_intensities, light_positions, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Rays deeper than this return the background colour
MAX_DEPTH = 4

# At most one pending sibling per level plus the two children just pushed
STACK_SIZE = MAX_DEPTH + 3

# Offset of secondary ray origins along the surface normal
RAY_EPSILON = 1e-3

# Colour of rays that escape the scene
BACKGROUND_COLOR = vec3(0.2, 0.7, 0.8)

WHITE = vec3(1.0, 1.0, 1.0)


# =============================================================================
# Local Illumination
# =============================================================================


@ti.func
def illuminate(point: vec3, normal: vec3, direction: vec3, specular_exponent: ti.f32):
    """Accumulate diffuse and specular light intensity at a surface point.

    A light is skipped when a shadow ray, started just off the surface on
    the light's side, hits anything closer than the light.

    Args:
        point: The surface point.
        normal: Unit surface normal at the point.
        direction: Direction of the ray that reached the point.
        specular_exponent: Phong shininess of the surface.

    Returns:
        A tuple (diffuse_intensity, specular_intensity).
    """
    diffuse_intensity = 0.0
    specular_intensity = 0.0

    for k in range(num_lights[None]):
        to_light = light_positions[k] - point
        light_distance = tm.length(to_light)
        light_dir = to_light / light_distance

        shadow_origin = offset_origin(point, normal, light_dir, RAY_EPSILON)
        if is_occluded(shadow_origin, light_dir, light_distance) == 0:
            intensity = light_intensities[k]
            diffuse_intensity += intensity * tm.max(0.0, tm.dot(light_dir, normal))
            highlight = tm.max(0.0, tm.dot(reflect(light_dir, normal), direction))
            specular_intensity += intensity * highlight**specular_exponent

    return diffuse_intensity, specular_intensity


@ti.func
def shade_surface(rec: SceneHitRecord, direction: vec3) -> vec3:
    """Local (non-recursive) part of the shading: diffuse plus specular."""
    diffuse, specular = illuminate(
        rec.point, rec.normal, direction, rec.material.specular_exponent
    )
    albedo = rec.material.albedo
    return rec.material.diffuse_colour * diffuse * albedo[0] + WHITE * specular * albedo[1]


# =============================================================================
# Ray Casting Core
# =============================================================================


@ti.func
def trace_ray(origin: vec3, direction: vec3, depth: ti.i32):
    """Evaluate the recursive shading of a ray.

    Every popped stack entry is one ray cast. Children whose weight is zero
    cannot change the result and are not pushed.

    Args:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
        depth: Recursion depth of this ray (0 for primary rays).

    Returns:
        A tuple (colour, casts, deepest) where casts is the number of ray
        casts evaluated and deepest the largest depth reached.
    """
    stack_origin = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_direction = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    stack_weight = ti.Vector.zero(ti.f32, STACK_SIZE)
    stack_depth = ti.Vector.zero(ti.i32, STACK_SIZE)

    for c in ti.static(range(3)):
        stack_origin[0, c] = origin[c]
        stack_direction[0, c] = direction[c]
    stack_weight[0] = 1.0
    stack_depth[0] = depth
    top = 1

    colour = vec3(0.0, 0.0, 0.0)
    casts = 0
    deepest = depth

    while top > 0:
        top -= 1
        o = vec3(stack_origin[top, 0], stack_origin[top, 1], stack_origin[top, 2])
        d = vec3(stack_direction[top, 0], stack_direction[top, 1], stack_direction[top, 2])
        weight = stack_weight[top]
        level = stack_depth[top]

        casts += 1
        deepest = ti.max(deepest, level)

        if level > MAX_DEPTH:
            colour += weight * BACKGROUND_COLOR
        else:
            rec = intersect_scene(o, d)
            if rec.hit == 0:
                colour += weight * BACKGROUND_COLOR
            else:
                colour += weight * shade_surface(rec, d)

                albedo = rec.material.albedo
                reflect_weight = weight * albedo[2]
                refract_weight = weight * albedo[3]

                if refract_weight != 0.0:
                    refract_dir = normalize(
                        refract(d, rec.normal, rec.material.refractive_index)
                    )
                    refract_origin = offset_origin(rec.point, rec.normal, refract_dir, RAY_EPSILON)
                    for c in ti.static(range(3)):
                        stack_origin[top, c] = refract_origin[c]
                        stack_direction[top, c] = refract_dir[c]
                    stack_weight[top] = refract_weight
                    stack_depth[top] = level + 1
                    top += 1

                if reflect_weight != 0.0:
                    reflect_dir = normalize(reflect(d, rec.normal))
                    reflect_origin = offset_origin(rec.point, rec.normal, reflect_dir, RAY_EPSILON)
                    for c in ti.static(range(3)):
                        stack_origin[top, c] = reflect_origin[c]
                        stack_direction[top, c] = reflect_dir[c]
                    stack_weight[top] = reflect_weight
                    stack_depth[top] = level + 1
                    top += 1

    return colour, casts, deepest


@ti.func
def cast_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    """Colour seen along a ray.

    Pure function of the ray and the (read-only) scene fields.

    Args:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
        depth: Recursion depth of this ray (0 for primary rays).

    Returns:
        The unclamped RGB colour.
    """
    colour, _, _ = trace_ray(origin, direction, depth)
    return colour


# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_target_width = ti.field(dtype=ti.i32, shape=())
_target_height = ti.field(dtype=ti.i32, shape=())

# 8-bit RGB framebuffer indexed [column, row], row 0 at the top
_framebuffer = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the framebuffer for a given image size.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _target_width[None] = width
    _target_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the framebuffer to black."""
    _framebuffer.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_target_width[None]), int(_target_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    """Cast one primary ray per pixel and store the clamped 8-bit colour."""
    for i, j in ti.ndrange(width, height):
        direction = primary_ray_direction(i, j)
        colour = cast_ray(vec3(0.0, 0.0, 0.0), direction, 0)
        _framebuffer[i, j] = ti.cast(255.0 * tm.clamp(colour, 0.0, 1.0), ti.u8)


# Results of the last trace_single_ray() call
_last_casts = ti.field(dtype=ti.i32, shape=())
_last_deepest = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_single(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
) -> vec3:
    colour, casts, deepest = trace_ray(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)), depth)
    _last_casts[None] = casts
    _last_deepest[None] = deepest
    return colour


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[tuple[float, float, float], int, int]:
    """Trace one ray against the current scene.

    This is a Python-callable function for testing and debugging. The
    direction is normalized before tracing.

    Returns:
        A tuple (colour, casts, deepest).

    Raises:
        ValueError: If depth is negative.
    """
    if depth < 0:
        raise ValueError(f"Ray depth = {depth} must be non-negative.")
    colour = _trace_single(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], depth
    )
    rgb = (float(colour[0]), float(colour[1]), float(colour[2]))
    return rgb, int(_last_casts[None]), int(_last_deepest[None])


def cast_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Colour seen along one ray (unclamped RGB)."""
    colour, _, _ = trace_single_ray(origin, direction, depth)
    return colour


def render_frame() -> None:
    """Render every pixel of the current render target once.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_frame(width, height)


def get_framebuffer_numpy():
    """Get the framebuffer as a NumPy array.

    Returns:
        NumPy uint8 array of shape (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _framebuffer.to_numpy()

    # Extract active region and transpose (width, height, 3) -> (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.uint8)
