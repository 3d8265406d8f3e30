"""Stock scene configurations.

Three scenes share the same sphere layout, viewed by the default pinhole
camera at the origin looking down -z:

- basic: four matte spheres lit by one light, no floor
- full: ivory, glass, red rubber and mirror spheres, three lights and the
  checkerboard floor
- single: one ivory sphere and one light

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.presets import SCENE_PRESETS
    >>> scene = SCENE_PRESETS["full"]()
    >>> scene.get_sphere_count()
    4
"""

from collections.abc import Callable

from whitted.geometry.checkerboard import CheckerboardPlane
from whitted.materials.phong import GLASS, IVORY, MIRROR, RED_RUBBER, PhongMaterial
from whitted.scene.manager import SceneManager

# =============================================================================
# Scene Constants
# =============================================================================

SPHERE_LAYOUT: list[tuple[tuple[float, float, float], float]] = [
    ((-3.0, 0.0, -16.0), 2.0),
    ((-1.0, -1.5, -12.0), 2.0),
    ((1.5, -0.5, -18.0), 3.0),
    ((7.0, 5.0, -18.0), 4.0),
]

KEY_LIGHT = ((-20.0, 20.0, 20.0), 1.5)

FULL_SCENE_LIGHTS = [
    KEY_LIGHT,
    ((30.0, 50.0, -25.0), 1.8),
    ((30.0, 20.0, 30.0), 1.7),
]


# =============================================================================
# Scene Factories
# =============================================================================


def create_basic_scene() -> SceneManager:
    """Create the diffuse-only scene.

    Four matte spheres in ivory and red rubber colours, lit by a single
    light. There is no checkerboard.
    """
    ivory = PhongMaterial.matte(IVORY.diffuse_colour)
    red_rubber = PhongMaterial.matte(RED_RUBBER.diffuse_colour)

    scene = SceneManager()
    for (center, radius), material in zip(
        SPHERE_LAYOUT, [ivory, red_rubber, red_rubber, ivory], strict=True
    ):
        scene.add_sphere(center, radius, material)
    scene.add_light(*KEY_LIGHT)
    return scene


def create_full_scene() -> SceneManager:
    """Create the full scene with every material and the checkerboard.

    Returns:
        A SceneManager holding four spheres (ivory, glass, red rubber,
        mirror), three lights and the checkerboard floor.
    """
    scene = SceneManager()
    for (center, radius), material in zip(
        SPHERE_LAYOUT, [IVORY, GLASS, RED_RUBBER, MIRROR], strict=True
    ):
        scene.add_sphere(center, radius, material)
    for position, intensity in FULL_SCENE_LIGHTS:
        scene.add_light(position, intensity)
    scene.set_checkerboard(CheckerboardPlane())
    return scene


def create_single_sphere_scene() -> SceneManager:
    """Create a scene with one ivory sphere and one light."""
    scene = SceneManager()
    center, radius = SPHERE_LAYOUT[0]
    scene.add_sphere(center, radius, IVORY)
    scene.add_light(*KEY_LIGHT)
    return scene


SCENE_PRESETS: dict[str, Callable[[], SceneManager]] = {
    "basic": create_basic_scene,
    "full": create_full_scene,
    "single": create_single_sphere_scene,
}
