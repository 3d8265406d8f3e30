"""Scene module for scene storage and queries.

Components:
    intersection: Sphere storage and nearest-hit queries
    lights: Point light storage
    manager: Scene manager with dict/JSON serialization
    presets: Stock scenes

Scene data is organized for GPU access:
    - Structure-of-Arrays layout for spheres and lights
    - Materials copied per sphere so the shader needs no lookup table
"""

from .intersection import (
    HORIZON,
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    is_occluded,
)
from .lights import MAX_LIGHTS, PointLight, add_light, clear_lights, get_light_count
from .manager import LightInfo, SceneConfig, SceneManager, SphereInfo
from .presets import (
    SCENE_PRESETS,
    create_basic_scene,
    create_full_scene,
    create_single_sphere_scene,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "is_occluded",
    "HORIZON",
    "MAX_SPHERES",
    # Lights module
    "PointLight",
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "LightInfo",
    "SceneConfig",
    # Presets module
    "SCENE_PRESETS",
    "create_basic_scene",
    "create_full_scene",
    "create_single_sphere_scene",
]
