"""Scene manager for coordinating spheres, lights and the checkerboard.

This module provides a high-level scene building API on top of the Taichi
field storage in ``intersection``, ``lights`` and ``checkerboard``. It keeps a
Python-side record of everything added so the scene can be inspected and
serialized.

The SceneManager maintains:
- SphereInfo records (center, radius, material) in insertion order
- LightInfo records in insertion order
- The checkerboard configuration
- Dict and JSON (de)serialization

Scene description format::

    {
        "materials": {"frosted": {"diffuse_colour": [...], "albedo": [...], ...}},
        "spheres": [{"center": [x, y, z], "radius": r, "material": "ivory"}, ...],
        "lights": [{"position": [x, y, z], "intensity": i}, ...],
        "checkerboard": {"enabled": true, ...}
    }

A sphere's ``material`` is either a name (a preset or a key of ``materials``)
or an inline material dict.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_sphere((-3, 0, -16), 2, "ivory")
    >>> scene.add_light((-20, 20, 20), 1.5)
    >>> scene.save_json("scene.json")
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from whitted.geometry.checkerboard import (
    CheckerboardPlane,
    disable_checkerboard,
    setup_checkerboard,
)
from whitted.materials.phong import PhongMaterial, get_preset, preset_name
from whitted.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)
from whitted.scene.lights import (
    MAX_LIGHTS,
    PointLight,
    add_light,
    clear_lights,
    get_light_count,
)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material: PhongMaterial


@dataclass
class LightInfo:
    """Information about a light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        light: The point light.
    """

    light_index: int
    light: PointLight


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: Named custom materials, referenced by spheres.
        spheres: List of sphere configurations.
        lights: List of light configurations.
        checkerboard: Board configuration, or None for no board.
    """

    materials: dict[str, dict[str, Any]] = field(default_factory=dict)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    checkerboard: dict[str, Any] | None = None


def _as_vec3(value: Any, what: str) -> tuple[float, float, float]:
    """Convert a 3-element sequence to a float tuple."""
    try:
        x, y, z = value
        return (float(x), float(y), float(z))
    except (TypeError, ValueError) as e:
        raise ValueError(f"{what} must be a sequence of 3 numbers, got {value!r}") from e


def _as_float(value: Any, what: str) -> float:
    """Convert a number to float."""
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{what} must be a number, got {value!r}") from e


class SceneManager:
    """Scene manager coordinating spheres, lights and the checkerboard.

    Creating a SceneManager resets the global scene storage, so only one
    scene is active at a time.

    Attributes:
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.
        checkerboard: The board configuration, or None when there is no board.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((-1, -1.5, -12), 2, "glass")
        >>> scene.add_sphere((7, 5, -18), 4, MIRROR)
        >>> scene.add_light((30, 50, -25), 1.8)
        >>> scene.set_checkerboard(CheckerboardPlane())
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self.checkerboard: CheckerboardPlane | None = None
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lights()
        disable_checkerboard()
        self.spheres.clear()
        self.lights.clear()
        self.checkerboard = None

    def clear(self) -> None:
        """Clear the entire scene (spheres, lights and board).

        Resets all Taichi fields and internal tracking structures.
        """
        self._clear_all()

    # =========================================================================
    # Scene Building
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: PhongMaterial | str,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material: A PhongMaterial or the name of a material preset.

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or the preset is unknown.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if isinstance(material, str):
            material = get_preset(material)

        center = _as_vec3(center, "Sphere center")
        radius = _as_float(radius, "Sphere radius")
        sphere_index = add_sphere(center, radius, material)

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=radius,
                material=material,
            )
        )
        logger.debug(
            "Added sphere {} at {} (r={}, material={})",
            sphere_index,
            center,
            radius,
            preset_name(material) or "custom",
        )
        return sphere_index

    def add_light(
        self,
        position: tuple[float, float, float],
        intensity: float,
    ) -> int:
        """Add a point light to the scene.

        Args:
            position: World-space position of the light.
            intensity: Scalar intensity (must be positive).

        Returns:
            The index of the added light.

        Raises:
            ValueError: If the intensity is not positive.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        light = PointLight(
            position=_as_vec3(position, "Light position"),
            intensity=_as_float(intensity, "Light intensity"),
        )
        light_index = add_light(light)
        self.lights.append(LightInfo(light_index=light_index, light=light))
        logger.debug("Added light {} at {} (intensity={})", light_index, light.position, intensity)
        return light_index

    def set_checkerboard(self, board: CheckerboardPlane | None) -> None:
        """Set or remove the checkerboard floor.

        Args:
            board: The board configuration, or None to remove the board.
        """
        self.checkerboard = board
        if board is None:
            disable_checkerboard()
        else:
            setup_checkerboard(board)
        logger.debug("Checkerboard {}", "enabled" if board and board.enabled else "disabled")

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Preset materials are referenced by name, other materials are
        collected under generated names in ``materials``.

        Returns:
            A SceneConfig containing all spheres, lights and the board.
        """
        config = SceneConfig()
        custom_names: dict[PhongMaterial, str] = {}

        for sphere in self.spheres:
            name = preset_name(sphere.material)
            if name is None:
                if sphere.material not in custom_names:
                    custom_names[sphere.material] = f"material_{len(custom_names)}"
                    config.materials[custom_names[sphere.material]] = sphere.material.to_dict()
                name = custom_names[sphere.material]
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material": name,
                }
            )

        for info in self.lights:
            config.lights.append(
                {
                    "position": list(info.light.position),
                    "intensity": info.light.intensity,
                }
            )

        if self.checkerboard is not None:
            config.checkerboard = self.checkerboard.to_dict()

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        The whole configuration is validated before anything changes, so a
        malformed configuration leaves the current scene untouched.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            RuntimeError: If it holds more spheres or lights than supported.
        """
        spheres, lights, board = self._parse_config(config)

        self.clear()
        for center, radius, material in spheres:
            self.add_sphere(center, radius, material)
        for light in lights:
            self.add_light(light.position, light.intensity)
        if board is not None:
            self.set_checkerboard(board)

    @staticmethod
    def _parse_config(
        config: SceneConfig,
    ) -> tuple[
        list[tuple[tuple[float, float, float], float, PhongMaterial]],
        list[PointLight],
        CheckerboardPlane | None,
    ]:
        """Convert a configuration into validated Python objects."""
        if not isinstance(config.materials, dict):
            raise ValueError(f"Scene materials must be a mapping, got {config.materials!r}")
        if not isinstance(config.spheres, list):
            raise ValueError(f"Scene spheres must be a list, got {config.spheres!r}")
        if not isinstance(config.lights, list):
            raise ValueError(f"Scene lights must be a list, got {config.lights!r}")

        custom: dict[str, PhongMaterial] = {}
        for name, mat_config in config.materials.items():
            if not isinstance(mat_config, dict):
                raise ValueError(f"Material {name!r} must be a mapping, got {mat_config!r}")
            custom[name] = PhongMaterial.from_dict(mat_config)

        spheres = []
        for sphere_config in config.spheres:
            if not isinstance(sphere_config, dict):
                raise ValueError(f"Sphere description must be a mapping, got {sphere_config!r}")
            try:
                center = _as_vec3(sphere_config["center"], "Sphere center")
                radius = _as_float(sphere_config["radius"], "Sphere radius")
            except KeyError as e:
                raise ValueError(f"Sphere description is missing {e}") from e
            if radius <= 0.0:
                raise ValueError(f"Sphere radius = {radius} must be positive.")

            mat_ref = sphere_config.get("material", "default")
            if isinstance(mat_ref, dict):
                material = PhongMaterial.from_dict(mat_ref)
            elif isinstance(mat_ref, str) and mat_ref in custom:
                material = custom[mat_ref]
            else:
                material = get_preset(str(mat_ref))
            spheres.append((center, radius, material))

        lights = []
        for light_config in config.lights:
            if not isinstance(light_config, dict):
                raise ValueError(f"Light description must be a mapping, got {light_config!r}")
            try:
                position = _as_vec3(light_config["position"], "Light position")
                intensity = _as_float(light_config["intensity"], "Light intensity")
            except KeyError as e:
                raise ValueError(f"Light description is missing {e}") from e
            lights.append(PointLight(position=position, intensity=intensity))

        if len(spheres) > MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
        if len(lights) > MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

        board = None
        if config.checkerboard is not None:
            board = CheckerboardPlane.from_dict(config.checkerboard)

        return spheres, lights, board

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
            "checkerboard": config.checkerboard,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'spheres', 'lights' and
                'checkerboard' keys; all are optional.

        Raises:
            ValueError: If the description is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scene description must be a mapping, got {type(data).__name__}")
        config = SceneConfig(
            materials=data.get("materials") or {},
            spheres=data.get("spheres") or [],
            lights=data.get("lights") or [],
            checkerboard=data.get("checkerboard"),
        )
        self.from_config(config)

    def save_json(self, filepath: str | Path) -> Path:
        """Write the scene description to a JSON file.

        Args:
            filepath: Output file path.

        Returns:
            The path written.
        """
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        logger.debug("Saved scene description to {}", path)
        return path

    def load_json(self, filepath: str | Path) -> None:
        """Replace the current scene with one read from a JSON file.

        Args:
            filepath: Path of the scene description.

        Raises:
            ValueError: If the file cannot be read, is not valid JSON, or the
                description is malformed.
        """
        path = Path(filepath)
        try:
            data = json.loads(path.read_text())
        except OSError as e:
            raise ValueError(f"Cannot read scene file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {path}: {e}") from e
        self.from_dict(data)
        logger.debug(
            "Loaded scene from {} ({} spheres, {} lights)", path, len(self.spheres), len(self.lights)
        )

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
