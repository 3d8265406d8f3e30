"""Point light storage.

Lights are stored in Taichi fields (Structure of Arrays) so the shader can
iterate over them inside kernels. Each light has a position and a scalar
intensity; light colour is always white.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class PointLight:
    """A point light.

    Attributes:
        position: World-space position (x, y, z).
        intensity: Scalar intensity, must be positive.
    """

    position: tuple[float, float, float]
    intensity: float

    def __post_init__(self) -> None:
        try:
            x, y, z = self.position
            position = (float(x), float(y), float(z))
            intensity = float(self.intensity)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Light needs a 3-component position and a numeric intensity: {e}"
            ) from e
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "intensity", intensity)
        if self.intensity <= 0.0:
            raise ValueError(f"Light intensity = {self.intensity} must be positive.")


# Maximum number of lights supported in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(light: PointLight) -> int:
    """Add a point light to the scene.

    Args:
        light: The light to add.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = vec3(light.position[0], light.position[1], light.position[2])
    light_intensities[idx] = light.intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])
