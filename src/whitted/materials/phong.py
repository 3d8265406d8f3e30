"""Phong surface material with four-channel albedo weighting.

A material describes how a surface responds to light:

    colour = diffuse_colour * diffuse_intensity * albedo[0]
           + white * specular_intensity * albedo[1]
           + reflected_colour * albedo[2]
           + refracted_colour * albedo[3]

The albedo channels are independent weights and need not sum to 1.

Materials exist in two forms:
    - PhongMaterial: an immutable Python value used while building scenes.
    - Material: the Taichi struct the material is copied into for kernels.

Example:
    >>> from whitted.materials.phong import IVORY, PhongMaterial
    >>> IVORY.albedo
    (0.6, 0.3, 0.1, 0.0)
    >>> clay = PhongMaterial.matte((0.5, 0.3, 0.2))
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Kernel-side material properties.

    Attributes:
        diffuse_colour: Diffuse surface colour (RGB).
        albedo: Weights for the diffuse, specular, reflected and refracted
            contributions.
        specular_exponent: Phong shininess.
        refractive_index: Index of refraction used for the refracted ray.
    """

    diffuse_colour: vec3
    albedo: vec4
    specular_exponent: ti.f32
    refractive_index: ti.f32


@dataclass(frozen=True)
class PhongMaterial:
    """Immutable material description used on the Python side.

    The diffuse colour is not clamped; values above 1 simply brighten the
    diffuse term.

    Attributes:
        diffuse_colour: Diffuse surface colour as (R, G, B).
        albedo: (diffuse, specular, reflect, refract) weights.
        specular_exponent: Phong shininess, must be non-negative.
        refractive_index: Index of refraction, must be positive. Use 1.0 for
            opaque materials.
    """

    diffuse_colour: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float = 0.0
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        # Normalize sequences (e.g. lists from JSON) to float tuples
        try:
            diffuse_colour = tuple(float(c) for c in self.diffuse_colour)
            albedo = tuple(float(a) for a in self.albedo)
            specular_exponent = float(self.specular_exponent)
            refractive_index = float(self.refractive_index)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Material values must be numbers: {e}") from e
        if len(diffuse_colour) != 3:
            raise ValueError(f"Diffuse colour must have 3 components, got {len(diffuse_colour)}")
        if len(albedo) != 4:
            raise ValueError(f"Albedo must have 4 components, got {len(albedo)}")
        if specular_exponent < 0.0:
            raise ValueError(f"Specular exponent = {specular_exponent} is negative.")
        if refractive_index <= 0.0:
            raise ValueError(f"Refractive index = {refractive_index} must be positive.")
        object.__setattr__(self, "diffuse_colour", diffuse_colour)
        object.__setattr__(self, "albedo", albedo)
        object.__setattr__(self, "specular_exponent", specular_exponent)
        object.__setattr__(self, "refractive_index", refractive_index)

    @classmethod
    def matte(cls, diffuse_colour: tuple[float, float, float]) -> "PhongMaterial":
        """Create a purely diffuse material (no specular, reflection or refraction)."""
        return cls(diffuse_colour=diffuse_colour, albedo=(1.0, 0.0, 0.0, 0.0))

    def to_dict(self) -> dict[str, Any]:
        """Export the material to a dictionary (for JSON serialization)."""
        return {
            "diffuse_colour": list(self.diffuse_colour),
            "albedo": list(self.albedo),
            "specular_exponent": self.specular_exponent,
            "refractive_index": self.refractive_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhongMaterial":
        """Create a material from a dictionary.

        Raises:
            ValueError: If required keys are missing or values are invalid.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Material description must be a mapping, got {data!r}")
        try:
            return cls(
                diffuse_colour=data["diffuse_colour"],
                albedo=data.get("albedo", (1.0, 0.0, 0.0, 0.0)),
                specular_exponent=data.get("specular_exponent", 0.0),
                refractive_index=data.get("refractive_index", 1.0),
            )
        except KeyError as e:
            raise ValueError(f"Material description is missing {e}") from e


# =============================================================================
# Named Presets
# =============================================================================

IVORY = PhongMaterial(
    diffuse_colour=(0.4, 0.4, 0.3),
    albedo=(0.6, 0.3, 0.1, 0.0),
    specular_exponent=50.0,
    refractive_index=1.0,
)

GLASS = PhongMaterial(
    diffuse_colour=(0.6, 0.7, 0.8),
    albedo=(0.0, 0.5, 0.1, 0.8),
    specular_exponent=125.0,
    refractive_index=1.5,
)

RED_RUBBER = PhongMaterial(
    diffuse_colour=(0.3, 0.1, 0.1),
    albedo=(0.9, 0.1, 0.0, 0.0),
    specular_exponent=10.0,
    refractive_index=1.0,
)

MIRROR = PhongMaterial(
    diffuse_colour=(1.0, 1.0, 1.0),
    albedo=(0.0, 10.0, 0.8, 0.0),
    specular_exponent=1425.0,
    refractive_index=1.0,
)

# Diffuse colour doubles as the background colour
DEFAULT_MATERIAL = PhongMaterial(
    diffuse_colour=(0.2, 0.7, 0.8),
    albedo=(1.0, 0.0, 0.0, 0.0),
    specular_exponent=0.0,
    refractive_index=1.0,
)

MATERIAL_PRESETS: dict[str, PhongMaterial] = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
    "default": DEFAULT_MATERIAL,
}


def get_preset(name: str) -> PhongMaterial:
    """Look up a named material preset.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        return MATERIAL_PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown material preset: {name!r} (expected one of {sorted(MATERIAL_PRESETS)})"
        ) from None


def preset_name(material: PhongMaterial) -> str | None:
    """Return the preset name of a material, or None if it is not a preset."""
    for name, preset in MATERIAL_PRESETS.items():
        if preset == material:
            return name
    return None


@ti.func
def default_material() -> Material:
    """Kernel-side copy of DEFAULT_MATERIAL."""
    return Material(
        diffuse_colour=vec3(0.2, 0.7, 0.8),
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        specular_exponent=0.0,
        refractive_index=1.0,
    )
