"""Materials module for the Phong surface model.

Components:
    phong: Material structs, PhongMaterial value objects and named presets

Each material combines four weighted terms:
    - diffuse: Lambert shading of the diffuse colour
    - specular: Phong highlight from each light
    - reflect: colour of the mirror-reflected ray
    - refract: colour of the refracted ray
"""

from .phong import (
    DEFAULT_MATERIAL,
    GLASS,
    IVORY,
    MATERIAL_PRESETS,
    MIRROR,
    RED_RUBBER,
    Material,
    PhongMaterial,
    default_material,
    get_preset,
    preset_name,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "DEFAULT_MATERIAL",
    "MATERIAL_PRESETS",
    "get_preset",
    "preset_name",
    "default_material",
]
