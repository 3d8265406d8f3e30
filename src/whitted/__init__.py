"""Whitted-style ray tracer built on Taichi.

This package renders spheres and a checkerboard floor with recursive
ray tracing, supporting:
- Phong diffuse and specular shading from point lights
- Hard shadows
- Mirror reflection and refraction (Snell's law)
- PNG output and a Matplotlib preview

Subpackages:
    core: Ray math, the Whitted shader and the frame driver
    geometry: Sphere and checkerboard intersection
    materials: Phong material model and presets
    scene: Sphere and light storage, scene manager and stock scenes
    camera: Pinhole camera with primary ray generation
    preview: PNG export and preview display
"""

__version__ = "0.1.0"
