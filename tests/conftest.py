"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear spheres, lights and the checkerboard before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from whitted.core.integrator import clear_render_target
    from whitted.geometry.checkerboard import disable_checkerboard
    from whitted.scene.intersection import clear_scene
    from whitted.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_lights()
        disable_checkerboard()
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
