"""Unit tests for the Whitted-style integrator.

Tests cover:
- Background colour for escaping rays and over-deep rays
- Local shading with and without lights
- Hard shadows
- Reflection, refraction and the recursion bound
- Render target setup and the frame kernel
"""

import pytest
import taichi as ti

BACKGROUND = (0.2, 0.7, 0.8)


def _assert_colour(actual, expected, tol=1e-5):
    for a, e in zip(actual, expected):
        assert abs(a - e) < tol, f"{actual} != {expected}"


class TestBackground:
    """Rays that escape the scene or recurse too deep."""

    def test_empty_scene_returns_background_exactly(self):
        from whitted.core.integrator import trace_single_ray

        colour, casts, deepest = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert colour == pytest.approx(BACKGROUND, abs=1e-7)
        assert casts == 1
        assert deepest == 0

    def test_ray_deeper_than_max_depth_returns_background(self):
        """No scene query happens past MAX_DEPTH."""
        from whitted.core.integrator import MAX_DEPTH, trace_single_ray
        from whitted.materials.phong import IVORY
        from whitted.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -10.0), 2.0, IVORY)
        colour, casts, _ = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), MAX_DEPTH + 1)

        _assert_colour(colour, BACKGROUND, tol=1e-7)
        assert casts == 1

    def test_negative_depth_raises(self):
        from whitted.core.integrator import cast_single_ray, trace_single_ray

        with pytest.raises(ValueError, match="non-negative"):
            trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), -1)
        with pytest.raises(ValueError, match="non-negative"):
            cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), -3)


class TestLocalShading:
    """Diffuse and specular terms."""

    def test_no_lights_and_no_reflection_is_black(self):
        """Diffuse and specular vanish without lights."""
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import RED_RUBBER
        from whitted.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -10.0), 2.0, RED_RUBBER)
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        _assert_colour(colour, (0.0, 0.0, 0.0), tol=1e-7)

    def test_no_lights_leaves_only_reflected_light(self):
        """With zero lights the colour is reflect_colour * albedo[2]."""
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere

        mat = PhongMaterial(diffuse_colour=(1.0, 1.0, 1.0), albedo=(0.7, 0.5, 0.5, 0.0))
        add_sphere((0.0, 0.0, -10.0), 2.0, mat)
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        # Reflected straight back into empty space
        _assert_colour(colour, tuple(0.5 * c for c in BACKGROUND))

    def test_head_on_light_gives_full_diffuse(self):
        """A light behind the camera lights the facing point at cos = 1."""
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        add_sphere((0.0, 0.0, -10.0), 2.0, PhongMaterial.matte((0.4, 0.4, 0.3)))
        add_light(PointLight(position=(0.0, 0.0, 0.0), intensity=1.0))
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        _assert_colour(colour, (0.4, 0.4, 0.3))

    def test_light_intensities_add_up(self):
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        add_sphere((0.0, 0.0, -10.0), 2.0, PhongMaterial.matte((0.2, 0.2, 0.2)))
        add_light(PointLight(position=(0.0, 0.0, 0.0), intensity=1.0))
        add_light(PointLight(position=(0.0, 0.0, 5.0), intensity=2.0))
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        _assert_colour(colour, (0.6, 0.6, 0.6))

    def test_light_behind_surface_contributes_nothing(self):
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        add_sphere((0.0, 0.0, -10.0), 2.0, PhongMaterial.matte((1.0, 1.0, 1.0)))
        add_light(PointLight(position=(0.0, 0.0, -30.0), intensity=1.0))
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        _assert_colour(colour, (0.0, 0.0, 0.0), tol=1e-7)

    def test_specular_highlight_is_white(self):
        """The specular term adds equally to all channels."""
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        mat = PhongMaterial(
            diffuse_colour=(0.0, 0.0, 0.0),
            albedo=(0.0, 1.0, 0.0, 0.0),
            specular_exponent=10.0,
        )
        add_sphere((0.0, 0.0, -10.0), 2.0, mat)
        add_light(PointLight(position=(0.0, 0.0, 0.0), intensity=1.0))
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        # Mirror direction of the light is the view direction: highlight = 1
        _assert_colour(colour, (1.0, 1.0, 1.0))


class TestShadows:
    """Hard shadows via shadow rays."""

    def _illuminate(self):
        from whitted.core.integrator import illuminate, vec3

        diffuse = ti.field(dtype=ti.f32, shape=())
        specular = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            d, s = illuminate(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0), 10.0
            )
            diffuse[None] = d
            specular[None] = s

        test_kernel()
        return diffuse[None], specular[None]

    def test_unoccluded_light_contributes(self):
        from whitted.scene.lights import PointLight, add_light

        add_light(PointLight(position=(0.0, 10.0, 0.0), intensity=1.0))
        diffuse, specular = self._illuminate()

        assert abs(diffuse - 1.0) < 1e-5
        assert specular > 0.0

    def test_occluded_light_contributes_nothing(self):
        from whitted.materials.phong import IVORY
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        add_light(PointLight(position=(0.0, 10.0, 0.0), intensity=1.0))
        add_sphere((0.0, 5.0, 0.0), 1.0, IVORY)
        diffuse, specular = self._illuminate()

        assert diffuse == 0.0
        assert specular == 0.0

    def test_only_blocked_light_is_removed(self):
        from whitted.materials.phong import IVORY
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        add_light(PointLight(position=(0.0, 10.0, 0.0), intensity=1.0))
        add_light(PointLight(position=(10.0, 10.0, 0.0), intensity=2.0))
        add_sphere((0.0, 5.0, 0.0), 1.0, IVORY)
        diffuse, _ = self._illuminate()

        # Second light at 45 degrees: 2 * cos(45)
        assert abs(diffuse - 2.0 * 0.5**0.5) < 1e-5

    def test_sphere_shadows_checkerboard(self):
        """A sphere between the board and the only light darkens the board."""
        from whitted.core.integrator import cast_single_ray
        from whitted.geometry.checkerboard import CheckerboardPlane, setup_checkerboard
        from whitted.materials.phong import IVORY
        from whitted.scene.intersection import add_sphere
        from whitted.scene.lights import PointLight, add_light

        setup_checkerboard(CheckerboardPlane())
        add_light(PointLight(position=(0.0, 20.0, -20.0), intensity=1.0))
        direction = (0.0, -4.0, -20.0)

        lit = cast_single_ray((0.0, 0.0, 0.0), direction)
        add_sphere((0.0, 5.0, -20.0), 2.0, IVORY)
        shadowed = cast_single_ray((0.0, 0.0, 0.0), direction)

        assert sum(lit) > 0.0
        _assert_colour(shadowed, (0.0, 0.0, 0.0), tol=1e-7)


class TestRecursion:
    """Reflection, refraction and the recursion bound."""

    def test_hall_of_mirrors_is_bounded(self):
        """Inside a mirror sphere every ray hits; recursion stops at MAX_DEPTH."""
        from whitted.core.integrator import MAX_DEPTH, trace_single_ray
        from whitted.materials.phong import MIRROR
        from whitted.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 10.0, MIRROR)
        colour, casts, deepest = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert casts <= 2 * (MAX_DEPTH + 1)
        assert deepest == MAX_DEPTH + 1
        _assert_colour(colour, tuple(0.8**5 * c for c in BACKGROUND))

    def test_transparent_sphere_shows_background_through_it(self):
        """A purely refractive sphere passes the background through."""
        from whitted.core.integrator import cast_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere

        clear = PhongMaterial(
            diffuse_colour=(0.0, 0.0, 0.0),
            albedo=(0.0, 0.0, 0.0, 1.0),
            refractive_index=1.5,
        )
        add_sphere((0.0, 0.0, -10.0), 2.0, clear)
        colour = cast_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        # Enters and leaves along the axis, then escapes
        _assert_colour(colour, BACKGROUND)

    def test_refraction_counts_casts(self):
        from whitted.core.integrator import trace_single_ray
        from whitted.materials.phong import PhongMaterial
        from whitted.scene.intersection import add_sphere

        clear = PhongMaterial(
            diffuse_colour=(0.0, 0.0, 0.0),
            albedo=(0.0, 0.0, 0.0, 1.0),
            refractive_index=1.5,
        )
        add_sphere((0.0, 0.0, -10.0), 2.0, clear)
        _, casts, deepest = trace_single_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        # Primary hit, exit hit, escape
        assert casts == 3
        assert deepest == 2

    def test_glass_sphere_in_full_scene_is_finite(self):
        from whitted.core.integrator import MAX_DEPTH, trace_single_ray
        from whitted.scene.presets import create_full_scene

        create_full_scene()
        colour, casts, deepest = trace_single_ray((0.0, 0.0, 0.0), (-1.0, -1.5, -12.0))

        assert all(c == c and abs(c) < 1e6 for c in colour)
        assert casts >= 2
        assert deepest <= MAX_DEPTH + 1


class TestRenderTarget:
    """Tests for the framebuffer and the frame kernel."""

    def test_setup_render_target_dimensions(self):
        from whitted.core.integrator import get_image_dimensions, setup_render_target

        setup_render_target(320, 240)
        assert get_image_dimensions() == (320, 240)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, -1), (4096, 10), (10, 4096)])
    def test_invalid_render_target_raises(self, width, height):
        from whitted.core.integrator import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_render_empty_scene_fills_background(self):
        import numpy as np

        from whitted.camera.pinhole import PinholeCamera, setup_camera
        from whitted.core.integrator import (
            get_framebuffer_numpy,
            render_frame,
            setup_render_target,
        )

        setup_camera(PinholeCamera(width=16, height=8))
        setup_render_target(16, 8)
        render_frame()
        image = get_framebuffer_numpy()

        assert image.shape == (8, 16, 3)
        assert image.dtype == np.uint8
        assert np.all(image == np.array([51, 178, 204], dtype=np.uint8))

    def test_framebuffer_row_zero_is_top(self):
        """A sphere above the axis shows up in the top rows."""
        import numpy as np

        from whitted.camera.pinhole import PinholeCamera, setup_camera
        from whitted.core.integrator import (
            get_framebuffer_numpy,
            render_frame,
            setup_render_target,
        )
        from whitted.materials.phong import RED_RUBBER
        from whitted.scene.intersection import add_sphere

        add_sphere((0.0, 5.0, -10.0), 2.0, RED_RUBBER)
        setup_camera(PinholeCamera(width=16, height=16))
        setup_render_target(16, 16)
        render_frame()
        image = get_framebuffer_numpy()

        background = np.array([51, 178, 204], dtype=np.uint8)
        top_changed = np.any(image[:8] != background, axis=2).sum()
        bottom_changed = np.any(image[8:] != background, axis=2).sum()
        assert top_changed > 0
        assert bottom_changed == 0
