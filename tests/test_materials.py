"""Unit tests for the Phong material model.

Tests cover:
- PhongMaterial validation and normalization
- Named presets and lookup
- Dict conversion
- The kernel-side default material
"""

import pytest
import taichi as ti


class TestPhongMaterial:
    """Tests for the PhongMaterial value object."""

    def test_defaults(self):
        from whitted.materials.phong import PhongMaterial

        mat = PhongMaterial(diffuse_colour=(0.1, 0.2, 0.3), albedo=(1.0, 0.0, 0.0, 0.0))
        assert mat.specular_exponent == 0.0
        assert mat.refractive_index == 1.0

    def test_sequences_normalized_to_float_tuples(self):
        """Lists (e.g. from JSON) become tuples of floats."""
        from whitted.materials.phong import PhongMaterial

        mat = PhongMaterial(diffuse_colour=[1, 0, 0], albedo=[1, 0, 0, 0], specular_exponent=5)
        assert mat.diffuse_colour == (1.0, 0.0, 0.0)
        assert mat.albedo == (1.0, 0.0, 0.0, 0.0)
        assert isinstance(mat.specular_exponent, float)

    def test_materials_are_immutable(self):
        from dataclasses import FrozenInstanceError

        from whitted.materials.phong import IVORY

        with pytest.raises(FrozenInstanceError):
            IVORY.specular_exponent = 1.0

    def test_wrong_albedo_length_raises(self):
        from whitted.materials.phong import PhongMaterial

        with pytest.raises(ValueError, match="Albedo"):
            PhongMaterial(diffuse_colour=(1.0, 1.0, 1.0), albedo=(1.0, 0.0, 0.0))

    def test_negative_specular_exponent_raises(self):
        from whitted.materials.phong import PhongMaterial

        with pytest.raises(ValueError, match="Specular exponent"):
            PhongMaterial(
                diffuse_colour=(1.0, 1.0, 1.0),
                albedo=(1.0, 0.0, 0.0, 0.0),
                specular_exponent=-1.0,
            )

    def test_non_positive_refractive_index_raises(self):
        from whitted.materials.phong import PhongMaterial

        with pytest.raises(ValueError, match="Refractive index"):
            PhongMaterial(
                diffuse_colour=(1.0, 1.0, 1.0),
                albedo=(1.0, 0.0, 0.0, 0.0),
                refractive_index=0.0,
            )

    def test_matte(self):
        """A matte material only has a diffuse term."""
        from whitted.materials.phong import PhongMaterial

        mat = PhongMaterial.matte((0.4, 0.4, 0.3))
        assert mat.diffuse_colour == (0.4, 0.4, 0.3)
        assert mat.albedo == (1.0, 0.0, 0.0, 0.0)
        assert mat.refractive_index == 1.0

    def test_dict_conversion(self):
        from whitted.materials.phong import GLASS, PhongMaterial

        assert PhongMaterial.from_dict(GLASS.to_dict()) == GLASS

    def test_from_dict_missing_colour_raises(self):
        from whitted.materials.phong import PhongMaterial

        with pytest.raises(ValueError, match="diffuse_colour"):
            PhongMaterial.from_dict({"albedo": [1.0, 0.0, 0.0, 0.0]})

    @pytest.mark.parametrize(
        "data",
        [
            {"diffuse_colour": 5},
            {"diffuse_colour": [0.1, "red", 0.3]},
            {"diffuse_colour": [0.1, 0.2, 0.3], "specular_exponent": None},
        ],
    )
    def test_from_dict_non_numeric_raises(self, data):
        from whitted.materials.phong import PhongMaterial

        with pytest.raises(ValueError, match="numbers"):
            PhongMaterial.from_dict(data)

    def test_from_dict_non_mapping_raises(self):
        from whitted.materials.phong import PhongMaterial

        with pytest.raises(ValueError, match="mapping"):
            PhongMaterial.from_dict([0.1, 0.2, 0.3])


class TestPresets:
    """Tests for the named material presets."""

    def test_ivory(self):
        from whitted.materials.phong import IVORY

        assert IVORY.diffuse_colour == (0.4, 0.4, 0.3)
        assert IVORY.albedo == (0.6, 0.3, 0.1, 0.0)
        assert IVORY.specular_exponent == 50.0
        assert IVORY.refractive_index == 1.0

    def test_glass(self):
        from whitted.materials.phong import GLASS

        assert GLASS.diffuse_colour == (0.6, 0.7, 0.8)
        assert GLASS.albedo == (0.0, 0.5, 0.1, 0.8)
        assert GLASS.specular_exponent == 125.0
        assert GLASS.refractive_index == 1.5

    def test_red_rubber(self):
        from whitted.materials.phong import RED_RUBBER

        assert RED_RUBBER.diffuse_colour == (0.3, 0.1, 0.1)
        assert RED_RUBBER.albedo == (0.9, 0.1, 0.0, 0.0)
        assert RED_RUBBER.specular_exponent == 10.0

    def test_mirror(self):
        from whitted.materials.phong import MIRROR

        assert MIRROR.diffuse_colour == (1.0, 1.0, 1.0)
        assert MIRROR.albedo == (0.0, 10.0, 0.8, 0.0)
        assert MIRROR.specular_exponent == 1425.0

    def test_get_preset_is_case_insensitive(self):
        from whitted.materials.phong import RED_RUBBER, get_preset

        assert get_preset("Red_Rubber") is RED_RUBBER

    def test_unknown_preset_raises(self):
        from whitted.materials.phong import get_preset

        with pytest.raises(ValueError, match="Unknown material preset"):
            get_preset("velvet")

    def test_preset_name(self):
        from whitted.materials.phong import MIRROR, PhongMaterial, preset_name

        assert preset_name(MIRROR) == "mirror"
        assert preset_name(PhongMaterial.matte((0.4, 0.4, 0.3))) is None

    def test_default_material_in_kernel(self):
        """The kernel-side default material matches DEFAULT_MATERIAL."""
        from whitted.materials.phong import DEFAULT_MATERIAL, default_material

        diffuse = ti.field(dtype=ti.math.vec3, shape=())
        albedo = ti.field(dtype=ti.math.vec4, shape=())
        refractive_index = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            mat = default_material()
            diffuse[None] = mat.diffuse_colour
            albedo[None] = mat.albedo
            refractive_index[None] = mat.refractive_index

        test_kernel()
        for k in range(3):
            assert abs(diffuse[None][k] - DEFAULT_MATERIAL.diffuse_colour[k]) < 1e-6
        for k in range(4):
            assert abs(albedo[None][k] - DEFAULT_MATERIAL.albedo[k]) < 1e-6
        assert abs(refractive_index[None] - 1.0) < 1e-6
