"""Unit tests for surface material storage and local shading.

Tests cover:
- Material registration and validation
- Field lookup from kernels
- Local (ambient + Lambertian) color evaluation
"""

import pytest
import taichi as ti


class TestSurfaceMaterialRegistration:
    """Tests for adding surface materials."""

    def test_add_returns_consecutive_indices(self):
        """Test materials get consecutive indices."""
        from spheretrace.materials.surface import add_surface_material, get_surface_material_count

        assert add_surface_material((155, 200, 155), 0.2, 0.7, 0.1) == 0
        assert add_surface_material((255, 255, 255), 0.0, 1.0, 0.0) == 1
        assert get_surface_material_count() == 2

    def test_clear(self):
        """Test clearing resets the material count."""
        from spheretrace.materials.surface import (
            add_surface_material,
            clear_surface_materials,
            get_surface_material_count,
        )

        add_surface_material((10, 20, 30), 0.0, 0.5, 0.5)
        clear_surface_materials()
        assert get_surface_material_count() == 0

    @pytest.mark.parametrize(
        "specular, lambert, ambient",
        [(-0.1, 0.5, 0.5), (0.5, 1.5, 0.0), (0.0, 0.0, 2.0)],
    )
    def test_coefficients_outside_unit_range_rejected(self, specular, lambert, ambient):
        """Test coefficients outside [0, 1] raise ValueError."""
        from spheretrace.materials.surface import add_surface_material

        with pytest.raises(ValueError):
            add_surface_material((100, 100, 100), specular, lambert, ambient)

    def test_negative_color_rejected(self):
        """Test negative color channels raise ValueError."""
        from spheretrace.materials.surface import add_surface_material

        with pytest.raises(ValueError):
            add_surface_material((100, -1, 100), 0.0, 1.0, 0.0)

    def test_color_above_255_allowed(self):
        """Test over-bright colors are accepted (clamped only on write)."""
        from spheretrace.materials.surface import add_surface_material

        assert add_surface_material((300, 255, 0), 0.0, 1.0, 0.0) == 0

    def test_overflow(self):
        """Test adding past capacity raises RuntimeError."""
        from spheretrace.materials.surface import (
            MAX_SURFACE_MATERIALS,
            add_surface_material,
            num_surface_materials,
        )

        num_surface_materials[None] = MAX_SURFACE_MATERIALS
        with pytest.raises(RuntimeError):
            add_surface_material((1, 1, 1), 0.0, 0.0, 0.0)

    def test_lookup_from_kernel(self):
        """Test materials read back correctly inside a kernel."""
        from spheretrace.materials.surface import add_surface_material, get_surface_material

        color = ti.field(dtype=ti.math.vec3, shape=())
        coeffs = ti.field(dtype=ti.math.vec3, shape=())

        add_surface_material((1, 2, 3), 0.0, 0.0, 0.0)
        idx = add_surface_material((155, 200, 155), 0.2, 0.7, 0.1)

        @ti.kernel
        def test_kernel(i: ti.i32):
            m = get_surface_material(i)
            color[None] = m.color
            coeffs[None] = ti.math.vec3(m.specular, m.lambert, m.ambient)

        test_kernel(idx)
        assert tuple(color[None].to_numpy()) == pytest.approx((155.0, 200.0, 155.0))
        assert tuple(coeffs[None].to_numpy()) == pytest.approx((0.2, 0.7, 0.1))


class TestLocalColor:
    """Tests for eval_local_color."""

    def test_ambient_and_lambert_terms(self):
        """Test color * amount * lambert + color * ambient."""
        from spheretrace.materials.surface import SurfaceMaterial, eval_local_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            m = SurfaceMaterial(
                color=vec3(200.0, 100.0, 50.0), specular=0.0, lambert=0.5, ambient=0.1
            )
            result[None] = eval_local_color(m, 0.8)

        test_kernel()
        # 0.8 * 0.5 + 0.1 = 0.5 of the base color
        assert tuple(result[None].to_numpy()) == pytest.approx((100.0, 50.0, 25.0), rel=1e-5)

    def test_zero_amount_leaves_ambient(self):
        """Test an unlit point keeps only the ambient term."""
        from spheretrace.materials.surface import SurfaceMaterial, eval_local_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            m = SurfaceMaterial(
                color=vec3(100.0, 100.0, 100.0), specular=0.3, lambert=1.0, ambient=0.25
            )
            result[None] = eval_local_color(m, 0.0)

        test_kernel()
        assert tuple(result[None].to_numpy()) == pytest.approx((25.0, 25.0, 25.0), rel=1e-5)
