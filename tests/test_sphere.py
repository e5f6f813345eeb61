"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Sphere behind the ray origin (negative t)
- Ray starting inside sphere
- Surface normals
"""

import pytest
import taichi as ti


def _run_hit(origin, direction, center, radius):
    """Run hit_sphere in a kernel and return (hit, t)."""
    from spheretrace.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        cx: ti.f32, cy: ti.f32, cz: ti.f32, r: ti.f32,
    ):
        sphere = Sphere(center=vec3(cx, cy, cz), radius=r)
        record = hit_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), sphere)
        hit[None] = record.hit
        t_val[None] = record.t

    test_kernel(*origin, *direction, *center, radius)
    return hit[None], t_val[None]


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from spheretrace.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        hit, t = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        # Front of the sphere is at z = -4
        assert t == pytest.approx(4.0, abs=1e-5)

    def test_miss(self):
        """Test ray missing a sphere off to the side."""
        hit, _ = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (10.0, 10.0, 10.0), 1.0)
        assert hit == 0

    def test_sphere_behind_origin_reports_negative_t(self):
        """Test a sphere behind the origin is reported with negative t."""
        hit, t = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(-6.0, abs=1e-5)

    def test_origin_inside_sphere(self):
        """Test a ray starting at the center reports the far-side root negated."""
        hit, t = _run_hit((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0)
        assert hit == 1
        # t = v - sqrt(disc) = 0 - 2
        assert t == pytest.approx(-2.0, abs=1e-5)

    def test_tangent_ray_hits(self):
        """Test a ray grazing the sphere (zero discriminant) counts as a hit."""
        hit, t = _run_hit((1.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(5.0, abs=1e-3)

    def test_off_center_hit(self):
        """Test an off-center hit against the geometric formula."""
        hit, t = _run_hit((0.5, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        expected = 5.0 - (1.0 - 0.25) ** 0.5
        assert t == pytest.approx(expected, abs=1e-5)


class TestSphereNormal:
    """Tests for the surface normal."""

    def test_normal_points_outward(self):
        """Test the normal at a surface point points away from the center."""
        from spheretrace.geometry.sphere import Sphere, sphere_normal, vec3

        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(1.0, 1.0, 1.0), radius=2.0)
            normal[None] = sphere_normal(sphere, vec3(1.0, 3.0, 1.0))

        test_kernel()
        assert tuple(normal[None].to_numpy()) == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)

    def test_normal_is_unit_length(self):
        """Test the normal is normalized for any off-center point."""
        from spheretrace.core.ray import length
        from spheretrace.geometry.sphere import Sphere, sphere_normal, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=3.0)
            result[None] = length(sphere_normal(sphere, vec3(1.0, 2.0, 2.0)))

        test_kernel()
        assert result[None] == pytest.approx(1.0, abs=1e-6)
