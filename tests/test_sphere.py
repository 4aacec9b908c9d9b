"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far crossing, outward normal)
- Sphere behind the ray origin
- Crossings closer than the self-intersection epsilon
"""

import pytest
import taichi as ti


def _trace(origin, direction, center, radius):
    """Run hit_sphere in a kernel and return (hit, t, point, normal)."""
    from src.ascii_raytracer.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32):
        record = hit_sphere(o, ti.math.normalize(d), Sphere(center=c, radius=r))
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius)
    return hit[None], t_val[None], point[None], normal[None]


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from src.ascii_raytracer.geometry.sphere import make_sphere, vec3

        @ti.kernel
        def test_kernel() -> ti.math.vec4:
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            return ti.math.vec4(sphere.center[0], sphere.center[1], sphere.center[2], sphere.radius)

        result = test_kernel()
        assert (result[0], result[1], result[2], result[3]) == pytest.approx((1.0, 2.0, 3.0, 0.5))


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        hit, t, p, n = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(4.0, abs=1e-5)
        assert p[2] == pytest.approx(-4.0, abs=1e-5)
        # Normal points back toward the camera
        assert (n[0], n[1], n[2]) == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)

    def test_miss(self):
        hit, _, _, _ = _trace((5.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_sphere_behind_origin(self):
        hit, _, _, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    def test_origin_inside_uses_far_crossing(self):
        """From the center, the far crossing is hit and the normal still points outward."""
        hit, t, _, n = _trace((0.0, 0.0, -5.0), (0.0, 0.0, 1.0), (0.0, 0.0, -5.0), 2.0)
        assert hit == 1
        assert t == pytest.approx(2.0, abs=1e-5)
        assert (n[0], n[1], n[2]) == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)

    def test_origin_on_surface_skips_near_crossing(self):
        """A crossing at t = 0 is closer than the epsilon and is ignored."""
        hit, t, _, _ = _trace((0.0, 0.0, -4.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert t == pytest.approx(2.0, abs=1e-5)

    def test_leaving_from_surface_misses(self):
        """A ray leaving the sphere from its surface does not hit it again."""
        hit, _, _, _ = _trace((0.0, 0.0, -4.0), (0.0, 0.0, 1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_oblique_hit_normal_is_unit_and_radial(self):
        hit, _, p, n = _trace((0.0, 0.0, 0.0), (0.3, 0.2, -1.0), (1.0, 1.0, -6.0), 2.0)
        assert hit == 1
        length = (n[0] ** 2 + n[1] ** 2 + n[2] ** 2) ** 0.5
        assert length == pytest.approx(1.0, abs=1e-5)
        radial = (p[0] - 1.0, p[1] - 1.0, p[2] + 6.0)
        for i in range(3):
            assert radial[i] / 2.0 == pytest.approx(n[i], abs=1e-4)
