"""Unit tests for the bounded checkerboard plane.

Tests cover:
- Cell parity and colors
- Hits inside the tile region
- Misses outside the tile region, behind the origin and at grazing angles
"""

import pytest
import taichi as ti


def _parity(x, z):
    from src.ascii_raytracer.geometry.checkerboard import checker_parity, vec3

    @ti.kernel
    def test_kernel(p: vec3) -> ti.i32:
        return checker_parity(p)

    return test_kernel(vec3(x, -4.0, z))


def _hit(origin, direction):
    """Intersect the default board and return (hit, t, point, normal)."""
    from src.ascii_raytracer.geometry.checkerboard import Checkerboard, hit_checkerboard, vec3

    board = Checkerboard()
    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        record = hit_checkerboard(
            o,
            ti.math.normalize(d),
            board.height,
            board.half_width,
            board.z_near,
            board.z_far,
        )
        hit[None] = record.hit
        t_val[None] = record.t
        point[None] = record.point
        normal[None] = record.normal

    test_kernel(vec3(*origin), vec3(*direction))
    return hit[None], t_val[None], point[None], normal[None]


class TestCheckerParity:
    """Tests for the 2x2 cell pattern."""

    def test_adjacent_cells_along_x_differ(self):
        assert _parity(1.0, -15.0) != _parity(2.5, -15.0)

    def test_adjacent_cells_along_z_differ(self):
        assert _parity(1.0, -15.0) != _parity(1.0, -17.0)

    def test_diagonal_cells_match(self):
        assert _parity(1.0, -15.0) == _parity(2.5, -17.0)

    def test_points_in_same_cell_match(self):
        assert _parity(0.0, -15.0) == _parity(0.6, -15.0)
        assert _parity(0.1, -14.1) == _parity(1.9, -15.9)

    def test_negative_coordinates_alternate(self):
        """Parity keeps alternating on the negative side of x."""
        assert _parity(-1.0, -15.0) != _parity(1.0, -15.0)
        assert _parity(-3.0, -15.0) != _parity(-1.0, -15.0)

    def test_colors(self):
        from src.ascii_raytracer.geometry.checkerboard import Checkerboard, checker_color, vec3

        board = Checkerboard()

        @ti.kernel
        def test_kernel(p: vec3, odd: vec3, even: vec3) -> vec3:
            return checker_color(p, odd, even)

        odd, even = vec3(*board.odd_color), vec3(*board.even_color)
        a = test_kernel(vec3(1.0, -4.0, -15.0), odd, even)
        b = test_kernel(vec3(2.5, -4.0, -15.0), odd, even)
        # Cell (1, -15) has even parity, its neighbour along x odd parity
        assert (a[0], a[1], a[2]) == pytest.approx((0.3, 0.2, 0.1), abs=1e-6)
        assert (b[0], b[1], b[2]) == pytest.approx((0.3, 0.3, 0.3), abs=1e-6)


class TestCheckerboardIntersection:
    """Tests for ray-plane intersection within the tile bounds."""

    def test_hit_inside_region(self):
        hit, t, p, n = _hit((0.0, 0.0, 0.0), (0.0, -1.0, -4.0))
        assert hit == 1
        assert t == pytest.approx(17.0**0.5 * 4.0, abs=1e-4)
        assert p[1] == pytest.approx(-4.0, abs=1e-5)
        assert p[2] == pytest.approx(-16.0, abs=1e-4)
        assert (n[0], n[1], n[2]) == (0.0, 1.0, 0.0)

    def test_miss_in_front_of_region(self):
        """Crossing at z = -4 lies closer than z_near."""
        hit, _, _, _ = _hit((0.0, 0.0, 0.0), (0.0, -1.0, -1.0))
        assert hit == 0

    def test_miss_beyond_region(self):
        """Crossing at z = -40 lies beyond z_far."""
        hit, _, _, _ = _hit((0.0, 0.0, 0.0), (0.0, -1.0, -10.0))
        assert hit == 0

    def test_miss_outside_half_width(self):
        """Crossing at x = 12 lies outside |x| < 10."""
        hit, _, _, _ = _hit((0.0, 0.0, 0.0), (3.0, -1.0, -4.0))
        assert hit == 0

    def test_parallel_ray_misses(self):
        hit, _, _, _ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_nearly_parallel_ray_misses(self):
        hit, _, _, _ = _hit((0.0, -3.99, -15.0), (0.0, -0.0005, -1.0))
        assert hit == 0

    def test_plane_behind_origin_misses(self):
        hit, _, _, _ = _hit((0.0, -5.0, -15.0), (0.0, -1.0, 0.0))
        assert hit == 0
