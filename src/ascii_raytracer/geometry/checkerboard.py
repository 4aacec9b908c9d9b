"""Bounded checkerboard ground plane.

The ground is the horizontal plane y = height, but it only exists inside a
rectangular tile region (|x| < half_width, z_far < z < z_near). Outside that
region the ray passes through as if there were no plane.

The plane is not stored as a primitive; it is evaluated analytically from a
handful of parameters held by the scene. Its diffuse color alternates between
two shades in 2x2 unit cells according to the parity of
floor(0.5 * x) + floor(0.5 * z). Both terms are shifted by a large positive
offset before flooring so the parity stays well defined on the negative side
of the axes.
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.ascii_raytracer.core.ray import SELF_INTERSECTION_EPSILON
from src.ascii_raytracer.geometry.sphere import HitRecord, make_miss_record

# Type alias for 3D vectors
vec3 = tm.vec3

# Rays flatter than this never hit the plane (avoids division by ~0)
PARALLEL_EPSILON = 1e-3

# Positive shift applied before flooring the cell coordinates
CELL_OFFSET = 1000.0

PLANE_NORMAL = (0.0, 1.0, 0.0)


@dataclass
class Checkerboard:
    """Configuration of the bounded checkerboard plane.

    Attributes:
        height: The y coordinate of the plane.
        half_width: The plane exists for |x| < half_width.
        z_near: Upper (closer to the camera) z bound of the tile region.
        z_far: Lower z bound of the tile region.
        odd_color: Diffuse color of cells with odd parity.
        even_color: Diffuse color of cells with even parity.
    """

    height: float = -4.0
    half_width: float = 10.0
    z_near: float = -10.0
    z_far: float = -30.0
    odd_color: tuple[float, float, float] = (0.3, 0.3, 0.3)
    even_color: tuple[float, float, float] = (0.3, 0.2, 0.1)


@ti.func
def checker_parity(point: vec3) -> ti.i32:
    """Return the cell parity (0 or 1) of a point on the plane."""
    cell_x = ti.cast(ti.floor(0.5 * point.x + CELL_OFFSET), ti.i32)
    cell_z = ti.cast(ti.floor(0.5 * point.z + CELL_OFFSET), ti.i32)
    return (cell_x + cell_z) & 1


@ti.func
def checker_color(point: vec3, odd_color: vec3, even_color: vec3) -> vec3:
    """Pick the diffuse color of the cell containing point."""
    color = even_color
    if checker_parity(point) == 1:
        color = odd_color
    return color


@ti.func
def hit_checkerboard(
    ray_origin: vec3,
    ray_direction: vec3,
    height: ti.f32,
    half_width: ti.f32,
    z_near: ti.f32,
    z_far: ti.f32,
) -> HitRecord:
    """Intersect a ray with the bounded checkerboard plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        height: The y coordinate of the plane.
        half_width: Half extent of the tile region along x.
        z_near: Upper z bound of the tile region.
        z_far: Lower z bound of the tile region.

    Returns:
        A HitRecord with the up-facing normal, or a miss record when the ray
        is (nearly) parallel to the plane, the crossing lies behind the
        self-intersection epsilon, or it falls outside the tile region.
    """
    result = make_miss_record()
    if ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        t = -(ray_origin.y - height) / ray_direction.y
        point = ray_origin + t * ray_direction
        if (
            t > SELF_INTERSECTION_EPSILON
            and ti.abs(point.x) < half_width
            and point.z < z_near
            and point.z > z_far
        ):
            result = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=vec3(PLANE_NORMAL[0], PLANE_NORMAL[1], PLANE_NORMAL[2]),
            )
    return result
