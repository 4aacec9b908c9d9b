"""Sphere primitive with analytic ray-sphere intersection.

The intersection uses the geometric (projection and discriminant) method:
project the center onto the ray, measure the squared distance from the center
to that closest-approach point, and compare it with the squared radius.

Let L = center - origin, tca = L . dir and d2 = L . L - tca^2. The ray misses
when d2 > r^2. Otherwise thc = sqrt(r^2 - d2) and the two crossings are at
tca - thc (near) and tca + thc (far). The near crossing wins if it lies beyond
the self-intersection epsilon, else the far one does (ray starting inside the
sphere), else there is no hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.ascii_raytracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=2.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.ascii_raytracer.core.ray import SELF_INTERSECTION_EPSILON, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 on a miss.
        t: Distance along the (unit) ray direction to the hit.
        point: The 3D intersection point.
        normal: Unit surface normal at the point, always oriented outward
            from the surface (for spheres: away from the center, even when
            the ray started inside).
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def ray_sphere_distance(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Find the distance to the first valid ray-sphere crossing.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        sphere: The sphere to test.

    Returns:
        A tuple (hit, t) where hit is 1 when a crossing beyond
        SELF_INTERSECTION_EPSILON exists and t is its distance.
    """
    to_center = sphere.center - ray_origin
    tca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    r2 = sphere.radius * sphere.radius

    did_hit = 0
    t = 0.0
    if d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t0 > SELF_INTERSECTION_EPSILON:
            did_hit = 1
            t = t0
        elif t1 > SELF_INTERSECTION_EPSILON:
            did_hit = 1
            t = t1
    return did_hit, t


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord with the hit point and outward unit normal. Check the
        hit field to determine if intersection occurred.
    """
    result = make_miss_record()
    did_hit, t = ray_sphere_distance(ray_origin, ray_direction, sphere)
    if did_hit == 1:
        point = ray_origin + t * ray_direction
        result = HitRecord(
            hit=1,
            t=t,
            point=point,
            normal=normalize(point - sphere.center),
        )
    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)
