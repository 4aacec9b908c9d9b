"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the Ray dataclass and the small amount of vector algebra
the tracer needs: dot/cross products, lengths, a NaN-safe normalize, and the
mirror-reflection and Snell refraction directions. All operations are Taichi
functions so they can run inside the per-pixel render kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum distance along a ray for a hit to count. Applied to primary rays,
# shadow rays and bounce origins alike.
SELF_INTERSECTION_EPSILON = 1e-3

# Vectors shorter than this normalize to CANONICAL_UNIT_VECTOR
NORMALIZE_EPSILON = 1e-12

CANONICAL_UNIT_VECTOR = (0.0, 0.0, 1.0)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            normalized before it is traced.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector (no square root)."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike ``tm.normalize`` this never divides by zero: a vector shorter than
    NORMALIZE_EPSILON yields CANONICAL_UNIT_VECTOR, so a degenerate direction
    cannot push NaN through the bounce recursion.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or (0, 0, 1) when v is
        (numerically) zero.
    """
    n = tm.length(v)
    result = vec3(CANONICAL_UNIT_VECTOR[0], CANONICAL_UNIT_VECTOR[1], CANONICAL_UNIT_VECTOR[2])
    if n > NORMALIZE_EPSILON:
        result = v / n
    return result


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes I - 2 (I . N) N. The normal should be unit length; the result
    then has the same length as the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is the outward surface normal. When the ray travels from the
    inside of the object (I . N > 0) the normal is flipped and the two
    refractive indices are swapped, so the same call handles entering and
    leaving the medium. The outside medium has index 1.

    Total internal reflection has no refracted ray. In that case the incident
    direction is returned unchanged, which keeps the refraction branch alive
    without any physical meaning.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        eta_t: Refractive index of the object's material.

    Returns:
        The refracted direction (not normalized), or the incident direction
        on total internal reflection.
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    n = normal
    eta_i = 1.0
    eta_o = eta_t
    if cos_i < 0.0:
        # Leaving the object: swap the media
        cos_i = -cos_i
        n = -normal
        eta_i = eta_t
        eta_o = 1.0

    eta = eta_i / eta_o
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = incident
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result
