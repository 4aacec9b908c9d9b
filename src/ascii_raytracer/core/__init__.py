"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities (reflect, refract, normalize)
    integrator: Whitted-style shading and the frame generator

The integrator walks each pixel's reflection/refraction tree with an explicit
work stack, since Taichi functions cannot recurse.
"""

from .ray import (
    CANONICAL_UNIT_VECTOR,
    SELF_INTERSECTION_EPSILON,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    vec3,
)

# Note: integrator is NOT imported here to avoid circular imports
# (it depends on scene, which depends on core.ray).
# Import directly from src.ascii_raytracer.core.integrator.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "SELF_INTERSECTION_EPSILON",
    "CANONICAL_UNIT_VECTOR",
]
