"""Geometry module for the scene primitives.

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection
    checkerboard: Bounded horizontal plane with a checker pattern

All intersection routines are Taichi functions returning a HitRecord.
"""

from .checkerboard import Checkerboard, checker_color, checker_parity, hit_checkerboard
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record, make_sphere, ray_sphere_distance

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss_record",
    "ray_sphere_distance",
    "Checkerboard",
    "checker_color",
    "checker_parity",
    "hit_checkerboard",
]
