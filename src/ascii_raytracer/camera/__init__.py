"""Camera module.

Components:
    pinhole: Fixed pinhole camera looking down -Z, with vertical field of
        view in radians
"""

from .pinhole import DEFAULT_FOV, PinholeCamera, camera_ray_direction, projection_distance

__all__ = [
    "PinholeCamera",
    "camera_ray_direction",
    "projection_distance",
    "DEFAULT_FOV",
]
