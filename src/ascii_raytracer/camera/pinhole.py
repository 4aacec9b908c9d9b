"""Pinhole camera for primary ray generation.

The camera sits at a fixed origin looking down -Z with +Y up, so no basis
construction is needed. The image plane is placed at the distance where one
pixel spans one unit:

    projection_distance = height / (2 * tan(fov / 2))

and the ray through the center of pixel (x, y), with y counted downward from
the top row, points at

    (x + 0.5 - width / 2,  -(y + 0.5) + height / 2,  -projection_distance)

before normalization. ``fov`` is the vertical field of view in radians.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.ascii_raytracer.camera.pinhole import camera_ray_direction
    >>> @ti.kernel
    ... def center_ray() -> ti.math.vec3:
    ...     return camera_ray_direction(40, 20, 80, 40, 1.05)
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.ascii_raytracer.core.ray import normalize

# Type alias for 3D vectors
vec3 = tm.vec3

# Roughly 60 degrees
DEFAULT_FOV = 1.05


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        origin: Camera position in world space (x, y, z).
        fov: Vertical field of view in radians, in (0, pi).
    """

    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fov: float = DEFAULT_FOV

    def validate(self) -> None:
        """Check the parameters.

        Raises:
            ValueError: If the field of view is outside (0, pi) or the origin
                does not have three components.
        """
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Field of view must be in (0, pi) radians, got {self.fov}")
        if len(self.origin) != 3:
            raise ValueError(f"Camera origin must have 3 components, got {len(self.origin)}")


def projection_distance(height: int, fov: float) -> float:
    """Distance of the image plane for a given image height and field of view."""
    return height / (2.0 * math.tan(fov / 2.0))


@ti.func
def camera_ray_direction(
    pixel_x: ti.i32,
    pixel_y: ti.i32,
    width: ti.i32,
    height: ti.i32,
    fov: ti.f32,
) -> vec3:
    """Compute the normalized direction of the primary ray through a pixel.

    Args:
        pixel_x: Column index (0 = left).
        pixel_y: Row index (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.

    Returns:
        Unit direction from the camera origin through the pixel center.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    dir_x = (ti.cast(pixel_x, ti.f32) + 0.5) - w / 2.0
    dir_y = -(ti.cast(pixel_y, ti.f32) + 0.5) + h / 2.0
    dir_z = -h / (2.0 * ti.tan(fov / 2.0))
    return normalize(vec3(dir_x, dir_y, dir_z))
