"""Rigid rotation of sphere centers between frames.

Each ``Orbit`` moves one sphere around a fixed pivot by a small set of Euler
angles per frame. The rotation is applied about X, then Y, then Z, in the
pivot's frame. The transform runs in Python/NumPy between render kernels,
so a frame always sees every sphere at a single consistent position.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.ascii_raytracer.scene.scene import Scene


@dataclass(frozen=True)
class Orbit:
    """Per-frame rotation of one sphere about a pivot.

    Attributes:
        sphere_index: Index of the sphere to move.
        pivot: Fixed point the sphere center rotates around.
        angles: Rotation per frame about the X, Y and Z axes, in degrees.
    """

    sphere_index: int
    pivot: tuple[float, float, float]
    angles: tuple[float, float, float]


def rotation_matrix(angles: tuple[float, float, float]) -> npt.NDArray[np.float64]:
    """Build the matrix rotating about X, then Y, then Z.

    Args:
        angles: Rotation about the X, Y and Z axes, in degrees.

    Returns:
        A 3x3 rotation matrix R such that R @ v applies the three rotations
        in that order.
    """
    rx, ry, rz = np.radians(angles)
    cx, sx = np.cos(rx), np.sin(rx)
    cy, sy = np.cos(ry), np.sin(ry)
    cz, sz = np.cos(rz), np.sin(rz)

    rot_x = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    rot_y = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rot_z = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return rot_z @ rot_y @ rot_x


def rotate_about_pivot(
    point: tuple[float, float, float],
    pivot: tuple[float, float, float],
    angles: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Rotate a point about a pivot.

    Translates the point into pivot-relative coordinates, rotates it about X,
    Y and Z (in that order) and translates it back.

    Args:
        point: The point to rotate.
        pivot: The center of rotation.
        angles: Rotation about the X, Y and Z axes, in degrees.

    Returns:
        The rotated point.
    """
    p = np.asarray(point, dtype=np.float64)
    c = np.asarray(pivot, dtype=np.float64)
    rotated = rotation_matrix(angles) @ (p - c) + c
    return (float(rotated[0]), float(rotated[1]), float(rotated[2]))


def animate(scene: Scene, orbits: Iterable[Orbit]) -> None:
    """Advance every orbit by one frame, moving its sphere in the scene.

    Must be called between renders, never while a render kernel runs.

    Raises:
        IndexError: If an orbit refers to a sphere that does not exist.
    """
    for orbit in orbits:
        center = scene.get_sphere_center(orbit.sphere_index)
        scene.set_sphere_center(
            orbit.sphere_index, rotate_about_pivot(center, orbit.pivot, orbit.angles)
        )
