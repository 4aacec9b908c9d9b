"""Demo scene: four spheres over a checkerboard, lit by three point lights.

The scene consists of:
- An ivory sphere on the left
- A glass sphere in front
- A large red rubber sphere in the middle
- A mirror sphere up and to the right
- A checkerboard floor at y = -4 spanning |x| < 10, -30 < z < -10
- Three white point lights above and around the camera

The camera sits at the origin looking down -Z. Two spheres (the red rubber and
the mirror) slowly orbit around pivots below the scene when animated.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.ascii_raytracer.scene.demo import create_demo_scene
    >>> from src.ascii_raytracer.scene.animation import animate
    >>>
    >>> scene, orbits = create_demo_scene()
    >>> animate(scene, orbits)  # advance one frame
"""

from src.ascii_raytracer.geometry.checkerboard import Checkerboard
from src.ascii_raytracer.materials.material import MaterialParams
from src.ascii_raytracer.materials.presets import GLASS, IVORY, MIRROR, RED_RUBBER
from src.ascii_raytracer.scene.animation import Orbit
from src.ascii_raytracer.scene.scene import Scene

# (center, radius, material) in scan order
DEMO_SPHERES: list[tuple[tuple[float, float, float], float, MaterialParams]] = [
    ((-3.0, 0.0, -16.0), 2.0, IVORY),
    ((-1.0, -1.5, -12.0), 2.0, GLASS),
    ((1.5, -0.5, -18.0), 3.0, RED_RUBBER),
    ((7.0, 5.0, -18.0), 4.0, MIRROR),
]

DEMO_LIGHTS: list[tuple[float, float, float]] = [
    (-20.0, 20.0, 20.0),
    (30.0, 50.0, -25.0),
    (30.0, 20.0, 30.0),
]

RED_RUBBER_SPHERE = 2
MIRROR_SPHERE = 3

DEMO_ORBITS: list[Orbit] = [
    Orbit(sphere_index=MIRROR_SPHERE, pivot=(1.5, -2.5, -20.0), angles=(0.0, -0.8, 0.0)),
    Orbit(sphere_index=RED_RUBBER_SPHERE, pivot=(1.5, -2.5, -15.0), angles=(0.0, 1.6, 0.0)),
]


def create_demo_scene(
    checkerboard: Checkerboard | None = None,
) -> tuple[Scene, list[Orbit]]:
    """Create the demo scene.

    Args:
        checkerboard: Optional plane parameters. Defaults to Checkerboard().

    Returns:
        A tuple of (scene, orbits) where orbits are the default per-frame
        sphere rotations for animate().
    """
    scene = Scene(checkerboard if checkerboard is not None else Checkerboard())

    for center, radius, material in DEMO_SPHERES:
        scene.add_sphere_with_material(center, radius, material)

    for position in DEMO_LIGHTS:
        scene.add_light(position)

    return scene, list(DEMO_ORBITS)
