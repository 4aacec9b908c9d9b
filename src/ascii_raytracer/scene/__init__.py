"""Scene module.

Components:
    scene: Scene container (spheres, lights, materials, checkerboard) with
        nearest-hit intersection and shadow queries
    demo: The four-sphere demo scene
    animation: Pivot rotation of sphere centers between frames
"""

from .animation import Orbit, animate, rotate_about_pivot, rotation_matrix
from .demo import DEMO_LIGHTS, DEMO_ORBITS, DEMO_SPHERES, create_demo_scene
from .scene import (
    HIT_DISTANCE_LIMIT,
    MAX_LIGHTS,
    MAX_MATERIALS,
    MAX_SPHERES,
    RayQueryResult,
    Scene,
    SceneConfig,
    SceneHitRecord,
    SphereInfo,
)

__all__ = [
    # Scene container
    "Scene",
    "SceneConfig",
    "SceneHitRecord",
    "SphereInfo",
    "RayQueryResult",
    "MAX_SPHERES",
    "MAX_LIGHTS",
    "MAX_MATERIALS",
    "HIT_DISTANCE_LIMIT",
    # Demo scene
    "create_demo_scene",
    "DEMO_SPHERES",
    "DEMO_LIGHTS",
    "DEMO_ORBITS",
    # Animation
    "Orbit",
    "animate",
    "rotate_about_pivot",
    "rotation_matrix",
]
