"""Scene container and ray-scene intersection.

A ``Scene`` owns every piece of geometry the tracer sees: an ordered list of
spheres, an ordered list of point lights, a material table, and the implicit
bounded checkerboard plane. All of it lives in Taichi fields owned by the
scene instance, so kernels receive the scene explicitly instead of reading
module globals, and two scenes can coexist (handy in tests).

Python-side bookkeeping (``materials``, ``spheres``, ``lights``) mirrors the
fields and backs scene serialization.

Intersection scans the plane first and then the spheres in insertion order.
A later candidate replaces the current best only if it is strictly closer, so
ties go to whichever primitive was scanned first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.ascii_raytracer.materials.presets import IVORY
    >>> from src.ascii_raytracer.scene.scene import Scene
    >>> scene = Scene()
    >>> ivory = scene.add_material(IVORY)
    >>> scene.add_sphere((-3.0, 0.0, -16.0), 2.0, ivory)
    0
    >>> scene.add_light((-20.0, 20.0, 20.0))
    0
    >>> scene.query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)).hit
    False
"""

from dataclasses import asdict, dataclass, field
from typing import Any

import taichi as ti
import taichi.math as tm

from src.ascii_raytracer.core.ray import normalize
from src.ascii_raytracer.geometry.checkerboard import (
    Checkerboard,
    checker_color,
    hit_checkerboard,
)
from src.ascii_raytracer.geometry.sphere import Sphere, ray_sphere_distance
from src.ascii_raytracer.materials.material import Material, MaterialParams, make_plane_material

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4

# Capacity of the per-scene storage
MAX_SPHERES = 64
MAX_LIGHTS = 16
MAX_MATERIALS = 64

# Initial "nearest distance" before any primitive is tested
NEAREST_SENTINEL = 1e10

# Hits at or beyond this distance count as background
HIT_DISTANCE_LIMIT = 1000.0


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: 1 if any primitive was hit, 0 otherwise.
        t: Distance along the ray to the nearest hit. Only valid if hit == 1.
        point: The nearest hit point. Only valid if hit == 1.
        normal: Outward unit normal at the hit point. Only valid if hit == 1.
        material: Material of the hit surface. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material: Material


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=Material(
            refractive_index=1.0,
            albedo=vec4(0.0, 0.0, 0.0, 0.0),
            diffuse_color=vec3(0.0, 0.0, 0.0),
            specular_exponent=0.0,
        ),
    )


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage fields.
        center: The current center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class RayQueryResult:
    """Python-side copy of a SceneHitRecord (see Scene.query)."""

    hit: bool
    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    diffuse_color: tuple[float, float, float]


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations (MaterialParams.to_dict).
        spheres: List of sphere configurations (center, radius, material_id).
        lights: List of light positions.
        checkerboard: Checkerboard parameters, or None if the plane is off.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[list[float]] = field(default_factory=list)
    checkerboard: dict[str, Any] | None = None


def _as_vec3_tuple(value, what: str) -> tuple[float, float, float]:
    values = tuple(float(v) for v in value)
    if len(values) != 3:
        raise ValueError(f"{what} must have 3 components, got {len(values)}")
    return values  # type: ignore[return-value]


@ti.data_oriented
class Scene:
    """Spheres, point lights, materials and the checkerboard plane.

    The scene is the explicit context handed to the renderer. Sphere centers
    may be moved between frames (``set_sphere_center``); everything else is
    fixed once added.

    Attributes:
        materials: Registered materials, indexed by material ID.
        spheres: SphereInfo for every sphere, in scan order.
        lights: Positions of the point lights.
        checkerboard: Current plane parameters, or None if disabled.
    """

    def __init__(self, checkerboard: Checkerboard | None = None) -> None:
        """Create an empty scene.

        Args:
            checkerboard: Parameters of the ground plane. None (the default)
                leaves the plane out of the scene.
        """
        self.materials: list[MaterialParams] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[tuple[float, float, float]] = []
        self.checkerboard: Checkerboard | None = None

        # Sphere storage: Structure of Arrays layout
        self.sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
        self.sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
        self.sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
        self.num_spheres = ti.field(dtype=ti.i32, shape=())

        self.light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
        self.num_lights = ti.field(dtype=ti.i32, shape=())

        self.material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.material_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
        self.material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
        self.material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
        self.num_materials = ti.field(dtype=ti.i32, shape=())

        # Checkerboard plane parameters
        self._plane_enabled = ti.field(dtype=ti.i32, shape=())
        self._plane_height = ti.field(dtype=ti.f32, shape=())
        self._plane_half_width = ti.field(dtype=ti.f32, shape=())
        self._plane_z_near = ti.field(dtype=ti.f32, shape=())
        self._plane_z_far = ti.field(dtype=ti.f32, shape=())
        self._plane_odd_color = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._plane_even_color = ti.Vector.field(3, dtype=ti.f32, shape=())

        # Result slots for the Python-side query helpers
        self._query_hit = ti.field(dtype=ti.i32, shape=())
        self._query_t = ti.field(dtype=ti.f32, shape=())
        self._query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._query_color = ti.Vector.field(3, dtype=ti.f32, shape=())

        self.set_checkerboard(checkerboard)

    # =========================================================================
    # Scene Construction
    # =========================================================================

    def clear(self) -> None:
        """Remove all spheres, lights and materials and disable the plane."""
        self.num_spheres[None] = 0
        self.num_lights[None] = 0
        self.num_materials[None] = 0
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()
        self.set_checkerboard(None)

    def set_checkerboard(self, checkerboard: Checkerboard | None) -> None:
        """Enable the plane with the given parameters, or disable it with None.

        Raises:
            ValueError: If the tile region is empty.
        """
        if checkerboard is None:
            self.checkerboard = None
            self._plane_enabled[None] = 0
            return

        if not checkerboard.half_width > 0.0:
            raise ValueError(f"Checkerboard half_width must be positive, got {checkerboard.half_width}")
        if not checkerboard.z_far < checkerboard.z_near:
            raise ValueError(
                f"Checkerboard z_far ({checkerboard.z_far}) must be below z_near ({checkerboard.z_near})"
            )

        self.checkerboard = checkerboard
        self._plane_enabled[None] = 1
        self._plane_height[None] = checkerboard.height
        self._plane_half_width[None] = checkerboard.half_width
        self._plane_z_near[None] = checkerboard.z_near
        self._plane_z_far[None] = checkerboard.z_far
        self._plane_odd_color[None] = list(checkerboard.odd_color)
        self._plane_even_color[None] = list(checkerboard.even_color)

    def add_material(self, params: MaterialParams) -> int:
        """Register a material.

        Args:
            params: The material description.

        Returns:
            The material ID.

        Raises:
            ValueError: If the parameters are invalid.
            RuntimeError: If the maximum number of materials is exceeded.
        """
        params.validate()

        idx = self.num_materials[None]
        if idx >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        self.material_refractive_indices[idx] = params.refractive_index
        self.material_albedos[idx] = list(params.albedo)
        self.material_diffuse_colors[idx] = list(params.diffuse_color)
        self.material_specular_exponents[idx] = params.specular_exponent
        self.num_materials[None] = idx + 1
        self.materials.append(params)
        return idx

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere.
            radius: The radius of the sphere (must be positive).
            material_id: ID returned by add_material.

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or the material ID is unknown.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        center = _as_vec3_tuple(center, "Sphere center")
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        if not 0 <= material_id < len(self.materials):
            raise ValueError(f"Invalid material ID: {material_id}")

        idx = self.num_spheres[None]
        if idx >= MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        self.sphere_centers[idx] = list(center)
        self.sphere_radii[idx] = radius
        self.sphere_material_ids[idx] = material_id
        self.num_spheres[None] = idx + 1
        self.spheres.append(
            SphereInfo(sphere_index=idx, center=center, radius=float(radius), material_id=material_id)
        )
        return idx

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        params: MaterialParams,
    ) -> int:
        """Register a material and add a sphere using it in one call.

        Returns:
            The index of the added sphere.
        """
        material_id = self.add_material(params)
        return self.add_sphere(center, radius, material_id)

    def add_light(self, position: tuple[float, float, float]) -> int:
        """Add a unit-intensity point light.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        position = _as_vec3_tuple(position, "Light position")
        idx = self.num_lights[None]
        if idx >= MAX_LIGHTS:
            raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

        self.light_positions[idx] = list(position)
        self.num_lights[None] = idx + 1
        self.lights.append(position)
        return idx

    def set_sphere_center(self, index: int, center: tuple[float, float, float]) -> None:
        """Move a sphere. Must not be called while a render kernel runs.

        Raises:
            IndexError: If there is no sphere with that index.
        """
        if not 0 <= index < len(self.spheres):
            raise IndexError(f"Sphere index {index} out of range (0..{len(self.spheres) - 1})")
        center = _as_vec3_tuple(center, "Sphere center")
        self.sphere_centers[index] = list(center)
        self.spheres[index].center = center

    def get_sphere_center(self, index: int) -> tuple[float, float, float]:
        """Get the current center of a sphere.

        Raises:
            IndexError: If there is no sphere with that index.
        """
        if not 0 <= index < len(self.spheres):
            raise IndexError(f"Sphere index {index} out of range (0..{len(self.spheres) - 1})")
        return self.spheres[index].center

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return int(self.num_spheres[None])

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return int(self.num_lights[None])

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return int(self.num_materials[None])

    # =========================================================================
    # Intersection (Taichi scope)
    # =========================================================================

    @ti.func
    def get_material(self, material_id: ti.i32) -> Material:
        """Assemble the Material struct for a material ID."""
        return Material(
            refractive_index=self.material_refractive_indices[material_id],
            albedo=self.material_albedos[material_id],
            diffuse_color=self.material_diffuse_colors[material_id],
            specular_exponent=self.material_specular_exponents[material_id],
        )

    @ti.func
    def intersect(self, ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
        """Find the nearest surface hit along a ray.

        Args:
            ray_origin: The starting point of the ray.
            ray_direction: The normalized ray direction.

        Returns:
            A SceneHitRecord for the nearest hit, or a miss record if nothing
            is hit closer than HIT_DISTANCE_LIMIT.
        """
        nearest = NEAREST_SENTINEL
        result = _make_miss_record()

        if self._plane_enabled[None] == 1:
            rec = hit_checkerboard(
                ray_origin,
                ray_direction,
                self._plane_height[None],
                self._plane_half_width[None],
                self._plane_z_near[None],
                self._plane_z_far[None],
            )
            if rec.hit == 1 and rec.t < nearest:
                nearest = rec.t
                color = checker_color(
                    rec.point, self._plane_odd_color[None], self._plane_even_color[None]
                )
                result = SceneHitRecord(
                    hit=1,
                    t=rec.t,
                    point=rec.point,
                    normal=rec.normal,
                    material=make_plane_material(color),
                )

        for i in range(self.num_spheres[None]):
            sphere = Sphere(center=self.sphere_centers[i], radius=self.sphere_radii[i])
            did_hit, t = ray_sphere_distance(ray_origin, ray_direction, sphere)
            if did_hit == 1 and t < nearest:
                nearest = t
                point = ray_origin + t * ray_direction
                result = SceneHitRecord(
                    hit=1,
                    t=t,
                    point=point,
                    normal=normalize(point - sphere.center),
                    material=self.get_material(self.sphere_material_ids[i]),
                )

        if nearest >= HIT_DISTANCE_LIMIT:
            result = _make_miss_record()
        return result

    @ti.func
    def is_occluded(self, point: vec3, light_position: vec3) -> ti.i32:
        """Shadow query: is anything between point and the light?

        Uses the same intersection routine as primary visibility. A hit counts
        only if it is strictly closer than the light, so a light sitting on
        the point itself is never blocked.

        Returns:
            1 if the light is blocked, 0 otherwise.
        """
        to_light = light_position - point
        light_distance = tm.length(to_light)
        shadow = self.intersect(point, normalize(to_light))
        occluded = 0
        if shadow.hit == 1 and tm.length(shadow.point - point) < light_distance:
            occluded = 1
        return occluded

    # =========================================================================
    # Python-side Queries
    # =========================================================================

    @ti.kernel
    def _query_kernel(self, origin: vec3, direction: vec3):
        rec = self.intersect(origin, normalize(direction))
        self._query_hit[None] = rec.hit
        self._query_t[None] = rec.t
        self._query_point[None] = rec.point
        self._query_normal[None] = rec.normal
        self._query_color[None] = rec.material.diffuse_color

    @ti.kernel
    def _occlusion_kernel(self, point: vec3, light_position: vec3):
        self._query_hit[None] = self.is_occluded(point, light_position)

    def query(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
    ) -> RayQueryResult:
        """Intersect a single ray with the scene from Python.

        The direction is normalized before tracing.
        """
        self._query_kernel(vec3(*origin), vec3(*direction))
        point = self._query_point[None]
        normal = self._query_normal[None]
        color = self._query_color[None]
        return RayQueryResult(
            hit=bool(self._query_hit[None]),
            t=float(self._query_t[None]),
            point=(float(point[0]), float(point[1]), float(point[2])),
            normal=(float(normal[0]), float(normal[1]), float(normal[2])),
            diffuse_color=(float(color[0]), float(color[1]), float(color[2])),
        )

    def query_occlusion(
        self,
        point: tuple[float, float, float],
        light_position: tuple[float, float, float],
    ) -> bool:
        """Run the shadow query for a single point/light pair from Python."""
        self._occlusion_kernel(vec3(*point), vec3(*light_position))
        return bool(self._query_hit[None])

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()
        config.materials = [params.to_dict() for params in self.materials]
        config.spheres = [
            {
                "center": list(sphere.center),
                "radius": sphere.radius,
                "material_id": sphere.material_id,
            }
            for sphere in self.spheres
        ]
        config.lights = [list(position) for position in self.lights]
        if self.checkerboard is not None:
            config.checkerboard = asdict(self.checkerboard)
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first. Materials are loaded before spheres
        so sphere material IDs refer to the configured material list.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for mat_config in config.materials:
            self.add_material(MaterialParams.from_dict(mat_config))

        for sphere_config in config.spheres:
            try:
                center = sphere_config["center"]
                radius = float(sphere_config["radius"])
                material_id = int(sphere_config["material_id"])
            except KeyError as e:
                raise ValueError(f"Sphere config is missing key {e}") from None
            self.add_sphere(center, radius, material_id)

        for position in config.lights:
            self.add_light(position)

        if config.checkerboard is not None:
            try:
                checkerboard = Checkerboard(**config.checkerboard)
            except TypeError as e:
                raise ValueError(f"Invalid checkerboard config: {e}") from None
            self.set_checkerboard(checkerboard)

    def __repr__(self) -> str:
        """Return a string representation of the scene contents."""
        return (
            f"Scene(spheres={self.get_sphere_count()}, lights={self.get_light_count()}, "
            f"materials={self.get_material_count()}, checkerboard={self.checkerboard is not None})"
        )
