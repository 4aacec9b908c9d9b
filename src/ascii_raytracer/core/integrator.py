"""Whitted-style ray tracing integrator.

This module implements the shading kernel and the frame generator. For every
pixel a primary ray is cast from the camera; at each surface hit the color is

    diffuse_color * diffuse_intensity * albedo[0]
    + white * specular_intensity * albedo[1]
    + reflect_color * albedo[2]
    + refract_color * albedo[3]

where the intensities sum over all point lights that are not shadowed, and
reflect_color / refract_color are themselves traced one level deeper. Rays
deeper than ``max_depth`` or rays that miss everything return the background
color. No clamping happens here; the display side takes care of that.

Taichi functions cannot call themselves, so the bounce tree is walked with an
explicit per-pixel work stack. Each entry carries the product of the reflect/
refract weights along its path, which lets the result be accumulated as a
plain weighted sum. Entries with zero weight cannot contribute and are never
pushed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.ascii_raytracer.core.integrator import Renderer, RenderConfig
    >>> from src.ascii_raytracer.scene.demo import create_demo_scene
    >>>
    >>> scene, orbits = create_demo_scene()
    >>> renderer = Renderer(scene, RenderConfig(width=80, height=40))
    >>> framebuffer = renderer.render()  # (40, 80, 3) float32
"""

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.ascii_raytracer.camera.pinhole import PinholeCamera, camera_ray_direction
from src.ascii_raytracer.core.ray import normalize, reflect, refract
from src.ascii_raytracer.materials.material import Material
from src.ascii_raytracer.scene.scene import Scene

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Deepest bounce level that is still shaded (levels 0..MAX_DEPTH)
MAX_DEPTH = 4

# Upper limit accepted for RenderConfig.max_depth
MAX_SUPPORTED_DEPTH = 16

# Color returned for rays that escape or run out of depth
BACKGROUND_COLOR = (0.2, 0.7, 0.8)

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 40

MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024


@dataclass
class RenderConfig:
    """Configuration of the frame generator.

    Attributes:
        width: Image width in pixels (terminal glyphs).
        height: Image height in pixels.
        max_depth: Number of reflection/refraction bounces that are shaded.
        background: Color of rays that miss the scene.
        camera: Camera position and field of view.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    max_depth: int = MAX_DEPTH
    background: tuple[float, float, float] = BACKGROUND_COLOR
    camera: PinholeCamera = field(default_factory=PinholeCamera)

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ValueError: If the image size or depth is out of range.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if not 0 <= self.max_depth <= MAX_SUPPORTED_DEPTH:
            raise ValueError(
                f"max_depth must be in [0, {MAX_SUPPORTED_DEPTH}], got {self.max_depth}"
            )
        if len(self.background) != 3:
            raise ValueError(f"Background must have 3 components, got {len(self.background)}")
        self.camera.validate()


@ti.data_oriented
class Renderer:
    """Renders a Scene into a framebuffer of RGB colors.

    The renderer owns the framebuffer, the per-pixel work stacks and some
    per-pixel statistics. It reads the scene it was created with on every
    render, so moving spheres between renders is picked up automatically.

    Attributes:
        scene: The scene being rendered.
        config: The render configuration.
        framebuffer: Taichi field of shape (height, width) holding the last frame.
    """

    def __init__(self, scene: Scene, config: RenderConfig | None = None) -> None:
        """Create a renderer.

        Args:
            scene: The scene to render.
            config: Render configuration. Defaults to RenderConfig().

        Raises:
            ValueError: If the configuration is invalid.
        """
        if config is None:
            config = RenderConfig()
        config.validate()

        self.scene = scene
        self.config = config
        self.width = config.width
        self.height = config.height
        # A pixel's stack never holds more than one pending sibling per level
        # plus the two children just pushed.
        self.stack_size = config.max_depth + 2

        self.framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=(self.height, self.width))

        # Row `height` of the stack and statistics fields belongs to trace(),
        # so single rays never disturb the statistics of a rendered frame.
        self._trace_row = self.height
        stack_shape = (self.height + 1, self.width, self.stack_size)
        self._stack_origin = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._stack_direction = ti.Vector.field(3, dtype=ti.f32, shape=stack_shape)
        self._stack_depth = ti.field(dtype=ti.i32, shape=stack_shape)
        self._stack_weight = ti.field(dtype=ti.f32, shape=stack_shape)

        self._evaluations = ti.field(dtype=ti.i32, shape=(self.height + 1, self.width))
        self._deepest = ti.field(dtype=ti.i32, shape=(self.height + 1, self.width))

        self._max_depth = ti.field(dtype=ti.i32, shape=())
        self._background = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
        self._fov = ti.field(dtype=ti.f32, shape=())

        self._max_depth[None] = config.max_depth
        self._background[None] = list(config.background)
        self.set_camera(config.camera)

    def set_camera(self, camera: PinholeCamera) -> None:
        """Move the camera or change its field of view.

        Raises:
            ValueError: If the camera parameters are invalid.
        """
        camera.validate()
        self.config.camera = camera
        self._camera_origin[None] = list(camera.origin)
        self._fov[None] = camera.fov

    # =========================================================================
    # Shading (Taichi scope)
    # =========================================================================

    @ti.func
    def direct_lighting(
        self,
        point: vec3,
        normal: vec3,
        direction: vec3,
        material: Material,
    ) -> vec3:
        """Diffuse and specular light arriving directly from the point lights.

        Each light that is not shadowed adds a Lambert term to the diffuse
        intensity and a Phong term to the specular intensity.
        """
        diffuse_intensity = 0.0
        specular_intensity = 0.0
        for i in range(self.scene.num_lights[None]):
            light = self.scene.light_positions[i]
            if self.scene.is_occluded(point, light) == 0:
                light_dir = normalize(light - point)
                diffuse_intensity += ti.max(0.0, tm.dot(light_dir, normal))
                highlight = ti.max(0.0, -tm.dot(reflect(-light_dir, normal), direction))
                specular_intensity += highlight**material.specular_exponent

        return (
            material.diffuse_color * diffuse_intensity * material.albedo[0]
            + vec3(1.0, 1.0, 1.0) * specular_intensity * material.albedo[1]
        )

    @ti.func
    def _push(
        self,
        row: ti.i32,
        col: ti.i32,
        top: ti.i32,
        origin: vec3,
        direction: vec3,
        depth: ti.i32,
        weight: ti.f32,
    ):
        self._stack_origin[row, col, top] = origin
        self._stack_direction[row, col, top] = direction
        self._stack_depth[row, col, top] = depth
        self._stack_weight[row, col, top] = weight

    @ti.func
    def cast_ray(self, origin: vec3, direction: vec3, row: ti.i32, col: ti.i32) -> vec3:
        """Trace a ray and all of its reflected and refracted descendants.

        Args:
            origin: The ray origin.
            direction: The normalized ray direction.
            row: Row of the stack slot to use (the pixel's row).
            col: Column of the stack slot to use (the pixel's column).

        Returns:
            The unclamped RGB color seen along the ray.
        """
        color = vec3(0.0, 0.0, 0.0)
        background = self._background[None]
        max_depth = self._max_depth[None]
        evaluations = 0
        deepest = 0

        self._push(row, col, 0, origin, direction, 0, 1.0)
        top = 1

        while top > 0:
            top -= 1
            ray_origin = self._stack_origin[row, col, top]
            ray_direction = self._stack_direction[row, col, top]
            depth = self._stack_depth[row, col, top]
            weight = self._stack_weight[row, col, top]
            evaluations += 1
            deepest = ti.max(deepest, depth)

            if depth > max_depth:
                color += weight * background
            else:
                rec = self.scene.intersect(ray_origin, ray_direction)
                if rec.hit == 0:
                    color += weight * background
                else:
                    material = rec.material
                    color += weight * self.direct_lighting(
                        rec.point, rec.normal, ray_direction, material
                    )

                    reflect_weight = weight * material.albedo[2]
                    if reflect_weight != 0.0 and top < self.stack_size:
                        reflect_dir = normalize(reflect(ray_direction, rec.normal))
                        self._push(row, col, top, rec.point, reflect_dir, depth + 1, reflect_weight)
                        top += 1

                    refract_weight = weight * material.albedo[3]
                    if refract_weight != 0.0 and top < self.stack_size:
                        refract_dir = normalize(
                            refract(ray_direction, rec.normal, material.refractive_index)
                        )
                        self._push(row, col, top, rec.point, refract_dir, depth + 1, refract_weight)
                        top += 1

        self._evaluations[row, col] = evaluations
        self._deepest[row, col] = deepest
        return color

    # =========================================================================
    # Rendering Kernels
    # =========================================================================

    @ti.kernel
    def _render_kernel(self):
        for row, col in self.framebuffer:
            direction = camera_ray_direction(col, row, self.width, self.height, self._fov[None])
            self.framebuffer[row, col] = self.cast_ray(self._camera_origin[None], direction, row, col)

    @ti.kernel
    def _render_pixel_kernel(self, col: ti.i32, row: ti.i32) -> vec3:
        direction = camera_ray_direction(col, row, self.width, self.height, self._fov[None])
        return self.cast_ray(self._camera_origin[None], direction, row, col)

    @ti.kernel
    def _trace_kernel(self, origin: vec3, direction: vec3) -> vec3:
        return self.cast_ray(origin, normalize(direction), self._trace_row, 0)

    # =========================================================================
    # Public Rendering API
    # =========================================================================

    def render(self) -> npt.NDArray[np.float32]:
        """Render a full frame.

        Every pixel is traced independently in parallel against the current
        state of the scene.

        Returns:
            The framebuffer as a (height, width, 3) float32 array, row 0 at
            the top. Values are unclamped.
        """
        self._render_kernel()
        return self.framebuffer.to_numpy()

    def render_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Render a single pixel (x = column, y = row from the top).

        Raises:
            IndexError: If the pixel lies outside the image.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        color = self._render_pixel_kernel(x, y)
        return (float(color[0]), float(color[1]), float(color[2]))

    def trace(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
    ) -> tuple[float, float, float]:
        """Trace one ray from Python and return its color.

        The direction is normalized first. The ray runs on a stack slot of
        its own, so the statistics of the last render() are left untouched;
        its own statistics are available from last_trace_stats().
        """
        color = self._trace_kernel(vec3(*origin), vec3(*direction))
        return (float(color[0]), float(color[1]), float(color[2]))

    def last_trace_stats(self) -> tuple[int, int]:
        """Statistics of the last trace() call.

        Returns:
            Tuple of (evaluations, deepest_depth).
        """
        row = self._trace_row
        return int(self._evaluations[row, 0]), int(self._deepest[row, 0])

    def get_depth_statistics(self) -> dict[str, int]:
        """Per-frame statistics of the last render().

        Returns:
            Dict with the maximum number of evaluations for any pixel, the
            total number of evaluations and the deepest level reached.
        """
        evaluations = self._evaluations.to_numpy()[: self.height]
        deepest = self._deepest.to_numpy()[: self.height]
        return {
            "max_evaluations": int(evaluations.max()),
            "total_evaluations": int(evaluations.sum()),
            "deepest": int(deepest.max()),
        }

    def __repr__(self) -> str:
        """Return a string representation of the renderer."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self.config.max_depth})"
        )


def render_frame(scene: Scene, config: RenderConfig | None = None) -> npt.NDArray[np.float32]:
    """Render one frame of a scene with a throwaway Renderer.

    Convenient for one-off renders; reuse a Renderer for animation so its
    kernels are compiled only once.
    """
    return Renderer(scene, config).render()
