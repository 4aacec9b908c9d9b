"""Terminal ray tracer built on Taichi.

This package renders a small scene of spheres over a checkerboard with
Whitted-style ray tracing and streams it to a terminal as colored glyphs:
- Analytic ray-sphere and bounded ray-plane intersection
- Direct diffuse/specular lighting with hard shadows
- Recursive mirror reflection and Snell refraction with a bounce limit
- Per-pixel parallel rendering in Taichi kernels
- 256-color terminal output with a fixed-rate animation loop

Subpackages:
    core: Vector utilities, ray type and the shading integrator
    geometry: Sphere and checkerboard intersection
    materials: Material struct and presets
    scene: Scene container, demo scene and animation
    camera: Pinhole camera ray generation
    preview: Palette quantization, terminal output, PNG export, frame loop
"""

__version__ = "0.1.0"
