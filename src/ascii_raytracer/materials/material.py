"""Whitted-style surface material.

A material combines four contributions at a hit point, each scaled by one
component of its albedo:

    albedo[0]  diffuse (Lambert term times diffuse_color)
    albedo[1]  specular highlight (Phong term, white)
    albedo[2]  mirror reflection
    albedo[3]  refraction through the object

The weights are not normalized and may sum to more than one. Over-bright
results are expected and are clamped only when a frame is displayed.

Two representations exist: ``Material`` is the Taichi struct consumed by
kernels, ``MaterialParams`` is the immutable Python-side description that the
scene validates and registers.
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Material properties used by the shading kernel.

    Attributes:
        refractive_index: Index of refraction (1.0 means no bending).
        albedo: Weights of (diffuse, specular, reflect, refract).
        diffuse_color: Base RGB color, each component in [0, 1].
        specular_exponent: Phong exponent controlling highlight size.
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@ti.func
def make_plane_material(diffuse_color: vec3) -> Material:
    """Material of the checkerboard plane: diffuse only, weighted by 2."""
    return Material(
        refractive_index=1.0,
        albedo=vec4(2.0, 0.0, 0.0, 0.0),
        diffuse_color=diffuse_color,
        specular_exponent=0.0,
    )


@dataclass(frozen=True)
class MaterialParams:
    """Python-side description of a material.

    Attributes:
        refractive_index: Index of refraction, must be >= 1.
        albedo: (diffuse, specular, reflect, refract) weights, each >= 0.
        diffuse_color: RGB color with components in [0, 1].
        specular_exponent: Phong exponent, must be >= 0.
        name: Optional human-readable label.
    """

    refractive_index: float
    albedo: tuple[float, float, float, float]
    diffuse_color: tuple[float, float, float]
    specular_exponent: float
    name: str = ""

    def validate(self) -> None:
        """Check the parameters.

        Raises:
            ValueError: If any parameter is out of range or has the wrong
                number of components.
        """
        if not self.refractive_index >= 1.0:
            raise ValueError(
                f"Refractive index must be >= 1.0 for physically meaningful "
                f"materials, got {self.refractive_index}"
            )
        if len(self.albedo) != 4:
            raise ValueError(f"Albedo must have 4 components, got {len(self.albedo)}")
        if not all(a >= 0.0 for a in self.albedo):
            raise ValueError(f"Albedo weights must be non-negative, got {self.albedo}")
        if len(self.diffuse_color) != 3:
            raise ValueError(
                f"Diffuse color must have 3 components, got {len(self.diffuse_color)}"
            )
        for i, c in enumerate(self.diffuse_color):
            if not 0.0 <= c <= 1.0:
                raise ValueError(f"Diffuse color component {i} = {c} is outside [0, 1] range")
        if not self.specular_exponent >= 0.0:
            raise ValueError(
                f"Specular exponent must be non-negative, got {self.specular_exponent}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict suitable for scene configuration."""
        return {
            "name": self.name,
            "refractive_index": self.refractive_index,
            "albedo": list(self.albedo),
            "diffuse_color": list(self.diffuse_color),
            "specular_exponent": self.specular_exponent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MaterialParams":
        """Build parameters from a scene configuration dict.

        Raises:
            ValueError: If required keys are missing or unknown keys are present.
        """
        required = {"refractive_index", "albedo", "diffuse_color", "specular_exponent"}
        missing = required - data.keys()
        if missing:
            raise ValueError(f"Material config is missing keys: {sorted(missing)}")
        unknown = data.keys() - required - {"name"}
        if unknown:
            raise ValueError(f"Material config has unknown keys: {sorted(unknown)}")
        return cls(
            refractive_index=float(data["refractive_index"]),
            albedo=tuple(float(a) for a in data["albedo"]),  # type: ignore[arg-type]
            diffuse_color=tuple(float(c) for c in data["diffuse_color"]),  # type: ignore[arg-type]
            specular_exponent=float(data["specular_exponent"]),
            name=str(data.get("name", "")),
        )
