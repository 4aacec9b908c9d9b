"""Materials module.

Components:
    material: Material struct (refractive index, 4-way albedo, diffuse color,
        specular exponent) and its validated Python-side parameters
    presets: Ivory, glass, red rubber and mirror
"""

from .material import Material, MaterialParams, make_plane_material
from .presets import GLASS, IVORY, MIRROR, PRESETS, RED_RUBBER, get_preset

__all__ = [
    "Material",
    "MaterialParams",
    "make_plane_material",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "PRESETS",
    "get_preset",
]
