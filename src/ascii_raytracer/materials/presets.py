"""Material presets for the demo scene."""

from src.ascii_raytracer.materials.material import MaterialParams

IVORY = MaterialParams(
    refractive_index=1.0,
    albedo=(0.9, 0.5, 0.1, 0.0),
    diffuse_color=(0.4, 0.4, 0.3),
    specular_exponent=50.0,
    name="ivory",
)

GLASS = MaterialParams(
    refractive_index=1.5,
    albedo=(0.0, 0.9, 0.1, 0.8),
    diffuse_color=(0.6, 0.7, 0.8),
    specular_exponent=125.0,
    name="glass",
)

RED_RUBBER = MaterialParams(
    refractive_index=1.0,
    albedo=(1.4, 0.3, 0.0, 0.0),
    diffuse_color=(0.3, 0.1, 0.1),
    specular_exponent=10.0,
    name="red_rubber",
)

# Huge specular weight and exponent give a small, very bright highlight
MIRROR = MaterialParams(
    refractive_index=1.0,
    albedo=(0.0, 16.0, 0.8, 0.0),
    diffuse_color=(1.0, 1.0, 1.0),
    specular_exponent=1425.0,
    name="mirror",
)

PRESETS: dict[str, MaterialParams] = {
    preset.name: preset for preset in (IVORY, GLASS, RED_RUBBER, MIRROR)
}


def get_preset(name: str) -> MaterialParams:
    """Look up a preset by name.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown material preset '{name}'. Available: {sorted(PRESETS)}"
        ) from None
