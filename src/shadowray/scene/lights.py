"""Point light storage.

A point light is a position and a dimensionless intensity. Intensity is
used directly as a multiplier on the diffuse term; there is no distance
falloff.
"""

import taichi as ti

from src.shadowray.core.ray import vec3

MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_point_light(position: vec3, intensity: float) -> int:
    """Append a point light.

    Args:
        position: World-space position of the light.
        intensity: Non-negative multiplier for the light's contribution.

    Returns:
        The index of the added light.

    Raises:
        ValueError: If intensity is negative or NaN.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    if not intensity >= 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])
