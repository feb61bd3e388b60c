"""Lambertian diffuse material.

A material is a single reflectance tint in [0, 1]^3. A point light seen
from a surface contributes

    max(0, normal . light_dir) * color * intensity

with no 1/pi normalization, no distance falloff and no ambient term.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.materials.lambertian import add_lambertian_material
    >>> red = add_lambertian_material((1.0, 0.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

from src.shadowray.core.ray import vec3


@ti.func
def eval_lambertian(color: vec3, normal: vec3, light_dir: vec3, intensity: ti.f32) -> vec3:
    """Diffuse contribution of one unoccluded light.

    Args:
        color: Material tint (RGB).
        normal: Unit surface normal.
        light_dir: Unit direction from the surface toward the light.
        intensity: Light intensity, applied as a plain multiplier.

    Returns:
        The RGB contribution, zero for lights behind the surface.
    """
    shade = tm.max(0.0, tm.dot(normal, light_dir))
    return shade * color * intensity


# =============================================================================
# Material Field Storage
# =============================================================================

MAX_LAMBERTIAN_MATERIALS = 256

lambertian_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Reset the material count; stale entries are overwritten on reuse."""
    num_lambertian_materials[None] = 0


def add_lambertian_material(color: tuple[float, float, float]) -> int:
    """Register a Lambertian material.

    Args:
        color: Reflectance tint as (R, G, B), each component in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any color component is outside [0, 1].
    """
    for i, component in enumerate(color):
        if not 0.0 <= component <= 1.0:
            raise ValueError(f"Color component {i} = {component} is outside [0, 1]")

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_colors[idx] = vec3(color[0], color[1], color[2])
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of registered Lambertian materials."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_color(material_idx: ti.i32) -> vec3:
    return lambertian_colors[material_idx]
