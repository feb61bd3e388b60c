"""Material models.

Only the Lambertian diffuse tint is supported: there is no specular,
transparency or emission model.
"""

from .lambertian import (
    MAX_LAMBERTIAN_MATERIALS,
    add_lambertian_material,
    clear_lambertian_materials,
    eval_lambertian,
    get_lambertian_color,
    get_lambertian_material_count,
)

__all__ = [
    "MAX_LAMBERTIAN_MATERIALS",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "eval_lambertian",
    "get_lambertian_color",
    "get_lambertian_material_count",
]
