"""Core rendering module.

Components:
    ray: Ray value type and point/vector aliases
    integrator: Shading (direct light with hard shadows) and render kernels
    renderer: Settings, row-batched rendering and output

One primary ray is cast per pixel. At the nearest hit each point light
is tested with a shadow ray and unoccluded lights add a Lambertian term.
"""

from .ray import (
    Point3,
    Ray,
    Vector3,
    make_ray,
    point3,
    point_at_distance,
    vec3,
)

# integrator and renderer declare Taichi fields and are not imported here.
# Import them from src.shadowray.core.integrator / src.shadowray.core.renderer
# after ti.init().

__all__ = [
    "Ray",
    "Point3",
    "Vector3",
    "point3",
    "vec3",
    "point_at_distance",
    "make_ray",
]
