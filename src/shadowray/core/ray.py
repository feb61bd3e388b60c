"""Ray value type and the point and vector aliases the renderer uses.

Positions and directions share Taichi's ``vec3`` storage. The ``point3``
alias marks affine positions in signatures so that the arithmetic
closures read correctly: point - point gives a direction, point +
direction gives a point. Python-side scene descriptions use the
``Point3`` and ``Vector3`` tuple aliases for the same distinction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.core.ray import Ray, point_at_distance, vec3
    >>> # Inside a kernel:
    >>> # ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 1.0))
    >>> # p = point_at_distance(ray, 5.0)
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3
point3 = tm.vec3

# Python-side scene coordinates
Point3 = tuple[float, float, float]
Vector3 = tuple[float, float, float]


@ti.dataclass
class Ray:
    """A half-line ``origin + t * direction`` for ``t >= 0``.

    Attributes:
        origin: Start point of the ray.
        direction: Direction of travel. Not required to be unit length at
            construction; primary and shadow rays are normalized before
            they are traced.
    """

    origin: point3
    direction: vec3


@ti.func
def point_at_distance(ray: Ray, distance: ti.f32) -> point3:
    """Return the point ``distance`` units (in direction lengths) along the ray."""
    return ray.origin + distance * ray.direction


@ti.func
def make_ray(origin: point3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)
