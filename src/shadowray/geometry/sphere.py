"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves ``|O + tD - C|^2 = r^2`` as the quadratic
``a t^2 + b t + c = 0`` with:

    a = D . D
    b = 2 (O - C) . D
    c = (O - C) . (O - C) - r^2

Policy for the roots:
    - discriminant <= 0 is a miss. A tangent (grazing) ray does not hit,
      which keeps single-pixel speckles off silhouettes.
    - both roots negative is a miss: the sphere is behind the origin.
    - otherwise the near root ``t0`` is used when it is non-negative,
      else the far root ``t1`` (the origin is inside the sphere).

The reported normal always points from the center to the hit point; it
is not flipped when the ray starts inside.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 0), radius=5.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.shadowray.core.ray import point3, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
    """

    center: point3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """First surface intersection along a ray.

    Attributes:
        hit: 1 if the ray intersected the shape, 0 otherwise.
        distance: Ray parameter of the intersection (>= 0). Only valid if
            hit == 1.
        normal: Unit surface normal at the intersection. Only valid if
            hit == 1.
    """

    hit: ti.i32
    distance: ti.f32
    normal: vec3


@ti.func
def make_miss() -> HitRecord:
    """Return the record used for "no intersection"."""
    return HitRecord(hit=0, distance=0.0, normal=vec3(0.0, 0.0, 0.0))


@ti.func
def hit_sphere(ray_origin: point3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction. Need not be unit length; the
            returned distance is in units of this vector's length.
        sphere: The sphere to test.

    Returns:
        A HitRecord. Check ``hit`` before reading the other fields.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    result = make_miss()

    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0 = (-b - sqrt_d) / (2.0 * a)
        t1 = (-b + sqrt_d) / (2.0 * a)

        if t0 >= 0.0 or t1 >= 0.0:
            distance = t0
            if t0 < 0.0:
                distance = t1

            hit_point = ray_origin + distance * ray_direction
            result = HitRecord(
                hit=1,
                distance=distance,
                normal=tm.normalize(hit_point - sphere.center),
            )

    return result
