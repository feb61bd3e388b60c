"""Geometric primitives and their ray intersection routines.

Components:
    sphere: Sphere primitive, the HitRecord value type, analytic
        ray-sphere intersection
    quad: Parallelogram primitive with ray-plane intersection

Every primitive exposes the same capability, a Taichi function

    hit_<shape>(ray_origin, ray_direction, shape) -> HitRecord

so the scene resolver can dispatch on a shape tag without knowing the
math behind each shape.
"""

from .quad import Quad, hit_quad, quad_normal
from .sphere import HitRecord, Sphere, hit_sphere, make_miss

__all__ = [
    "HitRecord",
    "make_miss",
    "Sphere",
    "hit_sphere",
    "Quad",
    "hit_quad",
    "quad_normal",
]
