"""Quad (parallelogram) primitive.

A quad is a corner point plus two edge vectors and covers the
parallelogram ``corner + alpha * edge_u + beta * edge_v`` for
``alpha, beta`` in [0, 1]. It is the second shape the scene resolver
dispatches on, next to the sphere, and is typically used as a ground
plate under the spheres.

Intersection:
    1. Intersect the ray with the supporting plane. Rays parallel to the
       plane miss.
    2. Reject plane hits behind the origin (t < 0).
    3. Express the plane hit in (alpha, beta) and check the unit square.

The normal is ``normalize(edge_u x edge_v)``, flipped to face the
incoming ray so that a quad is lit from whichever side it is seen.
"""

import taichi as ti
import taichi.math as tm

from src.shadowray.core.ray import point3, vec3

from .sphere import HitRecord, make_miss

PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Quad:
    """A parallelogram with vertices corner, corner+u, corner+v, corner+u+v.

    Attributes:
        corner: One vertex of the quad.
        edge_u: Edge vector from corner to an adjacent vertex.
        edge_v: Edge vector from corner to the other adjacent vertex.
    """

    corner: point3
    edge_u: vec3
    edge_v: vec3


@ti.func
def quad_normal(quad: Quad) -> vec3:
    """Geometric (unflipped) unit normal, ``normalize(edge_u x edge_v)``."""
    return tm.normalize(tm.cross(quad.edge_u, quad.edge_v))


@ti.func
def hit_quad(ray_origin: point3, ray_direction: vec3, quad: Quad) -> HitRecord:
    """Intersect a ray with a quad.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (need not be unit length).
        quad: The quad to test.

    Returns:
        A HitRecord. Check ``hit`` before reading the other fields.
    """
    n = tm.cross(quad.edge_u, quad.edge_v)
    n_dot_n = tm.dot(n, n)
    normal = quad_normal(quad)
    denom = tm.dot(normal, ray_direction)

    result = make_miss()

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = (tm.dot(normal, quad.corner) - tm.dot(normal, ray_origin)) / denom

        if t >= 0.0:
            # alpha = w_u . (P - Q), beta = w_v . (P - Q)
            w_u = tm.cross(quad.edge_v, n) / n_dot_n
            w_v = tm.cross(n, quad.edge_u) / n_dot_n
            local = ray_origin + t * ray_direction - quad.corner
            alpha = tm.dot(w_u, local)
            beta = tm.dot(w_v, local)

            if alpha >= 0.0 and alpha <= 1.0 and beta >= 0.0 and beta <= 1.0:
                facing = normal
                if denom > 0.0:
                    facing = -normal
                result = HitRecord(hit=1, distance=t, normal=facing)

    return result
