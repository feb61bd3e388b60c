"""Unit tests for quad intersection.

Tests cover:
- Ray hitting quad center from either side (normal faces the ray)
- Ray missing quad (outside bounds)
- Ray parallel to the quad plane
- Quad behind the ray origin
"""

import pytest
import taichi as ti

# Floor-like quad at z=5 spanning x, y in [-1, 1]
CORNER = (-1.0, -1.0, 5.0)
EDGE_U = (2.0, 0.0, 0.0)
EDGE_V = (0.0, 2.0, 0.0)


def _run_hit_quad(origin, direction, corner=CORNER, edge_u=EDGE_U, edge_v=EDGE_V):
    """Run hit_quad in a kernel and return (hit, distance, normal)."""
    from src.shadowray.geometry.quad import Quad, hit_quad, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f32, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, q: vec3, u: vec3, v: vec3):
        record = hit_quad(o, d, Quad(corner=q, edge_u=u, edge_v=v))
        hit[None] = record.hit
        distance[None] = record.distance
        normal[None] = record.normal

    test_kernel(vec3(*origin), vec3(*direction), vec3(*corner), vec3(*edge_u), vec3(*edge_v))
    n = normal[None]
    return hit[None], distance[None], (n[0], n[1], n[2])


class TestQuadIntersection:
    """Tests for ray-quad intersection."""

    def test_hit_center_from_front(self):
        """Ray along +z meets the quad at t=5 with normal facing back at it."""
        hit, distance, normal = _run_hit_quad((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(distance - 5.0) < 1e-5
        # u x v = +z, flipped toward the incoming ray
        assert abs(normal[2] - (-1.0)) < 1e-6

    def test_hit_center_from_back(self):
        """Ray along -z sees the unflipped normal."""
        hit, distance, normal = _run_hit_quad((0.0, 0.0, 10.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(distance - 5.0) < 1e-5
        assert abs(normal[2] - 1.0) < 1e-6

    def test_miss_outside_bounds(self):
        hit, _, _ = _run_hit_quad((3.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 0

    def test_parallel_ray_misses(self):
        hit, _, _ = _run_hit_quad((0.0, 0.0, 5.0), (1.0, 0.0, 0.0))
        assert hit == 0

    def test_quad_behind_origin(self):
        hit, _, _ = _run_hit_quad((0.0, 0.0, 10.0), (0.0, 0.0, 1.0))
        assert hit == 0

    def test_hit_near_corner(self):
        hit, _, _ = _run_hit_quad((0.99, 0.99, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1

    def test_skewed_quad(self):
        """Non-orthogonal edges: (alpha, beta) inside the parallelogram."""
        corner = (0.0, 0.0, 5.0)
        edge_u = (2.0, 0.0, 0.0)
        edge_v = (1.0, 1.0, 0.0)
        inside, _, _ = _run_hit_quad((2.5, 0.9, 0.0), (0.0, 0.0, 1.0), corner, edge_u, edge_v)
        outside, _, _ = _run_hit_quad((0.2, 0.9, 0.0), (0.0, 0.0, 1.0), corner, edge_u, edge_v)
        assert inside == 1
        assert outside == 0


class TestQuadNormal:
    def test_quad_normal_right_hand_rule(self):
        from src.shadowray.geometry.quad import Quad, quad_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            quad = Quad(
                corner=vec3(0.0, 0.0, 0.0),
                edge_u=vec3(0.0, 0.0, 3.0),
                edge_v=vec3(3.0, 0.0, 0.0),
            )
            result[None] = quad_normal(quad)

        test_kernel()
        n = result[None]
        # z x x = +y
        assert abs(n[0]) < 1e-6
        assert abs(n[1] - 1.0) < 1e-6
        assert abs(n[2]) < 1e-6


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
