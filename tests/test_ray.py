"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and point_at_distance
- Point/vector arithmetic closures
"""

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and point evaluation."""

    def test_point_at_zero_distance_is_origin(self):
        """Distance 0 returns the ray origin."""
        from src.shadowray.core.ray import Ray, point_at_distance, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = point_at_distance(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_point_at_positive_distance(self):
        """Point along a unit direction."""
        from src.shadowray.core.ray import make_ray, point_at_distance, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0))
            result[None] = point_at_distance(ray, 5.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 5.0) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_point_scales_with_unnormalized_direction(self):
        """Distance is measured in multiples of the direction vector."""
        from src.shadowray.core.ray import make_ray, point_at_distance, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, 0.0, 2.0))
            result[None] = point_at_distance(ray, 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6


class TestPointVectorClosures:
    """Point - point is a vector, point + vector is a point."""

    def test_point_difference_then_add_back(self):
        from src.shadowray.core.ray import point3, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            a = point3(1.0, 2.0, 3.0)
            b = point3(-4.0, 0.5, 10.0)
            offset = b - a
            result[None] = a + offset

        test_kernel()
        r = result[None]
        assert abs(r[0] - (-4.0)) < 1e-6
        assert abs(r[1] - 0.5) < 1e-6
        assert abs(r[2] - 10.0) < 1e-6


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
