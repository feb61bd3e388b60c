"""Pinhole camera mapping pixels to world-space primary rays.

The camera is a position and a look-at target; world up is fixed at
(0, 1, 0). ``setup_camera`` builds a camera-to-world frame with a
face-towards construction:

    z = normalize(look_at - position)     forward
    x = normalize(up x z)
    y = z x x

A local point (sx, sy, 1) maps to ``position + sx*x + sy*y + z``. Since
``x = up x z``, increasing sx moves toward the camera's left in a
right-handed world; the image is therefore the mirror of a right-handed
look-at camera.

Pixel (px, py), with row 0 at the top, maps to screen space as:

    nx = (px + 0.5) / width,  ny = (py + 0.5) / height
    sx = (2 nx - 1) * aspect * tan(vfov / 2)
    sy = (1 - 2 ny) * tan(vfov / 2)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.camera.pinhole import PinholeCamera, setup_camera
    >>> camera = PinholeCamera(position=(-30.0, 30.0, -20.0), look_at=(0.0, 0.0, 0.0))
    >>> setup_camera(camera, aspect_ratio=4.0 / 3.0)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.shadowray.core.ray import Point3, Ray, make_ray

WORLD_UP = (0.0, 1.0, 0.0)

# Below this |up x forward| the view direction is treated as parallel to up
_DEGENERATE_EPSILON = 1e-6


@dataclass
class PinholeCamera:
    """Camera placement.

    Attributes:
        position: Camera position in world space.
        look_at: Point the camera faces.
        vfov: Vertical field of view in degrees.
    """

    position: Point3
    look_at: Point3
    vfov: float = 45.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_x = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_y = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_z = ti.Vector.field(3, dtype=ti.f32, shape=())
_fov_adjust = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())


def camera_basis(camera: PinholeCamera) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Compute the camera-to-world axes (x, y, z) for a camera.

    Raises:
        ValueError: If a coordinate is not finite, position equals
            look_at, or the view direction is parallel to world up.
    """
    position = np.array(camera.position, dtype=np.float32)
    look_at = np.array(camera.look_at, dtype=np.float32)
    up = np.array(WORLD_UP, dtype=np.float32)

    if not (np.isfinite(position).all() and np.isfinite(look_at).all()):
        raise ValueError("Camera position and look_at must be finite")

    forward = look_at - position
    forward_len = np.linalg.norm(forward)
    if not forward_len > 0.0:
        raise ValueError("Camera position and look_at must differ")
    z = forward / forward_len

    x = np.cross(up, z)
    x_len = np.linalg.norm(x)
    if not x_len >= _DEGENERATE_EPSILON:
        raise ValueError("Camera view direction is parallel to world up (0, 1, 0)")
    x = x / x_len

    y = np.cross(z, x)
    return x, y, z


def validate_camera(camera: PinholeCamera) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Check that a camera defines a view and return its (x, y, z) axes.

    Raises:
        ValueError: For a degenerate frame or a field of view outside
            (0, 180) degrees.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {camera.vfov}")
    return camera_basis(camera)


def setup_camera(camera: PinholeCamera, aspect_ratio: float) -> None:
    """Upload the camera frame and projection to Taichi fields.

    Args:
        camera: Camera placement and field of view.
        aspect_ratio: Image width divided by height.

    Raises:
        ValueError: For a degenerate frame, a field of view outside
            (0, 180) degrees, or a non-positive aspect ratio.
    """
    if not aspect_ratio > 0.0:
        raise ValueError(f"Aspect ratio must be positive, got {aspect_ratio}")

    x, y, z = validate_camera(camera)

    _camera_origin[None] = [float(c) for c in camera.position]
    _camera_x[None] = x.tolist()
    _camera_y[None] = y.tolist()
    _camera_z[None] = z.tolist()
    _fov_adjust[None] = math.tan(math.radians(camera.vfov) / 2.0)
    _aspect_ratio[None] = aspect_ratio


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(px: ti.i32, py: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Primary ray through the center of pixel (px, py).

    Args:
        px: Column, 0 at the left.
        py: Row, 0 at the top.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    fov_adjust = _fov_adjust[None]
    norm_x = (ti.cast(px, ti.f32) + 0.5) / ti.cast(width, ti.f32)
    norm_y = (ti.cast(py, ti.f32) + 0.5) / ti.cast(height, ti.f32)
    screen_x = (2.0 * norm_x - 1.0) * _aspect_ratio[None] * fov_adjust
    # Row 0 is the top of the image
    screen_y = (1.0 - 2.0 * norm_y) * fov_adjust

    origin = _camera_origin[None]
    target = origin + screen_x * _camera_x[None] + screen_y * _camera_y[None] + _camera_z[None]

    return make_ray(origin, tm.normalize(target - origin))


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Current camera frame, for inspection from Python."""

    def _as_tuple(v) -> tuple[float, float, float]:
        return (float(v[0]), float(v[1]), float(v[2]))

    return {
        "origin": _as_tuple(_camera_origin[None]),
        "x": _as_tuple(_camera_x[None]),
        "y": _as_tuple(_camera_y[None]),
        "z": _as_tuple(_camera_z[None]),
    }
