"""Camera module for primary ray generation.

Components:
    pinhole: Perspective camera with a fixed world-up look-at frame

One ray is generated through each pixel center; there is no jitter or
lens model.
"""

from .pinhole import (
    WORLD_UP,
    PinholeCamera,
    camera_basis,
    get_camera_info,
    get_ray,
    setup_camera,
    validate_camera,
)

__all__ = [
    "WORLD_UP",
    "PinholeCamera",
    "camera_basis",
    "setup_camera",
    "validate_camera",
    "get_ray",
    "get_camera_info",
]
