"""Direct-illumination shading and the per-pixel render kernel.

For each pixel one primary ray is traced. At the nearest hit every point
light is tested with a shadow ray; unoccluded lights add a Lambertian
term. There are no secondary bounces, no ambient term and no sampling
noise, so a render is a deterministic function of the scene.

Shading a hit:
    1. hit_point = origin + distance * direction + SHADOW_BIAS * normal
    2. for each light, light_dir = normalize(light.position - hit_point)
    3. a shadow ray from hit_point along light_dir that hits ANY object
       removes the light's contribution
    4. otherwise color += max(0, normal . light_dir) * color * intensity

The accumulated color is not clamped. Shadow rays are unbounded unless
bounded shadows are enabled, in which case only occluders closer than
the light count.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.core.integrator import setup_render_target, render_image
    >>> setup_render_target(320, 240)
    >>> render_image()
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.shadowray.camera.pinhole import get_ray
from src.shadowray.core.ray import Point3, Vector3, make_ray, point3, point_at_distance, vec3
from src.shadowray.materials.lambertian import eval_lambertian, get_lambertian_color
from src.shadowray.scene.intersection import (
    T_MAX,
    SceneHitRecord,
    intersect_scene,
    intersect_scene_any,
)
from src.shadowray.scene.lights import light_intensities, light_positions, num_lights

# =============================================================================
# Rendering Constants
# =============================================================================

# Offset along the normal for shadow-ray origins. Sized for scenes with
# spheres of radius 2-10 and lights 20-60 units away.
SHADOW_BIAS = 0.0002

_bounded_shadows = ti.field(dtype=ti.i32, shape=())


def set_bounded_shadows(enabled: bool) -> None:
    """Limit shadow occluders to those closer than the light.

    Off by default: an object behind the light still shadows the hit.
    """
    _bounded_shadows[None] = 1 if enabled else 0


def bounded_shadows_enabled() -> bool:
    return bool(_bounded_shadows[None])


# =============================================================================
# Render Target
# =============================================================================

# Preallocated so that resizing does not recompile kernels
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the color buffer.

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Zero the color buffer."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the active image size; reads raise until it is set up again."""
    _render_target_initialized[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Return (width, height) of the active render target."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade(ray_origin: point3, ray_direction: vec3) -> vec3:
    """Color seen along a ray.

    Args:
        ray_origin: Start of the ray.
        ray_direction: Unit direction of the ray.

    Returns:
        Unclamped RGB. Black when the ray hits nothing.
    """
    rec = intersect_scene(ray_origin, ray_direction)
    color = vec3(0.0, 0.0, 0.0)

    if rec.hit == 1:
        primary = make_ray(ray_origin, ray_direction)
        hit_point = point_at_distance(primary, rec.distance) + rec.normal * SHADOW_BIAS
        material_color = get_lambertian_color(rec.material_id)

        for i in range(num_lights[None]):
            to_light = light_positions[i] - hit_point
            light_dir = tm.normalize(to_light)

            t_max = T_MAX
            if _bounded_shadows[None] == 1:
                t_max = tm.length(to_light)

            if intersect_scene_any(hit_point, light_dir, t_max) == 0:
                color += eval_lambertian(
                    material_color, rec.normal, light_dir, light_intensities[i]
                )

    return color


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Shade every pixel of rows [row_start, row_end)."""
    for x, y in ti.ndrange(width, (row_start, row_end)):
        ray = get_ray(x, y, width, height)
        _color_buffer[x, y] = shade(ray.origin, ray.direction)


@ti.kernel
def _render_single_pixel(px: ti.i32, py: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    ray = get_ray(px, py, width, height)
    return shade(ray.origin, ray.direction)


@ti.kernel
def _primary_direction(px: ti.i32, py: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    return get_ray(px, py, width, height).direction


@ti.kernel
def _shade_ray(origin: vec3, direction: vec3) -> vec3:
    return shade(origin, tm.normalize(direction))


_nearest = SceneHitRecord.field(shape=())


@ti.kernel
def _find_nearest(origin: vec3, direction: vec3):
    _nearest[None] = intersect_scene(origin, direction)


@ti.kernel
def _occluded(origin: vec3, direction: vec3, t_max: ti.f32) -> ti.i32:
    return intersect_scene_any(origin, tm.normalize(direction), t_max)


@ti.kernel
def _copy_active_region(out: ti.types.ndarray(dtype=ti.f32, ndim=3)):
    # out is (height, width, 3); the field is indexed [x, y]
    for y, x in ti.ndrange(_image_height[None], _image_width[None]):
        color = _color_buffer[x, y]
        for c in ti.static(range(3)):
            out[y, x, c] = color[c]


# =============================================================================
# Public Rendering API
# =============================================================================


@dataclass(frozen=True)
class NearestHit:
    """Python-side copy of a resolver hit.

    Attributes:
        distance: Ray parameter of the hit.
        normal: Unit surface normal.
        object_id: Index of the hit object in scene order.
        material_id: Material of the hit object.
    """

    distance: float
    normal: tuple[float, float, float]
    object_id: int
    material_id: int


def _to_vec3(v) -> vec3:
    return vec3(float(v[0]), float(v[1]), float(v[2]))


def _to_tuple(v) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


def render_rows(row_start: int, row_end: int) -> None:
    """Render rows [row_start, row_end) of the active render target.

    Raises:
        RuntimeError: If the render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image height {height}")
    if row_start == row_end:
        return
    _render_rows(width, height, row_start, row_end)


def render_image() -> None:
    """Render every pixel of the active render target.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    _, height = get_image_dimensions()
    render_rows(0, height)


def render_pixel(px: int, py: int) -> tuple[float, float, float]:
    """Shade a single pixel of the active render target (row 0 at the top).

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    return _to_tuple(_render_single_pixel(px, py, width, height))


def primary_ray_direction(px: int, py: int, width: int, height: int) -> tuple[float, float, float]:
    """Unit direction of the primary ray through pixel (px, py)."""
    return _to_tuple(_primary_direction(px, py, width, height))


def shade_ray(origin: Point3, direction: Vector3) -> tuple[float, float, float]:
    """Shade an arbitrary ray against the active scene.

    The direction is normalized before tracing.
    """
    return _to_tuple(_shade_ray(_to_vec3(origin), _to_vec3(direction)))


def find_nearest(origin: Point3, direction: Vector3) -> NearestHit | None:
    """Nearest hit along a ray, or None. The direction is used as given."""
    _find_nearest(_to_vec3(origin), _to_vec3(direction))
    rec = _nearest[None]
    if rec.hit == 0:
        return None
    return NearestHit(
        distance=float(rec.distance),
        normal=_to_tuple(rec.normal),
        object_id=int(rec.object_id),
        material_id=int(rec.material_id),
    )


def is_occluded(origin: Point3, direction: Vector3, t_max: float = T_MAX) -> bool:
    """Shadow query: does anything block the ray before ``t_max``?"""
    return bool(_occluded(_to_vec3(origin), _to_vec3(direction), t_max))


def get_color_numpy() -> npt.NDArray[np.float32]:
    """The rendered colors as an unclamped (height, width, 3) float32 array.

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    image = np.empty((height, width, 3), dtype=np.float32)
    _copy_active_region(image)
    return image
