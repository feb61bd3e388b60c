"""Scene-level visibility queries.

Objects live in an ordered object table. Each entry carries a shape tag
(``ShapeKind``), an index into that shape's storage, and a material id.
The resolver walks the table in insertion order and dispatches each
entry to its shape's intersection routine, keeping the nearest hit.
Ties keep the first object encountered.

The same resolver answers both primary visibility (``intersect_scene``)
and shadow occlusion (``intersect_scene_any``). A shadow ray that hits
any object, including the one being shaded, counts as occluded.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.scene.intersection import add_sphere, clear_scene, vec3
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, 0), 5.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti

from src.shadowray.core.ray import point3, vec3
from src.shadowray.geometry.quad import PARALLEL_EPSILON, Quad, hit_quad
from src.shadowray.geometry.sphere import HitRecord, Sphere, hit_sphere, make_miss

# Upper bound for ray distances; shadow rays use it when unbounded
T_MAX = 1e30


class ShapeKind(IntEnum):
    """Shape tags stored in the object table."""

    SPHERE = 0
    QUAD = 1


@ti.dataclass
class SceneHitRecord:
    """Nearest intersection across the scene.

    Attributes:
        hit: 1 if any object was hit, 0 otherwise.
        distance: Ray parameter of the nearest hit.
        normal: Unit surface normal at the nearest hit.
        object_id: Index of the hit object in the object table, -1 on miss.
        material_id: Material of the hit object, -1 on miss.
    """

    hit: ti.i32
    distance: ti.f32
    normal: vec3
    object_id: ti.i32
    material_id: ti.i32


MAX_OBJECTS = 1024
MAX_SPHERES = 1024
MAX_QUADS = 256

# Object table, insertion ordered
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_shape_indices = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Quad storage
quad_corners = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_edge_u = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
quad_edge_v = ti.Vector.field(3, dtype=ti.f32, shape=MAX_QUADS)
num_quads = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all objects. Field data is overwritten as objects are re-added."""
    num_objects[None] = 0
    num_spheres[None] = 0
    num_quads[None] = 0


def _append_object(kind: ShapeKind, shape_index: int, material_id: int) -> int:
    idx = num_objects[None]
    object_kinds[idx] = int(kind)
    object_shape_indices[idx] = shape_index
    object_material_ids[idx] = material_id
    num_objects[None] = idx + 1
    return idx


def _check_object_capacity() -> None:
    if num_objects[None] >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")


def check_sphere(radius: float) -> None:
    """Raise if a sphere of this radius cannot be added to the scene.

    Raises:
        ValueError: If radius is not positive.
        RuntimeError: If sphere or object capacity is exhausted.
    """
    if not radius > 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    if num_spheres[None] >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    _check_object_capacity()


def check_quad(edge_u: vec3, edge_v: vec3) -> None:
    """Raise if a quad with these edges cannot be added to the scene.

    Raises:
        ValueError: If the edges are parallel or zero length.
        RuntimeError: If quad or object capacity is exhausted.
    """
    nx = edge_u[1] * edge_v[2] - edge_u[2] * edge_v[1]
    ny = edge_u[2] * edge_v[0] - edge_u[0] * edge_v[2]
    nz = edge_u[0] * edge_v[1] - edge_u[1] * edge_v[0]
    if not nx * nx + ny * ny + nz * nz > PARALLEL_EPSILON:
        raise ValueError("Quad edges must span a non-degenerate parallelogram")
    if num_quads[None] >= MAX_QUADS:
        raise RuntimeError(f"Maximum number of quads ({MAX_QUADS}) exceeded")
    _check_object_capacity()


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Append a sphere object.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material to shade the sphere with.

    Returns:
        The object id (position in the object table).

    Raises:
        ValueError: If radius is not positive.
        RuntimeError: If sphere or object capacity is exceeded.
    """
    check_sphere(radius)

    sphere_idx = num_spheres[None]
    object_id = _append_object(ShapeKind.SPHERE, sphere_idx, material_id)
    sphere_centers[sphere_idx] = center
    sphere_radii[sphere_idx] = radius
    num_spheres[None] = sphere_idx + 1
    return object_id


def add_quad(corner: vec3, edge_u: vec3, edge_v: vec3, material_id: int = 0) -> int:
    """Append a quad object spanning corner + [0,1]*edge_u + [0,1]*edge_v.

    Raises:
        ValueError: If the edges are parallel or zero length.
        RuntimeError: If quad or object capacity is exceeded.
    """
    check_quad(edge_u, edge_v)

    quad_idx = num_quads[None]
    object_id = _append_object(ShapeKind.QUAD, quad_idx, material_id)
    quad_corners[quad_idx] = corner
    quad_edge_u[quad_idx] = edge_u
    quad_edge_v[quad_idx] = edge_v
    num_quads[None] = quad_idx + 1
    return object_id


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_quad_count() -> int:
    """Get the number of quads in the scene."""
    return int(num_quads[None])


@ti.func
def intersect_object(object_id: ti.i32, ray_origin: point3, ray_direction: vec3) -> HitRecord:
    """Dispatch one object-table entry to its shape's intersection routine."""
    kind = object_kinds[object_id]
    idx = object_shape_indices[object_id]
    rec = make_miss()

    if kind == int(ShapeKind.SPHERE):
        sphere = Sphere(center=sphere_centers[idx], radius=sphere_radii[idx])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
    elif kind == int(ShapeKind.QUAD):
        quad = Quad(corner=quad_corners[idx], edge_u=quad_edge_u[idx], edge_v=quad_edge_v[idx])
        rec = hit_quad(ray_origin, ray_direction, quad)

    return rec


@ti.func
def _make_scene_miss() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        distance=0.0,
        normal=vec3(0.0, 0.0, 0.0),
        object_id=-1,
        material_id=-1,
    )


@ti.func
def intersect_scene(ray_origin: point3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest intersection over all objects.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction.

    Returns:
        A SceneHitRecord for the object with the smallest hit distance,
        or a miss record. Equal distances keep the earlier object.
    """
    result = _make_scene_miss()

    for i in range(num_objects[None]):
        rec = intersect_object(i, ray_origin, ray_direction)
        if rec.hit == 1:
            if result.hit == 0 or rec.distance < result.distance:
                result = SceneHitRecord(
                    hit=1,
                    distance=rec.distance,
                    normal=rec.normal,
                    object_id=i,
                    material_id=object_material_ids[i],
                )

    return result


@ti.func
def intersect_scene_any(ray_origin: point3, ray_direction: vec3, t_max: ti.f32) -> ti.i32:
    """Occlusion query: does the ray hit anything closer than ``t_max``?

    Pass ``T_MAX`` for an unbounded shadow ray.

    Returns:
        1 if any object is hit with distance < t_max, 0 otherwise.
    """
    occluded = 0

    for i in range(num_objects[None]):
        if occluded == 0:
            rec = intersect_object(i, ray_origin, ray_direction)
            if rec.hit == 1 and rec.distance < t_max:
                occluded = 1

    return occluded
