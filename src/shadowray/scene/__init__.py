"""Scene description, storage and visibility queries.

Components:
    manager: Scene dataclasses and the SceneManager that uploads them
    intersection: Object table and the nearest-hit / occlusion resolver
    lights: Point light storage
    reference: Factory functions for the reference scenes

Scene data is read-only while a render runs, so every pixel can be
computed independently.
"""

from .intersection import (
    MAX_OBJECTS,
    MAX_QUADS,
    MAX_SPHERES,
    T_MAX,
    SceneHitRecord,
    ShapeKind,
    add_quad,
    add_sphere,
    clear_scene,
    get_object_count,
    get_quad_count,
    get_sphere_count,
    intersect_object,
    intersect_scene,
    intersect_scene_any,
)
from .lights import MAX_LIGHTS, add_point_light, clear_lights, get_light_count
from .manager import (
    LightInfo,
    Material,
    MaterialInfo,
    ObjectInfo,
    PointLight,
    QuadShape,
    Scene,
    SceneManager,
    SceneObject,
    SceneSummary,
    Shape,
    SphereShape,
)
from .reference import (
    REFERENCE_FOV,
    REFERENCE_HEIGHT,
    REFERENCE_WIDTH,
    create_reference_scene,
    create_single_sphere_scene,
)

__all__ = [
    # Intersection
    "SceneHitRecord",
    "ShapeKind",
    "add_sphere",
    "add_quad",
    "clear_scene",
    "get_object_count",
    "get_sphere_count",
    "get_quad_count",
    "intersect_object",
    "intersect_scene",
    "intersect_scene_any",
    "MAX_OBJECTS",
    "MAX_SPHERES",
    "MAX_QUADS",
    "T_MAX",
    # Lights
    "add_point_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager
    "Scene",
    "SceneObject",
    "Shape",
    "SphereShape",
    "QuadShape",
    "Material",
    "PointLight",
    "SceneManager",
    "SceneSummary",
    "ObjectInfo",
    "LightInfo",
    "MaterialInfo",
    # Reference scenes
    "create_reference_scene",
    "create_single_sphere_scene",
    "REFERENCE_WIDTH",
    "REFERENCE_HEIGHT",
    "REFERENCE_FOV",
]
