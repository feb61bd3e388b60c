"""Scene description and the manager that uploads it for rendering.

A ``Scene`` is a read-only aggregate of objects (shape + material), one
camera, and point lights. It is built once, in Python, before
rendering. ``SceneManager`` copies it into the Taichi fields read by the
intersection resolver and the shading kernel, validating degenerate
inputs on the way in.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.camera.pinhole import PinholeCamera
    >>> from src.shadowray.scene.manager import PointLight, Scene, SceneManager, SceneObject
    >>> scene = Scene(
    ...     objects=(SceneObject.sphere((0.0, 0.0, 0.0), 5.0, (0.0, 1.0, 0.0)),),
    ...     camera=PinholeCamera(position=(0.0, 0.0, -30.0), look_at=(0.0, 0.0, 0.0)),
    ...     lights=(PointLight(position=(0.0, 20.0, 0.0), intensity=1.0),),
    ... )
    >>> manager = SceneManager()
    >>> manager.load(scene)
"""

from __future__ import annotations

from dataclasses import dataclass, field

import taichi.math as tm

from src.shadowray.camera.pinhole import PinholeCamera, validate_camera
from src.shadowray.core.ray import Point3, Vector3
from src.shadowray.materials.lambertian import (
    MAX_LAMBERTIAN_MATERIALS,
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_material_count,
)
from src.shadowray.scene.intersection import (
    MAX_OBJECTS,
    ShapeKind,
    add_quad,
    add_sphere,
    check_quad,
    check_sphere,
    clear_scene,
    get_object_count,
    get_quad_count,
    get_sphere_count,
)
from src.shadowray.scene.lights import (
    MAX_LIGHTS,
    add_point_light,
    clear_lights,
    get_light_count,
)

vec3 = tm.vec3


# =============================================================================
# Scene Description
# =============================================================================


@dataclass(frozen=True)
class Material:
    """Lambertian reflectance tint, each component in [0, 1]."""

    color: Vector3


@dataclass(frozen=True)
class SphereShape:
    center: Point3
    radius: float


@dataclass(frozen=True)
class QuadShape:
    """Parallelogram corner + [0,1]*edge_u + [0,1]*edge_v."""

    corner: Point3
    edge_u: Vector3
    edge_v: Vector3


Shape = SphereShape | QuadShape


@dataclass(frozen=True)
class SceneObject:
    """One renderable object: a shape and the material it is shaded with."""

    shape: Shape
    material: Material

    @classmethod
    def sphere(cls, center: Point3, radius: float, color: Vector3) -> SceneObject:
        return cls(shape=SphereShape(center=center, radius=radius), material=Material(color))

    @classmethod
    def quad(cls, corner: Point3, edge_u: Vector3, edge_v: Vector3, color: Vector3) -> SceneObject:
        return cls(
            shape=QuadShape(corner=corner, edge_u=edge_u, edge_v=edge_v),
            material=Material(color),
        )


@dataclass(frozen=True)
class PointLight:
    """Point light with no distance falloff.

    Attributes:
        position: World-space position.
        intensity: Non-negative multiplier on the diffuse term.
    """

    position: Point3
    intensity: float


@dataclass(frozen=True)
class Scene:
    """Everything a render reads. Objects and lights keep their order."""

    objects: tuple[SceneObject, ...]
    camera: PinholeCamera
    lights: tuple[PointLight, ...] = ()


# =============================================================================
# Scene Manager
# =============================================================================


@dataclass
class ObjectInfo:
    """Bookkeeping for an uploaded object.

    Attributes:
        object_id: Position in the object table (resolver order).
        kind: Shape tag used by the resolver.
        material_id: Material index the object is shaded with.
        shape: The shape description as provided.
    """

    object_id: int
    kind: ShapeKind
    material_id: int
    shape: Shape


@dataclass
class LightInfo:
    light_index: int
    position: Point3
    intensity: float


@dataclass
class MaterialInfo:
    material_id: int
    color: Vector3


class SceneManager:
    """Uploads scenes into the renderer's Taichi fields.

    Construction clears all previously uploaded state; there is exactly
    one active scene per process.

    Attributes:
        materials: Registered materials, indexed by material id.
        objects: Uploaded objects, in resolver order.
        lights: Uploaded point lights.
        camera: Camera of the last loaded scene, or None.
    """

    def __init__(self) -> None:
        self.materials: list[MaterialInfo] = []
        self.objects: list[ObjectInfo] = []
        self.lights: list[LightInfo] = []
        self.camera: PinholeCamera | None = None
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_lights()
        clear_lambertian_materials()
        self.materials.clear()
        self.objects.clear()
        self.lights.clear()
        self.camera = None

    def clear(self) -> None:
        """Drop all objects, lights and materials."""
        self._clear_all()

    def load(self, scene: Scene) -> None:
        """Replace the active scene.

        Each object gets its own material entry, so object order and
        material order line up.

        Raises:
            ValueError: If the camera cannot define a view, or any object,
                material or light is degenerate.
            RuntimeError: If a capacity limit is exceeded.
        """
        validate_camera(scene.camera)
        self.clear()
        for obj in scene.objects:
            self.add_object(obj)
        for light in scene.lights:
            self.add_light(light.position, light.intensity)
        self.camera = scene.camera

    # =========================================================================
    # Materials
    # =========================================================================

    def add_lambertian_material(self, color: Vector3) -> int:
        """Register a material and return its id.

        Raises:
            ValueError: If any color component is outside [0, 1].
            RuntimeError: If the maximum number of materials is exceeded.
        """
        material_id = add_lambertian_material(color)
        self.materials.append(MaterialInfo(material_id=material_id, color=color))
        return material_id

    def get_material_count(self) -> int:
        return get_lambertian_material_count()

    # =========================================================================
    # Objects
    # =========================================================================

    def _check_material(self, material_id: int) -> None:
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

    def add_sphere(self, center: Point3, radius: float, material_id: int) -> int:
        """Add a sphere shaded with an existing material.

        Returns:
            The object id.

        Raises:
            ValueError: If radius is not positive or material_id is unknown.
        """
        self._check_material(material_id)
        object_id = add_sphere(vec3(center[0], center[1], center[2]), radius, material_id)
        self.objects.append(
            ObjectInfo(
                object_id=object_id,
                kind=ShapeKind.SPHERE,
                material_id=material_id,
                shape=SphereShape(center=center, radius=radius),
            )
        )
        return object_id

    def add_quad(self, corner: Point3, edge_u: Vector3, edge_v: Vector3, material_id: int) -> int:
        """Add a quad shaded with an existing material.

        Returns:
            The object id.

        Raises:
            ValueError: If the edges are degenerate or material_id is unknown.
        """
        self._check_material(material_id)
        object_id = add_quad(
            vec3(corner[0], corner[1], corner[2]),
            vec3(edge_u[0], edge_u[1], edge_u[2]),
            vec3(edge_v[0], edge_v[1], edge_v[2]),
            material_id,
        )
        self.objects.append(
            ObjectInfo(
                object_id=object_id,
                kind=ShapeKind.QUAD,
                material_id=material_id,
                shape=QuadShape(corner=corner, edge_u=edge_u, edge_v=edge_v),
            )
        )
        return object_id

    def add_object(self, obj: SceneObject) -> int:
        """Add a scene object with a fresh material. Returns the object id.

        A rejected object registers no material.

        Raises:
            TypeError: If the shape is not a SphereShape or QuadShape.
            ValueError: If the shape or its color is degenerate.
        """
        shape = obj.shape
        if not isinstance(shape, (SphereShape, QuadShape)):
            raise TypeError(f"Unsupported shape type: {type(shape).__name__}")

        if isinstance(shape, SphereShape):
            check_sphere(shape.radius)
        else:
            check_quad(vec3(*shape.edge_u), vec3(*shape.edge_v))

        material_id = self.add_lambertian_material(obj.material.color)
        if isinstance(shape, SphereShape):
            return self.add_sphere(shape.center, shape.radius, material_id)
        return self.add_quad(shape.corner, shape.edge_u, shape.edge_v, material_id)

    def add_lambertian_sphere(
        self, center: Point3, radius: float, color: Vector3
    ) -> tuple[int, int]:
        """Add a sphere with a new material. Returns (object_id, material_id)."""
        check_sphere(radius)
        material_id = self.add_lambertian_material(color)
        return self.add_sphere(center, radius, material_id), material_id

    # =========================================================================
    # Lights
    # =========================================================================

    def add_light(self, position: Point3, intensity: float) -> int:
        """Add a point light. Returns its index.

        Raises:
            ValueError: If intensity is negative or NaN.
        """
        light_index = add_point_light(vec3(position[0], position[1], position[2]), intensity)
        self.lights.append(
            LightInfo(light_index=light_index, position=position, intensity=intensity)
        )
        return light_index

    # =========================================================================
    # Queries
    # =========================================================================

    def get_object_count(self) -> int:
        return get_object_count()

    def get_sphere_count(self) -> int:
        return get_sphere_count()

    def get_quad_count(self) -> int:
        return get_quad_count()

    def get_light_count(self) -> int:
        return get_light_count()

    @staticmethod
    def get_max_objects() -> int:
        return MAX_OBJECTS

    @staticmethod
    def get_max_lights() -> int:
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        return MAX_LAMBERTIAN_MATERIALS


@dataclass
class SceneSummary:
    """Counts of an uploaded scene, for reporting."""

    objects: int = 0
    lights: int = 0
    materials: int = 0
    kinds: dict[str, int] = field(default_factory=dict)

    @classmethod
    def of(cls, manager: SceneManager) -> SceneSummary:
        kinds: dict[str, int] = {}
        for info in manager.objects:
            name = info.kind.name.lower()
            kinds[name] = kinds.get(name, 0) + 1
        return cls(
            objects=manager.get_object_count(),
            lights=manager.get_light_count(),
            materials=manager.get_material_count(),
            kinds=kinds,
        )
