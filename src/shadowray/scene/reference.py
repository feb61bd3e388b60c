"""The reference three-sphere scene.

Three diffuse spheres on the x axis, lit by two point lights and viewed
from above and to the side:

- red sphere, radius 2, at (-10, 0, 0)
- green sphere, radius 5, at the origin
- blue sphere, radius 10, at (20, 0, 0)
- light of intensity 0.8 at (-40, 20, 0)
- light of intensity 0.4 at (0, 20, -50)
- camera at (-30, 30, -20) looking at the origin, 45 degree field of view

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.scene.reference import create_reference_scene
    >>> scene = create_reference_scene()
    >>> len(scene.objects)
    3
"""

from src.shadowray.camera.pinhole import PinholeCamera
from src.shadowray.scene.manager import PointLight, Scene, SceneObject

REFERENCE_WIDTH = 1600
REFERENCE_HEIGHT = 1200
REFERENCE_FOV = 45.0


def create_reference_scene(vfov: float = REFERENCE_FOV) -> Scene:
    """Build the reference scene description.

    Args:
        vfov: Vertical field of view of the camera in degrees.

    Returns:
        A Scene; load it with ``SceneManager.load``.
    """
    objects = (
        SceneObject.sphere((-10.0, 0.0, 0.0), 2.0, (1.0, 0.0, 0.0)),
        SceneObject.sphere((0.0, 0.0, 0.0), 5.0, (0.0, 1.0, 0.0)),
        SceneObject.sphere((20.0, 0.0, 0.0), 10.0, (0.0, 0.0, 1.0)),
    )
    lights = (
        PointLight(position=(-40.0, 20.0, 0.0), intensity=0.8),
        PointLight(position=(0.0, 20.0, -50.0), intensity=0.4),
    )
    camera = PinholeCamera(position=(-30.0, 30.0, -20.0), look_at=(0.0, 0.0, 0.0), vfov=vfov)
    return Scene(objects=objects, camera=camera, lights=lights)


def create_single_sphere_scene(vfov: float = REFERENCE_FOV) -> Scene:
    """One radius-5 sphere at the origin with a light straight above it.

    The camera looks down at 45 degrees, so the center of the visible disc
    is lit. Renders a lit disc in the middle of the frame on a black
    background.
    """
    return Scene(
        objects=(SceneObject.sphere((0.0, 0.0, 0.0), 5.0, (1.0, 1.0, 1.0)),),
        camera=PinholeCamera(position=(0.0, 30.0, -30.0), look_at=(0.0, 0.0, 0.0), vfov=vfov),
        lights=(PointLight(position=(0.0, 40.0, 0.0), intensity=1.0),),
    )
