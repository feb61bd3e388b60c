"""Pytest configuration for renderer tests.

Taichi is initialized once per session; every test starts and ends with
an empty scene, no lights, no materials and no render target.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Repeated ti.init() calls within one process can crash the runtime.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Isolate tests from each other's scene state."""
    # Imported here so that Taichi is initialized first
    from src.shadowray.core.integrator import reset_render_target, set_bounded_shadows
    from src.shadowray.materials.lambertian import clear_lambertian_materials
    from src.shadowray.scene.intersection import clear_scene
    from src.shadowray.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_lights()
        clear_lambertian_materials()
        reset_render_target()
        set_bounded_shadows(False)

    _clear_all()
    yield
    _clear_all()
