"""Tests for RenderSettings and the Renderer.

Tests cover:
- Settings validation
- Row-batched rendering with progress reporting
- Pixel buffer size and layout
- PNG output
- Error cases (no scene loaded, degenerate camera)
"""

import numpy as np
import pytest


def _loaded_manager(scene=None):
    from src.shadowray.scene.manager import SceneManager
    from src.shadowray.scene.reference import create_single_sphere_scene

    manager = SceneManager()
    manager.load(scene if scene is not None else create_single_sphere_scene())
    return manager


class TestRenderSettings:
    """Tests for RenderSettings validation."""

    def test_defaults_match_reference(self):
        from src.shadowray.core.renderer import RenderSettings

        settings = RenderSettings()
        assert (settings.width, settings.height) == (1600, 1200)
        assert settings.bounded_shadows is False
        assert settings.aspect_ratio == pytest.approx(4.0 / 3.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -1},
            {"width": 5000},
            {"rows_per_batch": 0},
        ],
    )
    def test_invalid_settings(self, kwargs):
        from src.shadowray.core.renderer import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(**kwargs)


class TestRenderer:
    """Tests for rendering through the Renderer."""

    def test_progress_reports_each_batch(self):
        from src.shadowray.core.renderer import Renderer, RenderSettings

        renderer = Renderer(
            _loaded_manager(), RenderSettings(width=32, height=24, rows_per_batch=10)
        )
        calls = []
        renderer.render(callback=lambda done, total: calls.append((done, total)))

        assert calls == [(10, 24), (20, 24), (24, 24)]
        assert renderer.is_complete
        assert renderer.render_time is not None
        assert renderer.render_time >= 0.0

    def test_render_progressive_yields(self):
        from src.shadowray.core.renderer import Renderer, RenderSettings

        settings = RenderSettings(width=16, height=16, rows_per_batch=8)
        renderer = Renderer(_loaded_manager(), settings)
        assert not renderer.is_complete
        assert list(renderer.render_progressive()) == [(8, 16), (16, 16)]
        assert renderer.is_complete

    def test_pixel_buffer_size_and_dtype(self):
        from src.shadowray.core.renderer import Renderer, RenderSettings

        renderer = Renderer(_loaded_manager(), RenderSettings(width=40, height=30))
        renderer.render()
        buffer = renderer.get_pixel_buffer()

        assert buffer.shape == (40 * 30 * 3,)
        assert buffer.dtype == np.uint8

    def test_single_sphere_center_lit_corners_black(self):
        """The sphere fills the middle of the frame; the corners see nothing."""
        from src.shadowray.core.renderer import Renderer, RenderSettings

        width, height = 41, 31
        renderer = Renderer(_loaded_manager(), RenderSettings(width=width, height=height))
        renderer.render()
        image = renderer.get_pixel_buffer().reshape(height, width, 3)

        for y, x in [(0, 0), (0, width - 1), (height - 1, 0), (height - 1, width - 1)]:
            assert image[y, x].tolist() == [0, 0, 0]
        # Light straight above: the upper half of the disc is brighter
        assert image[height // 2 - 3, width // 2, 0] > image[height // 2 + 3, width // 2, 0]

    def test_color_numpy_matches_buffer(self):
        from src.shadowray.core.renderer import Renderer, RenderSettings
        from src.shadowray.output.export import color_to_u8

        renderer = Renderer(_loaded_manager(), RenderSettings(width=20, height=10))
        renderer.render()
        colors = renderer.get_color_numpy()

        assert colors.shape == (10, 20, 3)
        np.testing.assert_array_equal(color_to_u8(colors).reshape(-1), renderer.get_pixel_buffer())

    def test_bounded_shadows_setting_is_applied(self):
        from src.shadowray.core.integrator import bounded_shadows_enabled
        from src.shadowray.core.renderer import Renderer, RenderSettings

        renderer = Renderer(
            _loaded_manager(), RenderSettings(width=8, height=8, bounded_shadows=True)
        )
        renderer.render()
        assert bounded_shadows_enabled()

    def test_save_png(self, tmp_path):
        from PIL import Image

        from src.shadowray.core.renderer import Renderer, RenderSettings

        renderer = Renderer(_loaded_manager(), RenderSettings(width=24, height=18))
        renderer.render()
        path = renderer.save_png(tmp_path / "frame.png")

        with Image.open(path) as loaded:
            assert loaded.size == (24, 18)
            pixels = np.asarray(loaded)
        np.testing.assert_array_equal(pixels.reshape(-1), renderer.get_pixel_buffer())

    def test_render_without_scene_raises(self):
        from src.shadowray.core.renderer import Renderer, RenderSettings
        from src.shadowray.scene.manager import SceneManager

        renderer = Renderer(SceneManager(), RenderSettings(width=8, height=8))
        with pytest.raises(RuntimeError, match="No scene loaded"):
            renderer.render()

    def test_degenerate_camera_raises(self):
        """A camera swapped in after loading is still checked before rendering."""
        from src.shadowray.camera.pinhole import PinholeCamera
        from src.shadowray.core.renderer import Renderer, RenderSettings

        manager = _loaded_manager()
        manager.camera = PinholeCamera(position=(0.0, 10.0, 0.0), look_at=(0.0, 0.0, 0.0))
        renderer = Renderer(manager, RenderSettings(width=8, height=8))
        with pytest.raises(ValueError, match="parallel"):
            renderer.render()

    def test_repr(self):
        from src.shadowray.core.renderer import Renderer, RenderSettings

        renderer = Renderer(_loaded_manager(), RenderSettings(width=8, height=4))
        assert repr(renderer) == "Renderer(width=8, height=4, rows_done=0)"


class TestRenderScene:
    def test_render_scene_returns_buffer(self):
        from src.shadowray.core.renderer import RenderSettings, render_scene
        from src.shadowray.scene.reference import create_single_sphere_scene

        buffer = render_scene(create_single_sphere_scene(), RenderSettings(width=16, height=12))
        assert buffer.shape == (16 * 12 * 3,)
        assert buffer.any()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
