"""High-level renderer: settings, row-batched rendering and output.

``Renderer`` wraps the integrator's module-level render target with a
small object API:

- render the image in batches of rows, reporting progress after each
- read back unclamped float colors or the uint8 pixel buffer
- save a PNG through the output module

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.shadowray.core.renderer import RenderSettings, Renderer
    >>> from src.shadowray.scene.manager import SceneManager
    >>> from src.shadowray.scene.reference import create_reference_scene
    >>>
    >>> manager = SceneManager()
    >>> manager.load(create_reference_scene())
    >>> renderer = Renderer(manager, RenderSettings(width=320, height=240))
    >>> renderer.render()
    >>> buffer = renderer.get_pixel_buffer()
"""

from __future__ import annotations

import time
from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.shadowray.camera.pinhole import setup_camera
from src.shadowray.core.integrator import (
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_color_numpy,
    render_rows,
    set_bounded_shadows,
    setup_render_target,
)
from src.shadowray.output.export import save_png, to_pixel_buffer
from src.shadowray.scene.manager import Scene, SceneManager

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


@dataclass
class RenderSettings:
    """Render configuration.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        bounded_shadows: Ignore occluders farther away than the light.
            Off by default: occluders beyond the light still shadow.
        rows_per_batch: Rows rendered between progress reports.
    """

    width: int = 1600
    height: int = 1200
    bounded_shadows: bool = False
    rows_per_batch: int = 64

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {self.rows_per_batch}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Renderer:
    """Renders the scene held by a SceneManager.

    Attributes:
        settings: The render configuration.
        render_time: Wall-clock seconds of the last complete render, or None.
    """

    def __init__(self, manager: SceneManager, settings: RenderSettings | None = None) -> None:
        """Set up the render target for the given settings.

        Raises:
            ValueError: If the settings describe an unsupported image size.
        """
        self._manager = manager
        self.settings = settings if settings is not None else RenderSettings()
        self.render_time: float | None = None
        self._rows_done = 0
        setup_render_target(self.settings.width, self.settings.height)

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def is_complete(self) -> bool:
        return self._rows_done >= self.height

    def _prepare(self) -> None:
        camera = self._manager.camera
        if camera is None:
            raise RuntimeError("No scene loaded. Call SceneManager.load() first.")
        setup_camera(camera, self.settings.aspect_ratio)
        set_bounded_shadows(self.settings.bounded_shadows)
        self._rows_done = 0

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render the image batch by batch, yielding after each batch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            RuntimeError: If no scene is loaded.
            ValueError: If the camera is degenerate.
        """
        self._prepare()
        start = time.perf_counter()
        batch = self.settings.rows_per_batch

        while self._rows_done < self.height:
            row_end = min(self._rows_done + batch, self.height)
            render_rows(self._rows_done, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self.height)

        self.render_time = time.perf_counter() - start

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the full image.

        Args:
            callback: Optional function called after each batch with
                (rows_done, total_rows).
        """
        for done, total in self.render_progressive():
            if callback is not None:
                callback(done, total)

    def get_color_numpy(self) -> npt.NDArray[np.float32]:
        """Unclamped colors as a (height, width, 3) float32 array."""
        return get_color_numpy()

    def get_pixel_buffer(self) -> npt.NDArray[np.uint8]:
        """Interleaved RGB bytes, row-major, top row first."""
        return to_pixel_buffer(self.get_color_numpy())

    def save_png(self, filepath: str | Path) -> Path:
        """Encode the current pixel buffer as a PNG."""
        return save_png(self.get_pixel_buffer(), self.width, self.height, filepath)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self._rows_done})"
        )


def render_scene(scene: Scene, settings: RenderSettings | None = None) -> npt.NDArray[np.uint8]:
    """Load a scene, render it, and return the pixel buffer.

    Replaces whatever scene was active before.
    """
    manager = SceneManager()
    manager.load(scene)
    renderer = Renderer(manager, settings)
    renderer.render()
    return renderer.get_pixel_buffer()
