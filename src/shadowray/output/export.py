"""Pixel conversion and PNG export.

The renderer's obligation to its output sink is a dense ``uint8``
buffer of ``width * height * 3`` values: RGB interleaved, row-major,
top row first. This module produces that buffer from float colors and
hands it to Pillow for encoding.

Conversion is a saturating float-to-byte cast: each
channel becomes ``c * 255`` in single precision, the fraction is
truncated toward zero, and out-of-range values saturate (above 255 to
255, negative and NaN to 0). Colors are not clamped to [0, 1] first.

Example:
    >>> import numpy as np
    >>> from src.shadowray.output.export import to_pixel_buffer
    >>> colors = np.array([[[0.5, 1.0, 1.2]]], dtype=np.float32)
    >>> to_pixel_buffer(colors).tolist()
    [127, 255, 255]
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def color_to_u8(colors: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Convert float colors to bytes with truncating, saturating semantics.

    Args:
        colors: Array of any shape with float color channels.

    Returns:
        Array of the same shape with dtype uint8.
    """
    scaled = np.asarray(colors, dtype=np.float32) * np.float32(255.0)
    scaled = np.nan_to_num(scaled, nan=0.0, posinf=255.0, neginf=0.0)
    scaled = np.trunc(np.clip(scaled, 0.0, 255.0))
    return scaled.astype(np.uint8)


def to_pixel_buffer(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint8]:
    """Flatten an (H, W, 3) float image into the interleaved byte buffer.

    Raises:
        ValueError: If the image is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    return color_to_u8(image).reshape(-1)


def buffer_to_image_array(
    buffer: npt.NDArray[np.uint8], width: int, height: int
) -> npt.NDArray[np.uint8]:
    """View a flat RGB buffer as an (H, W, 3) array.

    Raises:
        ValueError: If the buffer length is not width * height * 3.
    """
    expected = width * height * 3
    if buffer.size != expected:
        raise ValueError(
            f"Buffer holds {buffer.size} values, expected {expected} for {width}x{height}"
        )
    return np.asarray(buffer, dtype=np.uint8).reshape(height, width, 3)


def save_png(buffer: npt.NDArray[np.uint8], width: int, height: int, filepath: str | Path) -> Path:
    """Encode a flat RGB buffer as an 8-bit PNG.

    Args:
        buffer: Interleaved RGB bytes, top row first.
        width: Image width in pixels.
        height: Image height in pixels.
        filepath: Output path.

    Returns:
        The path written.
    """
    path = Path(filepath)
    pil_image = PILImage.fromarray(buffer_to_image_array(buffer, width, height))
    pil_image.save(path)
    return path
