"""Output module: pixel buffer conversion and image encoding.

Components:
    export: float color -> uint8 buffer conversion, PNG encoding via Pillow
"""

from .export import buffer_to_image_array, color_to_u8, save_png, to_pixel_buffer

__all__ = [
    "color_to_u8",
    "to_pixel_buffer",
    "buffer_to_image_array",
    "save_png",
]
