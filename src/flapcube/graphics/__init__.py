"""Graphics for FlapCube: numpy buffer primitives and the frame renderer."""

from flapcube.graphics.renderer import FrameRenderer, Palette
from flapcube.graphics.primitives import (
    new_buffer,
    fill,
    draw_rect,
    draw_text,
    draw_centered_text,
    measure_text,
)

__all__ = [
    "FrameRenderer",
    "Palette",
    "new_buffer",
    "fill",
    "draw_rect",
    "draw_text",
    "draw_centered_text",
    "measure_text",
]
