from .canvas import blend_mask, clip_rect, fill_rect, new_canvas
from .draw_markers import circle_bounds, draw_circle
from .draw_text import draw_text, text_size

__all__ = [
    "blend_mask",
    "circle_bounds",
    "clip_rect",
    "draw_circle",
    "draw_text",
    "fill_rect",
    "new_canvas",
    "text_size",
]
