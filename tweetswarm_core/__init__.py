from .events import PointerEvent, PointerHandler, dispatch_pointer_event, parse_pointer_event
from .window_matrix import CallBlitEvent, FullRewrite, ReplaceRect, WindowMatrix, WriteBatch, union_rects

__all__ = [
    "CallBlitEvent",
    "FullRewrite",
    "PointerEvent",
    "PointerHandler",
    "ReplaceRect",
    "WindowMatrix",
    "WriteBatch",
    "dispatch_pointer_event",
    "parse_pointer_event",
    "union_rects",
]
