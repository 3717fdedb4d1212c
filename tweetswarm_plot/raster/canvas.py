from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_mask(dst: np.ndarray, x0: int, y0: int, coverage: np.ndarray, color: RGBA) -> None:
    """Alpha-blend `color` into `dst` where `coverage` (0..1, shape h x w) is set."""
    h, w = coverage.shape
    xa = max(0, x0)
    ya = max(0, y0)
    xb = min(dst.shape[1], x0 + w)
    yb = min(dst.shape[0], y0 + h)
    if xa >= xb or ya >= yb:
        return
    cov = coverage[ya - y0 : yb - y0, xa - x0 : xb - x0]
    alpha = (cov * (color[3] / 255.0))[:, :, None]
    view = dst[ya:yb, xa:xb]
    src = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    view[:, :, :3] = np.clip(src * alpha + view[:, :, :3].astype(np.float32) * (1.0 - alpha), 0, 255).astype(np.uint8)
    view[:, :, 3] = np.maximum(view[:, :, 3], (alpha[:, :, 0] * 255.0).astype(np.uint8))


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Fill the half-open rect [x0, x1) x [y0, y1), clipped to the canvas."""
    if x1 <= x0 or y1 <= y0:
        return
    blend_mask(dst, x0, y0, np.ones((y1 - y0, x1 - x0), dtype=np.float32), color)


def clip_rect(rect: tuple[int, int, int, int], width: int, height: int) -> tuple[int, int, int, int] | None:
    """Clip an `(x, y, w, h)` rect to a width x height canvas; None when nothing is left."""
    x, y, w, h = rect
    x0 = max(0, int(x))
    y0 = max(0, int(y))
    x1 = min(width, int(x) + int(w))
    y1 = min(height, int(y) + int(h))
    if x1 <= x0 or y1 <= y0:
        return None
    return (x0, y0, x1 - x0, y1 - y0)
