from __future__ import annotations

import math

import numpy as np

from tweetswarm_plot.raster.canvas import RGBA, blend_mask


def circle_bounds(cx: float, cy: float, radius: float, stroke_width: int = 0) -> tuple[int, int, int, int]:
    """Pixel `(x, y, w, h)` box that fully contains a stroked circle."""
    outer = radius + stroke_width / 2.0 + 1.0
    x0 = int(math.floor(cx - outer))
    y0 = int(math.floor(cy - outer))
    size = int(math.ceil(2.0 * outer)) + 1
    return (x0, y0, size, size)


def draw_circle(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA | None,
    *,
    stroke: RGBA | None = None,
    stroke_width: int = 0,
) -> None:
    """Antialiased circle; the stroke is centered on the edge like an SVG outline."""
    if not (math.isfinite(cx) and math.isfinite(cy)):
        return
    x0, y0, w, h = circle_bounds(cx, cy, radius, stroke_width)
    ys = np.arange(y0, y0 + h, dtype=np.float32)[:, None] + 0.5
    xs = np.arange(x0, x0 + w, dtype=np.float32)[None, :] + 0.5
    dist = np.sqrt((xs - cx) ** 2 + (ys - cy) ** 2)

    if fill is not None:
        inner = radius - (stroke_width / 2.0 if stroke is not None else 0.0)
        blend_mask(dst, x0, y0, _coverage_inside(dist, inner), fill)
    if stroke is not None and stroke_width > 0:
        half = stroke_width / 2.0
        ring = np.minimum(_coverage_inside(dist, radius + half), 1.0 - _coverage_inside(dist, radius - half))
        blend_mask(dst, x0, y0, ring, stroke)


def _coverage_inside(dist: np.ndarray, edge: float) -> np.ndarray:
    return np.clip(edge - dist + 0.5, 0.0, 1.0)
