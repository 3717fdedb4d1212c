from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Iterable, Sequence

import numpy as np

from tweetswarm_core.window_matrix import WriteBatch
from tweetswarm_plot.colors import RGBA, SENTIMENT, LegendSpec, legend_spec, mark_fill, validate_attribute
from tweetswarm_plot.compile import compile_full_rewrite_batch, compile_replace_patches_batch
from tweetswarm_plot.config import ChartConfig
from tweetswarm_plot.errors import LayoutError
from tweetswarm_plot.layout import BucketPlan, plan_buckets
from tweetswarm_plot.raster import circle_bounds, clip_rect, draw_circle, draw_text, fill_rect, new_canvas, text_size
from tweetswarm_plot.records import TweetRecord, visible_prefix
from tweetswarm_plot.relax import CollisionSimulation
from tweetswarm_plot.scene import RenderMark, Scene


LOGGER = logging.getLogger(__name__)

LEGEND_OFFSET_X = 20
LEGEND_SWATCH_W = 20
LEGEND_SWATCH_H = 150
LEGEND_LABEL_DX = 25
LEGEND_TOP_BASELINE = 10
LEGEND_BOTTOM_BASELINE = 160
AXIS_TICK_PADDING = 3


@dataclass
class SwarmChart:
    """Category swarm chart with a full layout pass and a paint-only pass.

    `load` lays records out and paints everything. `set_color_by`,
    `set_selection` and `advance` only repaint fills, strokes and the legend,
    returning patches for the regions that changed.
    """

    config: ChartConfig = field(default_factory=ChartConfig)
    color_by: str = SENTIMENT
    background: RGBA = (255, 255, 255, 255)
    text_color: RGBA = (0, 0, 0, 255)
    stroke_color: RGBA = (0, 0, 0, 255)
    missing_fill: RGBA = (0, 0, 0, 255)
    axis_font_px: float = 14.0
    legend_font_px: float = 12.0

    _records: tuple[TweetRecord, ...] = ()
    _plan: BucketPlan | None = None
    _scene: Scene = field(default_factory=Scene)
    _selected: frozenset[Any] = frozenset()
    _legend: LegendSpec | None = None
    _static_rgba: np.ndarray | None = None
    _last_frame_rgba: np.ndarray | None = None

    def __post_init__(self) -> None:
        validate_attribute(self.color_by)

    @property
    def records(self) -> tuple[TweetRecord, ...]:
        return self._records

    @property
    def plan(self) -> BucketPlan | None:
        return self._plan

    @property
    def marks(self) -> tuple[RenderMark, ...]:
        return tuple(self._scene.marks)

    @property
    def legend(self) -> LegendSpec | None:
        return self._legend

    @property
    def animating(self) -> bool:
        return self._scene.animating

    def positions(self) -> dict[Any, tuple[float, float]]:
        return {mark.idx: (mark.x, mark.y) for mark in self._scene.marks}

    def load(self, records: Sequence[TweetRecord]) -> WriteBatch:
        """Full pass: discard prior state, lay out the visible prefix, paint."""
        self._scene.clear()
        self._static_rgba = None
        self._selected = frozenset()
        self._records = visible_prefix(records, self.config.max_records)
        self._plan = plan_buckets(self._records, self.config)

        simulation = CollisionSimulation(self._plan.seed_x, self._plan.seed_y, self.config)
        xs, ys = simulation.run()
        self._scene.replace_marks(
            RenderMark(idx=record.idx, x=float(x), y=float(y), fill=self._fill_for(record))
            for record, x, y in zip(self._records, xs, ys, strict=True)
        )
        self._legend = legend_spec(self.color_by)
        LOGGER.debug("laid out %d marks; residual overlap=%.3fpx", len(self._records), simulation.max_overlap())
        return compile_full_rewrite_batch(self.render())

    def set_color_by(self, attribute: str) -> WriteBatch | None:
        validate_attribute(attribute)
        self.color_by = attribute
        return self._restyle()

    def set_selection(self, selected: Iterable[Any]) -> WriteBatch | None:
        self._selected = frozenset(selected)
        return self._restyle()

    def advance(self, delta_ms: float) -> WriteBatch | None:
        """Step running fill transitions and patch the marks still changing."""
        if not self._scene.animating:
            return None
        moving = [mark for mark in self._scene.marks if mark.idx in self._scene.transitions]
        self._scene.advance(delta_ms)
        return self._patch_batch(moving, include_legend=False)

    def settle(self) -> WriteBatch | None:
        return self.advance(self.config.transition_ms)

    def hit_test(self, x: float, y: float) -> RenderMark | None:
        """Topmost mark under `(x, y)`; later marks paint over earlier ones."""
        for mark in reversed(self._scene.marks):
            if not mark.positioned:
                continue
            reach = self.config.mark_radius + (self.config.stroke_width / 2.0 if mark.stroked else 0.0)
            if (mark.x - x) ** 2 + (mark.y - y) ** 2 <= reach * reach:
                return mark
        return None

    def record_for(self, idx: Any) -> TweetRecord:
        for record in self._records:
            if record.idx == idx:
                return record
        raise KeyError(idx)

    def axis_ticks(self) -> list[tuple[str, float]]:
        if self._plan is None:
            return []
        return [(layout.category, layout.center_y) for layout in self._plan.categories]

    def legend_origin(self) -> tuple[int, int]:
        return (self.config.width - self.config.margins.right + LEGEND_OFFSET_X, self.config.margins.top)

    def legend_rect(self) -> tuple[int, int, int, int] | None:
        lx, ly = self.legend_origin()
        return self._clip((lx, ly - 6, self.config.width - lx, LEGEND_BOTTOM_BASELINE + 12))

    def render(self) -> np.ndarray:
        if self._plan is None:
            raise LayoutError("chart has no records loaded")
        if self._static_rgba is None:
            self._static_rgba = self._render_static()
        frame = self._static_rgba.copy()
        for mark in self._scene.marks:
            self._draw_mark(frame, mark)
        self._draw_legend(frame)
        self._last_frame_rgba = frame
        return frame

    def last_frame(self) -> np.ndarray | None:
        if self._last_frame_rgba is None:
            return None
        return self._last_frame_rgba.copy()

    def _fill_for(self, record: TweetRecord) -> RGBA | None:
        return mark_fill(self.color_by, record.attribute(self.color_by))

    def _restyle(self) -> WriteBatch | None:
        if self._plan is None:
            return None
        fills = {record.idx: self._fill_for(record) for record in self._records}
        changed = self._scene.restyle(fills, set(self._selected), duration_ms=self.config.transition_ms)
        self._legend = legend_spec(self.color_by)
        return self._patch_batch([after for _, after in changed], include_legend=True)

    def _patch_batch(self, marks: list[RenderMark], *, include_legend: bool) -> WriteBatch | None:
        rects: list[tuple[int, int, int, int]] = []
        frame = self.render()
        for mark in marks:
            if not mark.positioned:
                continue
            rect = self._clip(circle_bounds(mark.x, mark.y, self.config.mark_radius, self.config.stroke_width))
            if rect is not None:
                rects.append(rect)
        if include_legend:
            legend_rect = self.legend_rect()
            if legend_rect is not None:
                rects.append(legend_rect)
        if not rects:
            return None
        return compile_replace_patches_batch(frame, rects)

    def _render_static(self) -> np.ndarray:
        canvas = new_canvas(self.config.width, self.config.height, color=self.background)
        right = self.config.margins.left - AXIS_TICK_PADDING
        for label, y in self.axis_ticks():
            w, h = text_size(label, font_size_px=self.axis_font_px, bold=True)
            draw_text(
                canvas,
                right - w,
                int(round(y - h / 2.0)),
                label,
                self.text_color,
                font_size_px=self.axis_font_px,
                bold=True,
            )
        return canvas

    def _draw_mark(self, canvas: np.ndarray, mark: RenderMark) -> None:
        fill = self._scene.displayed_fill(mark)
        draw_circle(
            canvas,
            mark.x,
            mark.y,
            self.config.mark_radius,
            fill if fill is not None else self.missing_fill,
            stroke=self.stroke_color if mark.stroked else None,
            stroke_width=self.config.stroke_width,
        )

    def _draw_legend(self, canvas: np.ndarray) -> None:
        legend = self._legend
        if legend is None:
            return
        lx, ly = self.legend_origin()
        steps = len(legend.colors)
        rows = np.arange(LEGEND_SWATCH_H)
        band_of_row = np.minimum(rows * steps // LEGEND_SWATCH_H, steps - 1)
        for band in range(steps):
            hit = np.flatnonzero(band_of_row == band)
            if hit.size == 0:
                continue
            fill_rect(
                canvas,
                lx,
                ly + int(hit[0]),
                lx + LEGEND_SWATCH_W,
                ly + int(hit[-1]) + 1,
                legend.colors[band],
            )
        for label, baseline in ((legend.top_label, LEGEND_TOP_BASELINE), (legend.bottom_label, LEGEND_BOTTOM_BASELINE)):
            _, h = text_size(label, font_size_px=self.legend_font_px, bold=True)
            draw_text(
                canvas,
                lx + LEGEND_LABEL_DX,
                ly + baseline - h,
                label,
                self.text_color,
                font_size_px=self.legend_font_px,
                bold=True,
            )

    def _clip(self, rect: tuple[int, int, int, int]) -> tuple[int, int, int, int] | None:
        return clip_rect(rect, self.config.width, self.config.height)
