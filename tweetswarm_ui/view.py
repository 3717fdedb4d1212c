from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Sequence

from tweetswarm_core.events import PointerEvent, PointerHandler, dispatch_pointer_event, parse_pointer_event
from tweetswarm_core.window_matrix import CallBlitEvent, Rect, WindowMatrix, WriteBatch, union_rects
from tweetswarm_plot.chart import SwarmChart
from tweetswarm_plot.config import ChartConfig
from tweetswarm_plot.records import TweetRecord, normalize_records

from .controls import ColorBySelect
from .panel import SelectionPanel
from .selection import SelectionSet


LOGGER = logging.getLogger(__name__)


@dataclass
class TweetSwarmView:
    """Chart, "Color by" select and selected-tweets list wired to one surface.

    All state changes come from three events: records loaded, color option
    changed, mark clicked. Only loading re-runs the layout.
    """

    config: ChartConfig = field(default_factory=ChartConfig)
    chart: SwarmChart = field(init=False)
    selection: SelectionSet = field(default_factory=SelectionSet)
    color_select: ColorBySelect = field(default_factory=ColorBySelect)
    panel: SelectionPanel = field(init=False)
    matrix: WindowMatrix = field(init=False)
    presented_revision: int = field(default=0, init=False)
    _container_handlers: list[PointerHandler] = field(default_factory=list, repr=False)
    _last_event: CallBlitEvent | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.chart = SwarmChart(config=self.config, color_by=self.color_select.value)
        self.panel = SelectionPanel(selection=self.selection, width=self.config.width)
        self.matrix = WindowMatrix(height=self.config.height, width=self.config.width, background=self.chart.background)
        self.color_select.on_change(self._on_color_by_changed)

    @property
    def loaded(self) -> bool:
        return self.chart.plan is not None

    def load_records(self, data: Sequence[TweetRecord] | Any) -> CallBlitEvent:
        """Replace the record set wholesale; the selection does not survive."""
        records = data if _is_record_tuple(data) else normalize_records(data)
        self.selection.clear()
        LOGGER.info("loading %d records", len(records))
        return self.matrix.submit_write_batch(self.chart.load(records))

    def select_color_by(self, value: str) -> CallBlitEvent | None:
        self._last_event = None
        self.color_select.select(value)
        return self._last_event

    def add_container_click_handler(self, handler: PointerHandler) -> None:
        """Handlers for clicks that reach the chart container (not stopped by a mark)."""
        self._container_handlers.append(handler)

    def click(self, x: float, y: float) -> CallBlitEvent | None:
        return self.dispatch(PointerEvent(event_type="click", x=x, y=y))

    def handle_pointer(self, event_type: str, payload: object) -> CallBlitEvent | None:
        """Entry point for raw pointer payloads; malformed ones are ignored."""
        event = parse_pointer_event(event_type, payload)
        if event is None:
            LOGGER.debug("ignoring pointer event %r with payload %r", event_type, payload)
            return None
        return self.dispatch(event)

    def dispatch(self, event: PointerEvent) -> CallBlitEvent | None:
        self._last_event = None
        dispatch_pointer_event(event, [self._on_mark_click, *self._container_handlers])
        return self._last_event

    def advance(self, delta_ms: float) -> CallBlitEvent | None:
        return self._submit(self.chart.advance(delta_ms))

    def settle(self) -> CallBlitEvent | None:
        return self._submit(self.chart.settle())

    def present(self) -> Rect | None:
        """Drain queued blits; returns the surface region changed since the last present."""
        events = self.matrix.drain_call_blits()
        if not events:
            return None
        self.presented_revision = events[-1].revision
        dirty = union_rects([event.dirty_rect for event in events])
        LOGGER.debug("presenting revision %d from %d blits, dirty=%s", self.presented_revision, len(events), dirty)
        return dirty

    def selected_texts(self) -> list[str]:
        return self.panel.lines()

    def _on_mark_click(self, event: PointerEvent) -> None:
        if event.event_type != "click":
            return
        mark = self.chart.hit_test(event.x, event.y)
        if mark is None:
            return
        event.stop_propagation()
        self.selection.toggle(self.chart.record_for(mark.idx))
        self._submit(self.chart.set_selection(self.selection.ids()))

    def _on_color_by_changed(self, value: str) -> None:
        if not self.loaded:
            self.chart.color_by = value
            self._last_event = None
            return
        self._submit(self.chart.set_color_by(value))

    def _submit(self, batch: WriteBatch | None) -> CallBlitEvent | None:
        self._last_event = None if batch is None else self.matrix.submit_write_batch(batch)
        return self._last_event


def _is_record_tuple(data: Any) -> bool:
    return isinstance(data, (tuple, list)) and all(isinstance(item, TweetRecord) for item in data)
