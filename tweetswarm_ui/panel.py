from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tweetswarm_plot.raster import draw_circle, draw_text, new_canvas, text_size
from tweetswarm_plot.raster.canvas import RGBA

from .selection import SelectionSet


PANEL_HEADING = "Selected Tweets"


@dataclass
class SelectionPanel:
    """Side list of selected tweet texts, in selection order."""

    selection: SelectionSet
    heading: str = PANEL_HEADING
    width: int = 1200
    font_px: float = 14.0
    heading_font_px: float = 18.0
    line_gap: int = 6
    background: RGBA = (255, 255, 255, 255)
    text_color: RGBA = (0, 0, 0, 255)

    def lines(self) -> list[str]:
        return [record.raw_tweet or "" for record in self.selection]

    def render(self) -> np.ndarray:
        _, heading_h = text_size(self.heading, font_size_px=self.heading_font_px, bold=True)
        _, line_h = text_size("Ag", font_size_px=self.font_px)
        items = self.lines()
        pad = 10
        height = pad * 2 + heading_h + self.line_gap * 2 + len(items) * (line_h + self.line_gap)
        canvas = new_canvas(self.width, max(1, height), color=self.background)
        draw_text(canvas, pad, pad, self.heading, self.text_color, font_size_px=self.heading_font_px, bold=True)
        y = pad + heading_h + self.line_gap * 2
        for text in items:
            draw_circle(canvas, pad + 12, y + line_h / 2.0, 2.5, self.text_color)
            draw_text(canvas, pad + 22, y, _single_line(text), self.text_color, font_size_px=self.font_px)
            y += line_h + self.line_gap
        return canvas


def _single_line(text: str) -> str:
    return " ".join(text.split())
