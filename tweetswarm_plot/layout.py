from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

import numpy as np

from tweetswarm_plot.config import ChartConfig
from tweetswarm_plot.records import TweetRecord
from tweetswarm_plot.scales import BandScale, LinearScale, median_and_half_range


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryLayout:
    """Horizontal allotment and vertical band for one category (time bucket)."""

    category: str
    count: int
    width: float
    x_start: float
    shift: float
    band_y: float
    band_height: float
    scale: LinearScale | None

    @property
    def center_y(self) -> float:
        return self.band_y + self.band_height / 2.0

    @property
    def x_range(self) -> tuple[float, float]:
        return (self.x_start + self.shift, self.x_start + self.width + self.shift)


@dataclass(frozen=True)
class BucketPlan:
    categories: tuple[CategoryLayout, ...]
    band_scale: BandScale
    seed_x: np.ndarray
    seed_y: np.ndarray

    def category(self, name: str) -> CategoryLayout:
        for layout in self.categories:
            if layout.category == name:
                return layout
        raise KeyError(name)

    def total_width(self) -> float:
        return float(sum(layout.width for layout in self.categories))

    def summary(self) -> list[dict[str, object]]:
        return [
            {
                "category": layout.category,
                "count": layout.count,
                "width": layout.width,
                "x_range": list(layout.x_range),
                "center_y": layout.center_y,
                "domain": None if layout.scale is None else list(layout.scale.domain),
            }
            for layout in self.categories
        ]


def plan_buckets(records: Sequence[TweetRecord], config: ChartConfig) -> BucketPlan:
    """Seed positions: band center for y, median-centered per-category scale for x."""

    categories = config.categories
    margins = config.margins
    band_scale = BandScale(
        domain=tuple(categories),
        range=(float(margins.top), float(config.height - margins.bottom)),
        padding=config.band_padding,
    )

    months = [record.month for record in records]
    dim1 = np.asarray([record.dimension_1 for record in records], dtype=np.float64)
    counts = [sum(1 for m in months if m == category) for category in categories]
    total = sum(counts)
    available = config.available_width

    layouts: list[CategoryLayout] = []
    cumulative_x = float(margins.left)
    for category, count in zip(categories, counts, strict=True):
        width = (count / total) * available if total > 0 else 0.0
        shift = config.shift_for(category)
        scale: LinearScale | None = None
        if count > 0:
            values = dim1[[i for i, m in enumerate(months) if m == category]]
            stats = median_and_half_range(values)
            if stats is not None:
                median, half = stats
                scale = LinearScale(
                    domain=(median - half, median + half),
                    range=(cumulative_x + shift, cumulative_x + width + shift),
                )
        layouts.append(
            CategoryLayout(
                category=category,
                count=count,
                width=width,
                x_start=cumulative_x,
                shift=shift,
                band_y=band_scale(category),
                band_height=band_scale.bandwidth,
                scale=scale,
            )
        )
        cumulative_x += width

    by_name = {layout.category: layout for layout in layouts}
    seed_x = np.full(len(records), np.nan, dtype=np.float64)
    seed_y = np.full(len(records), np.nan, dtype=np.float64)
    for i, month in enumerate(months):
        layout = by_name.get(month) if month is not None else None
        if layout is None:
            continue
        seed_y[i] = layout.center_y
        if layout.scale is not None:
            seed_x[i] = layout.scale(float(dim1[i]))

    LOGGER.debug(
        "planned %d records over %d categories; counts=%s widths=%s",
        len(records),
        len(layouts),
        counts,
        [round(layout.width, 2) for layout in layouts],
    )
    return BucketPlan(categories=tuple(layouts), band_scale=band_scale, seed_x=seed_x, seed_y=seed_y)
