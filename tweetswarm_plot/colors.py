"""Color scales for mark fills and the stepped legend palettes.

Continuous scales interpolate in RGB between control colors; stepped palettes
interpolate in CIE Lab (D50 white point) so the legend swatches are
perceptually even.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import math

import numpy as np
from PIL import ImageColor

from tweetswarm_plot.errors import UnknownAttributeError


RGBA = tuple[int, int, int, int]

SENTIMENT = "Sentiment"
SUBJECTIVITY = "Subjectivity"
COLOR_ATTRIBUTES: tuple[str, ...] = (SENTIMENT, SUBJECTIVITY)

RED = "red"
GREEN = "green"
NEUTRAL = "#ECECEC"
BLUE = "#4467C4"

_XN = 0.96422
_YN = 1.0
_ZN = 0.82521
_T0 = 4.0 / 29.0
_T1 = 6.0 / 29.0
_T2 = 3.0 * _T1 * _T1
_T3 = _T1 * _T1 * _T1


@lru_cache(maxsize=64)
def parse_color(color: str) -> RGBA:
    r, g, b, *rest = ImageColor.getrgb(color)
    a = rest[0] if rest else 255
    return (int(r), int(g), int(b), int(a))


def _as_rgba(color: str | RGBA) -> RGBA:
    if isinstance(color, str):
        return parse_color(color)
    return tuple(int(c) for c in color)  # type: ignore[return-value]


def _round_channel(value: float) -> int:
    if not math.isfinite(value):
        return 0
    # JS-style half-up rounding, then clamp.
    return max(0, min(255, int(math.floor(value + 0.5))))


def interpolate_rgb(start: str | RGBA, end: str | RGBA, t: float) -> RGBA:
    a = _as_rgba(start)
    b = _as_rgba(end)
    return tuple(_round_channel(a[i] + (b[i] - a[i]) * t) for i in range(4))  # type: ignore[return-value]


def rgb_to_lab(color: str | RGBA) -> tuple[float, float, float]:
    r, g, b, _ = _as_rgba(color)
    lr = _rgb2lrgb(r)
    lg = _rgb2lrgb(g)
    lb = _rgb2lrgb(b)
    y = _xyz2lab((0.2225045 * lr + 0.7168786 * lg + 0.0606169 * lb) / _YN)
    if r == g == b:
        x = z = y
    else:
        x = _xyz2lab((0.4360747 * lr + 0.3850649 * lg + 0.1430804 * lb) / _XN)
        z = _xyz2lab((0.0139322 * lr + 0.0971045 * lg + 0.7141733 * lb) / _ZN)
    return (116.0 * y - 16.0, 500.0 * (x - y), 200.0 * (y - z))


def lab_to_rgb(l: float, a: float, b: float, alpha: int = 255) -> RGBA:
    y = (l + 16.0) / 116.0
    x = y + a / 500.0
    z = y - b / 200.0
    x = _XN * _lab2xyz(x)
    y = _YN * _lab2xyz(y)
    z = _ZN * _lab2xyz(z)
    return (
        _round_channel(_lrgb2rgb(3.1338561 * x - 1.6168667 * y - 0.4906146 * z)),
        _round_channel(_lrgb2rgb(-0.9787684 * x + 1.9161415 * y + 0.0334540 * z)),
        _round_channel(_lrgb2rgb(0.0719453 * x - 0.2289914 * y + 1.4052427 * z)),
        alpha,
    )


def interpolate_lab(start: str | RGBA, end: str | RGBA, t: float) -> RGBA:
    la = rgb_to_lab(start)
    lb = rgb_to_lab(end)
    alpha = interpolate_rgb(start, end, t)[3]
    return lab_to_rgb(*(la[i] + (lb[i] - la[i]) * t for i in range(3)), alpha=alpha)


def create_stepped_colors(start: str | RGBA, end: str | RGBA, steps: int) -> list[RGBA]:
    """`steps` evenly spaced Lab interpolations from `start` to `end` inclusive."""
    if steps <= 0:
        raise ValueError("steps must be > 0")
    if steps == 1:
        return [_as_rgba(start)]
    return [interpolate_lab(start, end, i / (steps - 1)) for i in range(steps)]


@dataclass(frozen=True)
class LinearColorScale:
    """Piecewise-linear value -> color scale over ascending control points."""

    domain: tuple[float, ...]
    colors: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.domain) < 2 or len(self.domain) != len(self.colors):
            raise ValueError("color scale needs >= 2 control points with one color each")
        if any(b <= a for a, b in zip(self.domain, self.domain[1:])):
            raise ValueError("color scale domain must be strictly ascending")

    def __call__(self, value: float | None) -> RGBA | None:
        if value is None or not math.isfinite(value):
            return None
        # Out-of-domain values extrapolate along the outermost segment.
        seg = int(np.searchsorted(np.asarray(self.domain[1:-1]), value, side="right"))
        d0 = self.domain[seg]
        d1 = self.domain[seg + 1]
        t = (value - d0) / (d1 - d0)
        return interpolate_rgb(self.colors[seg], self.colors[seg + 1], t)


SENTIMENT_SCALE = LinearColorScale(domain=(-1.0, 0.0, 1.0), colors=(RED, NEUTRAL, GREEN))
SUBJECTIVITY_SCALE = LinearColorScale(domain=(0.0, 1.0), colors=(BLUE, NEUTRAL))


def validate_attribute(attribute: str) -> str:
    if attribute not in COLOR_ATTRIBUTES:
        raise UnknownAttributeError(f"unknown color attribute: {attribute!r}")
    return attribute


def color_scale_for(attribute: str) -> LinearColorScale:
    if validate_attribute(attribute) == SENTIMENT:
        return SENTIMENT_SCALE
    return SUBJECTIVITY_SCALE


def color_of(attribute: str, value: float | None) -> RGBA | None:
    return color_scale_for(attribute)(value)


def mark_fill(attribute: str, value: float | None) -> RGBA | None:
    """Fill for one mark; subjectivity is inverted so subjective reads saturated."""
    scale = color_scale_for(attribute)
    if attribute == SUBJECTIVITY and value is not None:
        value = 1.0 - value
    return scale(value)


@dataclass(frozen=True)
class LegendSpec:
    attribute: str
    colors: tuple[RGBA, ...]
    top_label: str
    bottom_label: str

    def gradient_stops(self) -> list[tuple[float, RGBA]]:
        """Hard-edged stops: each color owns an equal band, offsets in percent."""
        band = 100.0 / len(self.colors)
        stops: list[tuple[float, RGBA]] = []
        for i, color in enumerate(self.colors):
            stops.append((i * band, color))
            stops.append(((i + 1) * band, color))
        return stops


@lru_cache(maxsize=None)
def sentiment_legend_colors() -> tuple[RGBA, ...]:
    green_to_neutral = create_stepped_colors(GREEN, NEUTRAL, 11)
    neutral_to_red = create_stepped_colors(NEUTRAL, RED, 10)
    return tuple(green_to_neutral + neutral_to_red[1:])


@lru_cache(maxsize=None)
def subjectivity_legend_colors() -> tuple[RGBA, ...]:
    return tuple(create_stepped_colors(BLUE, NEUTRAL, 20))


def legend_spec(attribute: str) -> LegendSpec:
    if validate_attribute(attribute) == SENTIMENT:
        return LegendSpec(attribute, sentiment_legend_colors(), "Positive", "Negative")
    return LegendSpec(attribute, subjectivity_legend_colors(), "Subjective", "Objective")


def _rgb2lrgb(x: float) -> float:
    x /= 255.0
    return x / 12.92 if x <= 0.04045 else ((x + 0.055) / 1.055) ** 2.4


def _lrgb2rgb(x: float) -> float:
    if x <= 0.0031308:
        return 255.0 * 12.92 * x
    return 255.0 * (1.055 * x ** (1.0 / 2.4) - 0.055)


def _xyz2lab(t: float) -> float:
    return t ** (1.0 / 3.0) if t > _T3 else t / _T2 + _T0


def _lab2xyz(t: float) -> float:
    return t * t * t if t > _T1 else _T2 * (t - _T0)
