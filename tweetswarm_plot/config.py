from __future__ import annotations

from dataclasses import asdict, dataclass, field
import math
from pathlib import Path
import tomllib
from typing import Any, Mapping


DEFAULT_CATEGORIES: tuple[str, ...] = ("March", "April", "May")
DEFAULT_CATEGORY_SHIFTS: dict[str, float] = {"March": 200.0, "April": -150.0, "May": -400.0}


@dataclass(frozen=True)
class Margins:
    top: int = 50
    right: int = 150
    bottom: int = 50
    left: int = 100

    def __post_init__(self) -> None:
        for name in ("top", "right", "bottom", "left"):
            if getattr(self, name) < 0:
                raise ValueError(f"margin `{name}` must be >= 0")


@dataclass(frozen=True)
class ChartConfig:
    """Sizing and tuning constants for layout, relaxation and painting.

    `category_shifts` are hand-tuned horizontal offsets per category; they have
    no derivation rule and may make neighbouring bands overlap.
    """

    width: int = 1200
    height: int = 600
    margins: Margins = field(default_factory=Margins)
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    category_shifts: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_SHIFTS))
    band_padding: float = 0.3
    max_records: int = 300
    position_strength: float = 0.7
    collision_radius: float = 7.5
    collision_strength: float = 1.0
    iterations: int = 500
    velocity_decay: float = 0.4
    alpha_min: float = 0.001
    seed: int = 0
    mark_radius: float = 6.0
    stroke_width: int = 2
    transition_ms: float = 500.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        if self.margins.left + self.margins.right >= self.width:
            raise ValueError("horizontal margins leave no plotting width")
        if self.margins.top + self.margins.bottom >= self.height:
            raise ValueError("vertical margins leave no plotting height")
        if not self.categories:
            raise ValueError("categories must not be empty")
        if len(set(self.categories)) != len(self.categories):
            raise ValueError("categories must be unique")
        for name, shift in self.category_shifts.items():
            if not isinstance(shift, (int, float)) or not math.isfinite(shift):
                raise ValueError(f"category shift for `{name}` must be a finite number")
        if not 0.0 <= self.band_padding < 1.0:
            raise ValueError("band_padding must be in [0, 1)")
        if self.max_records <= 0:
            raise ValueError("max_records must be > 0")
        if self.position_strength < 0.0 or self.collision_strength < 0.0:
            raise ValueError("force strengths must be >= 0")
        if self.collision_radius <= 0.0:
            raise ValueError("collision_radius must be > 0")
        if self.iterations < 0:
            raise ValueError("iterations must be >= 0")
        if not 0.0 <= self.velocity_decay <= 1.0:
            raise ValueError("velocity_decay must be in [0, 1]")
        if not 0.0 < self.alpha_min < 1.0:
            raise ValueError("alpha_min must be in (0, 1)")
        if self.mark_radius <= 0.0:
            raise ValueError("mark_radius must be > 0")
        if self.stroke_width < 0:
            raise ValueError("stroke_width must be >= 0")
        if self.transition_ms < 0.0:
            raise ValueError("transition_ms must be >= 0")

    @property
    def available_width(self) -> float:
        return float(self.width - self.margins.left - self.margins.right)

    def shift_for(self, category: str) -> float:
        return float(self.category_shifts.get(category, 0.0))


DEFAULT_CONFIG = ChartConfig()


def chart_config_from_mapping(overrides: Mapping[str, Any] | None = None) -> ChartConfig:
    """Merge `overrides` over the defaults, rejecting unknown keys."""

    raw: dict[str, Any] = {name: getattr(DEFAULT_CONFIG, name) for name in DEFAULT_CONFIG.__dataclass_fields__}
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown chart setting: {key}")
            raw[key] = value

    margins = raw["margins"]
    if isinstance(margins, Mapping):
        base = asdict(DEFAULT_CONFIG.margins)
        for key in margins:
            if key not in base:
                raise ValueError(f"Unknown margin: {key}")
        base.update({k: int(v) for k, v in margins.items()})
        raw["margins"] = Margins(**base)
    elif not isinstance(margins, Margins):
        raise ValueError("Setting `margins` must be a table of top/right/bottom/left")

    raw["categories"] = tuple(str(c) for c in raw["categories"])
    raw["category_shifts"] = {str(k): float(v) for k, v in dict(raw["category_shifts"]).items()}
    return ChartConfig(**raw)


def load_chart_config(path: Path) -> ChartConfig:
    if not path.exists():
        raise FileNotFoundError(f"chart config not found: {path}")
    with path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", {})
    if not isinstance(table, dict):
        raise ValueError("`chart` must be a table")
    return chart_config_from_mapping(table)
