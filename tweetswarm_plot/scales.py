from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float | np.ndarray) -> float | np.ndarray:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        values = np.asarray(value, dtype=np.float64)
        if span == 0 or not np.isfinite(span):
            # Degenerate domain: every finite value lands mid-range.
            t = np.where(np.isfinite(values), 0.5 if span == 0 else np.nan, np.nan)
        else:
            t = (values - d0) / span
        out = r0 + (r1 - r0) * t
        if np.ndim(value) == 0:
            return float(out)
        return out


@dataclass(frozen=True)
class BandScale:
    """Ordinal band scale with equal inner and outer padding, centered."""

    domain: tuple[str, ...]
    range: tuple[float, float]
    padding: float = 0.0
    align: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 <= self.padding < 1.0:
            raise ValueError("band padding must be in [0, 1)")
        if not 0.0 <= self.align <= 1.0:
            raise ValueError("band align must be in [0, 1]")

    @property
    def step(self) -> float:
        n = len(self.domain)
        start, stop = self.range
        return (stop - start) / max(1.0, n - self.padding + self.padding * 2.0)

    @property
    def bandwidth(self) -> float:
        return self.step * (1.0 - self.padding)

    def _start(self) -> float:
        n = len(self.domain)
        start, stop = self.range
        return start + (stop - start - self.step * (n - self.padding)) * self.align

    def __call__(self, key: str | None) -> float:
        """Band start for `key`; NaN for keys outside the domain."""
        if key not in self.domain:
            return float("nan")
        return self._start() + self.step * self.domain.index(key)

    def center(self, key: str | None) -> float:
        return self(key) + self.bandwidth / 2.0


def finite_values(values: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    return arr[np.isfinite(arr)]


def median_and_half_range(values: Sequence[float] | np.ndarray) -> tuple[float, float] | None:
    """Median and (max - min) / 2 over finite values; None when there are none."""
    finite = finite_values(values)
    if finite.size == 0:
        return None
    median = float(np.median(finite))
    half = float(np.max(finite) - np.min(finite)) / 2.0
    return median, half
