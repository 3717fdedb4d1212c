"""Force relaxation that pulls marks toward their seeds while keeping them apart.

Each tick decays `alpha`, lets the x/y springs and the collision force adjust
velocities, then damps velocities and advances positions. Springs scale with
`alpha`, collision does not, so late ticks are almost pure overlap removal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Iterator

import numpy as np

from tweetswarm_plot.config import ChartConfig


LOGGER = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
JIGGLE_SCALE = 1e-6


def phyllotaxis(n: int) -> tuple[np.ndarray, np.ndarray]:
    i = np.arange(n, dtype=np.float64)
    radius = INITIAL_RADIUS * np.sqrt(0.5 + i)
    angle = i * INITIAL_ANGLE
    return radius * np.cos(angle), radius * np.sin(angle)


@dataclass
class CollisionSimulation:
    seed_x: np.ndarray
    seed_y: np.ndarray
    config: ChartConfig
    alpha: float = 1.0
    alpha_target: float = 0.0
    ticks_run: int = 0
    x: np.ndarray = field(init=False)
    y: np.ndarray = field(init=False)
    vx: np.ndarray = field(init=False)
    vy: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.seed_x = np.asarray(self.seed_x, dtype=np.float64)
        self.seed_y = np.asarray(self.seed_y, dtype=np.float64)
        if self.seed_x.shape != self.seed_y.shape or self.seed_x.ndim != 1:
            raise ValueError("seed_x and seed_y must be 1-D arrays of equal length")
        n = self.seed_x.size
        self.x, self.y = phyllotaxis(n)
        self.vx = np.zeros(n, dtype=np.float64)
        self.vy = np.zeros(n, dtype=np.float64)
        self.alpha_decay = 1.0 - self.config.alpha_min ** (1.0 / 300.0)
        self._rng = np.random.default_rng(self.config.seed)

    @property
    def size(self) -> int:
        return int(self.seed_x.size)

    def tick(self) -> None:
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
        self._apply_position_force(self.alpha)
        self._apply_collision_force()
        keep = 1.0 - self.config.velocity_decay
        self.vx *= keep
        self.vy *= keep
        self.x += self.vx
        self.y += self.vy
        self.ticks_run += 1

    def run(self, iterations: int | None = None) -> tuple[np.ndarray, np.ndarray]:
        """Run the fixed tick count synchronously and return final positions."""
        count = self.config.iterations if iterations is None else iterations
        for _ in range(count):
            self.tick()
        LOGGER.debug(
            "relaxed %d marks in %d ticks; residual overlap=%.3fpx",
            self.size,
            self.ticks_run,
            self.max_overlap(),
        )
        return self.x.copy(), self.y.copy()

    def iter_chunks(self, chunk_size: int = 25, iterations: int | None = None) -> Iterator[int]:
        """Same ticks as `run`, yielding the completed tick count after every chunk."""
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        remaining = self.config.iterations if iterations is None else iterations
        while remaining > 0:
            step = min(chunk_size, remaining)
            for _ in range(step):
                self.tick()
            remaining -= step
            yield self.ticks_run

    def max_overlap(self) -> float:
        """Largest pairwise shortfall below the collision separation, in pixels."""
        if self.size < 2:
            return 0.0
        dist = _pairwise_distance(self.x, self.y)
        finite = np.isfinite(dist)
        np.fill_diagonal(finite, False)
        if not np.any(finite):
            return 0.0
        shortfall = 2.0 * self.config.collision_radius - dist[finite]
        return float(max(0.0, np.max(shortfall)))

    def _apply_position_force(self, alpha: float) -> None:
        k = self.config.position_strength * alpha
        self.vx += (self.seed_x - self.x) * k
        self.vy += (self.seed_y - self.y) * k

    def _apply_collision_force(self) -> None:
        n = self.size
        if n < 2 or self.config.collision_strength == 0.0:
            return
        # Predicted positions, as the collision resolves where marks are heading.
        px = self.x + self.vx
        py = self.y + self.vy
        dx = px[:, None] - px[None, :]
        dy = py[:, None] - py[None, :]
        valid = np.isfinite(dx) & np.isfinite(dy)
        np.fill_diagonal(valid, False)
        separation = 2.0 * self.config.collision_radius

        close = valid & (np.abs(dx) < separation) & (np.abs(dy) < separation)
        if not np.any(close):
            return
        dx = np.where(close, dx, 0.0)
        dy = np.where(close, dy, 0.0)
        dx = self._jiggle_zeros(dx, close)
        dy = self._jiggle_zeros(dy, close)

        dist_sq = dx * dx + dy * dy
        overlapping = close & (dist_sq < separation * separation)
        if not np.any(overlapping):
            return
        dist = np.sqrt(np.where(overlapping, dist_sq, 1.0))
        push = np.where(overlapping, (separation - dist) / dist * self.config.collision_strength, 0.0)
        # Equal radii split each correction evenly between the two marks.
        self.vx += 0.5 * np.sum(dx * push, axis=1)
        self.vy += 0.5 * np.sum(dy * push, axis=1)

    def _jiggle_zeros(self, delta: np.ndarray, mask: np.ndarray) -> np.ndarray:
        zero = mask & (delta == 0.0)
        if not np.any(zero):
            return delta
        n = delta.shape[0]
        noise = (self._rng.random((n, n)) - 0.5) * JIGGLE_SCALE
        upper = np.triu(noise, k=1)
        antisymmetric = upper - upper.T
        return np.where(zero, antisymmetric, delta)


def relax_positions(seed_x: np.ndarray, seed_y: np.ndarray, config: ChartConfig) -> tuple[np.ndarray, np.ndarray]:
    return CollisionSimulation(seed_x=seed_x, seed_y=seed_y, config=config).run()


def _pairwise_distance(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    dx = x[:, None] - x[None, :]
    dy = y[:, None] - y[None, :]
    return np.sqrt(dx * dx + dy * dy)
