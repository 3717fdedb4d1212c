from __future__ import annotations

import math
import unittest

import numpy as np

from tweetswarm_plot.config import ChartConfig
from tweetswarm_plot.relax import CollisionSimulation, phyllotaxis, relax_positions


def _min_separation(x: np.ndarray, y: np.ndarray) -> float:
    dx = x[:, None] - x[None, :]
    dy = y[:, None] - y[None, :]
    dist = np.sqrt(dx * dx + dy * dy)
    np.fill_diagonal(dist, np.inf)
    return float(np.min(dist))


class RelaxationTests(unittest.TestCase):
    def test_phyllotaxis_starts_spread_out(self) -> None:
        x, y = phyllotaxis(3)
        self.assertAlmostEqual(x[0], 10.0 * math.sqrt(0.5))
        self.assertAlmostEqual(y[0], 0.0)
        self.assertAlmostEqual(math.hypot(x[2], y[2]), 10.0 * math.sqrt(2.5))

    def test_single_mark_settles_on_its_seed(self) -> None:
        x, y = relax_positions(np.asarray([500.0]), np.asarray([300.0]), ChartConfig())
        self.assertAlmostEqual(float(x[0]), 500.0, delta=1.0)
        self.assertAlmostEqual(float(y[0]), 300.0, delta=1.0)

    def test_coincident_seeds_are_pushed_apart(self) -> None:
        n = 20
        seeds = np.full(n, 400.0)
        config = ChartConfig()
        sim = CollisionSimulation(seeds, np.full(n, 300.0), config)
        x, y = sim.run()
        self.assertEqual(sim.ticks_run, 500)
        self.assertGreaterEqual(_min_separation(x, y), 0.9 * 2.0 * config.collision_radius)
        self.assertLess(sim.max_overlap(), 1.5)
        # The cluster stays around the shared seed.
        self.assertAlmostEqual(float(np.mean(x)), 400.0, delta=10.0)
        self.assertAlmostEqual(float(np.mean(y)), 300.0, delta=10.0)

    def test_runs_are_deterministic_for_a_seed(self) -> None:
        seeds_x = np.asarray([100.0, 100.0, 101.0, 250.0])
        seeds_y = np.asarray([50.0, 50.0, 50.0, 60.0])
        a = relax_positions(seeds_x, seeds_y, ChartConfig(seed=7))
        b = relax_positions(seeds_x, seeds_y, ChartConfig(seed=7))
        self.assertTrue(np.array_equal(a[0], b[0]))
        self.assertTrue(np.array_equal(a[1], b[1]))

    def test_unseeded_marks_do_not_disturb_others(self) -> None:
        seeds_x = np.asarray([200.0, np.nan, 400.0])
        seeds_y = np.asarray([300.0, np.nan, 300.0])
        x, y = relax_positions(seeds_x, seeds_y, ChartConfig())
        self.assertTrue(math.isnan(x[1]) and math.isnan(y[1]))
        self.assertAlmostEqual(float(x[0]), 200.0, delta=1.0)
        self.assertAlmostEqual(float(x[2]), 400.0, delta=1.0)

    def test_chunks_match_full_run(self) -> None:
        seeds_x = np.full(6, 300.0)
        seeds_y = np.full(6, 200.0)
        config = ChartConfig(iterations=60)
        chunked = CollisionSimulation(seeds_x, seeds_y, config)
        self.assertEqual(list(chunked.iter_chunks(chunk_size=25)), [25, 50, 60])
        full = CollisionSimulation(seeds_x, seeds_y, config)
        x, y = full.run()
        self.assertTrue(np.allclose(chunked.x, x))
        self.assertTrue(np.allclose(chunked.y, y))
        with self.assertRaises(ValueError):
            next(chunked.iter_chunks(chunk_size=0))

    def test_alpha_decays_toward_minimum(self) -> None:
        sim = CollisionSimulation(np.zeros(1), np.zeros(1), ChartConfig())
        sim.run(iterations=300)
        self.assertAlmostEqual(sim.alpha, 0.001, places=6)

    def test_mismatched_seeds_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CollisionSimulation(np.zeros(2), np.zeros(3), ChartConfig())


if __name__ == "__main__":
    unittest.main()
