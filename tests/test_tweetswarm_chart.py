from __future__ import annotations

import unittest

import numpy as np

from tweetswarm_core.window_matrix import FullRewrite, ReplaceRect
from tweetswarm_plot.chart import SwarmChart
from tweetswarm_plot.colors import legend_spec, mark_fill
from tweetswarm_plot.config import ChartConfig
from tweetswarm_plot.errors import LayoutError, UnknownAttributeError
from tweetswarm_plot.records import TweetRecord
from tweetswarm_plot.scene import FillTransition, RenderMark, Scene, diff_marks, ease_cubic_in_out

MONTHS = ("March", "April", "May")


def _records(n: int) -> list[TweetRecord]:
    out: list[TweetRecord] = []
    for i in range(n):
        out.append(
            TweetRecord(
                idx=i,
                month=MONTHS[i % 3],
                dimension_1=float(i * 7 % 23),
                sentiment=((i % 9) - 4) / 4.0,
                subjectivity=(i % 5) / 4.0,
                raw_tweet=f"tweet number {i}",
            )
        )
    return out


def _chart_config(**overrides: object) -> ChartConfig:
    values: dict[str, object] = {"category_shifts": {}, "iterations": 200}
    values.update(overrides)
    return ChartConfig(**values)  # type: ignore[arg-type]


class SwarmChartTests(unittest.TestCase):
    def setUp(self) -> None:
        self.chart = SwarmChart(config=_chart_config())
        self.records = _records(24)

    def test_render_before_load_fails(self) -> None:
        with self.assertRaises(LayoutError):
            self.chart.render()
        self.assertIsNone(self.chart.set_color_by("Subjectivity"))

    def test_load_emits_full_frame(self) -> None:
        batch = self.chart.load(self.records)
        self.assertEqual(len(batch.operations), 1)
        op = batch.operations[0]
        self.assertIsInstance(op, FullRewrite)
        self.assertEqual(tuple(op.tensor_h_w_4.shape), (600, 1200, 4))
        self.assertEqual(len(self.chart.marks), 24)
        self.assertEqual([m.idx for m in self.chart.marks], list(range(24)))

    def test_load_caps_visible_records(self) -> None:
        chart = SwarmChart(config=_chart_config(max_records=10))
        with self.assertLogs("tweetswarm_plot.records", level="INFO"):
            chart.load(self.records)
        self.assertEqual(len(chart.marks), 10)
        self.assertEqual(sum(layout.count for layout in chart.plan.categories), 10)

    def test_mark_fills_follow_color_attribute(self) -> None:
        self.chart.load(self.records)
        for record, mark in zip(self.records, self.chart.marks):
            self.assertEqual(mark.fill, mark_fill("Sentiment", record.sentiment))
            self.assertFalse(mark.stroked)

    def test_color_change_keeps_positions_and_transitions(self) -> None:
        self.chart.load(self.records)
        before = self.chart.positions()
        batch = self.chart.set_color_by("Subjectivity")
        self.assertIsNotNone(batch)
        self.assertTrue(all(isinstance(op, ReplaceRect) for op in batch.operations))
        self.assertEqual(self.chart.positions(), before)
        self.assertEqual(self.chart.legend, legend_spec("Subjectivity"))
        self.assertTrue(self.chart.animating)

        self.assertIsNotNone(self.chart.advance(250.0))
        self.assertTrue(self.chart.animating)
        self.chart.settle()
        self.assertFalse(self.chart.animating)
        self.assertIsNone(self.chart.advance(16.0))
        for record, mark in zip(self.records, self.chart.marks):
            self.assertEqual(mark.fill, mark_fill("Subjectivity", record.subjectivity))

    def test_reselecting_same_color_only_patches_legend(self) -> None:
        self.chart.load(self.records)
        batch = self.chart.set_color_by("Sentiment")
        self.assertEqual(len(batch.operations), 1)
        op = batch.operations[0]
        self.assertEqual((op.x, op.y), self.chart.legend_rect()[:2])
        self.assertFalse(self.chart.animating)

    def test_unknown_color_attribute_is_rejected(self) -> None:
        self.chart.load(self.records)
        with self.assertRaises(UnknownAttributeError):
            self.chart.set_color_by("Month")
        with self.assertRaises(ValueError):
            SwarmChart(color_by="Dimension 1")

    def test_selection_strokes_marks_without_relayout(self) -> None:
        self.chart.load(self.records)
        before = self.chart.positions()
        self.chart.set_selection({3, 5})
        stroked = {mark.idx for mark in self.chart.marks if mark.stroked}
        self.assertEqual(stroked, {3, 5})
        self.assertFalse(self.chart.animating)
        self.assertEqual(self.chart.positions(), before)

        mark = next(m for m in self.chart.marks if m.idx == 3)
        frame = self.chart.last_frame()
        edge = frame[int(mark.y), int(mark.x + 6)]
        self.assertLess(int(edge[:3].max()), 100)

    def test_hit_test_finds_mark_under_pointer(self) -> None:
        self.chart.load(self.records)
        mark = self.chart.marks[7]
        hit = self.chart.hit_test(mark.x + 2.0, mark.y - 2.0)
        self.assertIsNotNone(hit)
        self.assertEqual(hit.idx, 7)
        self.assertIsNone(self.chart.hit_test(2.0, 2.0))
        self.assertEqual(self.chart.record_for(7).raw_tweet, "tweet number 7")

    def test_missing_attribute_paints_black(self) -> None:
        records = self.records + [
            TweetRecord(idx=99, month="April", dimension_1=3.0, sentiment=float("nan"), subjectivity=0.5, raw_tweet=None)
        ]
        batch = self.chart.load(records)
        frame = batch.operations[0].tensor_h_w_4.numpy()
        mark = self.chart.marks[-1]
        self.assertIsNone(mark.fill)
        self.assertEqual(frame[int(mark.y), int(mark.x)].tolist(), [0, 0, 0, 255])

    def test_unplaced_marks_are_not_drawn(self) -> None:
        records = self.records + [
            TweetRecord(idx=50, month="June", dimension_1=1.0, sentiment=0.0, subjectivity=0.0, raw_tweet="lost")
        ]
        self.chart.load(records)
        mark = self.chart.marks[-1]
        self.assertFalse(mark.positioned)
        self.assertEqual(len(self.chart.marks), 25)

    def test_legend_swatch_and_axis_labels_are_painted(self) -> None:
        self.chart.load(self.records)
        frame = self.chart.last_frame()
        lx, ly = self.chart.legend_origin()
        self.assertEqual((lx, ly), (1070, 50))
        colors = self.chart.legend.colors
        self.assertEqual(tuple(frame[ly + 1, lx + 10].tolist()), colors[0])
        self.assertEqual(tuple(frame[ly + 148, lx + 10].tolist()), colors[-1])
        for _, center_y in self.chart.axis_ticks():
            region = frame[int(center_y) - 8 : int(center_y) + 8, 0:97, :3]
            self.assertLess(int(region.min()), 128)

    def test_reload_discards_previous_state(self) -> None:
        self.chart.load(self.records)
        self.chart.set_selection({1})
        self.chart.load(self.records[:6])
        self.assertEqual(len(self.chart.marks), 6)
        self.assertFalse(any(mark.stroked for mark in self.chart.marks))

    def test_frames_are_reproducible(self) -> None:
        first = self.chart.load(self.records).operations[0].tensor_h_w_4.numpy().copy()
        other = SwarmChart(config=_chart_config())
        second = other.load(self.records).operations[0].tensor_h_w_4.numpy()
        self.assertTrue(np.array_equal(first, second))


class SceneTests(unittest.TestCase):
    def test_cubic_easing_endpoints_and_midpoint(self) -> None:
        self.assertEqual(ease_cubic_in_out(0.0), 0.0)
        self.assertEqual(ease_cubic_in_out(0.5), 0.5)
        self.assertEqual(ease_cubic_in_out(1.0), 1.0)
        self.assertLess(ease_cubic_in_out(0.25), 0.25)

    def test_fill_transition_samples_between_colors(self) -> None:
        transition = FillTransition(start=(0, 0, 0, 255), end=(200, 100, 0, 255), duration_ms=500.0)
        self.assertEqual(transition.sample(0.0), (0, 0, 0, 255))
        self.assertEqual(transition.sample(250.0), (100, 50, 0, 255))
        self.assertEqual(transition.sample(600.0), (200, 100, 0, 255))
        snap = FillTransition(start=None, end=(1, 2, 3, 255), duration_ms=500.0)
        self.assertIsNone(snap.sample(100.0))
        self.assertEqual(snap.sample(500.0), (1, 2, 3, 255))

    def test_restyle_reports_only_changed_marks(self) -> None:
        scene = Scene()
        scene.replace_marks(
            [RenderMark(1, 10.0, 10.0, (1, 1, 1, 255)), RenderMark(2, 40.0, 10.0, (2, 2, 2, 255))]
        )
        changed = scene.restyle({1: (1, 1, 1, 255), 2: (9, 9, 9, 255)}, {1}, duration_ms=100.0)
        self.assertEqual([after.idx for _, after in changed], [1, 2])
        self.assertEqual(set(scene.transitions), {2})
        self.assertTrue(scene.marks[0].stroked)
        self.assertTrue(scene.advance(50.0))
        self.assertFalse(scene.advance(50.0))
        self.assertEqual(scene.displayed_fill(scene.marks[1]), (9, 9, 9, 255))

    def test_restyle_restarts_marks_caught_mid_transition(self) -> None:
        scene = Scene()
        scene.replace_marks(
            [RenderMark(1, 10.0, 10.0, (0, 0, 0, 255)), RenderMark(2, 40.0, 10.0, (0, 0, 0, 255))]
        )
        scene.restyle({1: (200, 200, 200, 255), 2: (200, 200, 200, 255)}, set(), duration_ms=100.0)
        scene.advance(50.0)
        halfway = scene.displayed_fill(scene.marks[1])
        self.assertEqual(halfway, (100, 100, 100, 255))

        changed = scene.restyle({1: (200, 200, 200, 255), 2: (200, 200, 200, 255)}, {1}, duration_ms=100.0)
        self.assertEqual(sorted(after.idx for _, after in changed), [1, 2])
        self.assertEqual(set(scene.transitions), {1, 2})
        self.assertEqual(scene.displayed_fill(scene.marks[1]), halfway)
        self.assertFalse(scene.advance(100.0))
        self.assertEqual(scene.displayed_fill(scene.marks[1]), (200, 200, 200, 255))

    def test_diff_matches_by_idx(self) -> None:
        before = [RenderMark(1, 0.0, 0.0, None), RenderMark(2, 5.0, 5.0, None)]
        after = [RenderMark(2, 5.0, 5.0, None), RenderMark(1, 1.0, 0.0, None), RenderMark(3, 2.0, 2.0, None)]
        self.assertEqual([new.idx for _, new in diff_marks(before, after)], [1, 3])


if __name__ == "__main__":
    unittest.main()
