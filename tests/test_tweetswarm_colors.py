from __future__ import annotations

import unittest

import numpy as np

from tweetswarm_plot.colors import (
    BLUE,
    GREEN,
    NEUTRAL,
    RED,
    color_of,
    create_stepped_colors,
    lab_to_rgb,
    legend_spec,
    mark_fill,
    parse_color,
    rgb_to_lab,
    sentiment_legend_colors,
    subjectivity_legend_colors,
)
from tweetswarm_plot.errors import UnknownAttributeError

RED_RGBA = (255, 0, 0, 255)
GREEN_RGBA = (0, 128, 0, 255)
NEUTRAL_RGBA = (236, 236, 236, 255)
BLUE_RGBA = (68, 103, 196, 255)


class ColorParsingTests(unittest.TestCase):
    def test_named_and_hex_colors(self) -> None:
        self.assertEqual(parse_color(RED), RED_RGBA)
        self.assertEqual(parse_color(GREEN), GREEN_RGBA)
        self.assertEqual(parse_color(NEUTRAL), NEUTRAL_RGBA)
        self.assertEqual(parse_color(BLUE), BLUE_RGBA)

    def test_lab_round_trip_is_exact_after_rounding(self) -> None:
        for color in (RED_RGBA, GREEN_RGBA, NEUTRAL_RGBA, BLUE_RGBA):
            self.assertEqual(lab_to_rgb(*rgb_to_lab(color)), color)

    def test_neutral_gray_has_no_chroma(self) -> None:
        _, a, b = rgb_to_lab(NEUTRAL_RGBA)
        self.assertAlmostEqual(a, 0.0, places=9)
        self.assertAlmostEqual(b, 0.0, places=9)


class ContinuousScaleTests(unittest.TestCase):
    def test_sentiment_control_points(self) -> None:
        self.assertEqual(color_of("Sentiment", -1.0), RED_RGBA)
        self.assertEqual(color_of("Sentiment", 0.0), NEUTRAL_RGBA)
        self.assertEqual(color_of("Sentiment", 1.0), GREEN_RGBA)

    def test_sentiment_interpolates_in_rgb(self) -> None:
        self.assertEqual(color_of("Sentiment", -0.5), (246, 118, 118, 255))

    def test_sentiment_channels_monotonic_per_segment(self) -> None:
        neg = np.asarray([color_of("Sentiment", v) for v in np.linspace(-1.0, 0.0, 41)])
        pos = np.asarray([color_of("Sentiment", v) for v in np.linspace(0.0, 1.0, 41)])
        self.assertTrue(np.all(np.diff(neg[:, 0]) <= 0))
        self.assertTrue(np.all(np.diff(neg[:, 1]) >= 0))
        self.assertTrue(np.all(np.diff(pos[:, 0]) <= 0))
        self.assertTrue(np.all(np.diff(pos[:, 1]) <= 0))
        self.assertTrue(np.all(np.diff(pos[:, 2]) <= 0))

    def test_out_of_domain_values_are_clamped(self) -> None:
        self.assertEqual(color_of("Sentiment", 3.0)[:3], (0, 0, 0))
        self.assertEqual(color_of("Subjectivity", -1.0)[:3], (0, 0, 156))

    def test_missing_values_have_no_color(self) -> None:
        self.assertIsNone(color_of("Sentiment", float("nan")))
        self.assertIsNone(mark_fill("Subjectivity", None))

    def test_subjectivity_mark_fill_is_inverted(self) -> None:
        self.assertEqual(color_of("Subjectivity", 0.0), BLUE_RGBA)
        self.assertEqual(mark_fill("Subjectivity", 1.0), BLUE_RGBA)
        self.assertEqual(mark_fill("Subjectivity", 0.0), NEUTRAL_RGBA)
        self.assertEqual(mark_fill("Sentiment", 1.0), GREEN_RGBA)

    def test_unknown_attribute_is_rejected(self) -> None:
        with self.assertRaises(UnknownAttributeError):
            color_of("Month", 0.5)
        with self.assertRaises(ValueError):
            mark_fill("Dimension 1", 0.5)
        with self.assertRaises(UnknownAttributeError):
            legend_spec("sentiment")


class SteppedPaletteTests(unittest.TestCase):
    def test_stepped_colors_keep_endpoints(self) -> None:
        colors = create_stepped_colors(GREEN, NEUTRAL, 11)
        self.assertEqual(len(colors), 11)
        self.assertEqual(colors[0], GREEN_RGBA)
        self.assertEqual(colors[-1], NEUTRAL_RGBA)

    def test_stepped_colors_rejects_zero_steps(self) -> None:
        with self.assertRaises(ValueError):
            create_stepped_colors(GREEN, NEUTRAL, 0)
        self.assertEqual(create_stepped_colors(RED, GREEN, 1), [RED_RGBA])

    def test_lab_steps_lighten_monotonically_toward_neutral(self) -> None:
        lightness = [rgb_to_lab(c)[0] for c in create_stepped_colors(BLUE, NEUTRAL, 20)]
        self.assertTrue(all(b > a for a, b in zip(lightness, lightness[1:])))

    def test_sentiment_legend_dedupes_neutral(self) -> None:
        colors = sentiment_legend_colors()
        self.assertEqual(len(colors), 20)
        self.assertEqual(colors[0], GREEN_RGBA)
        self.assertEqual(colors[10], NEUTRAL_RGBA)
        self.assertNotEqual(colors[11], NEUTRAL_RGBA)
        self.assertEqual(colors[-1], RED_RGBA)

    def test_subjectivity_legend_runs_blue_to_neutral(self) -> None:
        colors = subjectivity_legend_colors()
        self.assertEqual(len(colors), 20)
        self.assertEqual(colors[0], BLUE_RGBA)
        self.assertEqual(colors[-1], NEUTRAL_RGBA)

    def test_legend_labels_and_stops(self) -> None:
        sentiment = legend_spec("Sentiment")
        self.assertEqual((sentiment.top_label, sentiment.bottom_label), ("Positive", "Negative"))
        subjectivity = legend_spec("Subjectivity")
        self.assertEqual((subjectivity.top_label, subjectivity.bottom_label), ("Subjective", "Objective"))
        stops = subjectivity.gradient_stops()
        self.assertEqual(len(stops), 40)
        self.assertEqual(stops[0], (0.0, BLUE_RGBA))
        self.assertAlmostEqual(stops[1][0], 5.0)
        self.assertAlmostEqual(stops[-1][0], 100.0)


if __name__ == "__main__":
    unittest.main()
