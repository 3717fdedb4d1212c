from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
import tomllib

from PIL import Image

from tweetswarm_plot.colors import COLOR_ATTRIBUTES, SENTIMENT
from tweetswarm_plot.config import ChartConfig, load_chart_config
from tweetswarm_plot.errors import RecordsParseError
from tweetswarm_plot.layout import plan_buckets
from tweetswarm_plot.loader import load_records_json
from tweetswarm_plot.records import visible_prefix
from tweetswarm_ui.view import TweetSwarmView


LOGGER = logging.getLogger("tweetswarm")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tweetswarm")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a tweets JSON file to a PNG chart.")
    render.add_argument("input", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--color-by", choices=list(COLOR_ATTRIBUTES), default=SENTIMENT)
    render.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="IDX",
        help="Toggle selection of the record with this idx (repeatable, applied in order).",
    )
    render.add_argument("--panel-out", type=Path, default=None, help="Also write the selected-tweets list as a PNG.")
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [chart] table.")

    layout = sub.add_parser("layout", help="Print the per-category layout summary as JSON.")
    layout.add_argument("input", type=Path)
    layout.add_argument("--config", type=Path, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        config = load_chart_config(args.config) if args.config is not None else ChartConfig()
    except (OSError, TypeError, ValueError, tomllib.TOMLDecodeError) as exc:
        LOGGER.error("Error reading config: %s", exc)
        return 1

    try:
        records = load_records_json(args.input)
    except RecordsParseError as exc:
        LOGGER.error("Error reading file: %s", exc)
        return 1

    if args.command == "render":
        view = TweetSwarmView(config=config)
        view.load_records(records)
        view.select_color_by(args.color_by)
        for raw_idx in args.select:
            _toggle_by_idx(view, raw_idx)
        view.settle()
        dirty = view.present()
        LOGGER.info("presented surface revision %d, dirty=%s", view.presented_revision, dirty)
        frame = view.matrix.read_snapshot().numpy()
        Image.fromarray(frame).save(args.out)
        print(f"rendered {len(view.chart.marks)} marks to {args.out}")
        if args.panel_out is not None:
            Image.fromarray(view.panel.render()).save(args.panel_out)
            print(f"selected tweets: {len(view.selection)} -> {args.panel_out}")
        return 0

    if args.command == "layout":
        plan = plan_buckets(visible_prefix(records, config.max_records), config)
        print(json.dumps(plan.summary(), indent=2, sort_keys=True))
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _toggle_by_idx(view: TweetSwarmView, raw_idx: str) -> None:
    for mark in view.chart.marks:
        if str(mark.idx) == raw_idx:
            if not mark.positioned:
                LOGGER.warning("record idx=%s has no position; cannot click it", raw_idx)
                return
            view.click(mark.x, mark.y)
            return
    LOGGER.warning("no visible record with idx=%s", raw_idx)


if __name__ == "__main__":
    sys.exit(main())
