from tweetswarm_plot.chart import SwarmChart
from tweetswarm_plot.colors import (
    COLOR_ATTRIBUTES,
    SENTIMENT,
    SUBJECTIVITY,
    LegendSpec,
    color_of,
    create_stepped_colors,
    legend_spec,
    mark_fill,
)
from tweetswarm_plot.config import ChartConfig, Margins, chart_config_from_mapping, load_chart_config
from tweetswarm_plot.errors import LayoutError, RecordsParseError, TweetSwarmError, UnknownAttributeError
from tweetswarm_plot.layout import BucketPlan, CategoryLayout, plan_buckets
from tweetswarm_plot.loader import load_records_json
from tweetswarm_plot.records import TweetRecord, normalize_records
from tweetswarm_plot.relax import CollisionSimulation, relax_positions
from tweetswarm_plot.scene import RenderMark, Scene

__all__ = [
    "BucketPlan",
    "COLOR_ATTRIBUTES",
    "CategoryLayout",
    "ChartConfig",
    "CollisionSimulation",
    "LayoutError",
    "LegendSpec",
    "Margins",
    "RecordsParseError",
    "RenderMark",
    "SENTIMENT",
    "SUBJECTIVITY",
    "Scene",
    "SwarmChart",
    "TweetRecord",
    "TweetSwarmError",
    "UnknownAttributeError",
    "chart_config_from_mapping",
    "color_of",
    "create_stepped_colors",
    "legend_spec",
    "load_chart_config",
    "load_records_json",
    "mark_fill",
    "normalize_records",
    "plan_buckets",
    "relax_positions",
]
