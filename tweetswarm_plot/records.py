from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
import logging
import math
from typing import Any

import numpy as np

from tweetswarm_plot.errors import RecordsParseError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


LOGGER = logging.getLogger(__name__)

FIELD_IDX = "idx"
FIELD_MONTH = "Month"
FIELD_DIMENSION_1 = "Dimension 1"
FIELD_SENTIMENT = "Sentiment"
FIELD_SUBJECTIVITY = "Subjectivity"
FIELD_RAW_TWEET = "RawTweet"


@dataclass(frozen=True)
class TweetRecord:
    """One input tweet. Numeric attributes that are absent are NaN, text ones None."""

    idx: Any
    month: str | None
    dimension_1: float
    sentiment: float
    subjectivity: float
    raw_tweet: str | None

    def attribute(self, name: str) -> float:
        if name == FIELD_SENTIMENT:
            return self.sentiment
        if name == FIELD_SUBJECTIVITY:
            return self.subjectivity
        if name == FIELD_DIMENSION_1:
            return self.dimension_1
        raise KeyError(name)


def normalize_records(data: Any) -> tuple[TweetRecord, ...]:
    """Coerce a sequence of mappings (or a pandas DataFrame) into records.

    Items are not validated: missing or non-numeric values become NaN so they
    degrade to off-chart marks instead of failing the whole load.
    """

    if pd is not None and isinstance(data, pd.DataFrame):
        items: Sequence[Any] = data.to_dict(orient="records")
    elif isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        items = data
    else:
        raise RecordsParseError(f"records must be a sequence of objects, got {type(data)!r}")

    return tuple(_coerce_record(item, position=i) for i, item in enumerate(items))


def visible_prefix(records: Sequence[TweetRecord], max_records: int) -> tuple[TweetRecord, ...]:
    if len(records) > max_records:
        LOGGER.info("rendering first %d of %d records", max_records, len(records))
    return tuple(records[:max_records])


def _coerce_record(item: Any, *, position: int) -> TweetRecord:
    if not isinstance(item, Mapping):
        item = {}
    idx = item.get(FIELD_IDX, position)
    if idx is None:
        idx = position
    month = item.get(FIELD_MONTH)
    raw_tweet = item.get(FIELD_RAW_TWEET)
    return TweetRecord(
        idx=idx,
        month=None if month is None else str(month),
        dimension_1=_coerce_float(item.get(FIELD_DIMENSION_1)),
        sentiment=_coerce_float(item.get(FIELD_SENTIMENT)),
        subjectivity=_coerce_float(item.get(FIELD_SUBJECTIVITY)),
        raw_tweet=None if raw_tweet is None else str(raw_tweet),
    )


def _coerce_float(raw: Any) -> float:
    if raw is None or isinstance(raw, bool):
        return math.nan
    if isinstance(raw, Decimal):
        return float(raw)
    if isinstance(raw, (int, float, np.integer, np.floating)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw)
        except ValueError:
            return math.nan
    return math.nan
