from __future__ import annotations

import json
from pathlib import Path

from tweetswarm_plot.errors import RecordsParseError
from tweetswarm_plot.records import TweetRecord, normalize_records


def load_records_json(source: Path | str) -> tuple[TweetRecord, ...]:
    """Read an uploaded JSON document (a top-level array of tweet objects).

    `source` is a path, or the document text itself when given as a `str`.
    """

    if isinstance(source, Path):
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise RecordsParseError(f"cannot read records file {source}: {exc}") from exc
        origin = str(source)
    else:
        text = source
        origin = "<text>"

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordsParseError(f"{origin} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc

    if not isinstance(raw, list):
        raise RecordsParseError(f"{origin} must contain a JSON array, got {type(raw).__name__}")
    return normalize_records(raw)
