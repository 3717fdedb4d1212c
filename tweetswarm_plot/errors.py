from __future__ import annotations


class TweetSwarmError(Exception):
    """Base error for the tweetswarm packages."""


class RecordsParseError(TweetSwarmError):
    """Raised when an uploaded records document cannot be parsed."""


class UnknownAttributeError(TweetSwarmError, ValueError):
    """Raised when a color attribute other than Sentiment/Subjectivity is requested."""


class LayoutError(TweetSwarmError):
    """Raised when the chart is asked to paint before any records were laid out."""
