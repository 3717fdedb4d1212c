"""Input controls for the tweet swarm view."""

from .select import ColorBySelect

__all__ = ["ColorBySelect"]
