from .controls import ColorBySelect
from .panel import PANEL_HEADING, SelectionPanel
from .selection import SelectionSet
from .view import TweetSwarmView

__all__ = [
    "ColorBySelect",
    "PANEL_HEADING",
    "SelectionPanel",
    "SelectionSet",
    "TweetSwarmView",
]
