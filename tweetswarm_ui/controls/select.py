from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from tweetswarm_plot.colors import COLOR_ATTRIBUTES, SENTIMENT
from tweetswarm_plot.errors import UnknownAttributeError


@dataclass
class ColorBySelect:
    """The "Color by" dropdown: a fixed option list and one current value."""

    label: str = "Color by:"
    options: tuple[str, ...] = COLOR_ATTRIBUTES
    value: str = SENTIMENT
    _listeners: list[Callable[[str], None]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.value not in self.options:
            raise UnknownAttributeError(f"unknown option: {self.value!r}")

    def on_change(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def select(self, value: str) -> bool:
        """Set the current option; listeners run only when the value changes."""
        if value not in self.options:
            raise UnknownAttributeError(f"unknown option: {value!r}")
        if value == self.value:
            return False
        self.value = value
        for listener in self._listeners:
            listener(value)
        return True
