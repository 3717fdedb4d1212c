from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Mapping


PointerEventType = Literal["click", "pointer_down", "pointer_up"]


@dataclass
class PointerEvent:
    """Pointer input delivered to chart handlers, innermost target first."""

    event_type: PointerEventType
    x: float
    y: float
    button: int = 0
    _propagation_stopped: bool = field(default=False, init=False, repr=False)

    def stop_propagation(self) -> None:
        self._propagation_stopped = True

    @property
    def propagation_stopped(self) -> bool:
        return self._propagation_stopped


PointerHandler = Callable[[PointerEvent], None]


def dispatch_pointer_event(event: PointerEvent, handlers: list[PointerHandler]) -> int:
    """Bubble `event` through `handlers` (innermost first); returns how many ran."""
    ran = 0
    for handler in handlers:
        handler(event)
        ran += 1
        if event.propagation_stopped:
            break
    return ran


def parse_pointer_event(event_type: str, payload: object) -> PointerEvent | None:
    """Parse a raw `{x, y, button}` payload into a typed pointer event."""
    if event_type not in {"click", "pointer_down", "pointer_up"} or not isinstance(payload, Mapping):
        return None
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        return None
    button = payload.get("button", 0)
    if not isinstance(button, int):
        button = 0
    return PointerEvent(event_type=event_type, x=x, y=y, button=button)
