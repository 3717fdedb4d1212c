from __future__ import annotations

from dataclasses import dataclass, field, replace
import math
from typing import Any, Iterable

from tweetswarm_plot.colors import RGBA, interpolate_rgb


@dataclass(frozen=True)
class RenderMark:
    idx: Any
    x: float
    y: float
    fill: RGBA | None
    stroked: bool = False

    @property
    def positioned(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


def ease_cubic_in_out(t: float) -> float:
    t = max(0.0, min(1.0, t)) * 2.0
    if t <= 1.0:
        return t * t * t / 2.0
    t -= 2.0
    return (t * t * t + 2.0) / 2.0


@dataclass(frozen=True)
class FillTransition:
    start: RGBA | None
    end: RGBA | None
    duration_ms: float

    def sample(self, elapsed_ms: float) -> RGBA | None:
        if self.duration_ms <= 0 or elapsed_ms >= self.duration_ms:
            return self.end
        if self.start is None or self.end is None:
            # Nothing to blend from or to: snap at the end of the transition.
            return self.start
        return interpolate_rgb(self.start, self.end, ease_cubic_in_out(elapsed_ms / self.duration_ms))


@dataclass
class Scene:
    """Authoritative list of marks; painting always redraws from this state."""

    marks: list[RenderMark] = field(default_factory=list)
    transitions: dict[Any, FillTransition] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    def clear(self) -> None:
        self.marks = []
        self.transitions = {}
        self.elapsed_ms = 0.0

    def replace_marks(self, marks: Iterable[RenderMark]) -> None:
        self.marks = list(marks)
        self.transitions = {}
        self.elapsed_ms = 0.0

    def diff(self, after: list[RenderMark]) -> list[tuple[RenderMark, RenderMark]]:
        return diff_marks(self.marks, after)

    def restyle(
        self,
        fills: dict[Any, RGBA | None],
        stroked: set[Any],
        *,
        duration_ms: float,
    ) -> list[tuple[RenderMark, RenderMark]]:
        """Update fill/stroke in place of existing marks; positions are kept.

        Returns `(before, after)` pairs for marks whose paint changed, including
        marks caught mid-transition: those restart from their displayed fill.
        """
        displayed = {mark.idx: self.displayed_fill(mark) for mark in self.marks}
        updated = [
            replace(mark, fill=fills.get(mark.idx, mark.fill), stroked=mark.idx in stroked) for mark in self.marks
        ]
        changed = self.diff(updated)
        seen = {after.idx for _, after in changed}
        previous = {mark.idx: mark for mark in self.marks}
        for mark in updated:
            if mark.idx not in seen and displayed[mark.idx] != mark.fill:
                changed.append((previous[mark.idx], mark))
        self.transitions = {}
        for _, after in changed:
            start = displayed[after.idx]
            if duration_ms > 0 and start != after.fill:
                self.transitions[after.idx] = FillTransition(start=start, end=after.fill, duration_ms=duration_ms)
        self.marks = updated
        self.elapsed_ms = 0.0
        return changed

    def advance(self, delta_ms: float) -> bool:
        """Step running transitions; True while any is still in flight."""
        if not self.transitions:
            return False
        self.elapsed_ms += max(0.0, delta_ms)
        if all(self.elapsed_ms >= t.duration_ms for t in self.transitions.values()):
            self.transitions = {}
            return False
        return True

    @property
    def animating(self) -> bool:
        return bool(self.transitions)

    def displayed_fill(self, mark: RenderMark) -> RGBA | None:
        transition = self.transitions.get(mark.idx)
        if transition is None:
            return mark.fill
        return transition.sample(self.elapsed_ms)


def diff_marks(before: list[RenderMark], after: list[RenderMark]) -> list[tuple[RenderMark, RenderMark]]:
    """Pairs of marks (matched by idx) whose position or paint differ."""
    previous = {mark.idx: mark for mark in before}
    changed: list[tuple[RenderMark, RenderMark]] = []
    for mark in after:
        old = previous.get(mark.idx)
        if old is None or old != mark:
            changed.append((old if old is not None else mark, mark))
    return changed
