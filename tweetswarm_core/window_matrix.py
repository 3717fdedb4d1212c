"""Chart drawing surface: an RGBA tensor changed only through write batches.

A batch is checked in full before any pixel is written, so a bad batch leaves
the surface untouched. Every committed batch queues one `CallBlitEvent`
carrying the region it dirtied; the presenter drains these before it reads
the surface.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
from typing import TypeAlias

import torch


LOGGER = logging.getLogger(__name__)

Rect: TypeAlias = tuple[int, int, int, int]


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: torch.Tensor

@dataclass(frozen=True)
class ReplaceRect:
    x: int
    y: int
    width: int
    height: int
    rect_h_w_4: torch.Tensor

WriteOp: TypeAlias = FullRewrite | ReplaceRect

@dataclass(frozen=True)
class WriteBatch:
    operations: list[WriteOp]

@dataclass(frozen=True)
class CallBlitEvent:
    revision: int
    dirty_rect: Rect
    op_count: int

class WindowMatrix:
    """uint8 RGBA surface of a fixed size with a queue of pending blits."""

    def __init__(self, height: int, width: int, background: tuple[int, int, int, int] = (255, 255, 255, 255)) -> None:
        if height <= 0 or width <= 0:
            raise ValueError("height and width must be > 0")
        self.height = height
        self.width = width
        self._revision = 0
        self._pending: deque[CallBlitEvent] = deque()
        bg = torch.tensor(background, dtype=torch.uint8).view(1, 1, 4)
        self._matrix = bg.expand(height, width, 4).clone()

    @property
    def revision(self) -> int:
        return self._revision

    def read_snapshot(self) -> torch.Tensor:
        return self._matrix.clone()

    def submit_write_batch(self, batch: WriteBatch) -> CallBlitEvent:
        if not batch.operations:
            raise ValueError("write batch must include at least one operation")
        rects = [self._check_operation(op) for op in batch.operations]

        for op in batch.operations:
            if isinstance(op, FullRewrite):
                self._matrix = op.tensor_h_w_4.clone()
            else:
                self._matrix[op.y : op.y + op.height, op.x : op.x + op.width, :] = op.rect_h_w_4

        self._revision += 1
        event = CallBlitEvent(revision=self._revision, dirty_rect=union_rects(rects), op_count=len(rects))
        self._pending.append(event)
        LOGGER.debug("surface revision %d: %d ops, dirty=%s", event.revision, event.op_count, event.dirty_rect)
        return event

    def drain_call_blits(self) -> list[CallBlitEvent]:
        events = list(self._pending)
        self._pending.clear()
        return events

    def _check_operation(self, op: WriteOp) -> Rect:
        if isinstance(op, FullRewrite):
            _check_rgba(op.tensor_h_w_4, (self.height, self.width, 4))
            return (0, 0, self.width, self.height)
        if isinstance(op, ReplaceRect):
            if op.width <= 0 or op.height <= 0:
                raise ValueError("rect width/height must be > 0")
            if op.x < 0 or op.y < 0:
                raise ValueError("rect x/y must be >= 0")
            if op.x + op.width > self.width or op.y + op.height > self.height:
                raise ValueError("rect exceeds matrix bounds")
            _check_rgba(op.rect_h_w_4, (op.height, op.width, 4))
            return (op.x, op.y, op.width, op.height)
        raise TypeError(f"Unsupported write op: {type(op)!r}")


def _check_rgba(value: torch.Tensor, expected_shape: tuple[int, int, int]) -> None:
    if not torch.is_tensor(value):
        raise ValueError("rgba payload must be a torch.Tensor")
    if value.dtype != torch.uint8:
        raise ValueError(f"rgba payload must be uint8, got {value.dtype}")
    if tuple(value.shape) != expected_shape:
        raise ValueError(f"rgba payload has shape {tuple(value.shape)}, expected {expected_shape}")


def union_rects(rects: list[Rect]) -> Rect:
    x0 = min(r[0] for r in rects)
    y0 = min(r[1] for r in rects)
    x1 = max(r[0] + r[2] for r in rects)
    y1 = max(r[1] + r[3] for r in rects)
    return (x0, y0, x1 - x0, y1 - y0)
