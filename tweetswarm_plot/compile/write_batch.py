from __future__ import annotations

import numpy as np
import torch

from tweetswarm_core.window_matrix import FullRewrite, ReplaceRect, WriteBatch


def _check_rgba(frame_rgba: np.ndarray, label: str) -> None:
    if frame_rgba.dtype != np.uint8:
        raise ValueError(f"{label} must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError(f"{label} must have shape (H, W, 4)")


def compile_full_rewrite_batch(frame_rgba: np.ndarray) -> WriteBatch:
    _check_rgba(frame_rgba, "frame_rgba")
    tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba))
    return WriteBatch([FullRewrite(tensor)])


def compile_replace_patches_batch(frame_rgba: np.ndarray, rects: list[tuple[int, int, int, int]]) -> WriteBatch:
    """Copy each `(x, y, w, h)` rect of `frame_rgba` into a ReplaceRect op."""
    _check_rgba(frame_rgba, "frame_rgba")
    ops: list[ReplaceRect] = []
    for x, y, width, height in rects:
        if width <= 0 or height <= 0:
            continue
        if x < 0 or y < 0 or x + width > frame_rgba.shape[1] or y + height > frame_rgba.shape[0]:
            raise ValueError("rect exceeds frame bounds")
        patch = torch.from_numpy(np.ascontiguousarray(frame_rgba[y : y + height, x : x + width]))
        ops.append(ReplaceRect(x=x, y=y, width=width, height=height, rect_h_w_4=patch))
    if not ops:
        raise ValueError("rects must include at least one non-empty rect")
    return WriteBatch(ops)
