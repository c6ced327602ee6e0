"""Trim connector segments so they stop at label boxes instead of running under them."""

from __future__ import annotations

from collections.abc import Sequence

from gridwright.geometry import Box, Segment

LABEL_CLIP_PADDING = 4
PARALLEL_EPSILON = 0.001
MIN_PIECE_FRACTION = 0.01


def clip_segment(seg: Segment, rect: Box) -> list[Segment]:
    """Parts of ``seg`` outside ``rect`` (zero, one or two segments).

    Liang–Barsky: narrow the parametric range [t_enter, t_exit] against each
    of the four rectangle edges.
    """
    dx = seg.x2 - seg.x1
    dy = seg.y2 - seg.y1
    t_enter, t_exit = 0.0, 1.0

    for p, q in (
        (-dx, seg.x1 - rect.left),
        (dx, rect.right - seg.x1),
        (-dy, seg.y1 - rect.top),
        (dy, rect.bottom - seg.y1),
    ):
        if abs(p) < PARALLEL_EPSILON:
            if q < 0:
                return [seg]
            continue
        t = q / p
        if p < 0:
            t_enter = max(t_enter, t)
        else:
            t_exit = min(t_exit, t)

    if t_enter >= t_exit:
        return [seg]

    pieces = []
    if t_enter > MIN_PIECE_FRACTION:
        pieces.append(Segment(seg.x1, seg.y1, seg.x1 + t_enter * dx, seg.y1 + t_enter * dy, seg.dashed))
    if t_exit < 1 - MIN_PIECE_FRACTION:
        pieces.append(Segment(seg.x1 + t_exit * dx, seg.y1 + t_exit * dy, seg.x2, seg.y2, seg.dashed))
    return pieces


def clip_segments_around_labels(segments: Sequence[Segment], label_boxes: Sequence[Box]) -> list[Segment]:
    """Remove every portion of ``segments`` that falls inside a (padded) label box."""
    if not label_boxes:
        return list(segments)
    padded = [b.expand(LABEL_CLIP_PADDING) for b in label_boxes]
    result: list[Segment] = []
    for seg in segments:
        pieces = [seg]
        for rect in padded:
            pieces = [part for piece in pieces for part in clip_segment(piece, rect)]
        result.extend(pieces)
    return result
