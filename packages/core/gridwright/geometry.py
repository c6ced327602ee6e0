"""Axis-aligned geometry primitives shared by every layout stage."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float
    dashed: bool = False

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    @property
    def midpoint(self) -> Point:
        return Point((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    def point_at(self, t: float) -> Point:
        return Point(self.x1 + (self.x2 - self.x1) * t, self.y1 + (self.y2 - self.y1) * t)


@dataclass(frozen=True)
class Box:
    """Rectangle in screen coordinates (y grows downward)."""

    left: float
    right: float
    top: float
    bottom: float

    @classmethod
    def around(cls, x: float, y: float, width: float, height: float) -> Box:
        """Box of the given size centered on (x, y)."""
        return cls(left=x - width / 2, right=x + width / 2, top=y - height / 2, bottom=y + height / 2)

    @classmethod
    def from_origin(cls, x: float, y: float, width: float, height: float) -> Box:
        """Box of the given size with its top-left corner at (x, y)."""
        return cls(left=x, right=x + width, top=y, bottom=y + height)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> Point:
        return Point((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def expand(self, buffer: float) -> Box:
        return Box(self.left - buffer, self.right + buffer, self.top - buffer, self.bottom + buffer)

    def overlaps(self, other: Box) -> bool:
        # Touching edges count as overlap.
        return not (
            self.right < other.left or self.left > other.right or self.bottom < other.top or self.top > other.bottom
        )

    def contains_point(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def contains_box(self, other: Box) -> bool:
        return (
            self.left <= other.left
            and self.right >= other.right
            and self.top <= other.top
            and self.bottom >= other.bottom
        )


def segment_intersects_box(p1: Point, p2: Point, box: Box | None) -> bool:
    """True when an axis-aligned segment passes through the interior of ``box``.

    A segment lying exactly on a box edge does not count. Diagonal segments
    fall back to the bounding-box test.
    """
    if box is None:
        return False
    min_x, max_x = min(p1.x, p2.x), max(p1.x, p2.x)
    min_y, max_y = min(p1.y, p2.y), max(p1.y, p2.y)
    if max_x < box.left or min_x > box.right or max_y < box.top or min_y > box.bottom:
        return False
    if p1.x == p2.x:
        return box.left < p1.x < box.right
    if p1.y == p2.y:
        return box.top < p1.y < box.bottom
    return True


def segment_overlap_length(seg: Segment, box: Box) -> float:
    """Length of the part of ``seg`` that lies inside ``box``."""
    dx = seg.x2 - seg.x1
    dy = seg.y2 - seg.y1
    t_enter, t_exit = 0.0, 1.0
    for p, q in ((-dx, seg.x1 - box.left), (dx, box.right - seg.x1), (-dy, seg.y1 - box.top), (dy, box.bottom - seg.y1)):
        if abs(p) < 1e-9:
            if q < 0:
                return 0.0
            continue
        t = q / p
        if p < 0:
            t_enter = max(t_enter, t)
        else:
            t_exit = min(t_exit, t)
    if t_enter >= t_exit:
        return 0.0
    return (t_exit - t_enter) * seg.length
