"""Connector label placement.

A label is tried at candidate positions produced by a fixed sequence of
generators, from cheap on-path offsets to a wide grid search. The first
candidate that clears every component, placed label, arrow end and group
border wins. If nothing clears, ``fallback_position`` marches away from the
path and keeps the spot furthest from any component.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from gridwright.geometry import Box, Point
from gridwright.spec import LabelDim, PositionedComponent, PositionedGroup

CHAR_WIDTH = 6.5
LABEL_H_PADDING = 18
LABEL_MIN_WIDTH = 50
LABEL_MAX_WIDTH = 180
LABEL_HEIGHT = 26

COMPONENT_BUFFER = 20
LABEL_BUFFER = 15
ARROW_BUFFER = 35
GROUP_BORDER_BUFFER = 15
GROUP_HEADER_HEIGHT = 35
GROUP_HEADER_CHAR_WIDTH = 8
GROUP_HEADER_ICON_SPACE = 40
GROUP_HEADER_DEFAULT_CHARS = 10

# Phase 1: positions along a segment and offsets away from it.
ALONG_SEGMENT = (0.5, 0.35, 0.65, 0.25, 0.75)
HORIZONTAL_OFFSETS = (-30, 30, -48, 48, -18, -65, 65)
VERTICAL_MARGINS = (12, 30, 50)  # added to half the label width
DIAGONAL_PERPENDICULAR = (32, 50, 70, 95)
DIAGONAL_CARDINAL = (40, 65)
STRAIGHT_TOLERANCE = 5

# Phase 2: cardinal sweep from the preferred segment's midpoint.
SWEEP_START, SWEEP_STOP, SWEEP_STEP = 80, 200, 20
SWEEP_DIAGONAL = 0.7

# Phase 3: grid around every segment midpoint.
GRID_EXTENT = 120
GRID_STEP_X, GRID_STEP_Y = 40, 30

# Phase 4: guaranteed fallback.
FALLBACK_START, FALLBACK_STOP, FALLBACK_STEP = 100, 250, 30
FALLBACK_COMPONENT_BUFFER = 10


def measure_label_text(text: str | None) -> LabelDim:
    """Approximate rendered size of a label (bold 10px text plus padding)."""
    if not text:
        return LabelDim(width=LABEL_MIN_WIDTH, height=LABEL_HEIGHT)
    width = min(LABEL_MAX_WIDTH, max(LABEL_MIN_WIDTH, len(text) * CHAR_WIDTH + LABEL_H_PADDING))
    return LabelDim(width=width, height=LABEL_HEIGHT)


def label_box(center: Point, dim: LabelDim) -> Box:
    return Box.around(center.x, center.y, dim.width, dim.height)


def find_best_segment(points: Sequence[Point]) -> int:
    """Index of the longest segment, ignoring the first and last (arrow) segments."""
    best, best_len = 1, 0.0
    for i in range(1, len(points) - 2):
        length = points[i].distance_to(points[i + 1])
        if length > best_len:
            best, best_len = i, length
    return best


def _group_bands(group: PositionedGroup) -> list[Box]:
    b = GROUP_BORDER_BUFFER
    chars = len(group.name) if group.name else GROUP_HEADER_DEFAULT_CHARS
    header = Box(
        left=group.x,
        right=group.x + chars * GROUP_HEADER_CHAR_WIDTH + GROUP_HEADER_ICON_SPACE,
        top=group.y,
        bottom=group.y + GROUP_HEADER_HEIGHT,
    )
    left, right = group.x, group.x + group.width
    top, bottom = group.y, group.y + group.height
    return [
        header,
        Box(left - b, right + b, top - b, top + b),
        Box(left - b, right + b, bottom - b, bottom + b),
        Box(left - b, left + b, top - b, bottom + b),
        Box(right - b, right + b, top - b, bottom + b),
    ]


@dataclass
class LabelContext:
    """Everything a candidate label position is tested against."""

    path: Sequence[Point]
    components: Sequence[PositionedComponent]
    placed: Sequence[Box]
    groups: Sequence[PositionedGroup] = ()
    component_zones: list[Box] = field(init=False)
    label_zones: list[Box] = field(init=False)
    group_bands: list[Box] = field(init=False)

    def __post_init__(self) -> None:
        self.component_zones = [c.box.expand(COMPONENT_BUFFER) for c in self.components]
        self.label_zones = [b.expand(LABEL_BUFFER) for b in self.placed]
        self.group_bands = [band for g in self.groups for band in _group_bands(g)]


def label_collides(center: Point, dim: LabelDim, ctx: LabelContext) -> bool:
    if ctx.path:
        if center.distance_to(ctx.path[0]) < ARROW_BUFFER or center.distance_to(ctx.path[-1]) < ARROW_BUFFER:
            return True
    box = label_box(center, dim)
    return (
        any(box.overlaps(b) for b in ctx.component_zones)
        or any(box.overlaps(b) for b in ctx.label_zones)
        or any(box.overlaps(b) for b in ctx.group_bands)
    )


# ---------------------------------------------------------------------------
# Candidate generators
# ---------------------------------------------------------------------------

CandidateGenerator = Callable[[Sequence[Point], int, LabelDim], Iterator[Point]]


def _segment_order(points: Sequence[Point], preferred: int) -> list[int]:
    order = [preferred] + [i for i in range(1, len(points) - 1) if i != preferred]
    return [i for i in order if 0 <= i and i + 1 < len(points)]


def _offsets_around(p1: Point, p2: Point, dim: LabelDim) -> Iterator[Point]:
    half_w = dim.width / 2
    vertical = abs(p1.x - p2.x) < STRAIGHT_TOLERANCE
    horizontal = abs(p1.y - p2.y) < STRAIGHT_TOLERANCE
    perp = math.atan2(p2.y - p1.y, p2.x - p1.x) + math.pi / 2
    for t in ALONG_SEGMENT:
        mx = p1.x + (p2.x - p1.x) * t
        my = p1.y + (p2.y - p1.y) * t
        if horizontal:
            for dy in HORIZONTAL_OFFSETS:
                yield Point(mx, my + dy)
        elif vertical:
            for margin in VERTICAL_MARGINS:
                yield Point(mx + half_w + margin, my)
                yield Point(mx - (half_w + margin), my)
        else:
            for dist in DIAGONAL_PERPENDICULAR:
                yield Point(mx + math.cos(perp) * dist, my + math.sin(perp) * dist)
                yield Point(mx - math.cos(perp) * dist, my - math.sin(perp) * dist)
            for d in DIAGONAL_CARDINAL:
                yield Point(mx, my - d)
                yield Point(mx, my + d)
                yield Point(mx - d, my)
                yield Point(mx + d, my)


def _preferred_midpoint(points: Sequence[Point], preferred: int) -> Point:
    if len(points) < 2:
        return points[0]
    i = min(max(preferred, 0), len(points) - 2)
    a, b = points[i], points[i + 1]
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def segment_offset_candidates(points: Sequence[Point], preferred: int, dim: LabelDim) -> Iterator[Point]:
    for i in _segment_order(points, preferred):
        yield from _offsets_around(points[i], points[i + 1], dim)


def cardinal_sweep_candidates(points: Sequence[Point], preferred: int, dim: LabelDim) -> Iterator[Point]:
    mid = _preferred_midpoint(points, preferred)
    for offset in range(SWEEP_START, SWEEP_STOP + 1, SWEEP_STEP):
        diag = offset * SWEEP_DIAGONAL
        yield Point(mid.x, mid.y - offset)
        yield Point(mid.x, mid.y + offset)
        yield Point(mid.x + offset, mid.y)
        yield Point(mid.x - offset, mid.y)
        yield Point(mid.x + diag, mid.y - diag)
        yield Point(mid.x - diag, mid.y + diag)


def grid_candidates(points: Sequence[Point], preferred: int, dim: LabelDim) -> Iterator[Point]:
    for i in _segment_order(points, preferred):
        a, b = points[i], points[i + 1]
        mx, my = (a.x + b.x) / 2, (a.y + b.y) / 2
        for dx in range(-GRID_EXTENT, GRID_EXTENT + 1, GRID_STEP_X):
            for dy in range(-GRID_EXTENT, GRID_EXTENT + 1, GRID_STEP_Y):
                if dx == 0 and dy == 0:
                    continue
                yield Point(mx + dx, my + dy)


CANDIDATE_GENERATORS: tuple[CandidateGenerator, ...] = (
    segment_offset_candidates,
    cardinal_sweep_candidates,
    grid_candidates,
)


def _escape_distance(mid: Point, dim: LabelDim, blockers: Sequence[Box]) -> float:
    """Distance from ``mid`` at which a label clears every blocker in any direction."""
    reach = max(
        (max(abs(b.left - mid.x), abs(b.right - mid.x), abs(b.top - mid.y), abs(b.bottom - mid.y)) for b in blockers),
        default=0.0,
    )
    return reach + max(dim.width, dim.height)


def fallback_position(points: Sequence[Point], preferred: int, dim: LabelDim, ctx: LabelContext) -> Point:
    """March away from the path and keep the spot furthest from every component.

    When no step between ``FALLBACK_START`` and ``FALLBACK_STOP`` is clear,
    the march continues outward until one is. The returned position never
    overlaps a component (with a 10-unit buffer) or a placed label zone.
    """
    mid = _preferred_midpoint(points, preferred)
    blockers = [c.box.expand(FALLBACK_COMPONENT_BUFFER) for c in ctx.components] + list(ctx.label_zones)
    centers = [Point(c.x, c.y) for c in ctx.components]
    directions = ((0, -1), (0, 1), (1, 0), (-1, 0))

    def clear(candidate: Point) -> bool:
        box = label_box(candidate, dim)
        return not any(box.overlaps(b) for b in blockers)

    best, best_distance = None, -1.0
    for dx, dy in directions:
        for step in range(FALLBACK_START, FALLBACK_STOP + 1, FALLBACK_STEP):
            candidate = Point(mid.x + dx * step, mid.y + dy * step)
            if not clear(candidate):
                continue
            distance = min((candidate.distance_to(c) for c in centers), default=math.inf)
            if distance > best_distance:
                best, best_distance = candidate, distance
    if best is not None:
        return best

    escape = _escape_distance(mid, dim, blockers)
    step = FALLBACK_STOP + FALLBACK_STEP
    while step < escape:
        for dx, dy in directions:
            candidate = Point(mid.x + dx * step, mid.y + dy * step)
            if clear(candidate):
                return candidate
        step += FALLBACK_STEP
    return Point(mid.x, mid.y - escape)


def place_label(
    points: Sequence[Point],
    dim: LabelDim,
    components: Sequence[PositionedComponent],
    placed: Sequence[Box],
    groups: Sequence[PositionedGroup] = (),
    *,
    preferred: int | None = None,
    generators: Sequence[CandidateGenerator] = CANDIDATE_GENERATORS,
) -> Point:
    """Center point for a label of size ``dim`` on the path ``points``."""
    if preferred is None:
        preferred = find_best_segment(points)
    ctx = LabelContext(path=points, components=components, placed=placed, groups=groups)
    for generate in generators:
        for candidate in generate(points, preferred, dim):
            if not label_collides(candidate, dim, ctx):
                return candidate
    return fallback_position(points, preferred, dim, ctx)
