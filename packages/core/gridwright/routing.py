"""Orthogonal connector routing between two allocated edge points."""

from __future__ import annotations

from dataclasses import dataclass, field

from gridwright.geometry import Box, Point, Segment, segment_intersects_box

ROUTE_MARGIN = 30  # distance travelled straight out of an edge before turning
ROUTE_VARIATION_STEP = 15
ROUTE_VARIATION_CYCLE = 3
COMPONENT_PROXIMITY = 30
GROUP_PROXIMITY = 0
MIN_POINT_DELTA = 1
_OCCLUSION_SAMPLES = (0.2, 0.35, 0.5, 0.65, 0.8)


@dataclass(frozen=True)
class Obstacle:
    """A box connectors should not visually run through.

    ``members`` holds the component ids an obstacle contains (a group's
    descendants); a connection touching one of them is not occluded by it.
    """

    id: str
    box: Box
    proximity: float = COMPONENT_PROXIMITY
    members: frozenset[str] = field(default_factory=frozenset)

    def related_to(self, *component_ids: str) -> bool:
        return any(cid == self.id or cid in self.members for cid in component_ids)


@dataclass
class RoutedPath:
    points: list[Point]
    segments: list[Segment]

    @property
    def svg_path(self) -> str:
        return " ".join(f"{'M' if i == 0 else 'L'} {p.x:g} {p.y:g}" for i, p in enumerate(self.points))


def route_variation(conn_index: int) -> float:
    """Offset that keeps parallel connectors from sitting on top of each other."""
    return (conn_index % ROUTE_VARIATION_CYCLE) * ROUTE_VARIATION_STEP


def is_vertical_edge(edge: str) -> bool:
    return edge in ("top", "bottom")


def project(p: Point, edge: str, distance: float) -> Point:
    if edge == "top":
        return Point(p.x, p.y - distance)
    if edge == "bottom":
        return Point(p.x, p.y + distance)
    if edge == "left":
        return Point(p.x - distance, p.y)
    if edge == "right":
        return Point(p.x + distance, p.y)
    return p


def segment_passes_near(seg: Segment, obstacle: Obstacle) -> bool:
    """True when the middle band of ``seg`` comes within the obstacle's proximity."""
    zone = obstacle.box.expand(obstacle.proximity)
    return any(zone.contains_point(seg.point_at(t)) for t in _OCCLUSION_SAMPLES)


def _clamp(value: float, a: float, b: float) -> float:
    return min(max(value, min(a, b)), max(a, b))


def _same_orientation(
    start: Point, end: Point, from_edge: str, to_edge: str, variation: float, start_box: Box, end_box: Box
) -> list[Point]:
    # The varied mid-line never leaves the span between the projected points.
    m = ROUTE_MARGIN
    if is_vertical_edge(from_edge):
        mid_y = (start.y + end.y) / 2
        if from_edge == "bottom" and to_edge == "top":
            mid_y += variation
        elif from_edge == "top" and to_edge == "bottom":
            mid_y -= variation
        mid_y = _clamp(mid_y, start.y, end.y)
        p1, p2 = Point(start.x, mid_y), Point(end.x, mid_y)

        if segment_intersects_box(start, p1, start_box) or segment_intersects_box(p1, p2, start_box):
            side_x = start_box.right + m if end.x > start.x else start_box.left - m
            return [Point(side_x, start.y), Point(side_x, mid_y), Point(end.x, mid_y)]
        if segment_intersects_box(p1, p2, end_box) or segment_intersects_box(p2, end, end_box):
            side_x = end_box.right + m if start.x > end.x else end_box.left - m
            return [Point(start.x, mid_y), Point(side_x, mid_y), Point(side_x, end.y)]
        return [p1, p2]

    mid_x = (start.x + end.x) / 2
    if from_edge == "right" and to_edge == "left":
        mid_x += variation
    elif from_edge == "left" and to_edge == "right":
        mid_x -= variation
    mid_x = _clamp(mid_x, start.x, end.x)
    p1, p2 = Point(mid_x, start.y), Point(mid_x, end.y)

    if segment_intersects_box(start, p1, start_box) or segment_intersects_box(p1, p2, start_box):
        side_y = start_box.bottom + m if end.y > start.y else start_box.top - m
        return [Point(start.x, side_y), Point(mid_x, side_y), Point(mid_x, end.y)]
    if segment_intersects_box(p1, p2, end_box) or segment_intersects_box(p2, end, end_box):
        side_y = end_box.bottom + m if start.y > end.y else end_box.top - m
        return [Point(mid_x, start.y), Point(mid_x, side_y), Point(end.x, side_y)]
    return [p1, p2]


def _corner(start: Point, end: Point, from_edge: str, to_edge: str, start_box: Box, end_box: Box) -> list[Point]:
    m = ROUTE_MARGIN
    corner = Point(start.x, end.y) if is_vertical_edge(from_edge) else Point(end.x, start.y)
    blocked = any(
        segment_intersects_box(a, b, box)
        for a, b in ((start, corner), (corner, end))
        for box in (start_box, end_box)
    )
    if not blocked:
        return [corner]

    # Two-corner route. ``start`` is already a margin clear of its box, so run
    # parallel to the start edge out to the end box's outward side, then in.
    if is_vertical_edge(from_edge):
        side_x = end_box.left - m if to_edge == "left" else end_box.right + m
        return [Point(side_x, start.y), Point(side_x, end.y)]
    side_y = end_box.top - m if to_edge == "top" else end_box.bottom + m
    return [Point(start.x, side_y), Point(end.x, side_y)]


def _dedupe(points: list[Point]) -> list[Point]:
    """Drop near-duplicate points and snap near-equal coordinates.

    A coordinate within ``MIN_POINT_DELTA`` of the previous point's is
    replaced by it, so sub-unit jogs never turn a run diagonal. The last
    point can only move along its own edge this way, since it always sits a
    full margin away from its projection in the edge-normal axis.
    """
    out = [points[0]]
    for p in points[1:]:
        prev = out[-1]
        near_x = abs(p.x - prev.x) <= MIN_POINT_DELTA
        near_y = abs(p.y - prev.y) <= MIN_POINT_DELTA
        if near_x and near_y:
            continue
        out.append(Point(prev.x if near_x else p.x, prev.y if near_y else p.y))
    if len(out) == 1:
        out.append(points[-1])
    return out


def route_connector(
    start: Point,
    end: Point,
    from_edge: str,
    to_edge: str,
    start_box: Box,
    end_box: Box,
    *,
    variation: float = 0.0,
    obstacles: list[Obstacle] | None = None,
    endpoint_ids: tuple[str, ...] = (),
) -> RoutedPath:
    """Build an orthogonal path from ``start`` (on ``from_edge``) to ``end``.

    Segments running close to an obstacle unrelated to ``endpoint_ids`` are
    marked dashed.
    """
    p_start = project(start, from_edge, ROUTE_MARGIN)
    p_end = project(end, to_edge, ROUTE_MARGIN)

    if is_vertical_edge(from_edge) == is_vertical_edge(to_edge):
        middle = _same_orientation(p_start, p_end, from_edge, to_edge, variation, start_box, end_box)
    else:
        middle = _corner(p_start, p_end, from_edge, to_edge, start_box, end_box)

    points = _dedupe([start, p_start, *middle, p_end, end])

    unrelated = [o for o in obstacles or [] if not o.related_to(*endpoint_ids)]
    segments = []
    for a, b in zip(points, points[1:]):
        seg = Segment(a.x, a.y, b.x, b.y)
        seg.dashed = any(segment_passes_near(seg, o) for o in unrelated)
        segments.append(seg)
    return RoutedPath(points=points, segments=segments)
