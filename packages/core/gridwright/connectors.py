"""Connection point allocation on component edges."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from gridwright.diagnostics import EventKind, LayoutEvent, record
from gridwright.geometry import Point
from gridwright.spec import Connection

log = logging.getLogger(__name__)

EDGES = ("top", "bottom", "left", "right")
DEFAULT_EDGE = "bottom"
EDGE_PADDING = 30  # keep points away from the corners
PREFERRED_GAP = 40
MAX_PER_EDGE = 3

_ADJACENT = {
    "top": ("left", "right"),
    "bottom": ("left", "right"),
    "left": ("top", "bottom"),
    "right": ("top", "bottom"),
}
_OPPOSITE = {"top": "bottom", "bottom": "top", "left": "right", "right": "left"}


class Placed(Protocol):
    id: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class EdgeSlot:
    conn_index: int
    direction: str  # "out" on the source component, "in" on the target
    peer_id: str


@dataclass
class EdgeAssignment:
    """Connection slots on each of a component's four edges, in order."""

    top: list[EdgeSlot] = field(default_factory=list)
    bottom: list[EdgeSlot] = field(default_factory=list)
    left: list[EdgeSlot] = field(default_factory=list)
    right: list[EdgeSlot] = field(default_factory=list)

    def slots(self, edge: str) -> list[EdgeSlot]:
        return getattr(self, edge)

    def total(self) -> int:
        return sum(len(self.slots(e)) for e in EDGES)

    def locate(self, conn_index: int, direction: str) -> tuple[str, int] | None:
        """(edge, position on that edge) of a connection end, or None."""
        for edge in EDGES:
            for i, slot in enumerate(self.slots(edge)):
                if slot.conn_index == conn_index and slot.direction == direction:
                    return edge, i
        return None


def resolve_edges(source: Placed, target: Placed) -> tuple[str, str]:
    """Pick facing edges: vertical when the components are further apart in y than in x."""
    dx = target.x - source.x
    dy = target.y - source.y
    if abs(dy) > abs(dx):
        return ("bottom", "top") if dy > 0 else ("top", "bottom")
    return ("right", "left") if dx > 0 else ("left", "right")


def assign_edges(components: Mapping[str, Placed], connections: list[Connection]) -> dict[str, EdgeAssignment]:
    assignments = {cid: EdgeAssignment() for cid in components}
    for idx, conn in enumerate(connections):
        source = components.get(conn.source)
        target = components.get(conn.target)
        if source is None or target is None:
            continue
        from_edge, to_edge = resolve_edges(source, target)
        assignments[source.id].slots(from_edge).append(EdgeSlot(idx, "out", target.id))
        assignments[target.id].slots(to_edge).append(EdgeSlot(idx, "in", source.id))
    return assignments


def redistribute_overcrowded_edges(
    assignments: Mapping[str, EdgeAssignment], events: list[LayoutEvent] | None = None
) -> dict[str, EdgeAssignment]:
    """Spill slots beyond the third on an edge onto the perpendicular edges.

    Overflow alternates between the two adjacent edges, skipping any that are
    already full; the opposite edge is the last resort. A slot only stays
    where it is when all four edges are full. Returns a new mapping.
    """
    result = {cid: copy.deepcopy(a) for cid, a in assignments.items()}
    for cid, assignment in result.items():
        for edge in EDGES:
            slots = assignment.slots(edge)
            if len(slots) <= MAX_PER_EDGE:
                continue
            overflow = slots[MAX_PER_EDGE:]
            del slots[MAX_PER_EDGE:]
            first, second = _ADJACENT[edge]
            moved = 0
            for i, slot in enumerate(overflow):
                order = (first, second) if i % 2 == 0 else (second, first)
                target = next(
                    (e for e in (*order, _OPPOSITE[edge]) if len(assignment.slots(e)) < MAX_PER_EDGE),
                    edge,
                )
                assignment.slots(target).append(slot)
                moved += target != edge
            if events is not None and moved:
                record(events, log, EventKind.EDGE_REDISTRIBUTED, cid, f"{moved} connection(s) moved off {edge}")
    return result


def distributed_point(comp: Placed, edge: str, index: int, total: int) -> Point:
    """Exact point for the ``index``-th of ``total`` connections on an edge.

    Points cluster around the edge center, ``PREFERRED_GAP`` apart, while they
    fit between the corner paddings; otherwise they spread over the whole
    padded span.
    """
    half_w = comp.width / 2
    half_h = comp.height / 2
    horizontal = edge in ("top", "bottom")

    if total <= 1:
        offset = 0.0
    else:
        length = comp.width if horizontal else comp.height
        available = length - 2 * EDGE_PADDING
        span = (total - 1) * PREFERRED_GAP
        if span <= available:
            offset = -span / 2 + index * PREFERRED_GAP
        else:
            offset = -available / 2 + index * (available / (total - 1))

    if edge == "top":
        return Point(comp.x + offset, comp.y - half_h)
    if edge == "bottom":
        return Point(comp.x + offset, comp.y + half_h)
    if edge == "left":
        return Point(comp.x - half_w, comp.y + offset)
    if edge == "right":
        return Point(comp.x + half_w, comp.y + offset)
    return Point(comp.x, comp.y)


def endpoint_for(
    assignments: Mapping[str, EdgeAssignment], comp: Placed, conn_index: int, direction: str
) -> tuple[Point, str]:
    """Edge point and edge name for one end of a connection (bottom when unassigned)."""
    assignment = assignments.get(comp.id)
    located = assignment.locate(conn_index, direction) if assignment else None
    if located is None:
        return distributed_point(comp, DEFAULT_EDGE, 0, 1), DEFAULT_EDGE
    edge, position = located
    return distributed_point(comp, edge, position, len(assignment.slots(edge))), edge
