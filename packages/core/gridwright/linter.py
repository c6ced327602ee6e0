"""Diagram linter: structural problems in a graph, geometric ones in a layout."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from gridwright.geometry import segment_overlap_length
from gridwright.spec import DiagramGraph, PositionedDiagram

MAX_LABEL_LENGTH = 40
MAX_CONNECTIONS_PER_COMPONENT = 8
MIN_CENTER_DX = 100
MIN_CENTER_DY = 60
MAX_LABEL_SEGMENT_OVERLAP = 5


@dataclass
class LintWarning:
    rule: str
    severity: str  # "error", "warning", "info"
    component: str | None
    message: str
    recommendation: str


def lint_graph(graph: DiagramGraph) -> list[LintWarning]:
    warnings: list[LintWarning] = []
    warnings.extend(_check_dangling_connections(graph))
    warnings.extend(_check_duplicate_components(graph))
    warnings.extend(_check_self_loops(graph))
    warnings.extend(_check_long_labels(graph))
    warnings.extend(_check_overcrowded_components(graph))
    return warnings


def lint_layout(diagram: PositionedDiagram) -> list[LintWarning]:
    warnings: list[LintWarning] = []
    warnings.extend(_check_overlapping_components(diagram))
    warnings.extend(_check_label_segment_overlap(diagram))
    warnings.extend(_check_label_component_overlap(diagram))
    return warnings


def _check_dangling_connections(graph: DiagramGraph) -> list[LintWarning]:
    ids = {c.id for c in graph.components}
    out = []
    for conn in graph.connections:
        missing = [end for end in (conn.source, conn.target) if end not in ids]
        for end in missing:
            out.append(
                LintWarning(
                    rule="dangling_connection",
                    severity="error",
                    component=end or None,
                    message=f"Connection {conn.source} -> {conn.target} references unknown component {end!r}",
                    recommendation="Add the missing component or remove the connection; layout skips it",
                )
            )
    return out


def _check_duplicate_components(graph: DiagramGraph) -> list[LintWarning]:
    counts = Counter(c.id for c in graph.components)
    return [
        LintWarning(
            rule="duplicate_component",
            severity="error",
            component=cid,
            message=f"Component id {cid!r} appears {n} times",
            recommendation="Give every component a unique id; layout keeps only the first",
        )
        for cid, n in counts.items()
        if n > 1
    ]


def _check_self_loops(graph: DiagramGraph) -> list[LintWarning]:
    return [
        LintWarning(
            rule="self_loop",
            severity="warning",
            component=conn.source,
            message=f"Connection {conn.source} -> {conn.target} starts and ends on the same component",
            recommendation="Drop the connection or model the internal step as its own component",
        )
        for conn in graph.connections
        if conn.source and conn.source == conn.target
    ]


def _check_long_labels(graph: DiagramGraph) -> list[LintWarning]:
    out = []
    for conn in graph.connections:
        if len(conn.label) > MAX_LABEL_LENGTH:
            out.append(
                LintWarning(
                    rule="long_label",
                    severity="warning",
                    component=conn.source or None,
                    message=f"Label on {conn.source} -> {conn.target} is {len(conn.label)} characters long",
                    recommendation=f"Keep connection labels under {MAX_LABEL_LENGTH} characters; longer text is truncated visually",
                )
            )
    return out


def _check_overcrowded_components(graph: DiagramGraph) -> list[LintWarning]:
    degree: Counter[str] = Counter()
    for conn in graph.connections:
        degree[conn.source] += 1
        degree[conn.target] += 1
    known = {c.id for c in graph.components}
    return [
        LintWarning(
            rule="overcrowded_component",
            severity="warning",
            component=cid,
            message=f"{cid} has {n} connections",
            recommendation="Split the component or route traffic through an intermediary to keep edges readable",
        )
        for cid, n in degree.items()
        if cid in known and n > MAX_CONNECTIONS_PER_COMPONENT
    ]


def _check_overlapping_components(diagram: PositionedDiagram) -> list[LintWarning]:
    out = []
    comps = diagram.components
    for i, a in enumerate(comps):
        for b in comps[i + 1 :]:
            if abs(a.x - b.x) < MIN_CENTER_DX and abs(a.y - b.y) < MIN_CENTER_DY:
                out.append(
                    LintWarning(
                        rule="overlapping_components",
                        severity="error",
                        component=a.id,
                        message=f"{a.id} and {b.id} overlap ({a.x:g},{a.y:g}) vs ({b.x:g},{b.y:g})",
                        recommendation="Check the graph for duplicate layer or group membership",
                    )
                )
    return out


def _check_label_segment_overlap(diagram: PositionedDiagram) -> list[LintWarning]:
    labels = [(c, c.label_box) for c in diagram.connections if c.label_box is not None]
    out = []
    for conn in diagram.connections:
        for owner, box in labels:
            overlap = max((segment_overlap_length(seg, box) for seg in conn.path_segments), default=0.0)
            if overlap > MAX_LABEL_SEGMENT_OVERLAP:
                out.append(
                    LintWarning(
                        rule="label_overlaps_segment",
                        severity="error",
                        component=conn.source,
                        message=(
                            f"Connector {conn.source} -> {conn.target} runs {overlap:.0f} units "
                            f"under label {owner.label!r}"
                        ),
                        recommendation="Re-run layout; rendered segments should be clipped around labels",
                    )
                )
    return out


def _check_label_component_overlap(diagram: PositionedDiagram) -> list[LintWarning]:
    out = []
    for conn in diagram.connections:
        box = conn.label_box
        if box is None:
            continue
        for comp in diagram.components:
            if box.overlaps(comp.box):
                out.append(
                    LintWarning(
                        rule="label_overlaps_component",
                        severity="warning",
                        component=comp.id,
                        message=f"Label {conn.label!r} overlaps component {comp.id}",
                        recommendation="Shorten the label or reduce connections around this component",
                    )
                )
    return out
