"""Layout pipeline entry points.

    heal -> layer/group layout -> edge allocation -> routing -> labels -> clipping

Both views share everything after positioning; ``route_connections`` is that
shared tail.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from gridwright.clipping import clip_segments_around_labels
from gridwright.connectors import assign_edges, endpoint_for, redistribute_overcrowded_edges
from gridwright.diagnostics import EventKind, LayoutEvent, record
from gridwright.geometry import Box
from gridwright.group_layout import layout_groups
from gridwright.healing import GroupTree, heal_flat_graph, heal_hierarchical_graph
from gridwright.labels import measure_label_text, place_label
from gridwright.layer_layout import layout_layers
from gridwright.roles import TierClassifier, get_tier_classifier
from gridwright.routing import GROUP_PROXIMITY, Obstacle, route_connector, route_variation
from gridwright.spec import (
    Connection,
    DiagramGraph,
    Layer,
    PositionedComponent,
    PositionedDiagram,
    PositionedGroup,
    RoutedConnection,
)
from gridwright.viewport import Viewport, default_viewport, get_profile

log = logging.getLogger(__name__)

LAYOUT_MODES = ("auto", "flat", "hierarchical")

GraphInput = DiagramGraph | Mapping[str, Any]


def _as_graph(graph: GraphInput) -> DiagramGraph:
    if isinstance(graph, DiagramGraph):
        return graph
    return DiagramGraph.model_validate(dict(graph))


def _obstacles(
    components: Sequence[PositionedComponent],
    groups: Sequence[PositionedGroup],
    tree: GroupTree | None,
) -> list[Obstacle]:
    obstacles = [Obstacle(id=c.id, box=c.box) for c in components]
    for g in groups:
        members = frozenset(tree.descendant_component_ids(g.id)) if tree is not None and g.id in tree else frozenset()
        obstacles.append(Obstacle(id=g.id, box=g.box, proximity=GROUP_PROXIMITY, members=members))
    return obstacles


def route_connections(
    components: Sequence[PositionedComponent],
    connections: Sequence[Connection],
    events: list[LayoutEvent],
    *,
    groups: Sequence[PositionedGroup] = (),
    tree: GroupTree | None = None,
) -> list[RoutedConnection]:
    """Allocate edge points, route every connection, place labels, then clip.

    Connections whose endpoints are not among ``components`` are skipped.
    Clipping runs last so every segment is trimmed against every label,
    including labels placed after its own.
    """
    positions = {c.id: c for c in components}
    assignments = redistribute_overcrowded_edges(assign_edges(positions, list(connections)), events)
    obstacles = _obstacles(components, groups, tree)

    routed: list[RoutedConnection] = []
    placed: list[Box] = []
    for idx, conn in enumerate(connections):
        source = positions.get(conn.source)
        target = positions.get(conn.target)
        if source is None or target is None:
            record(events, log, EventKind.DANGLING_CONNECTION, f"{conn.source}->{conn.target}", "skipped")
            continue

        start, from_edge = endpoint_for(assignments, source, idx, "out")
        end, to_edge = endpoint_for(assignments, target, idx, "in")
        path = route_connector(
            start,
            end,
            from_edge,
            to_edge,
            source.box,
            target.box,
            variation=route_variation(idx),
            obstacles=obstacles,
            endpoint_ids=(source.id, target.id),
        )

        label_pos = label_dim = None
        if conn.label:
            label_dim = measure_label_text(conn.label)
            label_pos = place_label(path.points, label_dim, components, placed, groups)
            placed.append(Box.around(label_pos.x, label_pos.y, label_dim.width, label_dim.height))

        routed.append(
            RoutedConnection(
                **conn.model_dump(),
                index=idx,
                from_edge=from_edge,
                to_edge=to_edge,
                path_points=path.points,
                path_segments=path.segments,
                path_d=path.svg_path,
                label_pos=label_pos,
                label_dim=label_dim,
            )
        )

    for conn in routed:
        conn.path_segments = clip_segments_around_labels(conn.path_segments, placed)
    return routed


def layout_flat(
    graph: GraphInput,
    title: str | None = None,
    viewport: Viewport | str | None = None,
) -> PositionedDiagram:
    """Layered view: one centered row per layer, connectors between rows."""
    profile = get_profile(viewport or default_viewport())
    healed = heal_flat_graph(_as_graph(graph))
    g = healed.graph
    flat = layout_layers(g, profile, layer_height_scale=healed.layer_height_scale)

    events = list(healed.events)
    connections = route_connections(flat.components, g.connections, events)
    layers = [Layer(name=layer.name, component_ids=ids) for layer, ids in zip(g.layers, flat.layers)]

    log.debug("Flat layout: %d components, %d connections", len(flat.components), len(connections))
    return PositionedDiagram(
        system_name=title or g.system_name,
        mode="flat",
        width=flat.width,
        height=flat.height,
        cloud_provider=g.cloud_provider,
        components=flat.components,
        connections=connections,
        layers=layers,
        layer_height=flat.layer_height,
        padding_top=flat.padding_top,
        layer_label_height=flat.layer_label_height,
        events=events,
    )


def layout_hierarchical(
    graph: GraphInput,
    title: str | None = None,
    viewport: Viewport | str | None = None,
    *,
    classifier: TierClassifier | None = None,
) -> PositionedDiagram:
    """Cloud view: nested group boxes, tiered components inside each group."""
    profile = get_profile(viewport or default_viewport())
    healed = heal_hierarchical_graph(_as_graph(graph))
    g = healed.graph
    tree = healed.tree if healed.tree is not None else GroupTree()
    result = layout_groups(g, tree, profile, classifier=classifier or get_tier_classifier())

    events = list(healed.events)
    connections = route_connections(result.components, g.connections, events, groups=result.groups, tree=tree)

    log.debug(
        "Hierarchical layout: %d components, %d groups, %d connections",
        len(result.components),
        len(result.groups),
        len(connections),
    )
    return PositionedDiagram(
        system_name=title or g.system_name,
        mode="hierarchical",
        width=result.width,
        height=result.height,
        cloud_provider=g.cloud_provider,
        components=result.components,
        connections=connections,
        groups=result.groups,
        events=events,
    )


def layout_diagram(
    graph: GraphInput,
    title: str | None = None,
    viewport: Viewport | str | None = None,
    mode: str = "auto",
    *,
    classifier: TierClassifier | None = None,
) -> PositionedDiagram:
    """Dispatch on ``mode``; ``auto`` picks the cloud view when the graph has groups."""
    if mode not in LAYOUT_MODES:
        raise ValueError(f"Unknown layout mode {mode!r}. Valid: {', '.join(LAYOUT_MODES)}")
    g = _as_graph(graph)
    if mode == "hierarchical" or (mode == "auto" and g.is_hierarchical):
        return layout_hierarchical(g, title, viewport, classifier=classifier)
    return layout_flat(g, title, viewport)
