"""Flat layered layout: one centered row of components per layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from gridwright.spec import Connection, DiagramGraph, Layer, PositionedComponent
from gridwright.viewport import BOTTOM_MARGIN, LAYER_LABEL_HEIGHT, ViewportProfile


@dataclass
class FlatLayout:
    components: list[PositionedComponent]
    layers: list[list[str]]
    width: float
    height: float
    layer_height: float
    padding_top: float
    layer_label_height: float = LAYER_LABEL_HEIGHT
    positions: dict[str, PositionedComponent] = field(default_factory=dict)


def _mean_neighbour_index(comp_id: str, prev: list[str], connections: list[Connection]) -> float:
    index = {cid: i for i, cid in enumerate(prev)}
    hits = []
    for conn in connections:
        if conn.source == comp_id and conn.target in index:
            hits.append(index[conn.target])
        elif conn.target == comp_id and conn.source in index:
            hits.append(index[conn.source])
    if not hits:
        # Unlinked components drift to the middle of the row.
        return len(prev) / 2
    return sum(hits) / len(hits)


def order_layers(layers: list[Layer], connections: list[Connection]) -> list[list[str]]:
    """Order each layer by the mean position of its links into the previous one."""
    ordered: list[list[str]] = []
    for i, layer in enumerate(layers):
        if i == 0:
            ordered.append(list(layer.component_ids))
            continue
        prev = ordered[i - 1]
        ordered.append(sorted(layer.component_ids, key=lambda cid: _mean_neighbour_index(cid, prev, connections)))
    return ordered


def layout_layers(graph: DiagramGraph, profile: ViewportProfile, *, layer_height_scale: float = 1.0) -> FlatLayout:
    """Position every component of a healed flat graph.

    Rows are centered on the canvas: for ``n`` components the row starts at
    ``(canvas_width - (n*W + (n-1)*G)) / 2``.
    """
    w = profile.component_width
    h = profile.component_height
    gap = profile.gap_x
    layer_height = profile.layer_height * layer_height_scale

    ordered = order_layers(graph.layers, graph.connections)
    widest = max((len(ids) for ids in ordered), default=0)
    width = max(profile.min_width, widest * (w + gap) + profile.padding_side * 2)
    height = profile.padding_top + len(ordered) * layer_height + BOTTOM_MARGIN

    layer_of = {cid: li for li, ids in enumerate(ordered) for cid in ids}
    positions: dict[str, PositionedComponent] = {}
    for comp in graph.components:
        li = layer_of.get(comp.id)
        if li is None:
            continue
        row = ordered[li]
        n = len(row)
        content_width = n * w + (n - 1) * gap
        start_x = (width - content_width) / 2
        positions[comp.id] = PositionedComponent(
            **comp.model_dump(),
            x=start_x + row.index(comp.id) * (w + gap) + w / 2,
            y=profile.padding_top + li * layer_height + LAYER_LABEL_HEIGHT + (layer_height - LAYER_LABEL_HEIGHT) / 2,
            width=w,
            height=h,
            layer_index=li,
        )

    return FlatLayout(
        components=list(positions.values()),
        layers=ordered,
        width=width,
        height=height,
        layer_height=layer_height,
        padding_top=profile.padding_top,
        positions=positions,
    )
