"""Graph healing: repair a raw graph so layout can always proceed.

Healing never raises. Every repair is reported as a ``LayoutEvent`` and
logged; the caller gets a layoutable copy of the graph back and the input is
left untouched.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from gridwright.diagnostics import EventKind, LayoutEvent, record
from gridwright.roles import is_gateway_like
from gridwright.spec import Component, Connection, ConnectionType, DiagramGraph, Group, Layer

log = logging.getLogger(__name__)

INFERRED_LABEL = "Inferred"
DEFAULT_LAYER_NAME = "Application"
ORPHAN_GROUP_ID = "orphans"
ORPHAN_GROUP_NAME = "Ungrouped Resources"
# Share of a pruned layer's height handed back to the remaining layers.
PRUNED_SPACE_SHARE = 0.5


@dataclass
class GroupNode:
    group: Group
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)
    component_ids: list[str] = field(default_factory=list)
    # True for the group synthesized to hold ungrouped components.
    synthetic: bool = False


@dataclass
class GroupTree:
    """Arena of groups keyed by id, with explicit parent/children ids."""

    nodes: dict[str, GroupNode] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)

    def __contains__(self, group_id: str) -> bool:
        return group_id in self.nodes

    def node(self, group_id: str) -> GroupNode:
        return self.nodes[group_id]

    def descendant_component_ids(self, group_id: str) -> set[str]:
        found: set[str] = set()
        stack = [group_id]
        while stack:
            node = self.nodes[stack.pop()]
            found.update(node.component_ids)
            stack.extend(node.children)
        return found

    def groups(self) -> list[Group]:
        return [n.group for n in self.nodes.values()]


@dataclass
class HealedGraph:
    graph: DiagramGraph
    events: list[LayoutEvent] = field(default_factory=list)
    # Multiplier applied to the preset layer height (flat view).
    layer_height_scale: float = 1.0
    tree: GroupTree | None = None


# ---------------------------------------------------------------------------
# Shared repairs
# ---------------------------------------------------------------------------


def normalize_graph(graph: DiagramGraph, events: list[LayoutEvent]) -> None:
    """Drop duplicate component ids and fill in per-component cloud provider."""
    seen: set[str] = set()
    unique: list[Component] = []
    for comp in graph.components:
        if comp.id in seen:
            record(events, log, EventKind.DUPLICATE_COMPONENT, comp.id, "kept first occurrence")
            continue
        seen.add(comp.id)
        if not comp.cloud_provider and graph.cloud_provider:
            comp.cloud_provider = graph.cloud_provider
        unique.append(comp)
    graph.components = unique


def valid_connections(graph: DiagramGraph) -> list[Connection]:
    ids = {c.id for c in graph.components}
    return [c for c in graph.connections if c.source in ids and c.target in ids]


def _degrees(connections: list[Connection]) -> dict[str, int]:
    counts: dict[str, int] = defaultdict(int)
    for conn in connections:
        counts[conn.source] += 1
        counts[conn.target] += 1
    return counts


def heal_isolated_components(graph: DiagramGraph, events: list[LayoutEvent]) -> None:
    """Give every component without connections one inferred incoming edge."""
    for comp in graph.components:
        connections = valid_connections(graph)
        if any(comp.id in (c.source, c.target) for c in connections):
            continue

        target_id = None
        gateway = next((c for c in graph.components if is_gateway_like(c)), None)
        if gateway is not None and gateway.id != comp.id:
            target_id = gateway.id
        else:
            counts = _degrees(connections)
            if counts:
                target_id = max(counts, key=lambda cid: counts[cid])

        if target_id is None:
            log.debug("No healing target for isolated component %s", comp.id)
            continue
        graph.connections.append(
            Connection(source=target_id, target=comp.id, label=INFERRED_LABEL, type=ConnectionType.SYNC)
        )
        record(events, log, EventKind.ISOLATED_HEALED, comp.id, f"inferred connection from {target_id}")


# ---------------------------------------------------------------------------
# Flat (layered) view
# ---------------------------------------------------------------------------


def _default_layer_index(layers: list[Layer]) -> int:
    for i, layer in enumerate(layers):
        if "application" in layer.name.lower():
            return i
    return 1 if len(layers) > 1 else 0


def heal_orphan_components(graph: DiagramGraph, events: list[LayoutEvent]) -> None:
    """Make every component belong to exactly one layer."""
    known = {c.id for c in graph.components}
    placed: set[str] = set()
    for layer in graph.layers:
        kept = []
        for cid in layer.component_ids:
            if cid in known and cid not in placed:
                kept.append(cid)
                placed.add(cid)
            else:
                log.debug("Dropped layer reference %r from layer %r", cid, layer.name)
        layer.component_ids = kept

    orphans = [c.id for c in graph.components if c.id not in placed]
    if not orphans:
        return
    if not graph.layers:
        graph.layers.append(Layer(name=DEFAULT_LAYER_NAME))
    target = graph.layers[_default_layer_index(graph.layers)]
    target.component_ids.extend(orphans)
    for cid in orphans:
        record(events, log, EventKind.ORPHAN_HEALED, cid, f"assigned to layer {target.name!r}")


def prune_empty_layers(graph: DiagramGraph, events: list[LayoutEvent]) -> float:
    """Remove empty layers; returns the layer height multiplier for the rest."""
    remaining = [layer for layer in graph.layers if layer.component_ids]
    pruned = [layer for layer in graph.layers if not layer.component_ids]
    for layer in pruned:
        record(events, log, EventKind.LAYER_PRUNED, layer.name or "<unnamed>")
    graph.layers = remaining
    if not pruned or not remaining:
        return 1.0
    return 1.0 + PRUNED_SPACE_SHARE * len(pruned) / len(remaining)


def heal_flat_graph(graph: DiagramGraph) -> HealedGraph:
    graph = graph.model_copy(deep=True)
    events: list[LayoutEvent] = []
    normalize_graph(graph, events)
    heal_orphan_components(graph, events)
    heal_isolated_components(graph, events)
    scale = prune_empty_layers(graph, events)
    return HealedGraph(graph=graph, events=events, layer_height_scale=scale)


# ---------------------------------------------------------------------------
# Hierarchical (grouped) view
# ---------------------------------------------------------------------------


def _resolve_parents(groups: dict[str, Group], events: list[LayoutEvent]) -> dict[str, str | None]:
    listed_by: dict[str, str] = {}
    for g in groups.values():
        for child in g.child_group_ids:
            listed_by.setdefault(child, g.id)

    parents: dict[str, str | None] = {}
    for g in groups.values():
        parent = g.parent_group_id
        if parent and (parent not in groups or parent == g.id):
            record(events, log, EventKind.GROUP_REPARENTED, g.id, f"unknown parent {parent!r}")
            parent = None
        if parent is None and listed_by.get(g.id, g.id) != g.id:
            parent = listed_by[g.id]
        parents[g.id] = parent

    # Break parent cycles: a group whose ancestor chain loops becomes a root.
    for gid in groups:
        chain = {gid}
        cur = parents[gid]
        while cur is not None:
            if cur == gid:
                record(events, log, EventKind.GROUP_REPARENTED, gid, "parent cycle broken")
                parents[gid] = None
                break
            if cur in chain:
                # Loop further up; broken when its own members are visited.
                break
            chain.add(cur)
            cur = parents[cur]
    return parents


def _prune_empty(tree: GroupTree, group_id: str, events: list[LayoutEvent]) -> bool:
    """Drop empty subtrees below ``group_id``; True when the group itself is empty."""
    node = tree.nodes[group_id]
    node.children = [c for c in node.children if not _prune_empty(tree, c, events)]
    if node.component_ids or node.children:
        return False
    del tree.nodes[group_id]
    record(events, log, EventKind.GROUP_PRUNED, group_id)
    return True


def build_group_tree(graph: DiagramGraph, events: list[LayoutEvent]) -> GroupTree:
    """Build the group arena and give every component exactly one group."""
    groups: dict[str, Group] = {}
    for g in graph.groups:
        groups.setdefault(g.id, g)

    parents = _resolve_parents(groups, events)
    tree = GroupTree()
    for gid, g in groups.items():
        tree.nodes[gid] = GroupNode(group=g, parent_id=parents[gid])
    for gid, node in tree.nodes.items():
        if node.parent_id is None:
            tree.roots.append(gid)
        else:
            tree.nodes[node.parent_id].children.append(gid)

    orphans: list[str] = []
    for comp in graph.components:
        owner = comp.group_id if comp.group_id in groups else None
        if owner is None:
            owner = next((g.id for g in groups.values() if comp.id in g.component_ids), None)
        if owner is None:
            orphans.append(comp.id)
            continue
        comp.group_id = owner
        tree.nodes[owner].component_ids.append(comp.id)

    if orphans:
        orphan_id = ORPHAN_GROUP_ID
        while orphan_id in groups:
            orphan_id += "_"
        orphan_group = Group(id=orphan_id, name=ORPHAN_GROUP_NAME, group_type="region")
        tree.nodes = {orphan_id: GroupNode(group=orphan_group, component_ids=orphans, synthetic=True), **tree.nodes}
        tree.roots.insert(0, orphan_id)
        for cid in orphans:
            graph.component(cid).group_id = orphan_id
            record(events, log, EventKind.ORPHAN_HEALED, cid, f"assigned to group {orphan_id!r}")

    tree.roots = [r for r in tree.roots if not _prune_empty(tree, r, events)]

    for node in tree.nodes.values():
        node.group.parent_group_id = node.parent_id
        node.group.component_ids = list(node.component_ids)
        node.group.child_group_ids = list(node.children)
    graph.groups = tree.groups()
    return tree


def heal_hierarchical_graph(graph: DiagramGraph) -> HealedGraph:
    graph = graph.model_copy(deep=True)
    events: list[LayoutEvent] = []
    normalize_graph(graph, events)
    heal_isolated_components(graph, events)
    tree = build_group_tree(graph, events)
    return HealedGraph(graph=graph, events=events, tree=tree)
