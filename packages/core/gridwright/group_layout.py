"""Hierarchical (cloud) layout: nested groups laid out depth-first.

Each group places its own components in tiered grid rows, then its child
groups below them, and only then knows its own bounds. Roots sit side by
side and the finished canvas is re-centered horizontally.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gridwright.healing import GroupTree
from gridwright.roles import TIER_ORDER, Tier, TierClassifier, classify_tier, is_priority_group
from gridwright.spec import Component, DiagramGraph, PositionedComponent, PositionedGroup
from gridwright.viewport import ViewportProfile

GROUP_PADDING = 80  # border + header label
GROUP_HEADER = 20
TITLE_SPACE = 120
MIN_GROUP_CONTENT_WIDTH = 200
ROOT_START_X = 60
CANVAS_EXTRA_PADDING = 200  # room for connectors/labels detouring outside groups
MIN_CANVAS_WIDTH = 1200
MAX_COLUMNS = 4
SIDE_BY_SIDE_MAX_COMPONENTS = 4


@dataclass
class GroupLayout:
    components: list[PositionedComponent]
    groups: list[PositionedGroup]
    width: float
    height: float


@dataclass
class _Bounds:
    x: float
    y: float
    width: float
    height: float


@dataclass
class _GroupPlacer:
    graph: DiagramGraph
    tree: GroupTree
    profile: ViewportProfile
    classifier: TierClassifier
    components: dict[str, PositionedComponent] = field(default_factory=dict)
    bounds: dict[str, _Bounds] = field(default_factory=dict)

    def ordered(self, group_ids: list[str]) -> list[str]:
        """Synthetic group first, then user/client-facing groups, else input order."""

        def rank(gid: str) -> int:
            node = self.tree.node(gid)
            if node.synthetic:
                return 0
            return 1 if is_priority_group(node.group) else 2

        return sorted(group_ids, key=rank)

    def place_components(self, group_id: str, start_x: float, cur_y: float) -> tuple[float, float]:
        """Grid-place a group's direct components tier by tier; returns (width, new cursor y)."""
        w = self.profile.cloud_component_width
        h = self.profile.cloud_component_height
        gap = self.profile.cloud_gap

        tiers: dict[Tier, list[Component]] = {tier: [] for tier in TIER_ORDER}
        for cid in self.tree.node(group_id).component_ids:
            comp = self.graph.component(cid)
            tiers[self.classifier(comp)].append(comp)

        max_width = 0.0
        for tier in TIER_ORDER:
            comps = sorted(tiers[tier], key=lambda c: c.name.lower())
            if not comps:
                continue
            tier_width = tier_height = 0.0
            for i, comp in enumerate(comps):
                col, row = i % MAX_COLUMNS, i // MAX_COLUMNS
                left = start_x + GROUP_PADDING + col * (w + gap)
                top = cur_y + row * (h + gap)
                self.components[comp.id] = PositionedComponent(
                    **comp.model_dump(), x=left + w / 2, y=top + h / 2, width=w, height=h
                )
                tier_width = max(tier_width, (col + 1) * (w + gap))
                tier_height = (row + 1) * (h + gap)
            max_width = max(max_width, tier_width)
            cur_y += tier_height
        return max_width, cur_y

    def layout(self, group_id: str, start_x: float, start_y: float) -> _Bounds:
        gap = self.profile.cloud_gap
        max_width, cur_y = self.place_components(group_id, start_x, start_y + GROUP_PADDING + GROUP_HEADER)

        children = self.ordered(self.tree.node(group_id).children)
        child_x = start_x + GROUP_PADDING
        i = 0
        while i < len(children):
            current = children[i]
            following = children[i + 1] if i + 1 < len(children) else None
            pair_count = len(self.tree.node(current).component_ids)
            if following is not None:
                pair_count += len(self.tree.node(following).component_ids)

            if following is not None and pair_count <= SIDE_BY_SIDE_MAX_COMPONENTS:
                b1 = self.layout(current, child_x, cur_y)
                b2 = self.layout(following, child_x + b1.width + gap, cur_y)
                cur_y += max(b1.height, b2.height) + gap
                max_width = max(max_width, b1.width + gap + b2.width + GROUP_PADDING)
                i += 2
            else:
                b = self.layout(current, child_x, cur_y)
                cur_y += b.height + gap
                max_width = max(max_width, b.width + GROUP_PADDING)
                i += 1

        bounds = _Bounds(
            x=start_x,
            y=start_y,
            width=max(max_width, MIN_GROUP_CONTENT_WIDTH) + GROUP_PADDING,
            height=(cur_y - start_y) + GROUP_PADDING / 2,
        )
        self.bounds[group_id] = bounds
        return bounds

    def preorder(self, roots: list[str]) -> list[str]:
        out: list[str] = []
        stack = list(reversed(roots))
        while stack:
            gid = stack.pop()
            out.append(gid)
            stack.extend(reversed(self.ordered(self.tree.node(gid).children)))
        return out


def layout_groups(
    graph: DiagramGraph,
    tree: GroupTree,
    profile: ViewportProfile,
    *,
    classifier: TierClassifier = classify_tier,
) -> GroupLayout:
    """Position components and groups of a healed hierarchical graph."""
    placer = _GroupPlacer(graph=graph, tree=tree, profile=profile, classifier=classifier)
    roots = placer.ordered(tree.roots)

    x = float(ROOT_START_X)
    total_height = float(TITLE_SPACE)
    for gid in roots:
        b = placer.layout(gid, x, TITLE_SPACE)
        x += b.width + profile.cloud_gap
        total_height = max(total_height, b.height + TITLE_SPACE + 40)

    groups = []
    for gid in placer.preorder(roots):
        b = placer.bounds[gid]
        groups.append(
            PositionedGroup(**tree.node(gid).group.model_dump(), x=b.x, y=b.y, width=b.width, height=b.height)
        )
    components = [placer.components[c.id] for c in graph.components if c.id in placer.components]

    lefts = [g.x for g in groups] + [c.x - c.width / 2 for c in components]
    rights = [g.x + g.width for g in groups] + [c.x + c.width / 2 for c in components]
    if not lefts:
        return GroupLayout(components=[], groups=[], width=MIN_CANVAS_WIDTH, height=total_height + CANVAS_EXTRA_PADDING)

    min_x, max_x = min(lefts), max(rights)
    content_width = max_x - min_x
    width = max(content_width + CANVAS_EXTRA_PADDING * 2, MIN_CANVAS_WIDTH)
    offset = width / 2 - (min_x + content_width / 2)
    if offset:
        for c in components:
            c.x += offset
        for g in groups:
            g.x += offset

    return GroupLayout(components=components, groups=groups, width=width, height=total_height + CANVAS_EXTRA_PADDING)
