"""Tests for connector label placement."""

from __future__ import annotations

import pytest
from gridwright.geometry import Point
from gridwright.labels import (
    CANDIDATE_GENERATORS,
    FALLBACK_COMPONENT_BUFFER,
    LABEL_BUFFER,
    LabelContext,
    cardinal_sweep_candidates,
    find_best_segment,
    grid_candidates,
    label_box,
    label_collides,
    measure_label_text,
    place_label,
    segment_offset_candidates,
)
from gridwright.spec import LabelDim, PositionedComponent, PositionedGroup

COMPONENTS = [
    PositionedComponent(id="a", x=100, y=100, width=200, height=100),
    PositionedComponent(id="b", x=100, y=500, width=200, height=100),
]
PATH = [Point(100, 150), Point(100, 180), Point(100, 420), Point(100, 450)]


class TestMeasure:
    @pytest.mark.parametrize(
        "text, width",
        [
            ("", 50),
            (None, 50),
            ("ok", 50),
            ("HTTPS", 50.5),
            ("x" * 100, 180),
        ],
    )
    def test_width_clamped(self, text, width):
        dim = measure_label_text(text)
        assert dim.width == pytest.approx(width)
        assert dim.height == 26


def test_best_segment_skips_arrow_segments():
    points = [Point(0, 0), Point(0, 30), Point(0, 100), Point(200, 100), Point(200, 130)]
    assert find_best_segment(points) == 2


def test_best_segment_short_path():
    assert find_best_segment([Point(0, 0), Point(0, 100)]) == 1


def test_first_label_beside_vertical_run():
    dim = measure_label_text("HTTPS")
    pos = place_label(PATH, dim, COMPONENTS, [])
    assert pos == Point(100 + dim.width / 2 + 12, 300)
    assert not label_collides(pos, dim, LabelContext(path=PATH, components=COMPONENTS, placed=[]))


def test_second_label_avoids_first():
    dim = measure_label_text("HTTPS")
    first = place_label(PATH, dim, COMPONENTS, [])
    placed = [label_box(first, dim)]
    second = place_label(PATH, dim, COMPONENTS, placed)
    assert second != first
    assert not label_box(second, dim).overlaps(placed[0].expand(LABEL_BUFFER))


def test_arrow_buffer():
    ctx = LabelContext(path=PATH, components=[], placed=[])
    assert label_collides(Point(110, 160), LabelDim(width=50, height=26), ctx)


def test_group_border_and_header_collide():
    group = PositionedGroup(id="g", x=0, y=0, width=400, height=400)
    ctx = LabelContext(path=[], components=[], placed=[], groups=[group])
    dim = LabelDim(width=50, height=26)
    assert label_collides(Point(200, 0), dim, ctx)
    assert label_collides(Point(40, 20), dim, ctx)
    assert not label_collides(Point(200, 200), dim, ctx)


def test_fallback_maximizes_distance_from_components():
    dim = measure_label_text("HTTPS")
    pos = place_label(PATH, dim, COMPONENTS, [], generators=())
    assert pos == Point(350, 300)


def _crowded_grid() -> list[PositionedComponent]:
    """5x5 components 20 apart: no gap is wide enough for a label."""
    return [
        PositionedComponent(id=f"c{n}", x=200 * i, y=200 * j, width=180, height=180)
        for n, (i, j) in enumerate((i, j) for i in range(-2, 3) for j in range(-2, 3))
    ]


def test_fallback_escapes_crowded_grid():
    components = _crowded_grid()
    path = [Point(90, 0), Point(100, 0), Point(110, 0)]
    dim = measure_label_text("HTTPS")
    pos = place_label(path, dim, components, [])
    assert pos == Point(535, 0)


def test_fallback_never_lands_on_component_or_label():
    components = _crowded_grid()
    path = [Point(90, 0), Point(100, 0), Point(110, 0)]
    dim = measure_label_text("HTTPS")
    placed = [label_box(Point(535, 0), dim)]
    pos = place_label(path, dim, components, placed)
    box = label_box(pos, dim)
    assert not any(box.overlaps(c.box.expand(FALLBACK_COMPONENT_BUFFER)) for c in components)
    assert not box.overlaps(placed[0].expand(LABEL_BUFFER))


class TestCandidateGenerators:
    dim = LabelDim(width=50, height=26)

    def test_generator_order(self):
        assert CANDIDATE_GENERATORS == (segment_offset_candidates, cardinal_sweep_candidates, grid_candidates)

    def test_cardinal_sweep_order_and_offsets(self):
        candidates = list(cardinal_sweep_candidates(PATH, 1, self.dim))
        assert len(candidates) == 7 * 6
        first_ring = [c for p in candidates[:6] for c in (p.x, p.y)]
        assert first_ring == pytest.approx([100, 220, 100, 380, 180, 300, 20, 300, 156, 244, 44, 356])
        assert (candidates[-1].x, candidates[-1].y) == pytest.approx((-40, 440))

    def test_grid_skips_segment_midpoint(self):
        candidates = list(grid_candidates(PATH, 1, self.dim))
        per_segment = 7 * 9 - 1
        assert len(candidates) == 2 * per_segment
        assert candidates[0] == Point(-20, 180)
        assert candidates[per_segment] == Point(-20, 315)
        assert Point(100, 300) not in candidates
        assert Point(100, 435) not in candidates
        assert all(abs(p.x - 100) <= 120 and abs(p.y - 300) <= 120 for p in candidates[:per_segment])

    def test_segment_offsets_beside_vertical_run(self):
        first = next(segment_offset_candidates(PATH, 1, self.dim))
        assert first == Point(100 + 25 + 12, 300)
