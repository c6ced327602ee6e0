"""Tests for clipping connector segments around labels."""

from __future__ import annotations

import pytest
from gridwright.clipping import clip_segment, clip_segments_around_labels
from gridwright.geometry import Box, Segment, segment_overlap_length

LABEL = Box(left=80, right=120, top=-15, bottom=15)


def test_segment_through_label_splits_in_two():
    pieces = clip_segments_around_labels([Segment(0, 0, 200, 0)], [LABEL])
    assert len(pieces) == 2
    first, second = pieces
    assert first.x1 == 0
    assert first.x2 < 80
    assert second.x1 > 120
    assert second.x2 == 200


def test_segment_inside_label_is_dropped():
    assert clip_segments_around_labels([Segment(90, 0, 110, 0)], [LABEL]) == []


def test_dashed_flag_preserved():
    pieces = clip_segments_around_labels([Segment(0, 0, 200, 0, dashed=True)], [LABEL])
    assert pieces
    assert all(p.dashed for p in pieces)


def test_no_labels_returns_segments_unchanged():
    segs = [Segment(0, 0, 10, 0), Segment(10, 0, 10, 10)]
    assert clip_segments_around_labels(segs, []) == segs


def test_parallel_segment_outside_kept_whole():
    seg = Segment(0, 100, 200, 100)
    assert clip_segments_around_labels([seg], [LABEL]) == [seg]


def test_segment_ending_inside_label_keeps_one_piece():
    pieces = clip_segment(Segment(0, 0, 100, 0), LABEL)
    assert len(pieces) == 1
    assert pieces[0].x2 == pytest.approx(80)


def test_vertical_segment_clipped():
    pieces = clip_segment(Segment(100, -100, 100, 100), LABEL)
    assert len(pieces) == 2
    assert pieces[0].y2 == pytest.approx(-15)
    assert pieces[1].y1 == pytest.approx(15)


def test_multiple_labels_split_sequentially():
    labels = [LABEL, Box(left=160, right=180, top=-10, bottom=10)]
    pieces = clip_segments_around_labels([Segment(0, 0, 300, 0)], labels)
    assert len(pieces) == 3
    for piece in pieces:
        for box in labels:
            assert segment_overlap_length(piece, box) == 0
