from draftboard.hit_test import (
    hit_test_intersecting_rect,
    hit_test_intersecting_rect_indices,
    hit_test_topmost,
)


def test_topmost_wins_in_overlap(rect_a, rect_b):
    assert hit_test_topmost([rect_a, rect_b], 180, 160) is rect_b
    assert hit_test_topmost([rect_b, rect_a], 180, 160) is rect_a


def test_miss_returns_none(rect_a):
    assert hit_test_topmost([rect_a], 10, 10) is None


def test_empty_inputs():
    assert hit_test_topmost([], 0, 0) is None
    assert hit_test_intersecting_rect([], 0, 0, 10, 10) == []
    assert hit_test_intersecting_rect_indices([], 0, 0, 10, 10) == []


def test_marquee_selects_both_rectangles(make_rect):
    left = make_rect(0, 0, 10, 10)
    right = make_rect(20, 0, 10, 10)
    hits = hit_test_intersecting_rect([left, right], 0, 0, 30, 15)
    assert hits == [left, right]


def test_touching_edge_is_included(make_rect):
    shape = make_rect(10, 10, 10, 10)
    x0, y0, _, _ = shape.bounds_px()
    assert hit_test_intersecting_rect_indices([shape], 0, 0, x0, y0) == [0]


def test_disjoint_rect_excluded(make_rect):
    shape = make_rect(10, 10, 10, 10)
    assert hit_test_intersecting_rect_indices([shape], 0, 0, 5, 5) == []


def test_rect_corners_are_normalised(rect_a):
    assert hit_test_intersecting_rect([rect_a], 300, 300, 150, 150) == [rect_a]
