import pytest

from heritage_atlas.common.geometry import (
    compute_bbox,
    multipolygon_contains_point,
    point_in_bbox,
    polygon_contains_point,
    ring_contains_point,
)

SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]
HOLE = [(4.0, 4.0), (6.0, 4.0), (6.0, 6.0), (4.0, 6.0), (4.0, 4.0)]
TRIANGLE = [(20.0, 0.0), (30.0, 0.0), (25.0, 8.0), (20.0, 0.0)]


def test_point_strictly_inside_square_is_contained():
    assert ring_contains_point(SQUARE, (5.0, 5.0)) is True
    assert polygon_contains_point([SQUARE], (5.0, 5.0)) is True


def test_point_outside_square_is_not_contained():
    assert polygon_contains_point([SQUARE], (15.0, 5.0)) is False
    assert polygon_contains_point([SQUARE], (5.0, -1.0)) is False


def test_point_in_hole_is_not_contained():
    assert polygon_contains_point([SQUARE, HOLE], (5.0, 5.0)) is False
    assert polygon_contains_point([SQUARE, HOLE], (2.0, 2.0)) is True


def test_empty_polygon_contains_nothing():
    assert polygon_contains_point([], (0.0, 0.0)) is False


def test_multipolygon_matches_any_member():
    polygons = [[SQUARE, HOLE], [TRIANGLE]]
    assert multipolygon_contains_point(polygons, (25.0, 3.0)) is True
    assert multipolygon_contains_point(polygons, (5.0, 5.0)) is False
    assert multipolygon_contains_point(polygons, (15.0, 3.0)) is False


def test_horizontal_and_zero_length_edges_do_not_divide_by_zero():
    ring = [(0.0, 0.0), (10.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)]
    ring_contains_point(ring, (5.0, 0.0))
    ring_contains_point(ring, (5.0, 10.0))
    assert ring_contains_point(ring, (5.0, 5.0)) is True


def test_rings_with_extra_ordinates():
    ring = [(x, y, 12.0) for x, y in SQUARE]
    assert ring_contains_point(ring, (5.0, 5.0)) is True
    assert compute_bbox([[ring]]) == (0.0, 0.0, 10.0, 10.0)


def test_bbox_spans_every_ring_of_every_polygon():
    assert compute_bbox([[SQUARE, HOLE], [TRIANGLE]]) == (0.0, 0.0, 30.0, 10.0)


def test_point_in_bbox_is_inclusive():
    bbox = (0.0, 0.0, 10.0, 10.0)
    assert point_in_bbox((10.0, 0.0), bbox) is True
    assert point_in_bbox((10.1, 0.0), bbox) is False


@pytest.mark.parametrize("polygons", [[[SQUARE, HOLE]], [[TRIANGLE]], [[SQUARE], [TRIANGLE]]])
def test_containment_implies_bbox_membership(polygons):
    bbox = compute_bbox(polygons)
    for i in range(-4, 70):
        for j in range(-4, 28):
            point = (i * 0.5, j * 0.5)
            if multipolygon_contains_point(polygons, point):
                assert point_in_bbox(point, bbox)
