import math

import pytest

from dietoy import Segment, point_in_polygon, segment_intersect, segment_point_distance
from dietoy.geometry import manhattan_distance, polygon_area


@pytest.mark.parametrize(
    'point, expected',
    [
        ((5.0, 3.0), 3.0),     # foot inside the segment
        ((-4.0, 3.0), 5.0),    # clamped to p1
        ((13.0, -4.0), 5.0),   # clamped to p2
        ((7.0, 0.0), 0.0),     # on the segment
    ],
)
def test_segment_point_distance_clamps_to_segment(point, expected):
    segment = Segment((0.0, 0.0), (10.0, 0.0))
    assert math.isclose(segment_point_distance(segment, point), expected, abs_tol=1e-12)


def test_segment_point_distance_zero_length_segment():
    segment = Segment((1.0, 1.0), (1.0, 1.0))
    assert math.isclose(segment_point_distance(segment, (4.0, 5.0)), 5.0)


def test_segment_intersect_infinite_lines():
    a = Segment((0.0, 0.0), (1.0, 1.0))
    b = Segment((4.0, 0.0), (4.0, 1.0))

    hit = segment_intersect(a, b)

    assert hit == pytest.approx((4.0, 4.0))
    assert segment_intersect(a, b, bounded=True) is None


def test_segment_intersect_bounded_hit():
    a = Segment((0.0, 0.0), (10.0, 10.0))
    b = Segment((0.0, 10.0), (10.0, 0.0))
    assert segment_intersect(a, b, bounded=True) == pytest.approx((5.0, 5.0))


def test_segment_intersect_parallel_returns_none():
    a = Segment((0.0, 0.0), (10.0, 0.0))
    b = Segment((0.0, 2.0), (10.0, 2.0))
    assert segment_intersect(a, b) is None


def test_point_in_polygon_even_odd():
    square = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    assert point_in_polygon(square, (5.0, 5.0))
    assert not point_in_polygon(square, (15.0, 5.0))
    assert not point_in_polygon(square, (5.0, -0.5))
    assert not point_in_polygon(square[:2], (5.0, 0.0))


def test_polygon_area_and_manhattan():
    square = [(0.0, 0.0), (0.0, 4.0), (4.0, 4.0), (4.0, 0.0)]
    assert math.isclose(abs(polygon_area(square)), 16.0)
    assert manhattan_distance((1.0, 2.0), (4.0, -2.0)) == 7.0
