import numpy as np
import pytest

from src.mirrorcurve.errors import InvalidArgument
from src.mirrorcurve.geometry import (
    max_turning_angle,
    partial_polyline,
    point_at_progress,
    polyline_length,
    segment_lengths,
)

BENT = np.array([[0.0, 0.0], [3.0, 0.0], [3.0, 4.0]])
SQUARE = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])


def test_polyline_length_open_and_closed() -> None:
    assert polyline_length(BENT) == pytest.approx(7.0)
    assert polyline_length(BENT, closed=True) == pytest.approx(12.0)
    np.testing.assert_allclose(segment_lengths(BENT, closed=True), [3.0, 4.0, 5.0])


def test_point_at_progress_interpolates_by_arc_length() -> None:
    point, index = point_at_progress(BENT, 0.5)
    np.testing.assert_allclose(point, [3.0, 0.5])
    assert index == 1


def test_point_at_progress_endpoints() -> None:
    point, index = point_at_progress(BENT, 0.0)
    np.testing.assert_allclose(point, BENT[0])
    assert index == 0

    point, _ = point_at_progress(BENT, 1.0)
    np.testing.assert_allclose(point, BENT[-1])

    # Progress is clamped to [0, 1].
    point, _ = point_at_progress(BENT, 1.5)
    np.testing.assert_allclose(point, BENT[-1])
    point, index = point_at_progress(BENT, -0.25)
    np.testing.assert_allclose(point, BENT[0])
    assert index == 0


def test_closed_polyline_walks_the_wrap_segment() -> None:
    point, index = point_at_progress(SQUARE, 0.875, closed=True)
    np.testing.assert_allclose(point, [0.0, 0.5])
    assert index == 3

    point, _ = point_at_progress(SQUARE, 1.0, closed=True)
    np.testing.assert_allclose(point, SQUARE[0])


def test_partial_polyline_keeps_passed_vertices() -> None:
    out = partial_polyline(BENT, 0.5)
    np.testing.assert_allclose(out, [[0.0, 0.0], [3.0, 0.0], [3.0, 0.5]])

    start = partial_polyline(BENT, 0.0)
    np.testing.assert_allclose(start, [[0.0, 0.0], [0.0, 0.0]])


def test_degenerate_polylines() -> None:
    single = np.array([[2.0, 3.0]])
    assert polyline_length(single) == 0.0
    point, index = point_at_progress(single, 0.7)
    np.testing.assert_allclose(point, [2.0, 3.0])
    assert index == 0

    flat = np.array([[1.0, 1.0], [1.0, 1.0]])
    assert polyline_length(flat) == 0.0
    point, _ = point_at_progress(flat, 0.5)
    np.testing.assert_allclose(point, [1.0, 1.0])

    with pytest.raises(InvalidArgument):
        polyline_length(np.zeros((0, 2)))


def test_max_turning_angle_of_right_angle() -> None:
    assert max_turning_angle(BENT) == pytest.approx(np.pi / 2)
    line = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]])
    assert max_turning_angle(line) == pytest.approx(0.0, abs=1e-3)


def test_accepts_integer_progress_and_points() -> None:
    point, index = point_at_progress(SQUARE, 0, closed=True)
    np.testing.assert_allclose(point, SQUARE[0])
    assert index == 0
    point, _ = point_at_progress(BENT, 1)
    np.testing.assert_allclose(point, BENT[-1])

    grid_points = np.array([[0, 0], [3, 0], [3, 4]])
    assert polyline_length(grid_points) == pytest.approx(7.0)
    point, index = point_at_progress(grid_points, 0.5)
    assert point.dtype == np.float64
    np.testing.assert_allclose(point, [3.0, 0.5])
    assert index == 1
    out = partial_polyline(grid_points, 1)
    np.testing.assert_allclose(out[-1], [3.0, 4.0])
