import numpy as np
import pytest

from src.mirrorcurve.curve import Curve, Step, trace_curve
from src.mirrorcurve.errors import InvalidArgument, StaleReference
from src.mirrorcurve.grid import Direction, EdgeId, GridGraph, Orientation
from src.mirrorcurve.polyline import (
    SplineOptions,
    curve_to_polyline,
    edge_midpoint,
    helper_point_fn,
    midpoint_fn,
)

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


def test_edge_midpoints() -> None:
    np.testing.assert_allclose(edge_midpoint(EdgeId(H, 1, 2), 10.0, 10.0), [25.0, 10.0])
    np.testing.assert_allclose(edge_midpoint(EdgeId(V, 1, 2), 10.0, 10.0), [20.0, 15.0])
    np.testing.assert_allclose(edge_midpoint(EdgeId(H, 0, 0), 4.0, 2.0), [2.0, 0.0])


def test_helper_points_shift_off_mirrors() -> None:
    g = GridGraph(2, 2)
    fn = helper_point_fn(g, 10.0, 10.0)
    np.testing.assert_allclose(fn(Step(EdgeId(V, 0, 0), Direction.SE)), [1.25, 5.0])
    np.testing.assert_allclose(fn(Step(EdgeId(H, 0, 0), Direction.SW)), [5.0, 1.25])
    np.testing.assert_allclose(fn(Step(EdgeId(H, 2, 1), Direction.NE)), [15.0, 18.75])
    # Interior edges without a mirror sit on the midpoint.
    np.testing.assert_allclose(fn(Step(EdgeId(H, 1, 0), Direction.SE)), [5.0, 10.0])

    g.toggle_mirror(EdgeId(H, 1, 0), True)
    np.testing.assert_allclose(fn(Step(EdgeId(H, 1, 0), Direction.NW)), [5.0, 8.75])


def test_helper_points_reject_stale_edges() -> None:
    fn = helper_point_fn(GridGraph(2, 2), 10.0, 10.0)
    with pytest.raises(StaleReference):
        fn(Step(EdgeId(H, 4, 4), Direction.SW))


def test_curve_to_polyline_midpoints() -> None:
    g = GridGraph(1, 1)
    curve = trace_curve(g, EdgeId(H, 0, 0), Direction.SW)
    pts = curve_to_polyline(curve, midpoint_fn(2.0, 2.0))
    np.testing.assert_allclose(
        pts, [[1.0, 0.0], [0.0, 1.0], [1.0, 2.0], [2.0, 1.0], [1.0, 0.0]]
    )


def test_curve_to_polyline_smoothed_loop_closes() -> None:
    g = GridGraph(1, 1)
    curve = trace_curve(g, EdgeId(H, 0, 0), Direction.SW)
    pts = curve_to_polyline(curve, helper_point_fn(g, 2.0, 2.0), SplineOptions(0.5, 6))
    assert pts.shape == ((len(curve) - 1) * 6 + 1, 2)
    np.testing.assert_array_equal(pts[0], pts[-1])


def test_curve_to_polyline_rejects_empty_curve() -> None:
    with pytest.raises(InvalidArgument):
        curve_to_polyline(Curve(steps=()), midpoint_fn(1.0, 1.0))
