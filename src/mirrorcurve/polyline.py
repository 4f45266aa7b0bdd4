from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from beartype.typing import Callable

from .curve import Curve, Step
from .errors import InvalidArgument
from .grid import EdgeId, GridGraph, Orientation
from .spline import smooth

StepPointFn = Callable[[Step], np.ndarray]


@dataclass(frozen=True)
class SplineOptions:
    tension: float = 0.5
    subdivisions: int = 10


def edge_midpoint(edge_id: EdgeId, cell_w: float, cell_h: float) -> np.ndarray:
    x2, y2 = edge_id.lattice_point()
    return np.array([0.5 * x2 * cell_w, 0.5 * y2 * cell_h], dtype=np.float64)


def midpoint_fn(cell_w: float, cell_h: float) -> StepPointFn:
    def point(step: Step) -> np.ndarray:
        return edge_midpoint(step.edge, cell_w, cell_h)

    return point


def helper_point_fn(
    graph: GridGraph,
    cell_w: float,
    cell_h: float,
    offset_fraction: float = 0.125,
) -> StepPointFn:
    """Midpoints, with mirrored edges pushed toward the side the traveler
    leaves on so the bounce reads as a turn."""
    d = min(cell_w, cell_h) * offset_fraction

    def point(step: Step) -> np.ndarray:
        p = edge_midpoint(step.edge, cell_w, cell_h)
        if graph.edge(step.edge).is_mirror:
            if step.edge.orientation is Orientation.VERTICAL:
                p[0] += d * step.direction.dx
            else:
                p[1] += d * step.direction.dy
        return p

    return point


def curve_to_polyline(
    curve: Curve,
    point_fn: StepPointFn,
    smoothing: SplineOptions | None = None,
) -> np.ndarray:
    """Map every step of the curve to a point, optionally spline-smoothed."""
    if not curve.steps:
        raise InvalidArgument("curve has no steps")
    pts = np.stack(
        [np.asarray(point_fn(step), dtype=np.float64) for step in curve.steps]
    )
    if smoothing is None:
        return pts
    return smooth(pts, float(smoothing.tension), int(smoothing.subdivisions))
