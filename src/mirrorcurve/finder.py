from __future__ import annotations

from ..utils import debug
from .curve import Curve, trace_curve
from .errors import StaleReference, TraceOverflow
from .grid import GridGraph


def find_next_curve(graph: GridGraph, *, max_steps: int | None = None) -> Curve | None:
    """Trace from the first edge (in grid order) with an unconsumed direction.

    A start whose trace fails is left consumed and reported; the scan then
    moves on to the following edges. Returns None once nothing is left.
    """
    for edge_id in graph.edge_ids():
        unused = graph.unconsumed_directions(edge_id)
        if not unused:
            continue
        direction = unused[0]
        debug.log(f"starting curve from {edge_id} heading {direction.name}")
        try:
            curve = trace_curve(graph, edge_id, direction, max_steps=max_steps)
        except (TraceOverflow, StaleReference) as exc:
            debug.warn(f"failed to build curve from {edge_id} {direction.name}: {exc}")
            continue
        debug.log(
            f"built curve with {len(curve)} steps "
            f"({'closed loop' if curve.is_closed else 'open path'})"
        )
        return curve

    debug.log("no more curves available")
    return None


def find_all_curves(graph: GridGraph, *, max_steps: int | None = None) -> list[Curve]:
    graph.reset_consumed()
    curves: list[Curve] = []
    while (curve := find_next_curve(graph, max_steps=max_steps)) is not None:
        curves.append(curve)
    return curves
