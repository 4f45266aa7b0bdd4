from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from ..utils import debug
from .errors import GridExit, TraceOverflow
from .grid import (
    Direction,
    DirectionLike,
    EdgeId,
    EdgeRef,
    GridGraph,
    as_direction,
)


class Step(NamedTuple):
    edge: EdgeId
    direction: Direction


@dataclass(frozen=True)
class Curve:
    """One traversal: steps[0] is the start state, every later step is
    (edge reached, direction leaving it)."""

    steps: tuple[Step, ...]
    is_closed: bool = False
    left_grid: bool = False
    exit_edge: EdgeId | None = None
    exit_direction: Direction | None = None

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def start(self) -> Step:
        return self.steps[0]

    @property
    def edges(self) -> tuple[EdgeId, ...]:
        return tuple(s.edge for s in self.steps)

    @property
    def directions(self) -> tuple[Direction, ...]:
        return tuple(s.direction for s in self.steps)

    def describe(self) -> str:
        lines = ["MirrorCurve:"]
        lines.extend(f"  {s.edge} -> {s.direction.name}" for s in self.steps)
        if self.is_closed:
            lines.append("  (closed loop)")
        elif self.left_grid and self.exit_edge and self.exit_direction is not None:
            lines.append(
                f"  (left grid at {self.exit_edge} heading {self.exit_direction.name})"
            )
        else:
            lines.append("  (open path)")
        return "\n".join(lines)


def default_max_steps(graph: GridGraph) -> int:
    # The walk is injective on (edge, direction) states, so no curve can be
    # longer than the state count.
    return 4 * len(graph) + 2


def trace_curve(
    graph: GridGraph,
    start_edge: EdgeRef,
    start_direction: DirectionLike,
    *,
    max_steps: int | None = None,
) -> Curve:
    """Walk the reflection rule from (start_edge, start_direction).

    Consumes the start state, then for every edge reached both the outgoing
    direction and the opposite of the incoming one; together those are the
    state and its reverse traversal, so a curve and its reverse are used up
    in one pass.

    Raises TraceOverflow when the walk neither closes nor exits within
    max_steps.
    """
    start = Step(graph.edge(start_edge).id, as_direction(start_direction))
    cap = default_max_steps(graph) if max_steps is None else int(max_steps)

    steps: list[Step] = [start]
    graph.mark_consumed(start.edge, start.direction)
    current, direction = start

    while len(steps) < cap:
        try:
            nxt = graph.neighbor(current, direction)
        except GridExit as exc:
            return Curve(
                steps=tuple(steps),
                left_grid=True,
                exit_edge=exc.edge,
                exit_direction=exc.direction,
            )

        outgoing = graph.reflect(nxt, direction)
        steps.append(Step(nxt, outgoing))
        graph.mark_consumed(nxt, outgoing)
        graph.mark_consumed(nxt, direction.opposite)

        if len(steps) > 2 and nxt == start.edge and outgoing == start.direction:
            return Curve(steps=tuple(steps), is_closed=True)

        current, direction = nxt, outgoing

    debug.log(f"trace overflow from {start.edge} {start.direction.name} cap={cap}")
    raise TraceOverflow(start.edge, start.direction, cap)
