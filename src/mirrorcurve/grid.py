from __future__ import annotations

import math
import dataclasses
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, NamedTuple, TypeAlias

import numpy as np

from ..utils import debug
from .errors import GridExit, InvalidArgument, StaleReference


class Direction(IntEnum):
    """Diagonal direction of travel; the value doubles as a fixed array slot."""

    NW = 0
    NE = 1
    SW = 2
    SE = 3

    @property
    def dx(self) -> int:
        return -1 if self in (Direction.NW, Direction.SW) else 1

    @property
    def dy(self) -> int:
        # y grows downward (row index), so north is -1.
        return -1 if self in (Direction.NW, Direction.NE) else 1

    @property
    def opposite(self) -> Direction:
        return _OPPOSITE[self]


_OPPOSITE = {
    Direction.NW: Direction.SE,
    Direction.SE: Direction.NW,
    Direction.NE: Direction.SW,
    Direction.SW: Direction.NE,
}

ALL_DIRECTIONS: tuple[Direction, ...] = tuple(Direction)


class Orientation(Enum):
    HORIZONTAL = "h"
    VERTICAL = "v"


# Indexed by Direction value. Horizontal mirrors flip the vertical component,
# vertical mirrors flip the horizontal one.
_REFLECTION: dict[Orientation, tuple[Direction, Direction, Direction, Direction]] = {
    Orientation.HORIZONTAL: (Direction.SW, Direction.SE, Direction.NW, Direction.NE),
    Orientation.VERTICAL: (Direction.NE, Direction.NW, Direction.SE, Direction.SW),
}


class EdgeId(NamedTuple):
    orientation: Orientation
    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.orientation.value}_{self.row}_{self.col}"

    def lattice_point(self) -> tuple[int, int]:
        """Edge midpoint in doubled grid coordinates (x right, y down)."""
        if self.orientation is Orientation.HORIZONTAL:
            return 2 * self.col + 1, 2 * self.row
        return 2 * self.col, 2 * self.row + 1


def parse_edge_id(text: str) -> EdgeId:
    """Parse the `h_<row>_<col>` / `v_<row>_<col>` text form."""
    parts = text.strip().split("_")
    if len(parts) != 3:
        raise InvalidArgument(f"malformed edge id: {text!r}")
    try:
        orientation = Orientation(parts[0])
        row = int(parts[1])
        col = int(parts[2])
    except ValueError as exc:
        raise InvalidArgument(f"malformed edge id: {text!r}") from exc
    return EdgeId(orientation, row, col)


def _edge_at_lattice_point(x: int, y: int) -> EdgeId | None:
    if y % 2 == 0 and x % 2 == 1:
        return EdgeId(Orientation.HORIZONTAL, y // 2, (x - 1) // 2)
    if x % 2 == 0 and y % 2 == 1:
        return EdgeId(Orientation.VERTICAL, (y - 1) // 2, x // 2)
    return None


def as_direction(value: object) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction[value.upper()]
        except KeyError as exc:
            raise InvalidArgument(f"unknown direction: {value!r}") from exc
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        try:
            return Direction(int(value))
        except ValueError as exc:
            raise InvalidArgument(f"unknown direction: {value!r}") from exc
    raise InvalidArgument(f"unknown direction: {value!r}")


EdgeRef: TypeAlias = EdgeId | str
DirectionLike: TypeAlias = Direction | int | str


@dataclass(frozen=True)
class Edge:
    """One grid edge. Values are immutable; GridGraph swaps in a new Edge when
    a mirror changes."""

    id: EdgeId
    is_mirror: bool
    # Indexed by Direction value; None where the move would leave the grid.
    neighbors: tuple[EdgeId | None, EdgeId | None, EdgeId | None, EdgeId | None]

    @property
    def orientation(self) -> Orientation:
        return self.id.orientation

    @property
    def is_boundary(self) -> bool:
        return any(n is None for n in self.neighbors)

    def outward_directions(self) -> tuple[Direction, ...]:
        return tuple(d for d in ALL_DIRECTIONS if self.neighbors[d] is None)


@dataclass(frozen=True)
class EdgeSnapshot:
    id: EdgeId
    orientation: Orientation
    row: int
    col: int
    is_mirror: bool
    is_boundary: bool


class GridGraph:
    """Grid edges as the nodes of a diagonal traversal graph.

    Horizontal edges span (rows+1) x cols, vertical edges rows x (cols+1).
    Edge iteration order is all horizontal edges row-major, then all
    vertical edges row-major; curve enumeration depends on it.

    Boundary edges are exactly the edges with at least one outward
    (None) neighbor. They are always mirrors, and their outward directions
    are pre-consumed, so the mirror flag and the seeded directions both
    derive from the neighbor table.
    """

    def __init__(self, rows: int, cols: int) -> None:
        for name, value in (("rows", rows), ("cols", cols)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidArgument(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidArgument(f"{name} must be >= 1, got {value}")
        self.rows = int(rows)
        self.cols = int(cols)
        self._edges: dict[EdgeId, Edge] = {}
        self._consumed: dict[EdgeId, set[Direction]] = {}

        ids = [
            EdgeId(Orientation.HORIZONTAL, row, col)
            for row in range(self.rows + 1)
            for col in range(self.cols)
        ] + [
            EdgeId(Orientation.VERTICAL, row, col)
            for row in range(self.rows)
            for col in range(self.cols + 1)
        ]
        known = set(ids)
        for edge_id in ids:
            x, y = edge_id.lattice_point()
            neighbors: list[EdgeId | None] = []
            for d in ALL_DIRECTIONS:
                candidate = _edge_at_lattice_point(x + d.dx, y + d.dy)
                neighbors.append(candidate if candidate in known else None)
            nbrs = (neighbors[0], neighbors[1], neighbors[2], neighbors[3])
            self._edges[edge_id] = Edge(
                id=edge_id,
                is_mirror=any(n is None for n in nbrs),
                neighbors=nbrs,
            )

        self.reset_consumed()
        debug.log(
            f"grid rows={self.rows} cols={self.cols} edges={len(self._edges)} "
            f"boundary_mirrors={self.mirror_count()}"
        )

    # Lookup

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, edge_id: object) -> bool:
        return edge_id in self._edges

    def edge_ids(self) -> Iterator[EdgeId]:
        return iter(self._edges)

    def edge(self, edge_id: EdgeRef) -> Edge:
        key = parse_edge_id(edge_id) if isinstance(edge_id, str) else edge_id
        try:
            return self._edges[key]
        except (KeyError, TypeError) as exc:
            raise StaleReference(
                f"edge {edge_id} is not part of a {self.rows}x{self.cols} grid"
            ) from exc

    def is_boundary(self, edge_id: EdgeRef) -> bool:
        return self.edge(edge_id).is_boundary

    def snapshot(self) -> list[EdgeSnapshot]:
        return [
            EdgeSnapshot(
                id=e.id,
                orientation=e.id.orientation,
                row=e.id.row,
                col=e.id.col,
                is_mirror=e.is_mirror,
                is_boundary=e.is_boundary,
            )
            for e in self._edges.values()
        ]

    def mirror_count(self) -> int:
        return sum(1 for e in self._edges.values() if e.is_mirror)

    # Mirrors

    def toggle_mirror(self, edge_id: EdgeRef, value: bool | None = None) -> bool:
        """Set (or flip, when value is None) an interior mirror.

        Returns False without touching the edge when it lies on the boundary.
        """
        edge = self.edge(edge_id)
        if edge.is_boundary:
            debug.log(f"boundary mirror {edge.id} cannot be toggled")
            return False
        mirror = (not edge.is_mirror) if value is None else bool(value)
        self._edges[edge.id] = dataclasses.replace(edge, is_mirror=mirror)
        return True

    def randomize(self, p: float, rng: np.random.Generator | None = None) -> int:
        """Flip every interior edge independently with probability p.

        Returns the number of flipped edges.
        """
        if isinstance(p, bool) or not isinstance(p, (int, float, np.floating)):
            raise InvalidArgument(f"probability must be a number, got {p!r}")
        if not math.isfinite(p) or p < 0.0 or p > 1.0:
            raise InvalidArgument(f"probability must be in [0, 1], got {p}")
        rng = np.random.default_rng() if rng is None else rng
        flipped = 0
        for edge_id, edge in list(self._edges.items()):
            if edge.is_boundary:
                continue
            if rng.random() < p:
                self._edges[edge_id] = dataclasses.replace(
                    edge, is_mirror=not edge.is_mirror
                )
                flipped += 1
        debug.log(f"randomize p={float(p):.6g} flipped={flipped}")
        return flipped

    # Traversal

    def reflect(self, edge_id: EdgeRef, incoming: DirectionLike) -> Direction:
        edge = self.edge(edge_id)
        d = as_direction(incoming)
        if not edge.is_mirror:
            return d
        return _REFLECTION[edge.orientation][d]

    def neighbor(self, edge_id: EdgeRef, direction: DirectionLike) -> EdgeId:
        edge = self.edge(edge_id)
        d = as_direction(direction)
        nxt = edge.neighbors[d]
        if nxt is None:
            raise GridExit(edge.id, d)
        return nxt

    def is_edge_direction(self, edge_id: EdgeRef, direction: DirectionLike) -> bool:
        return self.edge(edge_id).neighbors[as_direction(direction)] is None

    # Consumed-direction bookkeeping

    def mark_consumed(self, edge_id: EdgeRef, direction: DirectionLike) -> None:
        edge = self.edge(edge_id)
        self._consumed[edge.id].add(as_direction(direction))

    def is_consumed(self, edge_id: EdgeRef, direction: DirectionLike) -> bool:
        edge = self.edge(edge_id)
        return as_direction(direction) in self._consumed[edge.id]

    def unconsumed_directions(self, edge_id: EdgeRef) -> list[Direction]:
        used = self._consumed[self.edge(edge_id).id]
        return [d for d in ALL_DIRECTIONS if d not in used]

    def reset_consumed(self) -> None:
        self._consumed = {
            edge_id: set(edge.outward_directions())
            for edge_id, edge in self._edges.items()
        }

    def consumed_pairs(self) -> set[tuple[EdgeId, Direction]]:
        return {(edge_id, d) for edge_id, used in self._consumed.items() for d in used}

    def seeded_pairs(self) -> set[tuple[EdgeId, Direction]]:
        return {
            (edge_id, d)
            for edge_id, edge in self._edges.items()
            for d in edge.outward_directions()
        }
