from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .grid import Direction, EdgeId


class GridExit(Exception):
    """Raised by a neighbor lookup whose move would leave the grid.

    This is a terminal traversal state, not a failure.
    """

    def __init__(self, edge: EdgeId, direction: Direction) -> None:
        super().__init__(f"curve left the grid at {edge} heading {direction.name}")
        self.edge = edge
        self.direction = direction


class TraceOverflow(RuntimeError):
    def __init__(self, edge: EdgeId, direction: Direction, max_steps: int) -> None:
        super().__init__(
            f"trace from {edge} heading {direction.name} did not close or exit "
            f"within {max_steps} steps"
        )
        self.edge = edge
        self.direction = direction
        self.max_steps = max_steps


class InvalidArgument(ValueError):
    pass


class StaleReference(LookupError):
    """An edge id held by stored state does not belong to the current grid."""
