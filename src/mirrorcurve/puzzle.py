from __future__ import annotations

import dataclasses

import numpy as np

from ..utils import debug
from .animation import (
    AnimationStyle,
    CompletedCurve,
    PartialPath,
    PlaybackQueue,
    PlaybackSettings,
)
from .curve import Curve
from .errors import StaleReference
from .finder import find_all_curves, find_next_curve
from .grid import EdgeRef, EdgeSnapshot, GridGraph
from .polyline import SplineOptions, curve_to_polyline, helper_point_fn, midpoint_fn

DEFAULT_ROWS = 5
DEFAULT_COLS = 5
DEFAULT_RANDOM_P = 0.15


class MirrorPuzzle:
    """Grid, permanent curves and playback for one puzzle.

    Every command that changes the grid or its consumed directions clears
    queued and in-flight playback before returning.
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        *,
        settings: PlaybackSettings | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.settings = PlaybackSettings() if settings is None else settings
        self.rng = np.random.default_rng() if rng is None else rng
        self.graph = GridGraph(rows, cols)
        self.curves: list[CompletedCurve] = []
        self.animation_path: PartialPath | None = None

        self.playback = PlaybackQueue(
            self.polyline,
            speed=self.settings.speed,
            style=self.settings.style,
            cell_size=self.settings.cell_size,
        )
        self.playback.on_partial(self._set_animation_path)
        self.playback.on_curve_completed(self.curves.append)
        self.playback.on_clear(self._clear_animation_path)

    # Geometry

    def polyline(self, curve: Curve) -> np.ndarray:
        """Points revealed for `curve` under the current style.

        Raises StaleReference when the curve belongs to another grid.
        """
        s = self.settings
        if s.style is AnimationStyle.CURVED:
            point_fn = helper_point_fn(
                self.graph, s.cell_size, s.cell_size, s.mirror_offset_fraction
            )
            return curve_to_polyline(
                curve, point_fn, SplineOptions(s.tension, s.subdivisions)
            )
        for edge_id in curve.edges:
            self.graph.edge(edge_id)
        return curve_to_polyline(curve, midpoint_fn(s.cell_size, s.cell_size))

    def edge_snapshot(self) -> list[EdgeSnapshot]:
        return self.graph.snapshot()

    # Commands

    def set_dimensions(self, rows: int, cols: int) -> None:
        graph = GridGraph(rows, cols)
        self._invalidate()
        self.graph = graph
        debug.log(f"grid updated to {rows}x{cols}, cleared curves and animations")

    def toggle_mirror(self, edge_id: EdgeRef) -> bool:
        try:
            boundary = self.graph.is_boundary(edge_id)
        except StaleReference as exc:
            debug.warn(str(exc))
            self._invalidate()
            return False
        if boundary:
            debug.log(f"boundary mirror {edge_id} cannot be toggled")
            return False
        self._invalidate()
        self.graph.toggle_mirror(edge_id)
        debug.log(f"mirror {edge_id} toggled, cleared curves and animations")
        return True

    def randomize(self, p: float = DEFAULT_RANDOM_P) -> int:
        flipped = self.graph.randomize(p, self.rng)
        self._invalidate()
        return flipped

    def reset(self) -> None:
        self._invalidate()
        debug.log("reset state, cleared curves and animations")

    def next_curve(self) -> Curve | None:
        curve = find_next_curve(self.graph)
        if curve is None:
            return None
        self.playback.enqueue(curve)
        self.playback.start()
        return curve

    def all_curves(self) -> list[Curve]:
        # Enumeration restarts from a clean consumed state, so anything
        # already shown would be found again.
        self.playback.clear()
        self.curves.clear()
        curves = find_all_curves(self.graph)
        for curve in curves:
            self.playback.enqueue(curve)
        self.playback.start()
        return curves

    def tick(self, now: float) -> PartialPath | None:
        return self.playback.tick(now)

    # Settings

    def set_speed(self, speed: float) -> None:
        self.playback.set_speed(speed)
        self.settings = dataclasses.replace(self.settings, speed=self.playback.speed)

    def set_style(self, style: AnimationStyle | str) -> None:
        style = AnimationStyle(style)
        self.settings = dataclasses.replace(self.settings, style=style)
        self.playback.style = style

    # Internals

    def _invalidate(self) -> None:
        self.playback.clear()
        self.curves.clear()
        self.animation_path = None
        self.graph.reset_consumed()

    def _set_animation_path(self, path: PartialPath) -> None:
        self.animation_path = path

    def _clear_animation_path(self) -> None:
        self.animation_path = None
