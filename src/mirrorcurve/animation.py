from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from beartype.typing import Callable

from ..utils import debug
from .curve import Curve
from .errors import InvalidArgument, StaleReference
from .geometry import partial_polyline, point_at_progress, polyline_length
from .types import NpPoint, NpPolyline

# Assumed average path length, in cells, when converting a duration into a
# speed. Multiplied by the cell size to get world units.
AVERAGE_PATH_CELLS = 5.0


class AnimationStyle(str, Enum):
    JAGGED = "jagged"
    CURVED = "curved"


class PlaybackState(Enum):
    PENDING = "pending"
    PLAYING = "playing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class PlaybackSettings:
    speed: float = 10.0
    style: AnimationStyle = AnimationStyle.CURVED
    tension: float = 0.05
    subdivisions: int = 10
    cell_size: float = 1.0
    mirror_offset_fraction: float = 0.125

    def __post_init__(self) -> None:
        check_speed(self.speed)
        if not math.isfinite(self.cell_size) or self.cell_size <= 0:
            raise InvalidArgument("cell_size must be finite and > 0")
        if self.subdivisions < 1:
            raise InvalidArgument("subdivisions must be >= 1")
        if not math.isfinite(self.tension):
            raise InvalidArgument("tension must be finite")


def check_speed(speed: float) -> float:
    if isinstance(speed, bool) or not isinstance(speed, (int, float, np.floating)):
        raise InvalidArgument(f"speed must be a number, got {speed!r}")
    if not math.isfinite(speed) or speed <= 0:
        raise InvalidArgument(f"speed must be finite and > 0, got {speed}")
    return float(speed)


@dataclass(frozen=True)
class PartialPath:
    points: NpPolyline
    progress: float
    style: AnimationStyle


@dataclass(frozen=True)
class CompletedCurve:
    curve: Curve
    points: NpPolyline
    style: AnimationStyle

    @property
    def is_closed(self) -> bool:
        return self.curve.is_closed


class PathAnimator:
    """Constant-speed reveal of one curve's polyline.

    Pending until the first tick, which fixes the start time; Playing while
    elapsed / duration < 1; Completed afterwards.
    """

    def __init__(self, curve: Curve, points: np.ndarray, speed: float) -> None:
        self.curve = curve
        self.points = np.asarray(points, dtype=np.float64)
        self.is_closed = curve.is_closed
        self.length = polyline_length(self.points, closed=self.is_closed)
        self.speed = check_speed(speed)
        self.duration = self.length / self.speed
        self.state = PlaybackState.PENDING
        self.start_time: float | None = None
        self.progress = 0.0

    def progress_at(self, now: float) -> float:
        if self.start_time is None:
            return 0.0
        if self.duration <= 0.0:
            return 1.0
        return min(max((now - self.start_time) / self.duration, 0.0), 1.0)

    def sample(self, progress: float) -> tuple[NpPoint, int]:
        return point_at_progress(self.points, float(progress), closed=self.is_closed)

    def partial(self, progress: float) -> NpPolyline:
        return partial_polyline(self.points, float(progress), closed=self.is_closed)

    def tick(self, now: float) -> float:
        if self.state is PlaybackState.COMPLETED:
            return 1.0
        if self.state is PlaybackState.PENDING:
            self.start_time = float(now)
            self.state = PlaybackState.PLAYING
            debug.log(
                f"path length={self.length:.6g} speed={self.speed:.6g} "
                f"duration={self.duration:.6g}s"
            )
        self.progress = self.progress_at(float(now))
        if self.progress >= 1.0:
            self.state = PlaybackState.COMPLETED
        return self.progress


PolylineFn = Callable[[Curve], np.ndarray]


@dataclass
class _Listeners:
    partial: list[Callable[[PartialPath], None]] = field(default_factory=list)
    completed: list[Callable[[CompletedCurve], None]] = field(default_factory=list)
    cleared: list[Callable[[], None]] = field(default_factory=list)
    drained: list[Callable[[], None]] = field(default_factory=list)


class PlaybackQueue:
    """FIFO of curves revealed one at a time, advanced only by tick(now).

    `polyline_fn` turns a curve into the points to reveal; it is called
    when a curve leaves the queue, so it sees the grid as it is then. A
    StaleReference raised there clears the whole queue.
    """

    def __init__(
        self,
        polyline_fn: PolylineFn,
        speed: float = 10.0,
        style: AnimationStyle = AnimationStyle.CURVED,
        cell_size: float = 1.0,
    ) -> None:
        if not math.isfinite(cell_size) or cell_size <= 0:
            raise InvalidArgument(f"cell_size must be finite and > 0, got {cell_size}")
        self.polyline_fn = polyline_fn
        self.speed = check_speed(speed)
        self.style = style
        self.cell_size = float(cell_size)
        self._queue: deque[Curve] = deque()
        self._current: PathAnimator | None = None
        self._animating = False
        self._listeners = _Listeners()

    # Listener registration

    def on_partial(self, cb: Callable[[PartialPath], None]) -> None:
        self._listeners.partial.append(cb)

    def on_curve_completed(self, cb: Callable[[CompletedCurve], None]) -> None:
        self._listeners.completed.append(cb)

    def on_clear(self, cb: Callable[[], None]) -> None:
        self._listeners.cleared.append(cb)

    def on_complete(self, cb: Callable[[], None]) -> None:
        """Called once each time the queue drains after playing."""
        self._listeners.drained.append(cb)

    # State

    @property
    def is_animating(self) -> bool:
        return self._animating

    @property
    def current(self) -> PathAnimator | None:
        return self._current

    def __len__(self) -> int:
        return len(self._queue)

    def set_speed(self, speed: float) -> None:
        # Applies from the next curve on; a playing curve keeps its duration.
        self.speed = check_speed(speed)

    def set_duration(self, duration: float) -> None:
        debug.warn("set_duration is deprecated, use set_speed instead")
        if not math.isfinite(duration) or duration <= 0:
            raise InvalidArgument(f"duration must be finite and > 0, got {duration}")
        self.set_speed(AVERAGE_PATH_CELLS * self.cell_size / float(duration))

    # Commands

    def enqueue(self, curve: Curve) -> None:
        self._queue.append(curve)

    def start(self) -> bool:
        """Begin playing the head of the queue; no-op if already playing."""
        if self._animating or not self._queue:
            return False
        self._animating = True
        self._emit_cleared()
        return self._advance()

    def cancel(self) -> None:
        """Drop queued and in-flight curves without emitting anything."""
        self._queue.clear()
        self._current = None
        self._animating = False

    def clear(self) -> None:
        """Cancel and tell listeners to discard any partial path."""
        self.cancel()
        self._emit_cleared()
        debug.log("all animations cleared")

    def tick(self, now: float) -> PartialPath | None:
        if not self._animating or self._current is None:
            self._animating = False
            return None

        animator = self._current
        progress = animator.tick(now)
        partial = PartialPath(
            points=animator.partial(progress),
            progress=progress,
            style=self.style,
        )
        for cb in list(self._listeners.partial):
            cb(partial)
        if self._current is not animator:
            # A listener cleared playback.
            return None

        if animator.state is PlaybackState.COMPLETED:
            done = CompletedCurve(
                curve=animator.curve, points=animator.points, style=self.style
            )
            for cb in list(self._listeners.completed):
                cb(done)
            self._emit_cleared()
            if not self._advance() and self._animating:
                self._animating = False
                self._current = None
                for cb in list(self._listeners.drained):
                    cb()
        return partial

    # Internals

    def _advance(self) -> bool:
        while self._queue:
            curve = self._queue.popleft()
            try:
                points = self.polyline_fn(curve)
            except StaleReference as exc:
                debug.warn(f"dropping playback for a stale curve: {exc}")
                self.clear()
                return False
            self._current = PathAnimator(curve, points, self.speed)
            return True
        return False

    def _emit_cleared(self) -> None:
        for cb in list(self._listeners.cleared):
            cb()
