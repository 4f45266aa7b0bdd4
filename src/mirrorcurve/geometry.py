from __future__ import annotations

import numpy as np
from beartype import beartype
from jaxtyping import Float, Real, jaxtyped

from .errors import InvalidArgument


def _check_points(x: np.ndarray) -> None:
    if x.ndim != 2 or x.shape[1] != 2:
        raise InvalidArgument("points must have shape (N,2)")
    if x.shape[0] == 0:
        raise InvalidArgument("points must contain at least one vertex")


@jaxtyped(typechecker=beartype)
def segment_lengths(
    x: Real[np.ndarray, "N 2"],
    *,
    closed: bool = False,
) -> Float[np.ndarray, "K"]:
    """Lengths of consecutive segments; closed adds the last -> first segment."""
    seg = x[1:, :] - x[:-1, :]
    if closed and x.shape[0] > 1:
        seg = np.concatenate([seg, (x[0, :] - x[-1, :])[None, :]], axis=0)
    return np.linalg.norm(seg, axis=-1).astype(np.float64)


@jaxtyped(typechecker=beartype)
def polyline_length(
    x: Real[np.ndarray, "N 2"],
    *,
    closed: bool = False,
) -> float:
    """Polyline length in world units."""
    _check_points(x)
    if x.shape[0] < 2:
        return 0.0
    return float(np.sum(segment_lengths(x, closed=closed)))


@jaxtyped(typechecker=beartype)
def point_at_progress(
    x: Real[np.ndarray, "N 2"],
    progress: float | int,
    *,
    closed: bool = False,
) -> tuple[Float[np.ndarray, "2"], int]:
    """
    Point at arc-length fraction `progress` of the polyline.

    Returns (point, segment_index) where segment_index is the index of the
    vertex starting the segment the point lies on; every vertex up to and
    including it has been fully passed. For closed polylines the last -> first
    segment is part of the walk and has index N-1.
    """
    _check_points(x)
    P = np.asarray(x, dtype=np.float64)
    n = P.shape[0]
    if n < 2 or progress <= 0.0:
        return P[0].copy(), 0

    seglen = segment_lengths(P, closed=closed)
    cum = np.cumsum(seglen)
    total = float(cum[-1])
    if total <= 0.0:
        return P[0].copy(), 0

    target = min(float(progress), 1.0) * total
    i = int(np.searchsorted(cum, target, side="left"))
    if i >= seglen.shape[0]:
        return (P[0].copy() if closed else P[-1].copy()), n - 1

    a = P[i]
    b = P[(i + 1) % n]
    L = float(seglen[i])
    if L <= 0.0:
        return a.copy(), i
    ratio = (target - (float(cum[i]) - L)) / L
    ratio = min(max(ratio, 0.0), 1.0)
    return a + ratio * (b - a), i


@jaxtyped(typechecker=beartype)
def partial_polyline(
    x: Real[np.ndarray, "N 2"],
    progress: float | int,
    *,
    closed: bool = False,
) -> Float[np.ndarray, "M 2"]:
    """Every fully passed vertex followed by the interpolated head point."""
    point, index = point_at_progress(x, progress, closed=closed)
    P = np.asarray(x, dtype=np.float64)
    return np.concatenate([P[: index + 1], point[None, :]], axis=0)


@jaxtyped(typechecker=beartype)
def max_turning_angle(
    points: Real[np.ndarray, "N 2"],
    eps: float = 1e-9,
) -> float:
    """Return the maximum discrete turning angle (radians) along an open polyline."""

    P = np.asarray(points, dtype=np.float64)
    if P.shape[0] < 3:
        return 0.0
    u = P[1:-1] - P[0:-2]
    v = P[2:] - P[1:-1]
    nu = np.linalg.norm(u, axis=1) + eps
    nv = np.linalg.norm(v, axis=1) + eps
    cos_th = np.sum(u * v, axis=1) / (nu * nv)
    cos_th = np.clip(cos_th, -1.0, 1.0)
    return float(np.max(np.arccos(cos_th)))
