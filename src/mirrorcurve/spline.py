from __future__ import annotations

import numpy as np
from beartype import beartype
from jaxtyping import Float, Real, jaxtyped

from .errors import InvalidArgument

CLOSED_EPS = 1e-3


@jaxtyped(typechecker=beartype)
def hermite_subdivide(
    p0: Float[np.ndarray, "2"],
    p1: Float[np.ndarray, "2"],
    m0: Float[np.ndarray, "2"],
    m1: Float[np.ndarray, "2"],
    subdivisions: int,
) -> Float[np.ndarray, "S 2"]:
    """
    Cubic Hermite samples at t = j / subdivisions, j = 0..subdivisions-1.
    The end point p1 is not emitted; it starts the next segment.
    """
    t = np.arange(subdivisions, dtype=np.float64) / float(subdivisions)
    t2 = t * t
    t3 = t2 * t

    h00 = 2.0 * t3 - 3.0 * t2 + 1.0
    h10 = t3 - 2.0 * t2 + t
    h01 = -2.0 * t3 + 3.0 * t2
    h11 = t3 - t2

    return (
        h00[:, None] * p0[None, :]
        + h10[:, None] * m0[None, :]
        + h01[:, None] * p1[None, :]
        + h11[:, None] * m1[None, :]
    )


def is_closed_polyline(points: np.ndarray, eps: float = CLOSED_EPS) -> bool:
    """True when there are >= 3 points and the last repeats the first within eps."""
    P = np.asarray(points)
    if P.ndim != 2 or P.shape[0] < 3:
        return False
    return bool(np.all(np.abs(P[0] - P[-1]) < eps))


@jaxtyped(typechecker=beartype)
def smooth(
    points: Real[np.ndarray, "N 2"],
    tension: float | int = 0.5,
    subdivisions: int = 10,
) -> Float[np.ndarray, "M 2"]:
    """Tension-controlled Catmull-Rom interpolation through `points`.

    Parameters
    - points: (N,2) vertices. If the last vertex repeats the first, the
      sequence is treated as cyclic: the duplicate is dropped, tangents wrap
      around, and the exact first vertex is re-appended so the output closes
      bit-for-bit.
    - tension: 0 gives the classic Catmull-Rom curve, 1 collapses tangents to
      zero so samples stay on the straight segments.
    - subdivisions: samples per segment, uniform in the curve parameter.

    Returns
    - (M,2) float64 samples. Open input yields (N-1)*subdivisions + 1 points
      ending on the last vertex; cyclic input yields (N-1)*subdivisions + 1
      points ending on the first vertex.
    """
    P = np.asarray(points, dtype=np.float64)
    if P.shape[0] < 2:
        return P.copy()
    if not np.isfinite(P).all():
        raise InvalidArgument("points contains non-finite coordinates")
    if not np.isfinite(tension):
        raise InvalidArgument("tension must be finite")
    if subdivisions < 1:
        raise InvalidArgument("subdivisions must be >= 1")

    closed = is_closed_polyline(P)
    Q = P[:-1] if closed else P
    n = Q.shape[0]

    if closed:
        prev = np.roll(Q, 1, axis=0)
        nxt = np.roll(Q, -1, axis=0)
    else:
        idx = np.arange(n)
        prev = Q[np.maximum(idx - 1, 0)]
        nxt = Q[np.minimum(idx + 1, n - 1)]
    tangents = (nxt - prev) * (1.0 - float(tension)) / 2.0

    n_segments = n if closed else n - 1
    parts: list[np.ndarray] = []
    for i in range(n_segments):
        j = (i + 1) % n
        parts.append(
            hermite_subdivide(Q[i], Q[j], tangents[i], tangents[j], subdivisions)
        )

    parts.append((Q[0] if closed else Q[-1])[None, :].copy())
    return np.concatenate(parts, axis=0)
