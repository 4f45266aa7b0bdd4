from __future__ import annotations

import numpy as np

from . import debug


def log_points(name: str, points: np.ndarray) -> None:
    """Log shape, finiteness and bounding box of an (N,2) point array."""
    if not debug.is_verbose():
        return
    if points.size == 0:
        debug.log(f"{name}: shape={points.shape} empty")
        return
    finite_all = bool(np.isfinite(points).all())
    minx, miny = np.min(points, axis=0)
    maxx, maxy = np.max(points, axis=0)
    debug.log(
        f"{name}: shape={points.shape} dtype={points.dtype} finite_all={finite_all} "
        f"bbox=({minx:.6g},{miny:.6g})-({maxx:.6g},{maxy:.6g})"
    )
