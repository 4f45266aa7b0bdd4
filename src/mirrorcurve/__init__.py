from . import (
    animation,
    curve,
    errors,
    export_svg,
    finder,
    geometry,
    grid,
    polyline,
    puzzle,
    spline,
)

__all__ = [
    "grid",
    "curve",
    "finder",
    "spline",
    "geometry",
    "polyline",
    "animation",
    "puzzle",
    "export_svg",
    "errors",
]
