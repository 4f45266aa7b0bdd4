from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import svgwrite  # type: ignore[reportMissingTypeStubs]

from .animation import CompletedCurve, PartialPath
from .grid import EdgeSnapshot, Orientation

DEFAULT_PALETTE = (
    "#e41a1c",
    "#377eb8",
    "#4daf4a",
    "#984ea3",
    "#ff7f00",
    "#ffff33",
)


@dataclass(frozen=True)
class SvgStyle:
    show_grid_lines: bool = False
    show_grid_points: bool = False
    show_mirrors: bool = True
    show_center_dots: bool = True
    background: str = "transparent"
    palette: tuple[str, ...] = DEFAULT_PALETTE
    grid_stroke: str = "#000000"
    grid_width: float = 1.0
    mirror_stroke: str = "#000000"
    mirror_width: float = 2.0
    dot_fill: str = "#888888"
    dot_radius: float = 3.0
    curve_width: float = 2.0


def edge_segment(
    edge: EdgeSnapshot, cell: float
) -> tuple[tuple[float, float], tuple[float, float]]:
    x0 = edge.col * cell
    y0 = edge.row * cell
    if edge.orientation is Orientation.HORIZONTAL:
        return (x0, y0), (x0 + cell, y0)
    return (x0, y0), (x0, y0 + cell)


def _to_point_list(points: np.ndarray) -> list[tuple[float, float]]:
    return [(float(p[0]), float(p[1])) for p in points]


def export_puzzle_svg(
    out_path: str,
    edges: list[EdgeSnapshot],
    rows: int,
    cols: int,
    cell: float,
    curves: list[CompletedCurve],
    partial: PartialPath | None = None,
    style: SvgStyle | None = None,
    pad: float = 10.0,
) -> None:
    """
    Draw grid lines, mirrors, decorative dots and curves into an SVG.
    curves: finished curves, colored cyclically from the palette.
    partial: optional in-progress path drawn last.
    """
    st = SvgStyle() if style is None else style
    width = cols * cell
    height = rows * cell

    dwg = svgwrite.Drawing(
        out_path,
        profile="tiny",
        size=(f"{width + 2 * pad}", f"{height + 2 * pad}"),
    )
    dwg.attribs["viewBox"] = f"{-pad} {-pad} {width + 2 * pad} {height + 2 * pad}"

    if st.background != "transparent":
        dwg.add(
            dwg.rect(
                insert=(-pad, -pad),
                size=(width + 2 * pad, height + 2 * pad),
                fill=st.background,
            )
        )

    if st.show_grid_lines:
        g = dwg.g(id="grid_lines", stroke=st.grid_stroke, stroke_width=st.grid_width)
        for e in edges:
            a, b = edge_segment(e, cell)
            g.add(dwg.line(start=a, end=b))
        dwg.add(g)

    if st.show_grid_points:
        g = dwg.g(id="grid_points", fill=st.dot_fill, stroke="none")
        for r in range(rows + 1):
            for c in range(cols + 1):
                g.add(dwg.circle(center=(c * cell, r * cell), r=st.dot_radius))
        dwg.add(g)

    if st.show_center_dots:
        g = dwg.g(id="center_dots", fill=st.dot_fill, stroke="none")
        for r in range(rows):
            for c in range(cols):
                g.add(
                    dwg.circle(
                        center=((c + 0.5) * cell, (r + 0.5) * cell), r=st.dot_radius
                    )
                )
        dwg.add(g)

    if st.show_mirrors:
        g = dwg.g(
            id="mirrors", stroke=st.mirror_stroke, stroke_width=st.mirror_width
        )
        for e in edges:
            if e.is_mirror:
                a, b = edge_segment(e, cell)
                g.add(dwg.line(start=a, end=b))
        dwg.add(g)

    for i, done in enumerate(curves):
        color = st.palette[i % len(st.palette)]
        pts = _to_point_list(done.points)
        kwargs: dict[str, object] = {
            "stroke": color,
            "fill": "none",
            "stroke_width": st.curve_width,
        }
        if done.is_closed:
            dwg.add(dwg.polygon(points=pts, **kwargs))
        else:
            dwg.add(dwg.polyline(points=pts, **kwargs))

    if partial is not None and partial.points.shape[0] > 1:
        color = st.palette[len(curves) % len(st.palette)]
        dwg.add(
            dwg.polyline(
                points=_to_point_list(partial.points),
                stroke=color,
                fill="none",
                stroke_width=st.curve_width,
            )
        )

    dwg.save()

