from __future__ import annotations

import argparse
from pathlib import Path
from typing import Protocol, cast

import numpy as np

from .mirrorcurve.animation import AnimationStyle, CompletedCurve, PlaybackSettings
from .mirrorcurve.export_svg import SvgStyle, export_puzzle_svg
from .mirrorcurve.puzzle import DEFAULT_RANDOM_P, MirrorPuzzle
from .utils import debug, debug_helpers


class CliArgs(Protocol):
    rows: int
    cols: int
    p: float
    seed: int
    style: str
    tension: float
    subdivisions: int
    cell: float
    output: str
    grid_lines: bool
    describe: bool
    verbose: bool


def _resolve_repo_path(rel_path: str) -> Path:
    # Default outputs land under the checkout, next to src/.
    project_root = Path(__file__).resolve().parent.parent
    return project_root / rel_path


def build_parser() -> argparse.ArgumentParser:
    defaults = PlaybackSettings()
    ap = argparse.ArgumentParser(
        description="Enumerate the mirror curves of a random grid and export an SVG"
    )
    ap.add_argument("--rows", type=int, default=5, help="Grid rows (default: 5)")
    ap.add_argument("--cols", type=int, default=5, help="Grid columns (default: 5)")
    ap.add_argument(
        "--p",
        type=float,
        default=DEFAULT_RANDOM_P,
        help="Probability of flipping each interior mirror (default: 0.15)",
    )
    ap.add_argument("--seed", type=int, default=0, help="RNG seed (default: 0)")
    ap.add_argument(
        "--style",
        choices=[s.value for s in AnimationStyle],
        default=AnimationStyle.CURVED.value,
        help="jagged: edge midpoints; curved: spline through bounce points",
    )
    ap.add_argument(
        "--tension",
        type=float,
        default=defaults.tension,
        help=f"Spline tension (default: {defaults.tension})",
    )
    ap.add_argument(
        "--subdivisions",
        type=int,
        default=defaults.subdivisions,
        help="Spline samples per segment",
    )
    ap.add_argument("--cell", type=float, default=60.0, help="Cell size in SVG units")
    ap.add_argument(
        "--output",
        type=str,
        default=str(_resolve_repo_path("data/processed/mirror_curves.svg")),
        help="Output SVG path",
    )
    ap.add_argument("--grid_lines", action="store_true", help="Draw all grid lines")
    ap.add_argument("--describe", action="store_true", help="Print every curve")
    ap.add_argument("--verbose", action="store_true")
    return ap


def main(argv: list[str] | None = None) -> None:
    args = cast(CliArgs, build_parser().parse_args(argv))

    debug.set_verbose(bool(args.verbose))

    settings = PlaybackSettings(
        style=AnimationStyle(args.style),
        tension=float(args.tension),
        subdivisions=int(args.subdivisions),
        cell_size=float(args.cell),
    )
    puzzle = MirrorPuzzle(
        args.rows,
        args.cols,
        settings=settings,
        rng=np.random.default_rng(args.seed),
    )
    flipped = puzzle.randomize(float(args.p))
    curves = puzzle.all_curves()
    # Static export: skip playback and finalize every curve directly.
    puzzle.playback.cancel()
    completed = [
        CompletedCurve(curve=c, points=puzzle.polyline(c), style=settings.style)
        for c in curves
    ]
    for i, done in enumerate(completed):
        debug_helpers.log_points(f"curve[{i}]", done.points)
        if args.describe:
            print(done.curve.describe())

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_puzzle_svg(
        str(out_path),
        puzzle.edge_snapshot(),
        puzzle.graph.rows,
        puzzle.graph.cols,
        settings.cell_size,
        completed,
        style=SvgStyle(show_grid_lines=bool(args.grid_lines)),
    )

    closed = sum(1 for c in curves if c.is_closed)
    print(
        f"Saved: {out_path}  curves={len(curves)} closed={closed} "
        f"mirrors={puzzle.graph.mirror_count()} flipped={flipped}"
    )


if __name__ == "__main__":
    main()
