from pathlib import Path

import numpy as np
from PIL import Image

from src.mirrorcurve.animation import AnimationStyle, PlaybackSettings
from src.mirrorcurve.export_svg import SvgStyle, edge_segment, export_puzzle_svg
from src.mirrorcurve.grid import EdgeId, GridGraph, Orientation
from src.mirrorcurve.puzzle import MirrorPuzzle
from src.utils.playback_gif import record_playback, render_frame, save_gif

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


def _played_puzzle() -> MirrorPuzzle:
    settings = PlaybackSettings(
        speed=200.0, style=AnimationStyle.CURVED, cell_size=20.0
    )
    puzzle = MirrorPuzzle(2, 2, settings=settings, rng=np.random.default_rng(1))
    puzzle.toggle_mirror(EdgeId(V, 0, 1))
    puzzle.all_curves()
    return puzzle


def test_edge_segment_geometry() -> None:
    snap = {e.id: e for e in GridGraph(2, 2).snapshot()}
    assert edge_segment(snap[EdgeId(H, 1, 0)], 10.0) == ((0.0, 10.0), (10.0, 10.0))
    assert edge_segment(snap[EdgeId(V, 0, 2)], 10.0) == ((20.0, 0.0), (20.0, 10.0))


def test_export_puzzle_svg(tmp_path: Path) -> None:
    puzzle = _played_puzzle()
    now = 0.0
    while puzzle.playback.is_animating:
        puzzle.tick(now)
        now += 0.05
    assert puzzle.curves

    out = tmp_path / "puzzle.svg"
    export_puzzle_svg(
        str(out),
        puzzle.edge_snapshot(),
        puzzle.graph.rows,
        puzzle.graph.cols,
        puzzle.settings.cell_size,
        puzzle.curves,
        style=SvgStyle(show_grid_lines=True, show_grid_points=True),
    )
    text = out.read_text()
    assert text.startswith("<?xml")
    assert 'id="mirrors"' in text
    assert 'id="grid_lines"' in text
    assert 'id="center_dots"' in text
    assert text.count("<polygon") == sum(1 for c in puzzle.curves if c.is_closed)
    assert "#e41a1c" in text


def test_export_includes_partial_path(tmp_path: Path) -> None:
    puzzle = _played_puzzle()
    puzzle.tick(0.0)
    puzzle.tick(0.05)
    assert puzzle.animation_path is not None

    out = tmp_path / "partial.svg"
    export_puzzle_svg(
        str(out),
        puzzle.edge_snapshot(),
        puzzle.graph.rows,
        puzzle.graph.cols,
        puzzle.settings.cell_size,
        puzzle.curves,
        partial=puzzle.animation_path,
        style=SvgStyle(show_mirrors=False, show_center_dots=False),
    )
    text = out.read_text()
    assert "<polyline" in text
    assert 'id="mirrors"' not in text


def test_record_playback_and_save_gif(tmp_path: Path) -> None:
    puzzle = _played_puzzle()
    first = render_frame(puzzle)
    assert first.size == (2 * 20 + 20, 2 * 20 + 20)

    frames = record_playback(puzzle, fps=20.0)
    assert len(frames) > 2
    assert not puzzle.playback.is_animating
    assert puzzle.curves

    out = tmp_path / "nested" / "playback.gif"
    save_gif(frames, out, 20.0)
    with Image.open(out) as img:
        assert img.format == "GIF"
        assert getattr(img, "n_frames", 1) >= 2
