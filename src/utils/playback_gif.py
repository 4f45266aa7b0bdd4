from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw
from tqdm import tqdm  # type: ignore[reportMissingModuleSource]

from ..mirrorcurve.animation import AnimationStyle, PlaybackSettings
from ..mirrorcurve.export_svg import DEFAULT_PALETTE, edge_segment
from ..mirrorcurve.puzzle import MirrorPuzzle
from . import debug

DEFAULT_BG = (255, 255, 255)
DEFAULT_STROKE = (0, 0, 0)
DEFAULT_DOT = (136, 136, 136)


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))


def _to_pixels(points: np.ndarray, pad: int) -> list[tuple[float, float]]:
    return [(float(x) + pad, float(y) + pad) for x, y in points]


def render_frame(puzzle: MirrorPuzzle, *, pad: int = 10) -> Image.Image:
    """Rasterize the puzzle's current state: mirrors, center dots, curves,
    and the partial path while one is playing."""
    cell = puzzle.settings.cell_size
    rows, cols = puzzle.graph.rows, puzzle.graph.cols
    size = (int(round(cols * cell)) + 2 * pad, int(round(rows * cell)) + 2 * pad)
    img = Image.new("RGB", size, DEFAULT_BG)
    draw = ImageDraw.Draw(img)

    r = max(1.0, cell / 20.0)
    for row in range(rows):
        for col in range(cols):
            cx = (col + 0.5) * cell + pad
            cy = (row + 0.5) * cell + pad
            draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=DEFAULT_DOT)

    for e in puzzle.edge_snapshot():
        if e.is_mirror:
            (x0, y0), (x1, y1) = edge_segment(e, cell)
            draw.line(
                (x0 + pad, y0 + pad, x1 + pad, y1 + pad), fill=DEFAULT_STROKE, width=2
            )

    palette = [_hex_to_rgb(c) for c in DEFAULT_PALETTE]
    for i, done in enumerate(puzzle.curves):
        pts = _to_pixels(done.points, pad)
        if done.is_closed:
            pts.append(pts[0])
        draw.line(pts, fill=palette[i % len(palette)], width=2)

    path = puzzle.animation_path
    if path is not None and path.points.shape[0] > 1:
        color = palette[len(puzzle.curves) % len(palette)]
        draw.line(_to_pixels(path.points, pad), fill=color, width=2)
    return img


def record_playback(
    puzzle: MirrorPuzzle,
    fps: float = 30.0,
    max_frames: int = 3000,
) -> list[Image.Image]:
    """Drive the puzzle's playback with synthetic ticks at `fps` until the
    queue drains, rendering one frame per tick."""
    if fps <= 0:
        raise ValueError("fps must be positive")
    frames: list[Image.Image] = [render_frame(puzzle)]
    dt = 1.0 / fps
    now = 0.0
    with tqdm(total=max_frames, desc="frames", unit="frame") as pbar:
        while puzzle.playback.is_animating and len(frames) < max_frames:
            puzzle.tick(now)
            frames.append(render_frame(puzzle))
            now += dt
            pbar.update(1)
    if puzzle.playback.is_animating:
        debug.warn(f"playback still running after {max_frames} frames; truncated")
    return frames


def save_gif(frames: list[Image.Image], out_path: Path, fps: float) -> None:
    if not frames:
        raise ValueError("no frames to save")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    duration_ms = max(1, int(round(1000.0 / fps)))
    frames[0].save(
        out_path,
        save_all=True,
        append_images=frames[1:],
        duration=duration_ms,
        loop=0,
    )


def main() -> None:
    ap = argparse.ArgumentParser(description="Record mirror-curve playback as a GIF")
    ap.add_argument("--rows", type=int, default=5)
    ap.add_argument("--cols", type=int, default=5)
    ap.add_argument("--p", type=float, default=0.15, help="Mirror flip probability")
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--cell", type=float, default=60.0, help="Cell size in pixels")
    ap.add_argument("--speed", type=float, default=600.0, help="Pixels per second")
    ap.add_argument(
        "--style", choices=[s.value for s in AnimationStyle], default="curved"
    )
    ap.add_argument("--fps", type=float, default=30.0)
    ap.add_argument("--output", type=str, required=True)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    debug.set_verbose(bool(args.verbose))
    settings = PlaybackSettings(
        speed=float(args.speed),
        style=AnimationStyle(args.style),
        cell_size=float(args.cell),
    )
    puzzle = MirrorPuzzle(
        args.rows, args.cols, settings=settings, rng=np.random.default_rng(args.seed)
    )
    puzzle.randomize(float(args.p))
    curves = puzzle.all_curves()
    frames = record_playback(puzzle, fps=float(args.fps))
    out_path = Path(args.output)
    save_gif(frames, out_path, float(args.fps))
    print(f"Saved: {out_path}  curves={len(curves)} frames={len(frames)}")


if __name__ == "__main__":
    main()
