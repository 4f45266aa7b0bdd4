from pathlib import Path

import pytest

from src.mirrorcurve.animation import PlaybackSettings
from src.render_curves import build_parser, main


def test_spline_defaults_match_playback() -> None:
    args = build_parser().parse_args([])
    defaults = PlaybackSettings()
    assert args.tension == defaults.tension
    assert args.subdivisions == defaults.subdivisions
    assert (args.rows, args.cols) == (5, 5)


def test_main_writes_svg(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = tmp_path / "curves.svg"
    main(["--rows", "3", "--cols", "4", "--seed", "2", "--output", str(out)])
    assert out.exists()
    assert "<svg" in out.read_text()
    assert f"Saved: {out}" in capsys.readouterr().out
