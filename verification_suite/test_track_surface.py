"""Track raster: painting, replacing, clearing and file round trips."""
from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

SIM_ENV_ROOT = Path(__file__).resolve().parents[1]
if str(SIM_ENV_ROOT) not in sys.path:
    sys.path.insert(0, str(SIM_ENV_ROOT))

import pygame  # noqa: E402
import pytest  # noqa: E402

from arena_mechanics.track import TrackSurface, quadratic_curve_points  # noqa: E402

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def test_new_surface_is_white() -> None:
    track = TrackSurface(40, 30)
    assert track.size == (40, 30)
    assert track.sample_pixel(0, 0) == WHITE
    assert track.sample_pixel(39, 29) == WHITE


def test_paint_and_erase() -> None:
    track = TrackSurface(40, 30)
    track.paint(20, 15, "draw")
    assert track.sample_pixel(20, 15) == BLACK
    assert track.sample_pixel(30, 15) == WHITE
    track.paint(20, 15, "erase")
    assert track.sample_pixel(20, 15) == WHITE


def test_unknown_brush_mode_rejected() -> None:
    track = TrackSurface(10, 10)
    with pytest.raises(ValueError):
        track.paint(1, 1, "spray")


def test_paint_stroke_connects_points() -> None:
    track = TrackSurface(60, 20)
    track.paint_stroke([(5, 10), (55, 10)], "draw")
    assert all(track.sample_pixel(x, 10) == BLACK for x in range(5, 56))


def test_clear_and_revision_counter() -> None:
    track = TrackSurface(20, 20)
    start = track.revision
    track.paint(10, 10)
    track.clear()
    assert track.sample_pixel(10, 10) == WHITE
    assert track.revision == start + 2


def test_replace_all_copies_and_scales() -> None:
    track = TrackSurface(20, 20)
    bitmap = pygame.Surface((20, 20))
    bitmap.fill(BLACK)
    track.replace_all(bitmap)
    assert track.sample_pixel(5, 5) == BLACK
    bitmap.fill(WHITE)
    assert track.sample_pixel(5, 5) == BLACK
    small = pygame.Surface((10, 10))
    small.fill((255, 0, 0))
    track.replace_all(small)
    assert track.sample_pixel(19, 19) == (255, 0, 0)


def test_sample_track_crosses_expected_points() -> None:
    track = TrackSurface(800, 600)
    track.draw_sample_track()
    assert track.sample_pixel(400, 200) == BLACK
    assert track.sample_pixel(400, 400) == BLACK
    assert track.sample_pixel(400, 300) == WHITE


def test_quadratic_curve_endpoints() -> None:
    pts = quadratic_curve_points((0.0, 0.0), (5.0, 10.0), (10.0, 0.0), segments=4)
    assert pts[0] == (0.0, 0.0)
    assert pts[-1] == (10.0, 0.0)
    assert pts[2] == (5.0, 5.0)


def test_image_round_trip(tmp_path: Path) -> None:
    track = TrackSurface(30, 30)
    track.paint(15, 15)
    path = tmp_path / "track.bmp"
    track.save_image(path)
    other = TrackSurface(30, 30)
    other.load_image(path)
    assert other.sample_pixel(15, 15) == BLACK
    assert other.sample_pixel(2, 2) == WHITE


def test_missing_image_raises(tmp_path: Path) -> None:
    track = TrackSurface(10, 10)
    with pytest.raises(FileNotFoundError):
        track.load_image(tmp_path / "nope.png")
