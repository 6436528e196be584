"""Off-screen rendering of the arena frame."""
from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

SIM_ENV_ROOT = Path(__file__).resolve().parents[1]
if str(SIM_ENV_ROOT) not in sys.path:
    sys.path.insert(0, str(SIM_ENV_ROOT))

import pygame  # noqa: E402

from arena_mechanics.track import TrackSurface  # noqa: E402
from arena_mechanics.visualizer import DEFAULT_COLORS, ArenaRenderer, RenderOptions  # noqa: E402
from arena_mechanics.world import Arena, Pose2D  # noqa: E402


def _rgb(surface: pygame.Surface, x: int, y: int):
    c = surface.get_at((x, y))
    return (c.r, c.g, c.b)


def test_draw_robot_and_sensor_dots() -> None:
    arena = Arena(width=200, height=150)
    track = TrackSurface(200, 150)
    renderer = ArenaRenderer(arena, RenderOptions(show_grid=False))
    target = pygame.Surface((200, 150))
    pose = Pose2D(100.0, 75.0, 0.0)
    renderer.draw(target, track, pose, [(100.0, 20.0), (150.0, 20.0), (60.0, 20.0)], [100, 900])
    assert _rgb(target, 92, 70) == DEFAULT_COLORS["body"]
    assert _rgb(target, 100, 20) == DEFAULT_COLORS["sensor_line"]
    assert _rgb(target, 150, 20) == DEFAULT_COLORS["sensor_surface"]
    # No reading yet for the third sensor.
    assert _rgb(target, 60, 20) == DEFAULT_COLORS["sensor_surface"]
    assert _rgb(target, 5, 140) == (255, 255, 255)


def test_heading_marker_follows_pose() -> None:
    arena = Arena(width=200, height=150)
    renderer = ArenaRenderer(arena, RenderOptions(show_grid=False))
    target = pygame.Surface((200, 150))
    renderer.draw(target, TrackSurface(200, 150), Pose2D(100.0, 75.0, 90.0), [], [])
    assert _rgb(target, 100, 88) == DEFAULT_COLORS["heading"]
    assert _rgb(target, 100, 62) == DEFAULT_COLORS["body"]


def test_grid_and_offset() -> None:
    arena = Arena(width=100, height=100)
    renderer = ArenaRenderer(arena, RenderOptions(show_grid=True, grid_step=50))
    target = pygame.Surface((130, 120))
    target.fill((0, 0, 0))
    renderer.draw(target, TrackSurface(100, 100), Pose2D(75.0, 75.0, 0.0), [], [], offset=(20, 10))
    assert _rgb(target, 70, 15) == DEFAULT_COLORS["grid"]
    assert _rgb(target, 30, 20) == (255, 255, 255)
    assert _rgb(target, 5, 5) == (0, 0, 0)


def test_sensor_color_threshold() -> None:
    renderer = ArenaRenderer(Arena())
    assert renderer.sensor_color(499) == DEFAULT_COLORS["sensor_line"]
    assert renderer.sensor_color(500) == DEFAULT_COLORS["sensor_surface"]
    assert renderer.sensor_color(None) == DEFAULT_COLORS["sensor_surface"]
