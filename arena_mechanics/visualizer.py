"""Pygame renderer that draws the track, the robot and its sensor dots."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - pygame import is environment specific
    import pygame
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "Pygame is required to use the arena_mechanics.visualizer module."
    ) from exc

from .track import TrackSurface
from .world import Arena, Pose2D

Color = Tuple[int, int, int]
Point = Tuple[float, float]

DEFAULT_COLORS = {
    "grid": (224, 224, 224),
    "body": (37, 99, 235),
    "heading": (220, 38, 38),
    "sensor_line": (239, 68, 68),
    "sensor_surface": (34, 197, 94),
}
SENSOR_DOT_RADIUS = 3
HEADING_LENGTH = 10.0
HEADING_HALF_WIDTH = 5.0


@dataclass
class RenderOptions:
    show_grid: bool = True
    grid_step: int = 50
    robot_size: float = 30.0
    line_threshold: int = 500


class ArenaRenderer:
    """Draws one frame of the arena onto any target surface."""

    def __init__(self, arena: Arena, options: Optional[RenderOptions] = None) -> None:
        self.arena = arena
        self.options = options or RenderOptions()
        self.colors = dict(DEFAULT_COLORS)

    def draw(
        self,
        target: pygame.Surface,
        track: TrackSurface,
        pose: Pose2D,
        sensor_points: Sequence[Point],
        readings: Sequence[int],
        *,
        offset: Tuple[int, int] = (0, 0),
    ) -> None:
        target.blit(track.surface, offset)
        if self.options.show_grid:
            self._draw_grid(target, offset)
        self._draw_robot(target, pose, offset)
        self._draw_sensors(target, sensor_points, readings, offset)

    def sensor_color(self, reading: Optional[int]) -> Color:
        if reading is not None and reading < self.options.line_threshold:
            return self.colors["sensor_line"]
        return self.colors["sensor_surface"]

    def _draw_grid(self, target: pygame.Surface, offset: Tuple[int, int]) -> None:
        ox, oy = offset
        step = max(1, self.options.grid_step)
        color = self.colors["grid"]
        for x in range(0, self.arena.width + 1, step):
            pygame.draw.line(target, color, (ox + x, oy), (ox + x, oy + self.arena.height))
        for y in range(0, self.arena.height + 1, step):
            pygame.draw.line(target, color, (ox, oy + y), (ox + self.arena.width, oy + y))

    def _draw_robot(self, target: pygame.Surface, pose: Pose2D, offset: Tuple[int, int]) -> None:
        half = self.options.robot_size / 2.0
        corners = [(-half, -half), (half, -half), (half, half), (-half, half)]
        body = [self._to_screen(pose.transform_point(c), offset) for c in corners]
        pygame.draw.polygon(target, self.colors["body"], body)
        heading = [
            (half, 0.0),
            (half - HEADING_LENGTH, -HEADING_HALF_WIDTH),
            (half - HEADING_LENGTH, HEADING_HALF_WIDTH),
        ]
        tip = [self._to_screen(pose.transform_point(p), offset) for p in heading]
        pygame.draw.polygon(target, self.colors["heading"], tip)

    def _draw_sensors(
        self,
        target: pygame.Surface,
        sensor_points: Sequence[Point],
        readings: Sequence[int],
        offset: Tuple[int, int],
    ) -> None:
        for idx, point in enumerate(sensor_points):
            reading = readings[idx] if idx < len(readings) else None
            pygame.draw.circle(target, self.sensor_color(reading), self._to_screen(point, offset), SENSOR_DOT_RADIUS)

    @staticmethod
    def _to_screen(point: Point, offset: Tuple[int, int]) -> Tuple[int, int]:
        return (int(round(point[0])) + offset[0], int(round(point[1])) + offset[1])


__all__ = ["ArenaRenderer", "RenderOptions", "DEFAULT_COLORS"]
