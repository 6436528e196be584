"""Raster track surface painted black-on-white and sampled by the line sensors."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence, Tuple

import pygame

Color = Tuple[int, int, int]
Point = Tuple[float, float]

SURFACE_COLOR: Color = (255, 255, 255)
LINE_COLOR: Color = (0, 0, 0)
BRUSH_RADIUS = {"draw": 2, "erase": 8}
SAMPLE_TRACK_WIDTH = 3

# Closed loop made of two quadratic curves: (start, control, end) per segment.
SAMPLE_TRACK_CURVES: Sequence[Tuple[Point, Point, Point]] = (
    ((100.0, 300.0), (400.0, 100.0), (700.0, 300.0)),
    ((700.0, 300.0), (400.0, 500.0), (100.0, 300.0)),
)


def quadratic_curve_points(start: Point, control: Point, end: Point, segments: int = 64) -> list[Point]:
    points: list[Point] = []
    for i in range(segments + 1):
        t = i / segments
        u = 1.0 - t
        points.append(
            (
                u * u * start[0] + 2 * u * t * control[0] + t * t * end[0],
                u * u * start[1] + 2 * u * t * control[1] + t * t * end[1],
            )
        )
    return points


class TrackSurface:
    """Owns the track bitmap; the drawing tools write it, the sensors read it."""

    def __init__(self, width: int = 800, height: int = 600) -> None:
        self.width = int(width)
        self.height = int(height)
        self.surface = pygame.Surface((self.width, self.height))
        self.surface.fill(SURFACE_COLOR)
        self.revision = 0

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    # --- Reading ---------------------------------------------------------
    def sample_pixel(self, x: int, y: int) -> Color:
        color = self.surface.get_at((x, y))
        return (color.r, color.g, color.b)

    # --- Writing ---------------------------------------------------------
    def replace_all(self, bitmap: pygame.Surface) -> None:
        if bitmap.get_size() != self.size:
            bitmap = pygame.transform.scale(bitmap, self.size)
        self.surface.fill(SURFACE_COLOR)
        self.surface.blit(bitmap, (0, 0))
        self._touch()

    def clear(self) -> None:
        self.surface.fill(SURFACE_COLOR)
        self._touch()

    def paint(self, x: float, y: float, mode: str = "draw") -> None:
        radius = self._brush_radius(mode)
        color = LINE_COLOR if mode == "draw" else SURFACE_COLOR
        pygame.draw.circle(self.surface, color, (int(x), int(y)), radius)
        self._touch()

    def paint_stroke(self, points: Iterable[Point], mode: str = "draw") -> None:
        radius = self._brush_radius(mode)
        color = LINE_COLOR if mode == "draw" else SURFACE_COLOR
        pts = [(int(px), int(py)) for px, py in points]
        if not pts:
            return
        for start, end in zip(pts, pts[1:]):
            pygame.draw.line(self.surface, color, start, end, radius * 2)
        for pt in pts:
            pygame.draw.circle(self.surface, color, pt, radius)
        self._touch()

    def draw_sample_track(self) -> None:
        """Reset to the built-in oval made of two quadratic curves."""
        self.surface.fill(SURFACE_COLOR)
        for start, control, end in SAMPLE_TRACK_CURVES:
            pts = quadratic_curve_points(start, control, end)
            pygame.draw.lines(self.surface, LINE_COLOR, False, pts, SAMPLE_TRACK_WIDTH)
        self._touch()

    # --- Files -----------------------------------------------------------
    def load_image(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"Track image not found: {path}")
        self.replace_all(pygame.image.load(str(path)))

    def save_image(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        pygame.image.save(self.surface, str(path))

    @staticmethod
    def _brush_radius(mode: str) -> int:
        if mode not in BRUSH_RADIUS:
            raise ValueError(f"Unknown brush mode '{mode}' (expected 'draw' or 'erase')")
        return BRUSH_RADIUS[mode]

    def _touch(self) -> None:
        self.revision += 1


__all__ = ["TrackSurface", "SURFACE_COLOR", "LINE_COLOR", "quadratic_curve_points"]
