"""Low-level arena mechanics: poses, the track raster, rendering and diagnostics."""

from .world import Arena, Pose2D, clamp, normalize_angle_deg
from .track import TrackSurface
from .diagnostics import TickHistory, TickRecord
from .visualizer import ArenaRenderer, RenderOptions

__all__ = [
    "Arena",
    "Pose2D",
    "clamp",
    "normalize_angle_deg",
    "TrackSurface",
    "TickHistory",
    "TickRecord",
    "ArenaRenderer",
    "RenderOptions",
]
