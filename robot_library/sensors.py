"""Line sensor array: mount transform, pixel sampling and analog conversion."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from arena_mechanics.track import TrackSurface
from arena_mechanics.world import Arena, Pose2D

from .base import ANALOG_MAX, LINE_THRESHOLD, SensorMount

Point = Tuple[float, float]

STRONG_LINE_BELOW = 400
WEAK_LINE_BELOW = 600
EXTREME_LOW = 100
EXTREME_HIGH = 950
SUPPLY_VOLTAGE = 5.0


def sensor_world_points(pose: Pose2D, mounts: Sequence[SensorMount]) -> List[Point]:
    """Mount offsets rotated by the heading and moved to the robot centre."""
    return [pose.transform_point(mount.offset) for mount in mounts]


def compute_sample_points(pose: Pose2D, mounts: Sequence[SensorMount], arena: Arena) -> List[Point]:
    """World points clamped onto the surface so off-surface mounts read the edge pixel."""
    return [arena.clamp_sample_point(x, y) for x, y in sensor_world_points(pose, mounts)]


def brightness_to_analog(r: int, g: int, b: int) -> int:
    # Tops out at 1020, not 1023.
    brightness = (r + g + b) / 3.0
    return int(round(brightness * 4))


def sample_reading(track: TrackSurface, point: Point) -> int:
    x, y = point
    r, g, b = track.sample_pixel(int(x), int(y))
    return brightness_to_analog(r, g, b)


def read_sensor_array(
    track: TrackSurface,
    pose: Pose2D,
    mounts: Sequence[SensorMount],
    arena: Arena,
) -> List[int]:
    return [sample_reading(track, point) for point in compute_sample_points(pose, mounts, arena)]


# --- Telemetry helpers -------------------------------------------------------

def is_line(reading: int) -> bool:
    return reading < LINE_THRESHOLD


def classify_reading(reading: int) -> str:
    if reading < STRONG_LINE_BELOW:
        return "strong_line"
    if reading < WEAK_LINE_BELOW:
        return "weak_line"
    return "surface"


def reading_voltage(reading: int) -> float:
    return reading / ANALOG_MAX * SUPPLY_VOLTAGE


def has_extreme_readings(readings: Sequence[int]) -> bool:
    return any(value < EXTREME_LOW or value > EXTREME_HIGH for value in readings)


@dataclass(frozen=True)
class ReadingStats:
    minimum: int
    maximum: int
    mean: float

    @property
    def span(self) -> int:
        return self.maximum - self.minimum

    @classmethod
    def from_readings(cls, readings: Sequence[int]) -> Optional["ReadingStats"]:
        if not readings:
            return None
        return cls(min(readings), max(readings), sum(readings) / len(readings))


__all__ = [
    "sensor_world_points",
    "compute_sample_points",
    "brightness_to_analog",
    "sample_reading",
    "read_sensor_array",
    "is_line",
    "classify_reading",
    "reading_voltage",
    "has_extreme_readings",
    "ReadingStats",
]
