"""Pose- and arena-level primitives for the line-follower arena."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Dict, Mapping, Tuple


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def normalize_angle_deg(angle: float) -> float:
    """Wrap a heading into [0, 360)."""
    wrapped = angle % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    if wrapped >= 360.0:
        wrapped -= 360.0
    return wrapped


@dataclass(frozen=True)
class Pose2D:
    """Robot centre in surface pixels and heading in degrees (0 deg points along +x)."""

    x: float
    y: float
    angle_deg: float = 0.0

    @property
    def theta(self) -> float:
        return self.angle_deg * math.pi / 180.0

    def normalized(self) -> "Pose2D":
        return Pose2D(self.x, self.y, normalize_angle_deg(self.angle_deg))

    def transform_point(self, point: Tuple[float, float]) -> Tuple[float, float]:
        px, py = point
        cos_t = math.cos(self.theta)
        sin_t = math.sin(self.theta)
        return (
            self.x + px * cos_t - py * sin_t,
            self.y + px * sin_t + py * cos_t,
        )

    def as_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "angle": self.angle_deg}

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> "Pose2D":
        return cls(float(data.get("x", 0.0)), float(data.get("y", 0.0)), float(data.get("angle", 0.0)))


class Arena:
    """Surface dimensions plus the margin that keeps the robot inside them."""

    def __init__(
        self,
        *,
        width: int = 800,
        height: int = 600,
        robot_half_size: float = 30.0,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Arena size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.robot_half_size = float(robot_half_size)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def center_pose(self) -> Pose2D:
        return Pose2D(self.width / 2.0, self.height / 2.0, 0.0)

    def clamp_pose_position(self, x: float, y: float) -> Tuple[float, float]:
        half = self.robot_half_size
        return (
            clamp(x, half, self.width - half),
            clamp(y, half, self.height - half),
        )

    def clamp_sample_point(self, x: float, y: float) -> Tuple[float, float]:
        return (
            clamp(x, 0.0, self.width - 1),
            clamp(y, 0.0, self.height - 1),
        )
