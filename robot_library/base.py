"""Shared value types for sensors and motors."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

ANALOG_MAX = 1023
NEUTRAL_READING = 512
LINE_THRESHOLD = 500
PWM_MAX = 255


@dataclass(frozen=True)
class SensorMount:
    """Sensor position relative to the robot centre.

    ``mount_angle_deg`` is kept for display and persistence only; sampling uses
    the offset alone.
    """

    offset_x: float
    offset_y: float
    mount_angle_deg: float = 0.0

    @property
    def offset(self) -> Tuple[float, float]:
        return (self.offset_x, self.offset_y)

    def as_dict(self) -> Dict[str, float]:
        return {"x": self.offset_x, "y": self.offset_y, "angle": self.mount_angle_deg}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SensorMount":
        return cls(float(data.get("x", 0.0)), float(data.get("y", 0.0)), float(data.get("angle", 0.0)))


@dataclass(frozen=True)
class MotorEffort:
    """Pulse-width style drive strength per wheel, 0..255."""

    left: int = 0
    right: int = 0

    def clamped(self) -> "MotorEffort":
        return MotorEffort(_clamp_pwm(self.left), _clamp_pwm(self.right))

    def as_dict(self) -> Dict[str, int]:
        return {"left": self.left, "right": self.right}


def _clamp_pwm(value: float) -> int:
    return int(max(0, min(PWM_MAX, round(value))))


STOPPED = MotorEffort(0, 0)
