"""Robot-side components: sensor array, control policy, drive integration."""

from .base import ANALOG_MAX, LINE_THRESHOLD, NEUTRAL_READING, PWM_MAX, MotorEffort, SensorMount
from .sensors import (
    ReadingStats,
    brightness_to_analog,
    classify_reading,
    compute_sample_points,
    has_extreme_readings,
    is_line,
    read_sensor_array,
    reading_voltage,
    sample_reading,
    sensor_world_points,
)
from .policy import DEFAULT_POLICY, LineFollowPolicy, follow_line
from .motors import forward_speed, integrate_pose, turn_rate_deg
from . import presets

__all__ = [
    "ANALOG_MAX",
    "LINE_THRESHOLD",
    "NEUTRAL_READING",
    "PWM_MAX",
    "MotorEffort",
    "SensorMount",
    "ReadingStats",
    "brightness_to_analog",
    "classify_reading",
    "compute_sample_points",
    "has_extreme_readings",
    "is_line",
    "read_sensor_array",
    "reading_voltage",
    "sample_reading",
    "sensor_world_points",
    "DEFAULT_POLICY",
    "LineFollowPolicy",
    "follow_line",
    "forward_speed",
    "integrate_pose",
    "turn_rate_deg",
    "presets",
]
