"""Named sensor layouts matching the configuration panel shortcuts."""
from __future__ import annotations

from typing import Dict, List, Tuple

from .base import SensorMount

MIN_SENSORS = 1
MAX_SENSORS = 8
SENSOR_SPACING = 10.0
SENSOR_FORWARD_OFFSET = -35.0
SENSOR_SPREAD_DEG = 90.0

DEFAULT_SENSOR_LAYOUT: Tuple[SensorMount, ...] = (
    SensorMount(-20.0, -30.0, -45.0),
    SensorMount(-10.0, -35.0, -22.5),
    SensorMount(0.0, -35.0, 0.0),
    SensorMount(10.0, -35.0, 22.5),
    SensorMount(20.0, -30.0, 45.0),
)

LAYOUT_PRESETS: Dict[str, int] = {
    "basic": 3,
    "standard": 5,
}


def sensor_layout(count: int) -> List[SensorMount]:
    """Evenly spaced row of ``count`` sensors fanned across +/-45 degrees."""
    if not MIN_SENSORS <= count <= MAX_SENSORS:
        raise ValueError(f"Sensor count must be between {MIN_SENSORS} and {MAX_SENSORS}, got {count}")
    angle_step = SENSOR_SPREAD_DEG / (count - 1) if count > 1 else 0.0
    start_angle = -SENSOR_SPREAD_DEG / 2 if count > 1 else 0.0
    return [
        SensorMount(
            i * SENSOR_SPACING - (count - 1) * SENSOR_SPACING / 2,
            SENSOR_FORWARD_OFFSET,
            start_angle + i * angle_step,
        )
        for i in range(count)
    ]


def preset_layout(name: str) -> List[SensorMount]:
    if name not in LAYOUT_PRESETS:
        raise KeyError(f"Unknown sensor preset '{name}' (available: {', '.join(sorted(LAYOUT_PRESETS))})")
    return sensor_layout(LAYOUT_PRESETS[name])


def list_layout_presets() -> List[str]:
    return sorted(LAYOUT_PRESETS)
