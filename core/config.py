"""Data models and JSON helpers for robot, arena and snapshot settings."""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple, get_type_hints, get_origin, get_args

from arena_mechanics.world import Arena, clamp
from robot_library.base import SensorMount
from robot_library.presets import DEFAULT_SENSOR_LAYOUT, MAX_SENSORS, MIN_SENSORS, sensor_layout

# Editable range and nudge step per mount field, matching the mount sliders.
MOUNT_LIMITS: Dict[str, Tuple[float, float]] = {
    "x": (-50.0, 50.0),
    "y": (-50.0, 20.0),
    "angle": (-90.0, 90.0),
}
MOUNT_STEPS: Dict[str, float] = {"x": 1.0, "y": 1.0, "angle": 5.0}


@dataclass
class SensorMountConfig:
    x: float = 0.0
    y: float = -35.0
    angle: float = 0.0

    def to_mount(self) -> SensorMount:
        return SensorMount(float(self.x), float(self.y), float(self.angle))

    @classmethod
    def from_mount(cls, mount: SensorMount) -> "SensorMountConfig":
        return cls(x=mount.offset_x, y=mount.offset_y, angle=mount.mount_angle_deg)


@dataclass
class RobotConfig:
    sensor_mounts: List[SensorMountConfig] = field(default_factory=list)
    left_motor_pin: int = 9
    right_motor_pin: int = 10

    @classmethod
    def default(cls) -> "RobotConfig":
        return cls(sensor_mounts=[SensorMountConfig.from_mount(m) for m in DEFAULT_SENSOR_LAYOUT])

    @property
    def sensor_count(self) -> int:
        return len(self.sensor_mounts)

    def set_sensor_count(self, count: int) -> None:
        """Replace all mounts with an evenly spread row of ``count`` sensors."""
        if not MIN_SENSORS <= count <= MAX_SENSORS:
            raise ValueError(f"Sensor count must be between {MIN_SENSORS} and {MAX_SENSORS}, got {count}")
        self.sensor_mounts = [SensorMountConfig.from_mount(m) for m in sensor_layout(count)]

    def update_mount(self, index: int, **fields: float) -> None:
        """Set mount fields by name; values are clamped to the editable range."""
        if not 0 <= index < len(self.sensor_mounts):
            raise IndexError(f"Sensor index {index} out of range (have {len(self.sensor_mounts)})")
        mount = self.sensor_mounts[index]
        for key, value in fields.items():
            if key not in MOUNT_LIMITS:
                raise ValueError(f"Unknown sensor field '{key}'")
            lo, hi = MOUNT_LIMITS[key]
            setattr(mount, key, clamp(float(value), lo, hi))

    def nudge_mount(self, index: int, field_name: str, steps: int) -> float:
        """Move one mount field by ``steps`` slider steps and return the new value."""
        if field_name not in MOUNT_STEPS:
            raise ValueError(f"Unknown sensor field '{field_name}'")
        if not 0 <= index < len(self.sensor_mounts):
            raise IndexError(f"Sensor index {index} out of range (have {len(self.sensor_mounts)})")
        current = getattr(self.sensor_mounts[index], field_name)
        self.update_mount(index, **{field_name: current + steps * MOUNT_STEPS[field_name]})
        return getattr(self.sensor_mounts[index], field_name)

    def to_mounts(self) -> List[SensorMount]:
        return [m.to_mount() for m in self.sensor_mounts]


@dataclass
class ArenaConfig:
    width: int = 800
    height: int = 600
    robot_size: float = 30.0
    # Pose clamping margin; the robot may not get closer than this to an edge.
    robot_half_size: float = 30.0
    grid_step: int = 50
    show_grid: bool = True

    def to_arena(self) -> Arena:
        return Arena(width=self.width, height=self.height, robot_half_size=self.robot_half_size)


@dataclass
class SnapshotState:
    step: int
    pose: Dict[str, float]
    readings: List[int]
    running: bool = False
    program_text: Optional[str] = None


def _dataclass_from_dict(cls, data: Dict) -> object:
    field_types = get_type_hints(cls)
    kwargs = {}
    for key, value in data.items():
        if key not in field_types:
            raise ValueError(f"Unknown field '{key}' for {cls.__name__}")
        expected = field_types[key]
        origin = get_origin(expected)
        if origin is list:
            inner = get_args(expected)[0]
            if hasattr(inner, "__dataclass_fields__"):
                kwargs[key] = [_dataclass_from_dict(inner, v) for v in value]
                continue
        if origin is not None:
            args = [a for a in get_args(expected) if a is not type(None)]
            if len(args) == 1 and hasattr(args[0], "__dataclass_fields__"):
                if value is None:
                    kwargs[key] = None
                else:
                    kwargs[key] = _dataclass_from_dict(args[0], value)
                continue
        if hasattr(expected, "__dataclass_fields__"):
            kwargs[key] = _dataclass_from_dict(expected, value)
        else:
            kwargs[key] = value
    return cls(**kwargs)


def load_json(path: Path, cls):
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return _dataclass_from_dict(cls, data)


def save_json(path: Path, obj) -> None:
    def _encode(o):
        if hasattr(o, "__dataclass_fields__"):
            return {k: _encode(v) for k, v in asdict(o).items()}
        if isinstance(o, (list, tuple)):
            return [_encode(v) for v in o]
        if isinstance(o, dict):
            return {k: _encode(v) for k, v in o.items()}
        return o

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_encode(obj), f, indent=2)
