"""Sensor layout presets."""
from __future__ import annotations

import sys
from pathlib import Path

SIM_ENV_ROOT = Path(__file__).resolve().parents[1]
if str(SIM_ENV_ROOT) not in sys.path:
    sys.path.insert(0, str(SIM_ENV_ROOT))

import pytest  # noqa: E402

from robot_library.base import SensorMount  # noqa: E402
from robot_library.presets import (  # noqa: E402
    DEFAULT_SENSOR_LAYOUT,
    list_layout_presets,
    preset_layout,
    sensor_layout,
)


def test_default_layout_is_symmetric() -> None:
    assert len(DEFAULT_SENSOR_LAYOUT) == 5
    assert DEFAULT_SENSOR_LAYOUT[2] == SensorMount(0.0, -35.0, 0.0)
    for left, right in zip(DEFAULT_SENSOR_LAYOUT, reversed(DEFAULT_SENSOR_LAYOUT)):
        assert left.offset_x == -right.offset_x
        assert left.mount_angle_deg == -right.mount_angle_deg


def test_five_sensor_layout() -> None:
    mounts = sensor_layout(5)
    assert [m.offset_x for m in mounts] == [-20.0, -10.0, 0.0, 10.0, 20.0]
    assert {m.offset_y for m in mounts} == {-35.0}
    assert [m.mount_angle_deg for m in mounts] == [-45.0, -22.5, 0.0, 22.5, 45.0]


def test_single_sensor_points_forward() -> None:
    assert sensor_layout(1) == [SensorMount(0.0, -35.0, 0.0)]


@pytest.mark.parametrize("count", [0, 9, -1])
def test_layout_count_limits(count: int) -> None:
    with pytest.raises(ValueError):
        sensor_layout(count)


def test_named_presets() -> None:
    assert list_layout_presets() == ["basic", "standard"]
    assert len(preset_layout("basic")) == 3
    assert len(preset_layout("standard")) == 5
    with pytest.raises(KeyError):
        preset_layout("huge")
