"""File I/O helpers for robot configs, tracks, snapshots and telemetry."""
from __future__ import annotations

import csv
import re
from pathlib import Path
from typing import Dict, List, Sequence

from arena_mechanics.track import TrackSurface

from .config import RobotConfig, SnapshotState, load_json, save_json

SNAPSHOT_NAME = re.compile(r"snap_(\d+)")


def save_robot_config(path: Path, robot: RobotConfig) -> None:
    save_json(path, robot)


def load_robot_config(path: Path) -> RobotConfig:
    if not path.exists():
        raise FileNotFoundError(f"Robot config not found: {path}")
    robot = load_json(path, RobotConfig)
    if not robot.sensor_mounts:
        # Older files may omit the mounts entirely.
        return RobotConfig.default()
    return robot


def save_snapshot(path: Path, snap: SnapshotState) -> None:
    save_json(path, snap)


def load_snapshot(path: Path) -> SnapshotState:
    if not path.exists():
        raise FileNotFoundError(f"Snapshot not found: {path}")
    return load_json(path, SnapshotState)


def _snapshot_sequence(path: Path) -> int:
    match = SNAPSHOT_NAME.match(path.name)
    return int(match.group(1)) if match else -1


def next_snapshot_path(folder: Path, step: int) -> Path:
    """Path for a new snapshot; the sequence number grows across resets."""
    existing = folder.glob("snap_*.json") if folder.exists() else []
    seq = max([0] + [_snapshot_sequence(p) for p in existing]) + 1
    return folder / f"snap_{seq:06d}_step{step:06d}.json"


def latest_snapshot(folder: Path) -> Path | None:
    if not folder.exists():
        return None
    snaps = [p for p in folder.glob("snap_*.json") if _snapshot_sequence(p) >= 0]
    return max(snaps, key=_snapshot_sequence) if snaps else None


def save_track(path: Path, track: TrackSurface) -> None:
    track.save_image(path)


def load_track(path: Path, track: TrackSurface) -> None:
    track.load_image(path)


def _flatten_trace_entry(entry: Dict[str, object]) -> Dict[str, object]:
    row: Dict[str, object] = {
        "step": entry.get("step"),
        "decision": entry.get("decision"),
    }
    pose = entry.get("pose") or {}
    for key in ("x", "y", "angle"):
        row[f"pose_{key}"] = pose.get(key)  # type: ignore[union-attr]
    motors = entry.get("motors") or {}
    row["motor_left"] = motors.get("left")  # type: ignore[union-attr]
    row["motor_right"] = motors.get("right")  # type: ignore[union-attr]
    for idx, value in enumerate(entry.get("readings") or []):  # type: ignore[arg-type]
        row[f"A{idx}"] = value
    return row


def save_telemetry_csv(path: Path, trace: Sequence[Dict[str, object]]) -> int:
    """Write a trace log as one CSV row per tick; returns the row count."""
    rows = [_flatten_trace_entry(entry) for entry in trace]
    all_keys: List[str] = []
    for row in rows:
        for key in row:
            if key not in all_keys:
                all_keys.append(key)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=all_keys)
        writer.writeheader()
        writer.writerows(rows)
    return len(rows)
