"""Tick-driven line-follower simulator with an explicit idle/running state machine."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from arena_mechanics.track import TrackSurface
from arena_mechanics.world import Arena, Pose2D
from robot_library.base import NEUTRAL_READING, MotorEffort, SensorMount, STOPPED
from robot_library.motors import integrate_pose
from robot_library.policy import DEFAULT_POLICY, POLICY_SLOTS, LineFollowPolicy
from robot_library.presets import DEFAULT_SENSOR_LAYOUT
from robot_library.sensors import compute_sample_points, sample_reading, sensor_world_points

from .config import SnapshotState
from .programs import DEFAULT_PROGRAM
from .scheduler import FrameScheduler

ReadingListener = Callable[[List[int]], None]
PoseListener = Callable[[Pose2D], None]

RESET_READING_COUNT = 5


class Simulator:
    """Owns the robot pose, the sensor array and the scheduled tick loop.

    ``start``, ``stop`` and ``reset`` are the only state mutators besides the
    tick itself. The track is read at each tick as it is at that moment, so
    painting between ticks is picked up on the next one.
    """

    def __init__(
        self,
        arena: Arena,
        track: TrackSurface,
        scheduler: FrameScheduler,
        *,
        sensor_mounts: Optional[Sequence[SensorMount]] = None,
        policy: Optional[LineFollowPolicy] = None,
    ) -> None:
        if track.size != arena.size:
            raise ValueError(f"Track size {track.size} does not match arena size {arena.size}")
        self.arena = arena
        self.track = track
        self.scheduler = scheduler
        self.policy = policy or DEFAULT_POLICY
        self.sensor_mounts: List[SensorMount] = list(
            DEFAULT_SENSOR_LAYOUT if sensor_mounts is None else sensor_mounts
        )
        self.program_text: str = DEFAULT_PROGRAM
        self.pose: Pose2D = arena.center_pose()
        self.sensor_readings: List[int] = [NEUTRAL_READING] * RESET_READING_COUNT
        self.last_motor_effort: MotorEffort = STOPPED
        self.last_decision: Optional[str] = None
        self.step_index: int = 0
        self._running = False
        self._tick_handle: Optional[int] = None
        self.reading_listeners: List[ReadingListener] = []
        self.pose_listeners: List[PoseListener] = []
        self.debug_checks: bool = False
        self.last_warning: Optional[str] = None
        # Optional per-step trace logging
        self.trace_enabled: bool = False
        self.trace_log: List[Dict[str, object]] = []
        self.trace_callback: Optional[Callable[[Dict[str, object]], None]] = None

    # --- Control surface -------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._schedule_next()

    def stop(self) -> None:
        self._running = False
        if self._tick_handle is not None:
            self.scheduler.cancel_tick(self._tick_handle)
            self._tick_handle = None

    def reset(self) -> None:
        """Return to the centre of the arena with neutral readings; run state is untouched."""
        self.pose = self.arena.center_pose()
        self.sensor_readings = [NEUTRAL_READING] * RESET_READING_COUNT
        self.last_motor_effort = STOPPED
        self.last_decision = None
        self.step_index = 0
        self._publish_readings()
        self._publish_pose()

    def set_sensor_array_config(self, mounts: Sequence[SensorMount]) -> None:
        self.sensor_mounts = list(mounts)
        self.last_warning = None
        if not self.sensor_mounts:
            self._flag_warning("no sensors mounted; the policy sees neutral readings only")
        elif len(self.sensor_mounts) > POLICY_SLOTS:
            self._flag_warning(
                f"{len(self.sensor_mounts)} sensors mounted; the policy reads only the first {POLICY_SLOTS}"
            )

    def set_program_text(self, text: str) -> None:
        # Kept for display and saving only; the policy does not read it.
        self.program_text = text

    # --- Stepping --------------------------------------------------------
    def step(self) -> None:
        points = compute_sample_points(self.pose, self.sensor_mounts, self.arena)
        self.sensor_readings = [sample_reading(self.track, point) for point in points]
        self._publish_readings()
        self.last_decision = self.policy.decide(self.sensor_readings)
        effort = self.policy.effort_for(self.last_decision).clamped()
        self.last_motor_effort = effort
        self.pose = integrate_pose(self.pose, effort, self.arena)
        self._publish_pose()
        if self.trace_enabled:
            self._record_trace(points)
        self.step_index += 1

    def sensor_points(self) -> List[Tuple[float, float]]:
        """World positions of the mounts for drawing the sensor dots."""
        return sensor_world_points(self.pose, self.sensor_mounts)

    def _on_tick(self) -> None:
        self._tick_handle = None
        if not self._running:
            return
        self.step()
        if self._running:
            self._schedule_next()

    def _schedule_next(self) -> None:
        self._tick_handle = self.scheduler.request_next_tick(self._on_tick)

    def _publish_readings(self) -> None:
        for listener in self.reading_listeners:
            listener(list(self.sensor_readings))

    def _publish_pose(self) -> None:
        for listener in self.pose_listeners:
            listener(self.pose)

    def _flag_warning(self, message: str) -> None:
        self.last_warning = message
        if self.debug_checks:
            print(f"[sim][warn] {message}")

    # --- Trace logging ---------------------------------------------------
    def enable_trace_logging(
        self,
        enabled: bool = True,
        callback: Optional[Callable[[Dict[str, object]], None]] = None,
        *,
        clear_existing: bool = True,
    ) -> None:
        """Toggle per-step trace capture; optional callback for streaming."""
        self.trace_enabled = enabled
        self.trace_callback = callback
        if clear_existing:
            self.trace_log.clear()

    def export_trace_log(self) -> List[Dict[str, object]]:
        return list(self.trace_log)

    def clear_trace_log(self) -> None:
        self.trace_log.clear()

    def save_trace_log(self, path: Path) -> None:
        """Persist the current trace log to disk as JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.trace_log, f, indent=2)

    def _record_trace(self, points: List[Tuple[float, float]]) -> None:
        entry: Dict[str, object] = {
            "step": self.step_index,
            "sample_points": [list(p) for p in points],
            "readings": list(self.sensor_readings),
            "decision": self.last_decision,
            "motors": self.last_motor_effort.as_dict(),
            "pose": self.pose.as_dict(),
            "warning": self.last_warning,
        }
        self.trace_log.append(entry)
        if self.trace_callback:
            self.trace_callback(entry)

    # --- Snapshot --------------------------------------------------------
    def snapshot(self) -> SnapshotState:
        return SnapshotState(
            step=self.step_index,
            pose=self.pose.as_dict(),
            readings=list(self.sensor_readings),
            running=self._running,
            program_text=self.program_text,
        )

    def apply_snapshot(self, snap: SnapshotState) -> None:
        """Restore pose, readings and program text; the run state is left to the caller."""
        self.step_index = snap.step
        pose = Pose2D.from_dict(snap.pose)
        x, y = self.arena.clamp_pose_position(pose.x, pose.y)
        self.pose = Pose2D(x, y, pose.angle_deg).normalized()
        self.sensor_readings = [int(v) for v in snap.readings]
        if snap.program_text is not None:
            self.program_text = snap.program_text
        self._publish_readings()
        self._publish_pose()
