"""Simulator state machine, tick ordering, reset and trace logging."""
from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

SIM_ENV_ROOT = Path(__file__).resolve().parents[1]
if str(SIM_ENV_ROOT) not in sys.path:
    sys.path.insert(0, str(SIM_ENV_ROOT))

import pygame  # noqa: E402
import pytest  # noqa: E402

from arena_mechanics.track import TrackSurface  # noqa: E402
from arena_mechanics.world import Arena, Pose2D  # noqa: E402
from core.programs import DEFAULT_PROGRAM  # noqa: E402
from core.scheduler import FrameScheduler  # noqa: E402
from core.simulator import Simulator  # noqa: E402
from robot_library.base import MotorEffort, SensorMount  # noqa: E402


def make_sim(**kwargs) -> Simulator:
    arena = Arena()
    track = TrackSurface(arena.width, arena.height)
    return Simulator(arena, track, FrameScheduler(), **kwargs)


def paint_horizontal_line(track: TrackSurface, y: int) -> None:
    pygame.draw.line(track.surface, (0, 0, 0), (0, y), (track.width - 1, y), 9)


def test_initial_state() -> None:
    sim = make_sim()
    assert not sim.is_running
    assert sim.pose == Pose2D(400.0, 300.0, 0.0)
    assert sim.sensor_readings == [512] * 5
    assert sim.program_text == DEFAULT_PROGRAM


def test_mismatched_track_rejected() -> None:
    with pytest.raises(ValueError):
        Simulator(Arena(), TrackSurface(10, 10), FrameScheduler())


def test_step_on_blank_track_stops_robot() -> None:
    sim = make_sim()
    sim.step()
    assert sim.sensor_readings == [1020] * 5
    assert sim.last_motor_effort == MotorEffort(0, 0)
    assert sim.pose == Pose2D(400.0, 300.0, 0.0)
    assert sim.step_index == 1


def test_step_follows_line_under_center_sensor() -> None:
    sim = make_sim()
    # Centre mount sits 35 px ahead of the robot centre.
    paint_horizontal_line(sim.track, 265)
    sim.step()
    assert sim.sensor_readings[2] == 0
    assert sim.last_motor_effort == MotorEffort(200, 200)
    assert sim.pose.x == pytest.approx(400.0 + 400.0 / 255.0)


def test_step_uses_pose_from_previous_tick() -> None:
    sim = make_sim(sensor_mounts=[SensorMount(0.0, 0.0)])
    seen = []
    sim.reading_listeners.append(lambda readings: seen.append((readings, sim.pose)))
    sim.step()
    readings, pose_at_publish = seen[0]
    assert pose_at_publish == Pose2D(400.0, 300.0, 0.0)


def test_publish_order_readings_then_pose() -> None:
    sim = make_sim()
    events = []
    sim.reading_listeners.append(lambda readings: events.append("readings"))
    sim.pose_listeners.append(lambda pose: events.append("pose"))
    sim.step()
    assert events == ["readings", "pose"]


def test_start_runs_one_tick_per_frame() -> None:
    sim = make_sim()
    paint_horizontal_line(sim.track, 265)
    sim.start()
    assert sim.is_running
    assert sim.step_index == 0
    for _ in range(3):
        sim.scheduler.run_pending()
    assert sim.step_index == 3
    assert sim.scheduler.pending_count == 1


def test_start_twice_does_not_double_schedule() -> None:
    sim = make_sim()
    sim.start()
    sim.start()
    assert sim.scheduler.pending_count == 1
    sim.scheduler.run_pending()
    assert sim.step_index == 1


def test_stop_cancels_pending_tick() -> None:
    sim = make_sim()
    sim.start()
    sim.scheduler.run_pending()
    sim.stop()
    assert not sim.is_running
    assert sim.scheduler.pending_count == 0
    sim.scheduler.run_pending()
    assert sim.step_index == 1


def test_stop_during_tick_finishes_that_tick() -> None:
    sim = make_sim()
    sim.pose_listeners.append(lambda pose: sim.stop())
    sim.start()
    sim.scheduler.run_pending()
    assert sim.step_index == 1
    assert not sim.is_running
    assert sim.scheduler.pending_count == 0


def test_reset_is_idempotent_and_keeps_run_state() -> None:
    sim = make_sim(sensor_mounts=[SensorMount(0.0, 0.0)])
    sim.pose = Pose2D(100.0, 100.0, 45.0)
    sim.step()
    sim.start()
    sim.reset()
    first = (sim.pose, list(sim.sensor_readings))
    sim.reset()
    second = (sim.pose, list(sim.sensor_readings))
    assert first == second
    assert first == (Pose2D(400.0, 300.0, 0.0), [512] * 5)
    assert sim.is_running


def test_track_edits_between_ticks_are_seen() -> None:
    sim = make_sim(sensor_mounts=[SensorMount(0.0, 0.0)])
    sim.step()
    assert sim.sensor_readings == [1020]
    sim.track.paint(int(sim.pose.x), int(sim.pose.y))
    sim.step()
    assert sim.sensor_readings == [0]


def test_sensor_config_warnings() -> None:
    sim = make_sim()
    sim.set_sensor_array_config([])
    assert sim.last_warning and "no sensors" in sim.last_warning
    sim.step()
    assert sim.sensor_readings == []
    assert sim.last_motor_effort == MotorEffort(0, 0)
    sim.set_sensor_array_config([SensorMount(0.0, -35.0)] * 7)
    assert "first 5" in sim.last_warning
    sim.set_sensor_array_config([SensorMount(0.0, -35.0)] * 3)
    assert sim.last_warning is None


def test_debug_checks_print_warnings(capsys) -> None:
    sim = make_sim()
    sim.debug_checks = True
    sim.set_sensor_array_config([])
    assert "[sim][warn]" in capsys.readouterr().out


def test_program_text_does_not_change_behavior() -> None:
    sim_a = make_sim()
    sim_b = make_sim()
    sim_b.set_program_text("void loop() { analogWrite(9, 255); }")
    for sim in (sim_a, sim_b):
        paint_horizontal_line(sim.track, 265)
        for _ in range(5):
            sim.step()
    assert sim_a.pose == sim_b.pose
    assert sim_b.program_text.startswith("void loop()")


def test_sensor_points_match_transform() -> None:
    sim = make_sim(sensor_mounts=[SensorMount(10.0, -35.0)])
    assert sim.sensor_points() == [(410.0, 265.0)]


def test_trace_logging(tmp_path: Path) -> None:
    sim = make_sim()
    streamed = []
    sim.enable_trace_logging(True, callback=streamed.append)
    sim.step()
    sim.step()
    trace = sim.export_trace_log()
    assert [entry["step"] for entry in trace] == [0, 1]
    assert trace[0]["decision"] == "stop"
    assert len(streamed) == 2
    out = tmp_path / "trace.json"
    sim.save_trace_log(out)
    assert out.exists()
    sim.clear_trace_log()
    assert sim.export_trace_log() == []


def test_snapshot_round_trip() -> None:
    sim = make_sim()
    paint_horizontal_line(sim.track, 265)
    for _ in range(4):
        sim.step()
    snap = sim.snapshot()
    other = make_sim()
    other.apply_snapshot(snap)
    assert other.pose == sim.pose
    assert other.sensor_readings == sim.sensor_readings
    assert other.step_index == 4


def test_custom_policy_effort_is_clamped_when_published() -> None:
    from robot_library.policy import LineFollowPolicy

    sim = make_sim(policy=LineFollowPolicy(stop_effort=MotorEffort(300, 300)))
    sim.step()
    assert sim.last_motor_effort == MotorEffort(255, 255)
    assert sim.pose.x == pytest.approx(402.0)


def test_mount_edit_between_ticks_moves_next_sample() -> None:
    from core.config import RobotConfig

    robot = RobotConfig.default()
    sim = make_sim(sensor_mounts=robot.to_mounts())
    sim.track.paint(405, 265)
    sim.enable_trace_logging(True)
    sim.start()
    sim.scheduler.run_pending()
    assert sim.sensor_readings[2] == 1020
    assert sim.last_decision == "stop"

    assert robot.nudge_mount(2, "x", 5) == 5.0
    sim.set_sensor_array_config(robot.to_mounts())
    sim.scheduler.run_pending()

    last = sim.export_trace_log()[-1]
    assert last["sample_points"][2] == [405.0, 265.0]
    assert sim.sensor_readings[2] == 0
    assert sim.last_decision == "straight"
