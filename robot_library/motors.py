"""Per-tick pose integration from a pair of wheel efforts."""
from __future__ import annotations

from arena_mechanics.world import Arena, Pose2D, normalize_angle_deg

from .base import PWM_MAX, MotorEffort

# Pixels per tick at full effort on both wheels.
MAX_SPEED_PER_TICK = 2.0
# Degrees per tick at full effort difference.
MAX_TURN_PER_TICK = 3.0


def forward_speed(effort: MotorEffort) -> float:
    return (effort.left + effort.right) / 2 / PWM_MAX * MAX_SPEED_PER_TICK


def turn_rate_deg(effort: MotorEffort) -> float:
    return (effort.right - effort.left) / PWM_MAX * MAX_TURN_PER_TICK


def integrate_pose(pose: Pose2D, effort: MotorEffort, arena: Arena) -> Pose2D:
    """Advance one tick.

    Effort difference maps straight to a turn rate (no wheel base or radius),
    and the step size is fixed per call rather than scaled by elapsed time.
    Translation uses the heading from before the turn. Efforts outside
    0..255 are clamped first.
    """
    effort = effort.clamped()
    speed = forward_speed(effort)
    x, y = pose.transform_point((speed, 0.0))
    x, y = arena.clamp_pose_position(x, y)
    return Pose2D(x, y, normalize_angle_deg(pose.angle_deg + turn_rate_deg(effort)))


__all__ = ["forward_speed", "turn_rate_deg", "integrate_pose", "MAX_SPEED_PER_TICK", "MAX_TURN_PER_TICK"]
