"""Fixed line-following decision table mapping sensor readings to motor effort.

The table mirrors the default program shown in the editor, but the edited
program text never reaches it: the robot always drives with this policy.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from .base import LINE_THRESHOLD, NEUTRAL_READING, MotorEffort

STRAIGHT = "straight"
TURN_LEFT = "left"
TURN_RIGHT = "right"
STOP = "stop"

# Slot layout assumed by the table: 0 left .. 4 right.
POLICY_SLOTS = 5


@dataclass(frozen=True)
class LineFollowPolicy:
    """Five-slot bang-bang follower: centre first, then left pair, then right pair."""

    threshold: int = LINE_THRESHOLD
    neutral: int = NEUTRAL_READING
    straight_effort: MotorEffort = MotorEffort(200, 200)
    left_effort: MotorEffort = MotorEffort(100, 255)
    right_effort: MotorEffort = MotorEffort(255, 100)
    stop_effort: MotorEffort = MotorEffort(0, 0)

    def __call__(self, readings: Sequence[int]) -> MotorEffort:
        return self.effort_for(self.decide(readings))

    def decide(self, readings: Sequence[int]) -> str:
        left, center_left, center, center_right, right = self._slots(readings)
        if center < self.threshold:
            return STRAIGHT
        if left < self.threshold or center_left < self.threshold:
            return TURN_LEFT
        if right < self.threshold or center_right < self.threshold:
            return TURN_RIGHT
        return STOP

    def effort_for(self, decision: str) -> MotorEffort:
        efforts: Dict[str, MotorEffort] = {
            STRAIGHT: self.straight_effort,
            TURN_LEFT: self.left_effort,
            TURN_RIGHT: self.right_effort,
            STOP: self.stop_effort,
        }
        return efforts[decision]

    def _slots(self, readings: Sequence[int]) -> list[int]:
        return [readings[i] if i < len(readings) else self.neutral for i in range(POLICY_SLOTS)]


DEFAULT_POLICY = LineFollowPolicy()


def follow_line(readings: Sequence[int]) -> MotorEffort:
    return DEFAULT_POLICY(readings)


__all__ = [
    "LineFollowPolicy",
    "DEFAULT_POLICY",
    "follow_line",
    "POLICY_SLOTS",
    "STRAIGHT",
    "TURN_LEFT",
    "TURN_RIGHT",
    "STOP",
]
