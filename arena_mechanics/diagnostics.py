"""Rolling tick history used by the telemetry panel and for debugging runs."""
from __future__ import annotations

import math
from collections import Counter, deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Deque, Dict, List, Mapping, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - only for static analyzers
    from core.simulator import Simulator


@dataclass(frozen=True)
class TickRecord:
    step: int
    x: float
    y: float
    angle_deg: float
    readings: Tuple[int, ...]
    left: int
    right: int
    decision: Optional[str] = None
    warning: Optional[str] = None
    notes: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        # Detach from the caller's containers.
        object.__setattr__(self, "readings", tuple(self.readings))
        object.__setattr__(self, "notes", MappingProxyType(dict(self.notes)))

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "step": self.step,
            "pose": {"x": self.x, "y": self.y, "angle": self.angle_deg},
            "readings": list(self.readings),
            "motors": {"left": self.left, "right": self.right},
            "decision": self.decision,
        }
        if self.warning:
            payload["warning"] = self.warning
        if self.notes:
            payload["notes"] = dict(self.notes)
        return payload


class TickHistory:
    """Keeps the most recent ``capacity`` ticks of a simulator.

    Hook ``record`` onto ``Simulator.pose_listeners`` to capture every tick, or
    call it by hand. Aggregates are computed over whatever is currently held.
    """

    def __init__(self, capacity: Optional[int] = 600, *, line_threshold: int = 500) -> None:
        self.capacity = capacity
        self.line_threshold = line_threshold
        self._records: Deque[TickRecord] = deque(maxlen=capacity)

    def record(self, sim: "Simulator", **notes: Any) -> TickRecord:
        effort = sim.last_motor_effort
        entry = TickRecord(
            step=sim.step_index,
            x=sim.pose.x,
            y=sim.pose.y,
            angle_deg=sim.pose.angle_deg,
            readings=tuple(sim.sensor_readings),
            left=effort.left,
            right=effort.right,
            decision=sim.last_decision,
            warning=sim.last_warning,
            notes=notes,
        )
        self._records.append(entry)
        return entry

    def latest(self) -> Optional[TickRecord]:
        return self._records[-1] if self._records else None

    def decision_counts(self) -> Dict[str, int]:
        return dict(Counter(r.decision for r in self._records if r.decision is not None))

    def line_coverage(self) -> float:
        """Share of held ticks where at least one sensor saw the line."""
        if not self._records:
            return 0.0
        seen = sum(1 for r in self._records if any(v < self.line_threshold for v in r.readings))
        return seen / len(self._records)

    def distance_travelled(self) -> float:
        total = 0.0
        previous = None
        for r in self._records:
            if previous is not None:
                total += math.hypot(r.x - previous.x, r.y - previous.y)
            previous = r
        return total

    def export(self) -> List[Dict[str, Any]]:
        return [r.as_dict() for r in self._records]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):  # pragma: no cover - trivial delegator
        return iter(self._records)


__all__ = ["TickRecord", "TickHistory"]
