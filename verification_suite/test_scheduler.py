"""Frame scheduler handle semantics."""
from __future__ import annotations

import sys
from pathlib import Path

SIM_ENV_ROOT = Path(__file__).resolve().parents[1]
if str(SIM_ENV_ROOT) not in sys.path:
    sys.path.insert(0, str(SIM_ENV_ROOT))

from core.scheduler import FrameScheduler  # noqa: E402


def test_callbacks_run_once_in_request_order() -> None:
    scheduler = FrameScheduler()
    calls = []
    scheduler.request_next_tick(lambda: calls.append("a"))
    scheduler.request_next_tick(lambda: calls.append("b"))
    assert scheduler.run_pending() == 2
    assert calls == ["a", "b"]
    assert scheduler.run_pending() == 0
    assert scheduler.frame_index == 2


def test_cancel_removes_callback() -> None:
    scheduler = FrameScheduler()
    calls = []
    handle = scheduler.request_next_tick(lambda: calls.append("x"))
    scheduler.cancel_tick(handle)
    scheduler.cancel_tick(handle)
    scheduler.run_pending()
    assert calls == []


def test_rescheduling_waits_for_next_frame() -> None:
    scheduler = FrameScheduler()
    calls = []

    def tick() -> None:
        calls.append(scheduler.frame_index)
        scheduler.request_next_tick(tick)

    scheduler.request_next_tick(tick)
    scheduler.run_pending()
    scheduler.run_pending()
    assert calls == [0, 1]
    assert scheduler.pending_count == 1


def test_callback_can_cancel_later_one() -> None:
    scheduler = FrameScheduler()
    calls = []
    second = None

    def first() -> None:
        scheduler.cancel_tick(second)
        calls.append("first")

    scheduler.request_next_tick(first)
    second = scheduler.request_next_tick(lambda: calls.append("second"))
    assert scheduler.run_pending() == 1
    assert calls == ["first"]


def test_handles_are_unique() -> None:
    scheduler = FrameScheduler()
    handles = {scheduler.request_next_tick(lambda: None) for _ in range(10)}
    assert len(handles) == 10
    scheduler.clear()
    assert scheduler.pending_count == 0
