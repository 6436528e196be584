"""Single-shot per-frame callback queue driven by the host's main loop."""
from __future__ import annotations

from typing import Callable, Dict

TickCallback = Callable[[], None]


class FrameScheduler:
    """Stand-in for a display-refresh callback API.

    ``request_next_tick`` queues a callback for the next frame and returns a
    handle; ``run_pending`` is called once per frame by the host and runs only
    the callbacks that were queued before it started, so a callback that
    re-requests itself runs again on the following frame.
    """

    def __init__(self) -> None:
        self._pending: Dict[int, TickCallback] = {}
        self._next_handle = 1
        self.frame_index = 0

    def request_next_tick(self, callback: TickCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_tick(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def run_pending(self) -> int:
        due = sorted(self._pending)
        ran = 0
        for handle in due:
            # Earlier callbacks in this frame may cancel later ones.
            callback = self._pending.pop(handle, None)
            if callback is None:
                continue
            callback()
            ran += 1
        self.frame_index += 1
        return ran

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def clear(self) -> None:
        self._pending.clear()


__all__ = ["FrameScheduler", "TickCallback"]
