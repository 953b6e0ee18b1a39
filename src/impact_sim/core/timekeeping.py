"""Frame clock and one-shot deferred callbacks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass
class DeferredTask:
    """Callback that fires once when the scheduler clock reaches ``fire_at``."""

    fire_at: float
    callback: Callable[[], None]
    fired: bool = False
    cancelled: bool = False

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)

    def cancel(self) -> None:
        self.cancelled = True

    def due(self, now: float) -> bool:
        return self.pending and now >= self.fire_at


class FrameScheduler:
    """Drives per-frame callbacks and deferred tasks from a host loop.

    The host (the pygame loop, or a test) calls :meth:`tick` once per frame
    with the elapsed seconds. Frame callbacks run first, in registration
    order, then any deferred task whose fire time has been reached.
    """

    def __init__(self) -> None:
        self.time = 0.0
        self.frame_index = 0
        self._callbacks: list[Callable[[], None]] = []
        self._tasks: list[DeferredTask] = []

    def add_callback(self, callback: Callable[[], None]) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> DeferredTask:
        task = DeferredTask(fire_at=self.time + max(0.0, delay), callback=callback)
        self._tasks.append(task)
        return task

    def pending_tasks(self) -> list[DeferredTask]:
        return [task for task in self._tasks if task.pending]

    def tick(self, dt: float) -> int:
        self.frame_index += 1
        if dt > 0.0:
            self.time += dt
        for callback in list(self._callbacks):
            callback()
        due = [task for task in self._tasks if task.due(self.time)]
        for task in due:
            task.fired = True
            task.callback()
        self._tasks = [task for task in self._tasks if task.pending]
        return self.frame_index

    def clear(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        self._callbacks.clear()


__all__ = ["DeferredTask", "FrameScheduler"]
