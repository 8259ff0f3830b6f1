"""Wall-clock helpers: frame timing and the deferred level-advance slot."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class DeferredTask:
    due: float
    callback: Callable[[], None]
    epoch: int
    label: str = ""


class DeferredScheduler:
    """Single-slot scheduler for work that must run after a wall-clock delay.

    Each task remembers the epoch it was scheduled in. :meth:`invalidate`
    bumps the epoch, so a task scheduled before a reset never fires even if
    something still holds on to it.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._epoch = 0
        self._pending: DeferredTask | None = None

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def pending(self) -> DeferredTask | None:
        return self._pending

    def now(self) -> float:
        return self._clock()

    def schedule(
        self,
        delay: float,
        callback: Callable[[], None],
        *,
        now: float | None = None,
        label: str = "",
    ) -> DeferredTask:
        """Schedule ``callback`` to run ``delay`` seconds after ``now``.

        Replaces any task already waiting in the slot.
        """

        if now is None:
            now = self._clock()
        task = DeferredTask(due=now + max(0.0, delay), callback=callback, epoch=self._epoch, label=label)
        self._pending = task
        return task

    def cancel(self) -> bool:
        had_task = self._pending is not None
        self._pending = None
        return had_task

    def invalidate(self) -> None:
        """Drop pending work and start a new epoch."""

        self._epoch += 1
        self._pending = None

    def poll(self, now: float | None = None) -> bool:
        """Run the pending task if it is due. Returns ``True`` if it ran."""

        task = self._pending
        if task is None:
            return False
        if now is None:
            now = self._clock()
        if now < task.due:
            return False
        self._pending = None
        if task.epoch != self._epoch:
            return False
        task.callback()
        return True


__all__ = ["DeferredScheduler", "DeferredTask", "FrameTimer"]
