"""Cancellable periodic tick sources."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TaskHandle(Protocol):
    """Handle to a scheduled periodic callback."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback every *interval* seconds."""

    def schedule_periodic(
        self, interval: float, callback: Callable[[], None],
    ) -> TaskHandle: ...


class AsyncioTaskHandle:
    """Periodic callback driven by a single ``asyncio.Task``.

    The callback runs synchronously between sleeps, so two invocations can
    never overlap. Cancelling from inside the callback stops the loop before
    the next sleep.
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self._callback = callback
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not asyncio.current_task():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the underlying task to finish."""
        await asyncio.gather(self._task, return_exceptions=True)

    async def _run(self) -> None:
        try:
            while not self._cancelled:
                await asyncio.sleep(self.interval)
                if self._cancelled:
                    break
                self._callback()
        except asyncio.CancelledError:
            logger.debug("Periodic task cancelled.")
        except Exception:
            logger.exception("Periodic task callback failed.")
            self._cancelled = True


class AsyncioScheduler:
    """Schedules periodic callbacks on the running event loop."""

    def schedule_periodic(
        self, interval: float, callback: Callable[[], None],
    ) -> AsyncioTaskHandle:
        if interval <= 0:
            raise ValueError("interval must be positive.")
        return AsyncioTaskHandle(interval, callback)


class ManualTaskHandle:
    """Handle returned by :class:`ManualScheduler`."""

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that only fires when :meth:`fire` is called.

    Used for headless runs where ticks are driven step by step instead of
    by wall-clock time.
    """

    def __init__(self) -> None:
        self.handles: list[ManualTaskHandle] = []

    def schedule_periodic(
        self, interval: float, callback: Callable[[], None],
    ) -> ManualTaskHandle:
        handle = ManualTaskHandle(interval, callback)
        # Drop handles that can never fire again.
        self.handles = [h for h in self.handles if not h.cancelled]
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualTaskHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire(self, times: int = 1) -> int:
        """Fire every active handle up to *times* rounds.

        Returns the number of rounds in which at least one handle fired.
        """
        rounds = 0
        for _ in range(times):
            live = self.active
            if not live:
                break
            for handle in live:
                if not handle.cancelled:
                    handle.callback()
            rounds += 1
        return rounds
