"""Visibility-driven refresh loop.

While active, a :class:`RefreshSession` repeats one cycle: fire the backend
trigger, then run a fixed number of polls separated by a fixed wait. Polls
never overlap and the wait is measured from the end of the previous poll.
Deactivating wakes the pending wait at once; the next activation starts a
fresh cycle from the trigger step.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from pydss._constants import POLL_INTERVAL_S, POLLS_PER_CYCLE
from pydss.exceptions import DssError

_logger = logging.getLogger(__name__)

Step = Callable[[], Awaitable[object]]


class RefreshSession:
    """Trigger-then-poll loop that only runs while the page is visible.

    Parameters
    ----------
    trigger : callable
        Coroutine function asking the backend to refresh. A ``DssError`` is
        logged and the cycle continues with its polls.
    poll : callable
        Coroutine function performing one fetch-project-render pass.
        A ``DssError`` is logged and counts as a completed poll.
    poll_interval : float
        Seconds to wait after a poll completes before the next one.
    polls_per_cycle : int
        Polls issued after each trigger.
    """

    def __init__(
        self,
        trigger: Step,
        poll: Step,
        *,
        poll_interval: float = POLL_INTERVAL_S,
        polls_per_cycle: int = POLLS_PER_CYCLE,
    ) -> None:
        if polls_per_cycle < 1:
            raise ValueError(f"polls_per_cycle must be >= 1, got {polls_per_cycle}")
        self._trigger = trigger
        self._poll = poll
        self._poll_interval = max(0.0, poll_interval)
        self._polls_per_cycle = polls_per_cycle
        self._active = False
        self._closed = False
        self._cycle_count = 0
        # One wake event per activation; identity marks the current run.
        self._wake: asyncio.Event | None = None
        self._waiting_on: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None
        # Every run not yet finished, including ones a newer run waits on.
        self._tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def cycle_count(self) -> int:
        """Polls completed since the last trigger of the current activation."""
        return self._cycle_count

    @property
    def waiting(self) -> bool:
        """Whether the current activation is sleeping between two polls."""
        return self._waiting_on is not None and self._waiting_on is self._wake

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Activate the loop (page became visible). No-op when already active."""
        if self._closed:
            raise DssError("Refresh session is closed")
        if self._active:
            _logger.debug("Refresh session already active")
            return
        loop = asyncio.get_running_loop()
        wake = asyncio.Event()
        self._active = True
        self._cycle_count = 0
        self._wake = wake
        task = loop.create_task(self._run(wake, self._task), name="pydss-refresh")
        task.add_done_callback(self._on_task_done)
        self._task = task
        self._tasks.add(task)
        _logger.debug(
            "Refresh session activated polls_per_cycle=%d interval_s=%.2f",
            self._polls_per_cycle,
            self._poll_interval,
        )

    def stop(self) -> None:
        """Deactivate the loop (page hidden), waking any pending wait."""
        if not self._active:
            return
        wake = self._wake
        self._active = False
        self._wake = None
        self._cycle_count = 0
        if wake is not None:
            wake.set()
        _logger.debug("Refresh session deactivated")

    async def close(self) -> None:
        """Tear the session down for good (page unload)."""
        self.stop()
        self._closed = True
        self._task = None
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        for task in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def _is_current(self, wake: asyncio.Event) -> bool:
        return self._active and self._wake is wake

    async def _run(self, wake: asyncio.Event, previous: asyncio.Task[None] | None) -> None:
        # A poll from an earlier activation may still be in flight.
        if previous is not None and not previous.done():
            _logger.debug("Waiting for previous refresh run to finish")
            await asyncio.wait({previous})

        while self._is_current(wake):
            self._cycle_count = 0
            await self._fire_trigger()
            for poll_number in range(1, self._polls_per_cycle + 1):
                if not self._is_current(wake):
                    return
                await self._run_poll(poll_number)
                if not self._is_current(wake):
                    return
                self._cycle_count = poll_number
                if poll_number < self._polls_per_cycle and not await self._wait(wake):
                    return
            # Let other callbacks run even when trigger and poll never suspend.
            await asyncio.sleep(0)

    async def _fire_trigger(self) -> None:
        try:
            await self._trigger()
        except DssError:
            _logger.warning("Refresh trigger failed; polling anyway", exc_info=True)

    async def _run_poll(self, poll_number: int) -> None:
        _logger.debug("Refresh poll %d/%d", poll_number, self._polls_per_cycle)
        try:
            await self._poll()
        except DssError:
            _logger.warning("Refresh poll %d failed", poll_number, exc_info=True)

    async def _wait(self, wake: asyncio.Event) -> bool:
        """Sleep ``poll_interval`` unless woken; return whether still current."""
        if not self._is_current(wake):
            return False
        if self._poll_interval <= 0:
            await asyncio.sleep(0)
            return self._is_current(wake)
        self._waiting_on = wake
        try:
            await asyncio.wait_for(wake.wait(), timeout=self._poll_interval)
        except TimeoutError:
            pass
        finally:
            if self._waiting_on is wake:
                self._waiting_on = None
        return self._is_current(wake)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        _logger.error("Refresh loop stopped unexpectedly", exc_info=exc)
        if task is self._task:
            self.stop()
