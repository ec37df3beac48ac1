"""Trailing-edge debounce on an asyncio event loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Coalesce bursts of triggers into one call after a quiet period.

    Every ``trigger()`` restarts the timer; the coroutine function runs once,
    ``delay_ms`` after the last trigger. Must be used from the loop's thread.
    """

    def __init__(
        self,
        func: Callable[[], Awaitable[None]],
        delay_ms: int,
        loop: asyncio.AbstractEventLoop,
    ):
        """Initialize debouncer.

        Args:
            func: Coroutine function to run when the burst settles
            delay_ms: Quiet period in milliseconds
            loop: Event loop owning the timer
        """
        self.func = func
        self.delay_ms = delay_ms
        self.loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a call is scheduled but has not started."""
        return self._handle is not None

    @property
    def running(self) -> bool:
        """Whether a started call has not finished yet."""
        return any(not task.done() for task in self._tasks)

    def trigger(self) -> None:
        """Start or restart the quiet period."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self.loop.call_later(self.delay_ms / 1000.0, self._fire)

    def _fire(self) -> None:
        self._handle = None
        logger.debug(f"Debounce settled after {self.delay_ms}ms")
        task = self.loop.create_task(self.func())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def cancel(self) -> None:
        """Drop any scheduled call and cancel calls still in flight."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        for task in list(self._tasks):
            task.cancel()

    async def wait(self) -> None:
        """Wait until every started call has finished."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
