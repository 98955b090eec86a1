"""Trailing-edge debounce for async callbacks."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.3


class Debouncer:
    """Run the most recent callback once calls have been quiet for `delay` seconds.

    Only the waiting timer is cancelled by a newer call; a callback that has
    already started runs to completion.
    """

    def __init__(self, delay: float = SEARCH_DEBOUNCE_SECONDS):
        self.delay = delay
        self._timer: Optional[asyncio.Task] = None
        self._last: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def call(self, callback: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        self.cancel()
        task = asyncio.get_running_loop().create_task(self._fire_after_delay(callback))
        task.add_done_callback(_log_failure)
        self._timer = task
        self._last = task
        return task

    def cancel(self) -> None:
        if self.pending:
            self._timer.cancel()  # type: ignore[union-attr]
        self._timer = None

    async def wait(self) -> None:
        """Block until the latest scheduled callback has run (or was cancelled)."""
        if self._last is None:
            return
        await asyncio.wait([self._last])

    async def _fire_after_delay(self, callback: Callable[[], Awaitable[Any]]) -> None:
        await asyncio.sleep(self.delay)
        # Past this point a newer call() must not cancel us
        if self._timer is asyncio.current_task():
            self._timer = None
        await callback()


def _log_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Debounced callback failed: {exc!r}", exc_info=exc)
