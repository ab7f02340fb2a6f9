"""Debounced free-text search."""

import asyncio
from collections.abc import Awaitable, Callable

from armory.config import get_settings


class SearchDebouncer:
    """
    Delay a search until typing pauses.

    Each ``set()`` restarts the timer. When it expires the callback gets
    whatever value is current at that moment.
    """

    def __init__(
        self,
        on_fire: Callable[[str], Awaitable[None]],
        delay: float | None = None,
    ):
        self._on_fire = on_fire
        self.delay = delay if delay is not None else get_settings().client.search_debounce_seconds
        self.value = ""
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def set(self, value: str) -> None:
        self.value = value
        self.cancel()
        self._task = asyncio.create_task(self._fire_later())

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def flush(self) -> None:
        """Fire now if a search is pending."""
        if self.pending:
            self.cancel()
            await self._on_fire(self.value)

    async def wait(self) -> None:
        """Wait until no timer is pending. Re-raises a failure of the fired search."""
        while self.pending:
            task = self._task
            await asyncio.wait({task})
            if task is self._task:
                task.result()

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        await self._on_fire(self.value)
