"""Progressive reveal of an already-computed result list.

``LazyReveal`` exposes a growing prefix of a list: it starts at one page,
grows by one page per ``load_more()``, and stops once the whole list is
visible. ``Debouncer`` coalesces bursts of calls (search keystrokes) into
a single call after a quiet period.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Generic, TypeVar

import structlog

from storefront.infrastructure.config import settings

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20


class LazyReveal(Generic[T]):
    """Controller for the visible prefix of a result list.

    Example usage:
        reveal = LazyReveal(page_size=20)
        reveal.set_total(len(results))
        await reveal.load_more()
        shown = reveal.visible(results)
    """

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        delay: float | None = None,
        total: int = 0,
    ) -> None:
        """Initialize the controller.

        Args:
            page_size: Items revealed per page.
            delay: Artificial load delay in seconds.
            total: Length of the current result list.
        """
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.page_size = page_size
        self.delay = settings.reveal_delay_seconds if delay is None else delay
        self.total = total
        self.visible_count = page_size
        self.is_loading = False
        self._generation = 0

    def reset(self, total: int | None = None) -> None:
        """Return to the first page, e.g. after filters or sort change."""
        if total is not None:
            self.total = total
        self.visible_count = self.page_size
        self._generation += 1

    def set_total(self, total: int) -> None:
        """Update the result length and reset the window."""
        self.reset(total)

    @property
    def has_more(self) -> bool:
        return self.visible_count < self.total

    @property
    def is_armed(self) -> bool:
        """Whether the viewport sentinel should trigger a load."""
        return self.has_more and not self.is_loading

    @property
    def shown_count(self) -> int:
        return min(self.visible_count, self.total)

    async def load_more(self) -> bool:
        """Reveal one more page after the artificial delay.

        Calls made while a load is in flight, or once everything is
        visible, are ignored. A load overtaken by ``reset`` does not grow
        the fresh window.

        Returns:
            True if the window grew.
        """
        if not self.is_armed:
            return False
        generation = self._generation
        self.is_loading = True
        try:
            if self.delay > 0:
                await asyncio.sleep(self.delay)
            if generation != self._generation:
                logger.debug("Discarded stale reveal", visible=self.visible_count)
                return False
            self.visible_count = min(self.visible_count + self.page_size, self.total)
        finally:
            self.is_loading = False
        logger.debug("Revealed more results", visible=self.visible_count, total=self.total)
        return True

    async def on_sentinel_visible(self) -> bool:
        """Viewport trigger: load the next page when armed."""
        return await self.load_more()

    def visible(self, items: Sequence[T]) -> list[T]:
        """The currently visible prefix of ``items``."""
        return list(items[: self.visible_count])


class Debouncer:
    """Run an async callback once after calls stop arriving.

    Each call cancels the previous pending timer; a callback that already
    started is left to finish.
    """

    def __init__(
        self,
        callback: Callable[..., Awaitable[Any]],
        wait: float | None = None,
    ) -> None:
        self.callback = callback
        self.wait = settings.search_debounce_seconds if wait is None else wait
        self._timer: asyncio.Task[None] | None = None
        self._running: asyncio.Task[Any] | None = None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        """Schedule the callback, replacing any pending schedule."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.create_task(self._fire(*args, **kwargs))

    async def _fire(self, *args: Any, **kwargs: Any) -> None:
        await asyncio.sleep(self.wait)
        self._running = asyncio.create_task(self.callback(*args, **kwargs))
        await asyncio.shield(self._running)

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    async def flush(self) -> None:
        """Wait for the pending timer and any running callback."""
        if self._timer is not None:
            await asyncio.wait({self._timer})
        if self._running is not None:
            await self._running

    def cancel(self) -> None:
        """Drop the pending timer without running the callback."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
