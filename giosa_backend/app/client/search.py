from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable


logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.3


class SearchBox:
    """Debounced search that only applies the response of the latest request."""

    def __init__(
        self,
        fetch: Callable[[str], Awaitable[str]],
        render: Callable[[str], None],
        delay: float = DEBOUNCE_SECONDS,
    ) -> None:
        self._fetch = fetch
        self._render = render
        self.delay = delay
        self.loading = False
        self.issued = 0
        self.applied = 0
        self._timer: asyncio.Task[None] | None = None
        self._requests: set[asyncio.Task[None]] = set()

    def input(self, query: str) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.ensure_future(self._debounced(query))

    def clear(self) -> None:
        self.input("")

    async def _debounced(self, query: str) -> None:
        await asyncio.sleep(self.delay)
        task = asyncio.ensure_future(self.perform(query))
        self._requests.add(task)
        task.add_done_callback(self._requests.discard)

    async def perform(self, query: str) -> bool:
        """Issue one request now; returns True if its response was rendered."""
        self.issued += 1
        seq = self.issued
        self.loading = bool(query)
        try:
            html = await self._fetch(query)
        except Exception as e:
            logger.warning("Search %r failed: %s", query, e)
            if seq == self.issued:
                self.loading = False
            return False
        if seq != self.issued:
            logger.debug("Dropping stale search response %d (latest %d)", seq, self.issued)
            return False
        self.applied = seq
        self.loading = False
        self._render(html)
        return True

    async def settle(self) -> None:
        """Wait for the pending debounce timer and every request in flight."""
        if self._timer is not None:
            await asyncio.gather(self._timer, return_exceptions=True)
        if self._requests:
            await asyncio.gather(*self._requests, return_exceptions=True)
