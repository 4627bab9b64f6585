from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable


logger = logging.getLogger(__name__)

ERROR_SECONDS = 1.0


class LikeState(str, Enum):
    SETTLED = "settled"
    PENDING = "pending"


class LikeButton:
    """Optimistic like counter with a single in-flight request.

    ``send`` performs the request and returns the server's like count. A
    failed request rolls the count back and raises ``error`` for
    ``error_seconds``.
    """

    def __init__(
        self,
        count: int,
        send: Callable[[], Awaitable[int]],
        error_seconds: float = ERROR_SECONDS,
    ) -> None:
        self.count = count
        self.state = LikeState.SETTLED
        self.error = False
        self.error_seconds = error_seconds
        self._send = send
        self._error_timer: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self.state is LikeState.PENDING

    async def click(self) -> bool:
        """Returns False when the click was dropped because a request is in flight."""
        if self.pending:
            return False
        self.state = LikeState.PENDING
        self.clear_error()
        self.count += 1
        try:
            self.count = await self._send()
        except Exception as e:
            logger.warning("Like request failed: %s", e)
            self.count -= 1
            self._show_error()
        finally:
            self.state = LikeState.SETTLED
        return True

    def _show_error(self) -> None:
        self.error = True
        self._error_timer = asyncio.ensure_future(self._expire_error())

    async def _expire_error(self) -> None:
        await asyncio.sleep(self.error_seconds)
        self.error = False

    def clear_error(self) -> None:
        if self._error_timer is not None and not self._error_timer.done():
            self._error_timer.cancel()
        self._error_timer = None
        self.error = False
