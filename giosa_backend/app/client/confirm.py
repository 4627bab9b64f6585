from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable

from ..core.i18n import translate


logger = logging.getLogger(__name__)


class ConfirmState(str, Enum):
    HIDDEN = "hidden"
    SHOWN = "shown"
    CONFIRMING = "confirming"


class DeleteConfirmation:
    """Modal guarding a delete button.

    ``show()`` opens it, ``cancel()`` closes it without sending anything and
    ``confirm()`` sends the delete once; the confirm button stays disabled
    while the request is in flight.
    """

    def __init__(
        self,
        delete: Callable[[], Awaitable[None]],
        title: str | None = None,
        locale: str | None = None,
    ) -> None:
        self._delete = delete
        self.locale = locale
        self.title = title
        self.state = ConfirmState.HIDDEN
        self.deleted = False
        self.error = False

    @property
    def visible(self) -> bool:
        return self.state is not ConfirmState.HIDDEN

    @property
    def confirm_disabled(self) -> bool:
        return self.state is ConfirmState.CONFIRMING

    @property
    def heading(self) -> str:
        return self.title or translate("posts.delete_confirm", self.locale)

    def show(self) -> bool:
        if self.state is not ConfirmState.HIDDEN or self.deleted:
            return False
        self.state = ConfirmState.SHOWN
        self.error = False
        return True

    def cancel(self) -> bool:
        if self.state is not ConfirmState.SHOWN:
            return False
        self.state = ConfirmState.HIDDEN
        return True

    async def confirm(self) -> bool:
        """Returns False when there was nothing to confirm or a delete is already running."""
        if self.state is not ConfirmState.SHOWN:
            return False
        self.state = ConfirmState.CONFIRMING
        try:
            await self._delete()
        except Exception as e:
            logger.warning("Delete request failed: %s", e)
            self.error = True
        else:
            self.deleted = True
        finally:
            self.state = ConfirmState.HIDDEN
        return True
