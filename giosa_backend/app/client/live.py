from __future__ import annotations

import json
import logging
import re
from typing import Any, AsyncIterable

from ..core.i18n import translate
from ..core.notifications import ToastCategory
from .toasts import ToastStack


logger = logging.getLogger(__name__)

_COMMENT_LIST = re.compile(r"^post_(?P<post>.+)_comments_list$")
_COMMENT_ITEM = re.compile(r'class="comment"')


class LiveRegions:
    """Page regions kept current from relayed broadcasts.

    A comment list replacement that holds more comments than before raises a
    ``comment`` toast.
    """

    def __init__(self, toasts: ToastStack | None = None, locale: str | None = None) -> None:
        self.regions: dict[str, str] = {}
        self.toasts = toasts or ToastStack.container()
        self.locale = locale

    def apply(self, message: dict[str, Any] | str) -> None:
        if isinstance(message, str):
            message = json.loads(message)
        action = message.get("action")
        target = message.get("target", "")
        html = message.get("html", "")
        previous = self.regions.get(target)
        if action == "remove":
            self.regions.pop(target, None)
        elif action == "append":
            self.regions[target] = (previous or "") + html
        elif action in ("replace", "update"):
            self.regions[target] = html
        else:
            logger.warning("Unknown stream action %r for %s", action, target)
            return
        if _COMMENT_LIST.match(target) and action == "replace":
            before = len(_COMMENT_ITEM.findall(previous or ""))
            if previous is not None and len(_COMMENT_ITEM.findall(html)) > before:
                self.toasts.show(translate("messages.new_comment", self.locale), ToastCategory.COMMENT)

    async def consume(self, messages: AsyncIterable[str]) -> int:
        count = 0
        async for raw in messages:
            self.apply(raw)
            count += 1
        return count
