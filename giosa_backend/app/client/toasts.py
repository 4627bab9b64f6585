from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from typing import Callable

from ..core.notifications import DEFAULT_DURATION_MS, Toast, ToastCategory


@dataclass
class ShownToast:
    id: int
    toast: Toast
    expires_at: float


class ToastStack:
    """Append-only list of visible toasts, trimmed by close() or by timeout."""

    _container: "ToastStack | None" = None

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._ids = itertools.count(1)
        self._items: list[ShownToast] = []

    @classmethod
    def container(cls) -> "ToastStack":
        if cls._container is None:
            cls._container = cls()
        return cls._container

    @classmethod
    def reset_container(cls) -> None:
        cls._container = None

    def show(
        self,
        message: str,
        category: ToastCategory | str = ToastCategory.INFO,
        title: str | None = None,
        duration_ms: int | None = None,
    ) -> ShownToast:
        toast = Toast(
            message=message,
            category=category if isinstance(category, ToastCategory) else ToastCategory.parse(category),
            title=title,
            duration_ms=duration_ms or DEFAULT_DURATION_MS,
        )
        shown = ShownToast(next(self._ids), toast, self._clock() + toast.duration_ms / 1000)
        self._items.append(shown)
        return shown

    def close(self, toast_id: int) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.id != toast_id]
        return len(self._items) != before

    def expire(self) -> int:
        now = self._clock()
        before = len(self._items)
        self._items = [item for item in self._items if item.expires_at > now]
        return before - len(self._items)

    def visible(self) -> list[ShownToast]:
        self.expire()
        return list(self._items)
