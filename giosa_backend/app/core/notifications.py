from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_DURATION_MS = 5000


class ToastCategory(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    COMMENT = "comment"

    @classmethod
    def parse(cls, value: str | None) -> "ToastCategory":
        try:
            return cls(value)
        except ValueError:
            return cls.INFO

    @classmethod
    def from_flash(cls, kind: str) -> "ToastCategory":
        # notice/alert are the two flash kinds set by redirects
        return {"notice": cls.SUCCESS, "alert": cls.ERROR}.get(kind) or cls.parse(kind)


@dataclass(frozen=True)
class ToastStyle:
    icon: str
    accent: str
    border_light: str
    border_dark: str


TOAST_STYLES: dict[ToastCategory, ToastStyle] = {
    ToastCategory.SUCCESS: ToastStyle("✓", "text-green-400", "border-green-200", "border-green-700"),
    ToastCategory.ERROR: ToastStyle("!", "text-red-400", "border-red-200", "border-red-700"),
    ToastCategory.WARNING: ToastStyle("⚠", "text-yellow-400", "border-yellow-200", "border-yellow-700"),
    ToastCategory.INFO: ToastStyle("i", "text-blue-400", "border-blue-200", "border-blue-700"),
    ToastCategory.COMMENT: ToastStyle("💬", "text-indigo-400", "border-indigo-200", "border-indigo-700"),
}


@dataclass(frozen=True)
class Toast:
    message: str
    category: ToastCategory = ToastCategory.INFO
    title: str | None = None
    duration_ms: int = DEFAULT_DURATION_MS

    @property
    def style(self) -> ToastStyle:
        return TOAST_STYLES[self.category]

    def classes(self, dark: bool) -> str:
        surface = "bg-gray-800 text-white" if dark else "bg-white text-gray-900"
        border = self.style.border_dark if dark else self.style.border_light
        return f"notification notification-{self.category.value} max-w-sm w-full shadow-lg rounded-lg border p-4 {surface} {border}"
