from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from fastapi import Request

from .i18n import AVAILABLE_LOCALES, get_default_locale, translate
from .notifications import Toast, ToastCategory


def get_session_secret() -> str:
    return os.getenv("SESSION_SECRET", "giosa-dev-session-secret")


def get_session_max_age_seconds() -> int:
    try:
        return int(os.getenv("SESSION_MAX_AGE_SECONDS", "1209600"))  # 14 days
    except Exception:
        return 1209600


@dataclass
class RequestContext:
    """Per-request view state read from the session once and passed to renders."""

    dark_theme: bool = False
    locale: str = field(default_factory=get_default_locale)
    flash: list[dict[str, str]] = field(default_factory=list)

    def t(self, key: str, **params: Any) -> str:
        return translate(key, self.locale, **params)

    def theme_classes(self, light: str, dark: str) -> str:
        return dark if self.dark_theme else light

    def toasts(self) -> list[Toast]:
        return [
            Toast(
                message=item.get("message", ""),
                category=ToastCategory.from_flash(item.get("type", "notice")),
                title=item.get("title") or None,
            )
            for item in self.flash
        ]


async def get_request_context(request: Request) -> RequestContext:
    session = request.session
    locale = session.get("locale")
    return RequestContext(
        dark_theme=session.get("dark_theme") is True,
        locale=locale if locale in AVAILABLE_LOCALES else get_default_locale(),
        flash=list(session.get("flash", [])),
    )


def flash(request: Request, kind: str, message: str, title: str | None = None) -> None:
    entries = list(request.session.get("flash", []))
    entries.append({"type": kind, "message": message, "title": title or ""})
    request.session["flash"] = entries


def back_url(request: Request, fallback: str = "/") -> str:
    referer = request.headers.get("referer")
    if not referer:
        return fallback
    parsed = urlparse(referer)
    if parsed.netloc and parsed.netloc != request.url.netloc:
        return fallback
    return referer
