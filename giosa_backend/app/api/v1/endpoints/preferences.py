from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import Response

from ....core.i18n import AVAILABLE_LOCALES, get_default_locale
from ....core.rendering import redirect
from ....core.session import back_url


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/toggle_theme")
async def toggle_theme(request: Request) -> Response:
    before = request.session.get("dark_theme") is True
    request.session["dark_theme"] = not before
    logger.debug("Theme toggled: dark_theme %s -> %s", before, not before)
    return redirect(back_url(request))


@router.post("/toggle_locale")
async def toggle_locale(request: Request) -> Response:
    current = request.session.get("locale") or get_default_locale()
    request.session["locale"] = "es" if current == "en" else "en"
    logger.debug("Locale toggled to %s", request.session["locale"])
    return redirect(back_url(request))


@router.post("/set_locale/{locale}")
async def set_locale(request: Request, locale: str) -> Response:
    if locale in AVAILABLE_LOCALES:
        request.session["locale"] = locale
    return redirect(back_url(request))
