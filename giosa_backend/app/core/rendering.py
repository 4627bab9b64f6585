from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .notifications import Toast, ToastCategory
from .session import RequestContext


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
STREAM_MEDIA_TYPE = "text/vnd.turbo-stream.html"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


class ResponseKind(str, Enum):
    PAGE = "page"
    FRAGMENT = "fragment"
    STREAM = "stream"
    JSON = "json"


async def get_response_kind(request: Request) -> ResponseKind:
    accept = request.headers.get("accept", "")
    if STREAM_MEDIA_TYPE in accept:
        return ResponseKind.STREAM
    if request.headers.get("turbo-frame") or request.query_params.get("turbo_frame"):
        return ResponseKind.FRAGMENT
    if "application/json" in accept and "text/html" not in accept:
        return ResponseKind.JSON
    return ResponseKind.PAGE


@dataclass(frozen=True)
class StreamAction:
    action: str
    target: str
    html: str = ""

    def to_message(self) -> dict[str, str]:
        return {"action": self.action, "target": self.target, "html": self.html}


def render_fragment(name: str, ctx: RequestContext | None = None, **context: Any) -> str:
    ctx = ctx or RequestContext()
    return templates.get_template(name).render(ctx=ctx, t=ctx.t, **context)


def toast_action(ctx: RequestContext, message: str, category: ToastCategory = ToastCategory.SUCCESS, title: str | None = None) -> StreamAction:
    toast = Toast(message=message, category=category, title=title)
    return StreamAction("append", "notifications", render_fragment("shared/_toast.html", ctx, toast=toast))


def render_page(request: Request, name: str, ctx: RequestContext, status_code: int = 200, **context: Any) -> HTMLResponse:
    """Render a full page; the layout shows the flash, so it is consumed here."""
    request.session.pop("flash", None)
    return templates.TemplateResponse(
        request,
        name,
        {"ctx": ctx, "t": ctx.t, **context},
        status_code=status_code,
    )


def fragment_response(name: str, ctx: RequestContext, status_code: int = 200, **context: Any) -> HTMLResponse:
    return HTMLResponse(render_fragment(name, ctx, **context), status_code=status_code)


def stream_response(actions: Iterable[StreamAction], status_code: int = 200) -> HTMLResponse:
    body = templates.get_template("shared/_stream.html").render(actions=list(actions))
    return HTMLResponse(body, status_code=status_code, media_type=STREAM_MEDIA_TYPE)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def json_response(payload: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code)
