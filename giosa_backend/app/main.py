from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Iterable

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .core import runtime
from .core.rendering import ResponseKind, get_response_kind, render_page
from .core.session import get_request_context, get_session_max_age_seconds, get_session_secret


logger = logging.getLogger("app")


def configure_logging() -> None:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.setLevel(level if isinstance(level, int) else logging.INFO)


def get_cors_origins() -> list[str]:
    origins_env = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000")
    parts: Iterable[str] = (o.strip() for o in origins_env.split(","))
    return [o for o in parts if o]


def create_redis_client() -> Any:
    import redis.asyncio as redis

    use_fake = os.getenv("USE_FAKE_REDIS", "0") == "1"
    redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    if use_fake or redis_url.startswith("memory://") or redis_url.startswith("redis+fake://"):
        from .core.memory_redis import AsyncMemoryRedis

        logger.info("Using in-memory store")
        return AsyncMemoryRedis()
    logger.info("Using redis at %s", redis_url)
    return redis.from_url(redis_url, decode_responses=True)


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[override]
    configure_logging()
    client = create_redis_client()
    try:
        await client.ping()
    except Exception as e:
        # keep booting; requests report the failure through /healthz
        logger.warning("Redis ping failed: %s", e)
    runtime.redis_client = client
    if os.getenv("SEED_DATA", "0") == "1":
        from .seeds import seed_posts

        await seed_posts()
    yield
    try:
        await client.aclose()
    finally:
        runtime.redis_client = None


app = FastAPI(title="GiosaApp", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    SessionMiddleware,
    secret_key=get_session_secret(),
    max_age=get_session_max_age_seconds(),
    same_site="lax",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def not_found_page(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404 and await get_response_kind(request) in (ResponseKind.PAGE, ResponseKind.FRAGMENT):
        ctx = await get_request_context(request)
        return render_page(request, "errors/not_found.html", ctx, status_code=404)
    return await http_exception_handler(request, exc)


@app.get("/")
async def root() -> RedirectResponse:
    return RedirectResponse("/posts", status_code=303)


@app.get("/healthz")
@app.get("/up")
async def healthz() -> dict[str, Any]:
    status: dict[str, Any] = {"ok": True}
    # report redis status
    if runtime.redis_client is None:
        status["redis"] = {"connected": False, "message": "redis not initialized"}
        return status
    try:
        pong = await runtime.redis_client.ping()
        status["redis"] = {"connected": bool(pong)}
    except Exception as e:  # pragma: no cover - diagnostic only
        status["redis"] = {"connected": False, "error": str(e)}
    return status


from .api.v1.endpoints import comments, posts, preferences, stream  # noqa: E402

app.include_router(posts.router, tags=["posts"])  # e.g., /posts, /posts/{id}/like
app.include_router(comments.router, tags=["comments"])  # e.g., /posts/{id}/comments
app.include_router(preferences.router, tags=["preferences"])  # e.g., /toggle_theme
app.include_router(stream.router, tags=["stream"])  # e.g., /posts/{id}/stream
