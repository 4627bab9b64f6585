from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ....core.broadcast import likes_action, likes_broadcasts, post_broadcasts, publish
from ....core.errors import RecordInvalid
from ....core.notifications import ToastCategory
from ....core.params import as_bool, read_params
from ....core.rendering import (
    ResponseKind,
    StreamAction,
    fragment_response,
    get_response_kind,
    json_response,
    redirect,
    render_page,
    stream_response,
    toast_action,
)
from ....core.session import RequestContext, back_url, flash, get_request_context
from ....crud import blog
from ....schemas.blog import PostPublic


router = APIRouter()

POST_FIELDS = ("title", "content", "published")


def _form_values(data: dict[str, Any]) -> dict[str, Any]:
    values = dict(data)
    values["published"] = as_bool(values.get("published", False))
    return values


def _post_values(post: PostPublic) -> dict[str, Any]:
    return {"title": post.title, "content": post.content, "published": post.published}


@router.get("/posts")
async def index(
    request: Request,
    search: str | None = None,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    search = (search or "").strip() or None
    posts = await blog.list_posts(search)
    if kind is ResponseKind.JSON:
        return json_response({"items": [p.model_dump() for p in posts]})
    if kind is ResponseKind.FRAGMENT:
        return fragment_response("posts/_list.html", ctx, posts=posts, search=search)
    return render_page(request, "posts/index.html", ctx, posts=posts, search=search)


@router.get("/posts/new")
async def new(request: Request, ctx: RequestContext = Depends(get_request_context)) -> Response:
    return render_page(request, "posts/new.html", ctx, values={"published": False}, errors={})


@router.post("/posts")
async def create(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    data = await read_params(request, "post", POST_FIELDS)
    try:
        post = await blog.create_post(data)
    except RecordInvalid as exc:
        errors = exc.messages(ctx.locale)
        if kind is ResponseKind.JSON:
            return json_response({"errors": errors}, status_code=422)
        return render_page(request, "posts/new.html", ctx, status_code=422, values=_form_values(data), errors=errors)
    if kind is ResponseKind.JSON:
        return json_response(post.model_dump(), status_code=201)
    flash(request, "notice", ctx.t("messages.post_created"))
    return redirect(f"/posts/{post.id}")


@router.get("/posts/{post_id}")
async def show(
    request: Request,
    post_id: str,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    post = await blog.get_post(post_id)
    comments = await blog.list_comments(post_id)
    if kind is ResponseKind.JSON:
        return json_response({**post.model_dump(), "comment_items": [c.model_dump() for c in comments]})
    return render_page(
        request, "posts/show.html", ctx, post=post, comments=comments, count=len(comments), values={}, errors={}
    )


@router.get("/posts/{post_id}/edit")
async def edit(request: Request, post_id: str, ctx: RequestContext = Depends(get_request_context)) -> Response:
    post = await blog.get_post(post_id)
    return render_page(request, "posts/edit.html", ctx, post=post, values=_post_values(post), errors={})


@router.api_route("/posts/{post_id}", methods=["PATCH", "PUT", "POST"])
async def update(
    request: Request,
    post_id: str,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    post = await blog.get_post(post_id)
    data = await read_params(request, "post", POST_FIELDS)
    try:
        post = await blog.update_post(post_id, data)
    except RecordInvalid as exc:
        errors = exc.messages(ctx.locale)
        if kind is ResponseKind.JSON:
            return json_response({"errors": errors}, status_code=422)
        values = {**_post_values(post), **_form_values(data)}
        return render_page(request, "posts/edit.html", ctx, status_code=422, post=post, values=values, errors=errors)
    await publish(post_broadcasts(post))
    if kind is ResponseKind.JSON:
        return json_response(post.model_dump())
    flash(request, "notice", ctx.t("messages.post_updated"))
    return redirect(f"/posts/{post.id}")


@router.delete("/posts/{post_id}")
@router.post("/posts/{post_id}/delete")
async def destroy(
    request: Request,
    post_id: str,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    post = await blog.delete_post(post_id)
    message = f'"{post.title}" {ctx.t("messages.post_deleted")}'
    if kind is ResponseKind.JSON:
        return json_response({"ok": True})
    if kind is ResponseKind.STREAM:
        return stream_response([StreamAction("remove", f"post_{post.id}"), toast_action(ctx, message)])
    flash(request, "notice", message)
    return redirect("/posts")


@router.patch("/posts/{post_id}/like")
@router.post("/posts/{post_id}/like")
async def like(
    request: Request,
    post_id: str,
    ctx: RequestContext = Depends(get_request_context),
    kind: ResponseKind = Depends(get_response_kind),
) -> Response:
    likes = await blog.increment_likes(post_id)
    post = await blog.get_post(post_id)
    await publish(likes_broadcasts(post))
    if kind is ResponseKind.JSON:
        return json_response({"id": post.id, "likes": likes})
    if kind is ResponseKind.STREAM:
        return stream_response([likes_action(post), toast_action(ctx, ctx.t("messages.post_liked"), ToastCategory.INFO)])
    return redirect(back_url(request, "/posts"))
